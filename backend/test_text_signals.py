"""
Tests for the free-text signal layer (keyword groups + negation window).
"""

from archengine.pipeline.text_signals import TextSignals, scan_text


def test_empty_text_has_no_signals():
    assert scan_text("") == TextSignals()
    assert scan_text(None) == TextSignals()


def test_negated_database_with_positive_profile():
    signals = scan_text("Save user profile, no database needed")

    assert signals.has("stateful")
    assert signals.has("authentication")
    assert signals.denies("persistence")
    assert not signals.has("store:relationaldatabase")


def test_negation_does_not_cross_clauses():
    signals = scan_text("No database needed. Save the user profile")

    assert signals.denies("persistence")
    assert signals.has("stateful")


def test_negation_stops_at_but():
    signals = scan_text("we don't need a database but we cache with redis")

    assert signals.denies("persistence")
    assert signals.has("store:cache")


def test_negator_outside_window_is_ignored():
    signals = scan_text("no time for anything fancy database")

    assert signals.has("persistence")
    assert not signals.denies("persistence")


def test_window_size_is_configurable():
    text = "no time for anything fancy database"
    assert scan_text(text, window=5).denies("persistence")


def test_words_match_on_boundaries_only():
    # "userland" is not "user"
    signals = scan_text("userland tooling")
    assert not signals.has("authentication")


def test_multi_word_and_hyphenated_phrases():
    assert scan_text("a real-time dashboard").has("realtime")
    assert scan_text("users sign in with email").has("authentication")
    assert scan_text("message queue for jobs").has("store:messagequeue")


def test_workloads_are_reported_sorted():
    signals = scan_text("A mobile app with an API")
    assert signals.with_prefix("workload:") == ["backend_api", "mobile_backend", "web_app"]
