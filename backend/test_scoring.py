"""
Tests for the advisory scoring router.
"""

import pytest

from archengine.ir.capabilities import CapabilityMap
from archengine.ir.identifiers import CapabilityId, CapabilityValue, PatternId
from archengine.pipeline.scoring import rank_patterns, score_pattern

K = CapabilityId
P = PatternId


def required(*capabilities):
    return CapabilityMap().with_values({cap: CapabilityValue.REQUIRED for cap in capabilities})


def test_empty_map_uses_the_fallback(catalog):
    ranking = rank_patterns(CapabilityMap(), catalog=catalog)

    assert ranking.selected is P.SERVERLESS_WEB_APP
    assert ranking.fallback_used
    # ties keep catalog order
    assert [a.pattern_id for a in ranking.alternatives] == [
        P.STATIC_SITE, P.STATIC_SITE_WITH_AUTH, P.SERVERLESS_API,
    ]


def test_static_content_selects_static_site(catalog):
    ranking = rank_patterns(required(K.STATIC_CONTENT), catalog=catalog)

    assert ranking.selected is P.STATIC_SITE
    assert not ranking.fallback_used
    assert ranking.score == pytest.approx(1.0 / 1.5)
    assert len(ranking.alternatives) == 3


def test_forbidden_capability_zeroes_the_score(catalog):
    capabilities = required(K.STATIC_CONTENT, K.PAYMENTS)
    assert score_pattern(catalog.pattern(P.STATIC_SITE), capabilities) == 0.0


def test_missing_required_capabilities_are_penalised(catalog):
    pattern = catalog.pattern(P.STATIC_SITE_WITH_AUTH)
    # 0.7 / 1.6 matched, identity_access missing
    assert score_pattern(pattern, required(K.STATIC_CONTENT)) == pytest.approx(0.7 / 1.6 - 0.25)


def test_scores_never_go_negative(catalog):
    pattern = catalog.pattern(P.HYBRID_PLATFORM)
    assert score_pattern(pattern, CapabilityMap()) == 0.0


def test_simple_intent_penalises_complex_patterns(catalog):
    pattern = catalog.pattern(P.IOT_PLATFORM)
    capabilities = required(K.DOMAIN_IOT)

    assert score_pattern(pattern, capabilities) == pytest.approx(0.8)
    assert score_pattern(pattern, capabilities, "simple") == pytest.approx(0.56)
    assert score_pattern(pattern, capabilities, "complex") == pytest.approx(0.8)


def test_ranking_covers_every_pattern(catalog):
    ranking = rank_patterns(required(K.PAYMENTS, K.DATA_PERSISTENCE), catalog=catalog)

    assert {s.pattern_id for s in ranking.scores} == set(catalog.patterns)
    assert ranking.selected is P.E_COMMERCE_BACKEND
    assert ranking.to_dict()["selected"] == "E_COMMERCE_BACKEND"


def test_ranking_is_deterministic(catalog):
    capabilities = required(K.REALTIME, K.CACHING)
    assert rank_patterns(capabilities, catalog=catalog) == rank_patterns(capabilities, catalog=catalog)
