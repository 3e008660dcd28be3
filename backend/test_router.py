"""
Tests for the pattern router gates.
"""

import pytest

from archengine.ir.errors import RoutingErrorKind
from archengine.ir.identifiers import PatternId
from archengine.ir.requirements import CanonicalAxes, ComputePreference, DataModel
from archengine.pipeline.router import GATES, NO_MATCH, PATTERN_GATES, explain_route, route

P = PatternId


@pytest.mark.parametrize("axes,gate", [
    (dict(static_content=True, stateful=True), "static_without_backend_but_stateful"),
    (dict(static_content=True, realtime=True), "static_without_backend_but_realtime"),
    (dict(payments=True, persistence_excluded=True), "payments_without_persistence"),
    (dict(primary_data_model=DataModel.RELATIONAL, persistence_excluded=True),
     "relational_without_persistence"),
    (dict(database_requested=True, persistence_excluded=True), "database_without_persistence"),
    (dict(compute_excluded=True, api_backend=True), "compute_excluded_but_needed"),
])
def test_contradictions_are_invalid_intent(axes, gate):
    outcome, name = explain_route(CanonicalAxes(**axes))

    assert name == gate
    assert not outcome.is_resolved
    assert outcome.error.kind is RoutingErrorKind.INVALID_INTENT
    assert outcome.error.requirement and outcome.error.conflict


def test_derived_database_does_not_contradict_a_stateful_request():
    axes = CanonicalAxes(stateful=True, database_requested=True, persistence_excluded=True)
    outcome, name = explain_route(axes)

    assert name == "stateful"
    assert outcome.pattern_id is P.STATEFUL_WEB_PLATFORM


@pytest.mark.parametrize("axes,pattern,gate", [
    (dict(ml=True, realtime=True), P.HYBRID_PLATFORM, "ml_with_realtime_or_state"),
    (dict(ml=True, stateful=True), P.HYBRID_PLATFORM, "ml_with_realtime_or_state"),
    (dict(ml=True, batch_processing=True), P.ML_TRAINING_PLATFORM, "ml_batch_training"),
    (dict(ml=True, batch_processing=True, api_backend=True), P.ML_INFERENCE_PLATFORM,
     "ml_inference"),
    (dict(iot=True), P.IOT_PLATFORM, "iot"),
    (dict(realtime=True, gaming=True), P.GAMING_BACKEND, "realtime_gaming"),
    (dict(realtime=True, payments=True), P.HYBRID_PLATFORM, "realtime_hybrid"),
    (dict(realtime=True, event_driven=True), P.HYBRID_PLATFORM, "realtime_hybrid"),
    (dict(realtime=True, api_backend=True), P.REALTIME_PLATFORM, "realtime"),
    (dict(payments=True, pci=True), P.FINTECH_PAYMENT_PLATFORM, "payments_pci"),
    (dict(payments=True, stateful=True), P.E_COMMERCE_BACKEND, "payments_stateful"),
    (dict(payments=True), P.STATEFUL_WEB_PLATFORM, "payments"),
    (dict(hipaa=True, api_backend=True), P.HEALTHCARE_PLATFORM, "hipaa_api"),
    (dict(data_analytics=True), P.DATA_PLATFORM, "data_analytics"),
    (dict(mobile=True, stateful=True), P.MOBILE_BACKEND_PLATFORM, "mobile_stateful"),
    (dict(mobile=True), P.SERVERLESS_API, "mobile"),
    (dict(high_availability=True, stateful=True), P.HIGH_AVAILABILITY_PLATFORM,
     "high_availability_stateful"),
    (dict(event_driven=True), P.EVENT_DRIVEN_PLATFORM, "event_driven_stateless"),
    (dict(api_backend=True, compute_preference=ComputePreference.CONTAINER),
     P.CONTAINERIZED_WEB_APP, "api_containers"),
    (dict(stateful=True, primary_data_model=DataModel.DOCUMENT), P.SERVERLESS_WEB_APP,
     "stateful_document"),
    (dict(stateful=True), P.STATEFUL_WEB_PLATFORM, "stateful"),
    (dict(api_backend=True), P.SERVERLESS_API, "api"),
    (dict(static_content=True, authentication=True), P.STATIC_SITE_WITH_AUTH, "static_with_auth"),
    (dict(static_content=True), P.STATIC_SITE, "static"),
])
def test_pattern_gates(axes, pattern, gate):
    outcome, name = explain_route(CanonicalAxes(**axes))

    assert name == gate
    assert outcome.pattern_id is pattern
    assert outcome.error is None


def test_nothing_matched_needs_clarification():
    outcome, name = explain_route(CanonicalAxes())

    assert name == NO_MATCH
    assert outcome.error.kind is RoutingErrorKind.NEEDS_CLARIFICATION


class TestPrecedence:
    def test_contradiction_beats_every_pattern(self):
        axes = CanonicalAxes(payments=True, stateful=True, persistence_excluded=True)
        assert route(axes).error.kind is RoutingErrorKind.INVALID_INTENT

    def test_static_with_backend_is_not_a_contradiction(self):
        axes = CanonicalAxes(static_content=True, api_backend=True, stateful=True)
        assert route(axes).pattern_id is P.STATEFUL_WEB_PLATFORM

    def test_ml_beats_realtime_and_payments(self):
        axes = CanonicalAxes(ml=True, realtime=True, payments=True)
        assert route(axes).pattern_id is P.HYBRID_PLATFORM

    def test_stateful_events_are_not_event_driven(self):
        axes = CanonicalAxes(event_driven=True, stateful=True)
        assert route(axes).pattern_id is P.STATEFUL_WEB_PLATFORM

    def test_compute_exclusion_alone_is_allowed(self):
        axes = CanonicalAxes(static_content=True, compute_excluded=True)
        assert route(axes).pattern_id is P.STATIC_SITE


def test_gate_names_are_unique():
    names = [gate.name for gate in GATES]
    assert len(names) == len(set(names))
    assert NO_MATCH not in names


def test_every_gate_pattern_is_in_the_catalog(catalog):
    for gate in PATTERN_GATES:
        assert catalog.pattern(gate.pattern_id).id is gate.pattern_id


def test_routing_is_deterministic():
    axes = CanonicalAxes(realtime=True, stateful=True, exclusions=("cache",))
    assert route(axes) == route(axes)
    assert route(axes).to_dict()["pattern_id"] == "HYBRID_PLATFORM"
