"""
Pattern Router - the authoritative pattern decision.

Ordered gates over CanonicalAxes, first match wins. Contradiction gates
come first and return INVALID_INTENT; if no pattern gate matches the
request needs clarification. The router is pure: same axes, same outcome.
"""

from dataclasses import dataclass
from typing import Callable, Optional, Tuple

import structlog

from archengine.ir.errors import RoutingError
from archengine.ir.identifiers import PatternId
from archengine.ir.requirements import CanonicalAxes, ComputePreference, DataModel

logger = structlog.get_logger(__name__)

_P = PatternId


@dataclass(frozen=True)
class RoutingOutcome:
    pattern_id: Optional[PatternId] = None
    error: Optional[RoutingError] = None

    @property
    def is_resolved(self) -> bool:
        return self.pattern_id is not None

    def to_dict(self) -> dict:
        return {
            "pattern_id": self.pattern_id.value if self.pattern_id else None,
            "error": self.error.to_dict() if self.error else None,
        }


@dataclass(frozen=True)
class Gate:
    name: str
    when: Callable[[CanonicalAxes], bool]
    pattern_id: Optional[PatternId] = None
    error: Optional[RoutingError] = None

    def outcome(self) -> RoutingOutcome:
        return RoutingOutcome(pattern_id=self.pattern_id, error=self.error)


def _contradiction(name: str, when, reason: str, requirement: str, conflict: str) -> Gate:
    return Gate(name, when, error=RoutingError.invalid_intent(reason, requirement, conflict))


# ============================================================
# CONTRADICTIONS
# ============================================================

CONTRADICTION_GATES: Tuple[Gate, ...] = (
    _contradiction(
        "static_without_backend_but_stateful",
        lambda a: a.static_content and not a.api_backend and a.stateful,
        "Static content without a backend cannot hold state",
        requirement="stateful",
        conflict="static_content without api_backend",
    ),
    _contradiction(
        "static_without_backend_but_realtime",
        lambda a: a.static_content and not a.api_backend and a.realtime,
        "Static content without a backend cannot serve realtime updates",
        requirement="realtime",
        conflict="static_content without api_backend",
    ),
    _contradiction(
        "payments_without_persistence",
        lambda a: a.payments and a.persistence_excluded,
        "payments require persistent storage",
        requirement="payments",
        conflict="persistence excluded",
    ),
    _contradiction(
        "relational_without_persistence",
        lambda a: a.primary_data_model is DataModel.RELATIONAL and a.persistence_excluded,
        "A relational data model requires persistent storage",
        requirement="primary_data_model=relational",
        conflict="persistence excluded",
    ),
    _contradiction(
        "database_without_persistence",
        lambda a: a.database_requested and a.persistence_excluded and not a.stateful,
        "A requested database requires persistent storage",
        requirement="data_stores",
        conflict="persistence excluded",
    ),
    _contradiction(
        "compute_excluded_but_needed",
        lambda a: a.compute_excluded and (a.api_backend or a.ml or a.realtime),
        "An API backend, ML or realtime workload requires compute",
        requirement="api_backend/ml/realtime",
        conflict="compute excluded",
    ),
)

# ============================================================
# PATTERNS
# ============================================================

PATTERN_GATES: Tuple[Gate, ...] = (
    Gate("ml_with_realtime_or_state", lambda a: a.ml and (a.realtime or a.stateful),
         _P.HYBRID_PLATFORM),
    Gate("ml_batch_training", lambda a: a.ml and a.batch_processing and not a.api_backend,
         _P.ML_TRAINING_PLATFORM),
    Gate("ml_inference", lambda a: a.ml, _P.ML_INFERENCE_PLATFORM),
    Gate("iot", lambda a: a.iot, _P.IOT_PLATFORM),
    Gate("realtime_gaming", lambda a: a.realtime and a.gaming, _P.GAMING_BACKEND),
    Gate("realtime_hybrid", lambda a: a.realtime and (a.payments or a.event_driven or a.stateful),
         _P.HYBRID_PLATFORM),
    Gate("realtime", lambda a: a.realtime, _P.REALTIME_PLATFORM),
    Gate("payments_pci", lambda a: a.payments and a.pci, _P.FINTECH_PAYMENT_PLATFORM),
    Gate("payments_stateful", lambda a: a.payments and a.stateful, _P.E_COMMERCE_BACKEND),
    Gate("payments", lambda a: a.payments, _P.STATEFUL_WEB_PLATFORM),
    Gate("hipaa_api", lambda a: a.hipaa and a.api_backend, _P.HEALTHCARE_PLATFORM),
    Gate("data_analytics", lambda a: a.data_analytics, _P.DATA_PLATFORM),
    Gate("mobile_stateful", lambda a: a.mobile and a.stateful, _P.MOBILE_BACKEND_PLATFORM),
    Gate("mobile", lambda a: a.mobile, _P.SERVERLESS_API),
    Gate("high_availability_stateful", lambda a: a.high_availability and a.stateful,
         _P.HIGH_AVAILABILITY_PLATFORM),
    Gate("event_driven_stateless", lambda a: a.event_driven and not a.stateful,
         _P.EVENT_DRIVEN_PLATFORM),
    Gate("api_containers",
         lambda a: a.api_backend and a.compute_preference is ComputePreference.CONTAINER,
         _P.CONTAINERIZED_WEB_APP),
    Gate("stateful_document",
         lambda a: a.stateful and a.primary_data_model in (DataModel.DOCUMENT, DataModel.KV),
         _P.SERVERLESS_WEB_APP),
    Gate("stateful", lambda a: a.stateful, _P.STATEFUL_WEB_PLATFORM),
    Gate("api", lambda a: a.api_backend, _P.SERVERLESS_API),
    Gate("static_with_auth", lambda a: a.static_content and a.authentication,
         _P.STATIC_SITE_WITH_AUTH),
    Gate("static", lambda a: a.static_content, _P.STATIC_SITE),
)

GATES: Tuple[Gate, ...] = CONTRADICTION_GATES + PATTERN_GATES

NO_MATCH = "no_match"
NEEDS_CLARIFICATION = RoutingOutcome(error=RoutingError.needs_clarification(
    "No pattern matches the intent; describe the workload (static site, API, data, ML...)"
))


def explain_route(axes: CanonicalAxes) -> Tuple[RoutingOutcome, str]:
    """Route and also return the name of the gate that decided."""
    for gate in GATES:
        if gate.when(axes):
            outcome = gate.outcome()
            logger.debug(
                "pattern_routed",
                gate=gate.name,
                pattern=outcome.pattern_id.value if outcome.pattern_id else None,
                error=outcome.error.kind.value if outcome.error else None,
            )
            return outcome, gate.name
    logger.debug("pattern_routed", gate=NO_MATCH, pattern=None)
    return NEEDS_CLARIFICATION, NO_MATCH


def route(axes: CanonicalAxes) -> RoutingOutcome:
    return explain_route(axes)[0]
