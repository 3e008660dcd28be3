# backend/archengine/catalog/rules.py
"""
Requirement-driven service rules and exclusion vocabulary.

Each rule is a deterministic mapping from a fact of the Requirements
record to one or more services, and declares whether the services it adds
may later be removed by a user exclusion.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, Mapping, Tuple

from archengine.ir.identifiers import ServiceId
from archengine.ir.requirements import DataModel, Requirements

_S = ServiceId


@dataclass(frozen=True)
class RequirementRule:
    name: str
    services: Tuple[ServiceId, ...]
    removable: bool
    when: Callable[[Requirements], bool]


def _has_store(service_id: ServiceId) -> Callable[[Requirements], bool]:
    return lambda req: service_id.value in req.data_stores


_DOCUMENT_MODELS = (DataModel.DOCUMENT, DataModel.KV)

# Data stores a request may ask for directly by service id
DATA_STORE_SERVICES: Tuple[ServiceId, ...] = (
    _S.RELATIONAL_DATABASE,
    _S.NOSQL_DATABASE,
    _S.CACHE,
    _S.OBJECT_STORAGE,
    _S.MESSAGE_QUEUE,
    _S.EVENT_BUS,
    _S.SEARCH_ENGINE,
    _S.DATA_WAREHOUSE,
    _S.TIMESERIES_DATABASE,
    _S.VECTOR_DATABASE,
)


REQUIREMENT_RULES: Tuple[RequirementRule, ...] = (
    RequirementRule(
        "authentication", (_S.IDENTITY_AUTH,), removable=True,
        when=lambda req: req.authentication,
    ),
    RequirementRule(
        "payments", (_S.PAYMENT_GATEWAY,), removable=False,
        when=lambda req: req.payments,
    ),
    RequirementRule(
        "stateful_relational", (_S.RELATIONAL_DATABASE,), removable=False,
        when=lambda req: req.stateful and req.primary_data_model not in _DOCUMENT_MODELS,
    ),
    RequirementRule(
        "stateful_document", (_S.NOSQL_DATABASE,), removable=False,
        when=lambda req: req.stateful and req.primary_data_model in _DOCUMENT_MODELS,
    ),
    RequirementRule(
        "realtime", (_S.WEBSOCKET_GATEWAY, _S.MESSAGE_QUEUE), removable=True,
        when=lambda req: req.realtime,
    ),
    RequirementRule(
        "ml", (_S.ML_INFERENCE,), removable=False,
        when=lambda req: req.ml,
    ),
    RequirementRule(
        "mobile", (_S.PUSH_NOTIFICATION,), removable=True,
        when=lambda req: req.mobile,
    ),
    RequirementRule(
        "compliance:PCI", (_S.WAF, _S.KEY_MANAGEMENT), removable=False,
        when=lambda req: "PCI" in req.compliance,
    ),
    RequirementRule(
        "compliance:HIPAA", (_S.KEY_MANAGEMENT, _S.AUDIT_LOGGING), removable=False,
        when=lambda req: "HIPAA" in req.compliance,
    ),
    RequirementRule(
        "compliance:GDPR", (_S.KEY_MANAGEMENT,), removable=False,
        when=lambda req: "GDPR" in req.compliance,
    ),
    RequirementRule(
        "security_level", (_S.SECRETS_MANAGEMENT,), removable=True,
        when=lambda req: req.nfr.security_level in ("high", "critical"),
    ),
    RequirementRule(
        "availability", (_S.LOAD_BALANCER, _S.BACKUP), removable=True,
        when=lambda req: req.nfr.availability_value >= 99.99,
    ),
    RequirementRule(
        "observability_baseline", (_S.LOGGING, _S.MONITORING), removable=True,
        when=lambda req: True,
    ),
) + tuple(
    RequirementRule(f"data_store:{sid.value}", (sid,), removable=True, when=_has_store(sid))
    for sid in DATA_STORE_SERVICES
)


# Exclusion words that name a group of services rather than one id
_PERSISTENCE = (_S.RELATIONAL_DATABASE, _S.NOSQL_DATABASE, _S.BLOCK_STORAGE, _S.BACKUP)

EXCLUSION_ALIASES: Mapping[str, Tuple[ServiceId, ...]] = MappingProxyType({
    "persistence": _PERSISTENCE,
    "data_persistence": _PERSISTENCE,
    "database": _PERSISTENCE,
    "compute": (_S.COMPUTE_SERVERLESS, _S.COMPUTE_CONTAINER, _S.COMPUTE_VM, _S.COMPUTE_BATCH),
    "containers": (_S.COMPUTE_CONTAINER,),
    "serverless": (_S.COMPUTE_SERVERLESS,),
    "queue": (_S.MESSAGE_QUEUE,),
    "storage": (_S.OBJECT_STORAGE, _S.BLOCK_STORAGE),
    "authentication": (_S.IDENTITY_AUTH,),
    "auth": (_S.IDENTITY_AUTH,),
})

# Exclusion tokens that mean "no persistent storage at all"
PERSISTENCE_EXCLUSIONS = frozenset({
    "persistence", "data_persistence", "database", "relationaldatabase", "nosqldatabase",
})

# Exclusion tokens that force the stateful downgrade
STATEFUL_DOWNGRADE_EXCLUSIONS = frozenset({"persistence", "data_persistence", "database"})

# Stores that make a request stateful when asked for explicitly
DATABASE_STORES = ("relationaldatabase", "nosqldatabase")
