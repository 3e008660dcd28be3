"""
Requirement Extractor

Merges every source of a request into one frozen Requirements record.
Sources, lowest trust first:

1. free-text signals from the description (see text_signals)
2. explicit / inferred features (explicit wins on the same key)
3. the capability map and a handful of raw axes
4. the recognised domain's requirement defaults and contract

All sources only add. The one exception is the stateful downgrade: a
persistence exclusion turns a stateful request stateless and drops the
data store that statefulness implied. Every such change is recorded in
``Requirements.adjustments``.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Set, Tuple, Union

import structlog

from archengine.catalog.registry import Catalog, get_catalog
from archengine.catalog.rules import DATABASE_STORES, STATEFUL_DOWNGRADE_EXCLUSIONS
from archengine.domain.loader import DomainProfile
from archengine.ir.capabilities import CapabilityMap, max_security_level
from archengine.ir.identifiers import AxisId, CapabilityId, lookup
from archengine.ir.requirements import (
    ComputePreference,
    DataModel,
    NonFunctionalRequirements,
    Requirements,
)
from archengine.pipeline.axis_normalizer import is_confident, raw_number, raw_text
from archengine.pipeline.text_signals import TextSignals, scan_text
from archengine.schemas import Intent

logger = structlog.get_logger(__name__)

_K = CapabilityId

FLAGS = ("stateful", "realtime", "payments", "authentication", "ml", "mobile")


@dataclass(frozen=True)
class Contribution:
    """What one recognised feature key or capability adds."""
    flags: Tuple[str, ...] = ()
    workloads: Tuple[str, ...] = ()
    stores: Tuple[str, ...] = ()


# ============================================================
# FEATURES
# ============================================================

FEATURE_TABLE: Mapping[str, Contribution] = MappingProxyType({
    "static_content": Contribution(workloads=("static_site",)),
    "payments": Contribution(flags=("payments",), workloads=("payment_system",)),
    "real_time": Contribution(flags=("realtime",), workloads=("realtime_app",)),
    "case_management": Contribution(flags=("stateful",)),
    "document_storage": Contribution(stores=("objectstorage",)),
    "multi_user_roles": Contribution(flags=("authentication", "stateful")),
    "identityauth": Contribution(flags=("authentication",)),
    "messagequeue": Contribution(stores=("messagequeue",)),
    "api_backend": Contribution(workloads=("backend_api",)),
    "mobile": Contribution(flags=("mobile",), workloads=("mobile_backend",)),
    "ml": Contribution(flags=("ml",), workloads=("ml_service",)),
    "search": Contribution(stores=("searchengine",)),
    "cache": Contribution(stores=("cache",)),
    "database": Contribution(stores=("relationaldatabase",)),
    "nosql_database": Contribution(stores=("nosqldatabase",)),
})

# ============================================================
# CAPABILITIES
# ============================================================

# data_persistence is handled separately: its store depends on the data model
CAPABILITY_TABLE: Mapping[CapabilityId, Contribution] = MappingProxyType({
    _K.STATIC_CONTENT: Contribution(workloads=("static_site",)),
    _K.API_BACKEND: Contribution(workloads=("backend_api",)),
    _K.DOCUMENT_STORAGE: Contribution(stores=("objectstorage",)),
    _K.IDENTITY_ACCESS: Contribution(flags=("authentication",)),
    _K.MULTI_USER_ROLES: Contribution(flags=("authentication", "stateful")),
    _K.REALTIME: Contribution(flags=("realtime",), workloads=("realtime_app",)),
    _K.SCHEDULED_JOBS: Contribution(workloads=("batch_jobs",)),
    _K.MESSAGING: Contribution(stores=("messagequeue",)),
    _K.EVENTING: Contribution(stores=("eventbus",)),
    _K.SEARCH: Contribution(stores=("searchengine",)),
    _K.PAYMENTS: Contribution(flags=("payments",), workloads=("payment_system",)),
    _K.DOMAIN_ML_HEAVY: Contribution(flags=("ml",), workloads=("ml_service",)),
    _K.DOMAIN_IOT: Contribution(workloads=("iot",)),
    _K.DOMAIN_ANALYTICS: Contribution(workloads=("data_analytics",)),
    _K.CACHING: Contribution(stores=("cache",)),
    _K.MOBILE_CLIENTS: Contribution(flags=("mobile",), workloads=("mobile_backend",)),
})

COMPLIANCE_CAPABILITIES = (
    (_K.PCI_COMPLIANT, "PCI"),
    (_K.HIPAA_COMPLIANT, "HIPAA"),
    (_K.GDPR_COMPLIANT, "GDPR"),
)

# ============================================================
# TEXT FACTS
# ============================================================

@dataclass(frozen=True)
class TextFact:
    """
    A text fact and the structured signals that silence it.

    The fact is ignored when any of ``capabilities`` is known, any of
    ``features`` is present in the merged features, or the domain sets
    ``flag``.
    """
    contribution: Contribution
    capabilities: Tuple[CapabilityId, ...] = ()
    features: Tuple[str, ...] = ()
    flag: Optional[str] = None


TEXT_FACTS: Mapping[str, TextFact] = MappingProxyType({
    "stateful": TextFact(
        Contribution(flags=("stateful",)),
        (_K.DATA_PERSISTENCE, _K.MULTI_USER_ROLES),
        ("case_management", "multi_user_roles"),
        "stateful",
    ),
    "realtime": TextFact(
        Contribution(flags=("realtime",)), (_K.REALTIME,), ("real_time",), "realtime",
    ),
    "authentication": TextFact(
        Contribution(flags=("authentication",)),
        (_K.IDENTITY_ACCESS, _K.MULTI_USER_ROLES),
        ("identityauth", "multi_user_roles"),
        "authentication",
    ),
    "payments": TextFact(
        Contribution(flags=("payments",)), (_K.PAYMENTS,), ("payments",), "payments",
    ),
    "ml": TextFact(
        Contribution(flags=("ml",)), (_K.DOMAIN_ML_HEAVY,), ("ml",), "ml",
    ),
    "store:relationaldatabase": TextFact(
        Contribution(stores=("relationaldatabase",)),
        (_K.DATA_PERSISTENCE,),
        ("database", "nosql_database"),
    ),
    "store:cache": TextFact(
        Contribution(stores=("cache",)), (_K.CACHING,), ("cache",),
    ),
    "store:messagequeue": TextFact(
        Contribution(stores=("messagequeue",)), (_K.MESSAGING,), ("messagequeue",),
    ),
    "store:objectstorage": TextFact(
        Contribution(stores=("objectstorage",)), (_K.DOCUMENT_STORAGE,), ("document_storage",),
    ),
})

# Structured signals that speak about persistence as a whole
PERSISTENCE_SIGNAL = TEXT_FACTS["stateful"]


# ============================================================
# BUILDER
# ============================================================

@dataclass
class _RequirementDraft:
    """Mutable working copy; frozen into Requirements at the end."""
    flags: Dict[str, bool] = field(default_factory=lambda: {f: False for f in FLAGS})
    workload_types: List[str] = field(default_factory=list)
    data_stores: List[str] = field(default_factory=list)
    compliance: List[str] = field(default_factory=list)
    exclusions: List[str] = field(default_factory=list)
    adjustments: List[str] = field(default_factory=list)
    # stores that only exist because the request is stateful
    derived_stores: Set[str] = field(default_factory=set)

    def apply(self, contribution: Contribution):
        for flag in contribution.flags:
            self.flags[flag] = True
        for workload in contribution.workloads:
            _append(self.workload_types, workload)
        for store in contribution.stores:
            _append(self.data_stores, store)


def _append(items: List[str], value: str):
    if value not in items:
        items.append(value)


def _truthy_feature(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("true", "yes", "required", "enabled")
    return value is True


def merged_features(intent: Intent) -> Dict[str, Any]:
    """Inferred features overlaid with explicit ones (explicit wins)."""
    return {**(intent.inferred_features or {}), **(intent.explicit_features or {})}


def _apply_features(draft: _RequirementDraft, features: Dict[str, Any]):
    for key, value in features.items():
        contribution = FEATURE_TABLE.get(key)
        if contribution is None:
            logger.debug("feature_ignored", feature=key)
            continue
        if _truthy_feature(value):
            draft.apply(contribution)


def _apply_capabilities(draft: _RequirementDraft, capabilities: CapabilityMap,
                        data_model: DataModel):
    for capability in capabilities.required():
        contribution = CAPABILITY_TABLE.get(capability)
        if contribution is not None:
            draft.apply(contribution)

    if capabilities.is_required(_K.DATA_PERSISTENCE):
        draft.flags["stateful"] = True
        store = (
            "nosqldatabase"
            if data_model in (DataModel.DOCUMENT, DataModel.KV)
            else "relationaldatabase"
        )
        if store not in draft.data_stores:
            draft.derived_stores.add(store)
        _append(draft.data_stores, store)

    for capability, tag in COMPLIANCE_CAPABILITIES:
        if capabilities.is_required(capability):
            _append(draft.compliance, tag)


def _apply_domain_defaults(draft: _RequirementDraft, profile: Optional[DomainProfile]):
    if profile is None:
        return
    defaults = profile.requirement_defaults
    for flag, value in defaults.flags.items():
        if value:
            draft.flags[flag] = True
    for workload in defaults.workload_types:
        _append(draft.workload_types, workload)
    for store in defaults.data_stores:
        _append(draft.data_stores, str(store))
    for tag in defaults.compliance:
        _append(draft.compliance, tag)


def _silenced(fact: TextFact, capabilities: CapabilityMap, features: Dict[str, Any],
              profile: Optional[DomainProfile]) -> bool:
    if any(capabilities.is_known(cap) for cap in fact.capabilities):
        return True
    if any(key in features for key in fact.features):
        return True
    if fact.flag and profile is not None and fact.flag in profile.requirement_defaults.flags:
        return True
    return False


def _apply_text(draft: _RequirementDraft, signals: TextSignals, capabilities: CapabilityMap,
                features: Dict[str, Any], profile: Optional[DomainProfile]):
    for name, fact in TEXT_FACTS.items():
        if signals.has(name) and not _silenced(fact, capabilities, features, profile):
            draft.apply(fact.contribution)

    if signals.denies("persistence") and not _silenced(PERSISTENCE_SIGNAL, capabilities,
                                                       features, profile):
        if "data_persistence" not in draft.exclusions:
            draft.exclusions.append("data_persistence")
            draft.adjustments.append("exclusion data_persistence added from negated description text")

    if not draft.workload_types:
        for workload in signals.with_prefix("workload:"):
            _append(draft.workload_types, workload)


def _apply_downgrade(draft: _RequirementDraft):
    trigger = next((e for e in draft.exclusions if e in STATEFUL_DOWNGRADE_EXCLUSIONS), None)
    if trigger is None or not draft.flags["stateful"]:
        return
    draft.flags["stateful"] = False
    draft.adjustments.append(f"stateful downgraded to false by exclusion '{trigger}'")
    for store in sorted(draft.derived_stores):
        if store in draft.data_stores:
            draft.data_stores.remove(store)
            draft.adjustments.append(f"data store {store} dropped with stateful")
    for store in DATABASE_STORES:
        if store in draft.data_stores:
            draft.adjustments.append(
                f"requested data store {store} conflicts with exclusion '{trigger}'")
    logger.info("stateful_downgraded", exclusion=trigger)


def _raw_axis(axes: Dict[str, Any], axis: AxisId):
    raw = axes.get(axis.value)
    return raw if raw is not None and is_confident(raw) else None


def _nfr(capabilities: CapabilityMap, axes: Dict[str, Any], compliance: List[str],
         profile: Optional[DomainProfile]) -> NonFunctionalRequirements:
    tiers = capabilities.tiers
    availability = tiers.availability_tier
    if capabilities.is_required(_K.HIGH_AVAILABILITY):
        current = raw_number(availability, 0.0)
        if current < 99.99:
            availability = "99.99"

    sensitivity_raw = _raw_axis(axes, AxisId.DATA_SENSITIVITY)
    sensitivity = raw_text(sensitivity_raw) or "low"
    if "pii" in sensitivity or "sensitive" in sensitivity:
        sensitivity = "confidential"
    elif sensitivity == "low" and capabilities.is_required(_K.SENSITIVE_DATA):
        sensitivity = "confidential"

    security = "medium"
    if capabilities.is_required(_K.SENSITIVE_DATA) or compliance:
        security = "high"
    if profile is not None and profile.contract is not None:
        security = max_security_level(security, profile.contract.min_security_level)

    return NonFunctionalRequirements(
        availability=availability,
        latency=tiers.latency_tier,
        security_level=security,
        data_sensitivity=sensitivity,
    )


def extract_requirements(intent: Union[Intent, dict], capabilities: CapabilityMap,
                         catalog: Optional[Catalog] = None) -> Requirements:
    """
    Build the Requirements record for one intent.

    ``capabilities`` must come from the capability mapper for the same
    intent. The same input always yields an equal record.
    """
    if not isinstance(intent, Intent):
        intent = Intent.model_validate(intent)
    catalog = catalog or get_catalog()
    profile = catalog.domain(capabilities.domain_id or intent.domain)
    axes = intent.axes or {}

    data_model = lookup(DataModel, raw_text(_raw_axis(axes, AxisId.PRIMARY_DATA_MODEL))) \
        or DataModel.NONE
    compute = lookup(ComputePreference, raw_text(_raw_axis(axes, AxisId.COMPUTE_PREFERENCE))) \
        or ComputePreference.NONE

    draft = _RequirementDraft(exclusions=list(intent.terminal_exclusions))
    features = merged_features(intent)

    _apply_features(draft, features)
    _apply_capabilities(draft, capabilities, data_model)
    _apply_domain_defaults(draft, profile)
    _apply_text(draft, scan_text(intent.description), capabilities, features, profile)

    # An explicitly requested database means the request keeps state
    if any(store in draft.data_stores for store in DATABASE_STORES):
        draft.flags["stateful"] = True

    _apply_downgrade(draft)

    requirements = Requirements(
        stateful=draft.flags["stateful"],
        realtime=draft.flags["realtime"],
        payments=draft.flags["payments"],
        authentication=draft.flags["authentication"],
        ml=draft.flags["ml"],
        mobile=draft.flags["mobile"],
        workload_types=tuple(draft.workload_types),
        data_stores=tuple(draft.data_stores),
        compliance=tuple(draft.compliance),
        nfr=_nfr(capabilities, axes, draft.compliance, profile),
        capabilities=capabilities,
        terminal_exclusions=tuple(draft.exclusions),
        scale_tier=capabilities.tiers.scale_tier,
        primary_data_model=data_model,
        compute_preference=compute,
        domain_id=profile.id if profile else None,
        contract=profile.contract if profile else None,
        adjustments=tuple(draft.adjustments),
    )
    logger.debug(
        "requirements_extracted",
        domain=requirements.domain_id,
        stateful=requirements.stateful,
        workloads=list(requirements.workload_types),
        exclusions=list(requirements.terminal_exclusions),
    )
    return requirements
