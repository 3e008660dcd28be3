"""
Capability Mapper

Raw decision axes (plus an optional domain) -> complete CapabilityMap.

Passes, in order:
1. base pass: every capability read from its axes through the normalizer
2. domain hints: unknown -> required for the capabilities a domain declares
3. composite rules: conjunctions of raw axis values
4. tier hints and the domain's strict contract

A later pass never turns ``none`` into ``required`` and never downgrades.
"""

from typing import Any, Dict, Mapping, Optional

import structlog

from archengine import config
from archengine.catalog.capability_map import CAPABILITY_AXES
from archengine.catalog.registry import Catalog, get_catalog
from archengine.domain.loader import DomainProfile
from archengine.ir.capabilities import CapabilityMap, TierHints
from archengine.ir.identifiers import AxisId, CapabilityId, CapabilityValue
from archengine.pipeline.axis_normalizer import (
    axis_confidence,
    is_confident,
    is_truthy,
    normalize_axis,
    raw_list,
    raw_number,
    raw_text,
)

logger = structlog.get_logger(__name__)

_A = AxisId
_K = CapabilityId
REQUIRED = CapabilityValue.REQUIRED
NONE = CapabilityValue.NONE
UNKNOWN = CapabilityValue.UNKNOWN

OBSERVABILITY_LEVELS = {"basic", "standard", "comprehensive", "high"}
SENSITIVE_LEVELS = {"high", "pii", "confidential", "restricted"}
PERSISTENT_MODELS = {"relational", "document", "kv", "graph"}
HIPAA_SENSITIVITY = {"high", "pii"}

SCALE_TIERS = {
    "very_low": "TINY",
    "low": "SMALL",
    "medium": "MEDIUM",
    "high": "LARGE",
    "very_high": "XL",
}

# Domain ids whose recognition also raises a domain flag capability
DOMAIN_FLAGS = {
    "iot": _K.DOMAIN_IOT,
    "ai_ml": _K.DOMAIN_ML_HEAVY,
    "data_analytics": _K.DOMAIN_ANALYTICS,
    "fintech": _K.DOMAIN_FINTECH,
    "healthcare": _K.DOMAIN_HEALTHCARE,
}


def known_axes(axes: Optional[Mapping[str, Any]]) -> Dict[AxisId, Any]:
    """Keep only recognised axis names; unknown names are dropped."""
    out: Dict[AxisId, Any] = {}
    for name, raw in (axes or {}).items():
        try:
            out[AxisId(str(name))] = raw
        except ValueError:
            logger.debug("axis_ignored", axis=str(name))
    return out


# ------------------------------------------------------------------ #
# Base pass
# ------------------------------------------------------------------ #

def _first_present(axes: Dict[AxisId, Any], names) -> CapabilityValue:
    for name in names:
        if name in axes and axes[name] is not None:
            return normalize_axis(axes[name])
    return UNKNOWN


def _level_in(axes, axis: AxisId, accepted) -> CapabilityValue:
    """Enum-valued axis: accepted level -> required, explicit negative -> none."""
    raw = axes.get(axis)
    if raw is None or not is_confident(raw):
        return UNKNOWN
    if raw_text(raw) in accepted:
        return REQUIRED
    return normalize_axis(raw)


def _resolve_data_persistence(axes) -> CapabilityValue:
    direct = _first_present(axes, (_A.STATEFUL, _A.DATA_PERSISTENCE))
    if direct is not UNKNOWN:
        return direct
    model = axes.get(_A.PRIMARY_DATA_MODEL)
    if model is None or not is_confident(model):
        return UNKNOWN
    text = raw_text(model)
    if text in PERSISTENT_MODELS:
        return REQUIRED
    if text == "none":
        return NONE
    return UNKNOWN


def _resolve_caching(axes) -> CapabilityValue:
    direct = _first_present(axes, (_A.CACHING_REQUIRED,))
    if direct is not UNKNOWN:
        return direct
    perf = axes.get(_A.PERFORMANCE_SENSITIVITY)
    if perf is not None and is_confident(perf) and raw_text(perf) == "high":
        return REQUIRED
    return UNKNOWN


def _resolve_notifications(axes) -> CapabilityValue:
    raw = axes.get(_A.NOTIFICATION_CHANNELS)
    if raw is None or not is_confident(raw):
        return UNKNOWN
    channels = [c for c in raw_list(raw) if c not in ("none", "no")]
    if channels:
        return REQUIRED
    return NONE if raw_list(raw) else normalize_axis(raw)


def _resolve_compliance(axes, tag: str) -> CapabilityValue:
    raw = axes.get(_A.REGULATORY_COMPLIANCE)
    if raw is None or not is_confident(raw):
        return UNKNOWN
    tags = raw_list(raw)
    if tag in tags:
        return REQUIRED
    if tags == ["none"]:
        return NONE
    return UNKNOWN


def _resolve_high_availability(axes) -> CapabilityValue:
    target = axes.get(_A.AVAILABILITY_TARGET)
    if target is not None and is_confident(target):
        number = raw_number(target)
        if number is not None and number >= 99.99:
            return REQUIRED
    return _first_present(axes, (_A.MULTI_REGION,))


def base_capabilities(axes: Dict[AxisId, Any]) -> Dict[CapabilityId, CapabilityValue]:
    values = {cap: UNKNOWN for cap in CapabilityId}
    for capability, names in CAPABILITY_AXES.items():
        values[capability] = _first_present(axes, names)

    values[_K.DATA_PERSISTENCE] = _resolve_data_persistence(axes)
    values[_K.OBSERVABILITY] = _level_in(axes, _A.OBSERVABILITY_LEVEL, OBSERVABILITY_LEVELS)
    values[_K.SENSITIVE_DATA] = _level_in(axes, _A.DATA_SENSITIVITY, SENSITIVE_LEVELS)
    values[_K.CACHING] = _resolve_caching(axes)
    values[_K.NOTIFICATIONS] = _resolve_notifications(axes)
    values[_K.PCI_COMPLIANT] = _resolve_compliance(axes, "pci")
    values[_K.HIPAA_COMPLIANT] = _resolve_compliance(axes, "hipaa")
    values[_K.GDPR_COMPLIANT] = _resolve_compliance(axes, "gdpr")
    values[_K.HIGH_AVAILABILITY] = _resolve_high_availability(axes)
    return values


# ------------------------------------------------------------------ #
# Refinement passes
# ------------------------------------------------------------------ #

def _upgrade(values: Dict[CapabilityId, CapabilityValue], capability: CapabilityId) -> bool:
    if values.get(capability, UNKNOWN) is UNKNOWN:
        values[capability] = REQUIRED
        return True
    return False


def apply_domain_hints(capabilities: CapabilityMap, profile: Optional[DomainProfile]) -> CapabilityMap:
    """
    Upgrade unknown capabilities the domain declares to required.

    Explicit ``none`` values are never overridden; applying the same
    domain twice changes nothing.
    """
    if profile is None:
        return capabilities
    values = dict(capabilities.values)
    upgraded = [cap.value for cap in profile.capability_hints if _upgrade(values, cap)]
    flag = DOMAIN_FLAGS.get(profile.id)
    if flag is not None and _upgrade(values, flag):
        upgraded.append(flag.value)
    if upgraded:
        logger.debug("domain_hints_applied", domain=profile.id, upgraded=upgraded)
    return capabilities.with_values(
        values,
        domain_id=profile.id,
        contract=profile.contract or capabilities.contract,
    )


def apply_composite_rules(values: Dict[CapabilityId, CapabilityValue], axes: Dict[AxisId, Any],
                          profile: Optional[DomainProfile]) -> Dict[CapabilityId, CapabilityValue]:
    domain_id = profile.id if profile else None
    fintech = domain_id == "fintech" or is_truthy(axes.get(_A.DOMAIN_FINTECH))
    healthcare = domain_id == "healthcare" or is_truthy(axes.get(_A.DOMAIN_HEALTHCARE))

    if fintech and is_truthy(axes.get(_A.PAYMENTS)):
        _upgrade(values, _K.PCI_COMPLIANT)

    if healthcare and raw_text(axes.get(_A.DATA_SENSITIVITY)) in HIPAA_SENSITIVITY:
        _upgrade(values, _K.HIPAA_COMPLIANT)

    perf = axes.get(_A.PERFORMANCE_SENSITIVITY)
    if raw_text(perf) == "high" and axis_confidence(perf) >= config.COMPOSITE_CONFIDENCE:
        _upgrade(values, _K.HIGH_PERFORMANCE)

    availability = raw_number(axes.get(_A.AVAILABILITY_TARGET))
    if (availability is not None and availability >= 99.99) or is_truthy(axes.get(_A.MULTI_REGION)):
        _upgrade(values, _K.HIGH_AVAILABILITY)

    return values


def tier_hints(axes: Dict[AxisId, Any]) -> TierHints:
    scale = SCALE_TIERS.get(raw_text(axes.get(_A.ESTIMATED_MAU)), "MEDIUM")
    latency = raw_text(axes.get(_A.LATENCY_SENSITIVITY)) or "medium"
    availability = raw_number(axes.get(_A.AVAILABILITY_TARGET))
    return TierHints(
        scale_tier=scale,
        latency_tier=latency,
        availability_tier=f"{availability:g}" if availability is not None else "99.5",
    )


def map_capabilities(axes: Optional[Mapping[str, Any]], domain: Optional[str] = None,
                     catalog: Optional[Catalog] = None) -> CapabilityMap:
    """Build the capability map for one request."""
    catalog = catalog or get_catalog()
    parsed = known_axes(axes)
    profile = catalog.domain(domain)
    if domain and profile is None:
        logger.info("domain_unrecognized", domain=str(domain))

    capabilities = CapabilityMap().with_values(base_capabilities(parsed), tiers=tier_hints(parsed))
    capabilities = apply_domain_hints(capabilities, profile)
    values = apply_composite_rules(dict(capabilities.values), parsed, profile)
    capabilities = capabilities.with_values(values)

    logger.debug(
        "capabilities_mapped",
        domain=capabilities.domain_id,
        required=[c.value for c in capabilities.required()],
    )
    return capabilities


def capability_summary(capabilities: CapabilityMap) -> dict:
    return capabilities.summary()
