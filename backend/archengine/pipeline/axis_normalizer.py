"""
Axis Normalizer

Turns one raw, untrusted axis value into a tri-state capability value.
Accepted shapes:
- None / missing
- plain booleans, strings, numbers
- ``{"value": ..., "confidence": ...}`` dicts or objects with those attributes

Every function here is total: bad input degrades to ``unknown`` or a
neutral default, never to an exception.
"""

import math
from typing import Any, Tuple

from archengine import config
from archengine.ir.identifiers import CapabilityValue

POSITIVE_TOKENS = frozenset({"required", "enabled", "strong", "true", "regulated"})
NEGATIVE_TOKENS = frozenset({"none", "disabled", "false", "no"})


def _is_structured(raw: Any) -> bool:
    if isinstance(raw, dict):
        return "value" in raw or "confidence" in raw
    return hasattr(raw, "value") and hasattr(raw, "confidence")


def split_axis(raw: Any) -> Tuple[Any, float, bool]:
    """Return ``(value, confidence, structured)`` for a raw axis."""
    if raw is None:
        return None, 0.0, False
    if _is_structured(raw):
        if isinstance(raw, dict):
            value, confidence = raw.get("value"), raw.get("confidence")
        else:
            value, confidence = raw.value, raw.confidence
        if isinstance(confidence, bool) or not isinstance(confidence, (int, float)):
            confidence = 0.0
        elif not math.isfinite(confidence):
            confidence = 0.0
        return value, min(max(float(confidence), 0.0), 1.0), True
    return raw, 1.0, False


def axis_value(raw: Any) -> Any:
    return split_axis(raw)[0]


def axis_confidence(raw: Any) -> float:
    return split_axis(raw)[1]


def is_confident(raw: Any, threshold: float = None) -> bool:
    floor = config.CONFIDENCE_FLOOR if threshold is None else threshold
    value, confidence, structured = split_axis(raw)
    return value is not None and (not structured or confidence >= floor)


def normalize_scalar(value: Any) -> CapabilityValue:
    if value is None:
        return CapabilityValue.UNKNOWN
    if isinstance(value, bool):
        return CapabilityValue.REQUIRED if value else CapabilityValue.NONE
    if isinstance(value, str):
        token = value.strip().lower()
        if token in POSITIVE_TOKENS:
            return CapabilityValue.REQUIRED
        if token in NEGATIVE_TOKENS:
            return CapabilityValue.NONE
    return CapabilityValue.UNKNOWN


def normalize_axis(raw: Any, threshold: float = None) -> CapabilityValue:
    """Map a raw axis to required / none / unknown."""
    floor = config.CONFIDENCE_FLOOR if threshold is None else threshold
    value, confidence, structured = split_axis(raw)
    if structured and confidence < floor:
        return CapabilityValue.UNKNOWN
    return normalize_scalar(value)


def raw_text(raw: Any) -> str:
    """Lowercased string form of an axis value, '' when absent."""
    value = axis_value(raw)
    if value is None or isinstance(value, (dict, list, tuple, set)):
        return ""
    return str(value).strip().lower()


def raw_number(raw: Any, default: float = None):
    """Numeric form of an axis value ('99.99%' is accepted)."""
    value = axis_value(raw)
    if isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip().rstrip("%"))
        except ValueError:
            return default
    return default


def raw_list(raw: Any) -> list:
    """List form of an axis value; a single string becomes a one-item list."""
    value = axis_value(raw)
    if value is None:
        return []
    if isinstance(value, (list, tuple, set)):
        return [str(v).strip().lower() for v in value if v is not None and str(v).strip()]
    if isinstance(value, str):
        return [part.strip().lower() for part in value.split(",") if part.strip()]
    return []


def is_truthy(raw: Any) -> bool:
    """Raw truthiness used by composite rules (confidence is ignored)."""
    return normalize_scalar(axis_value(raw)) is CapabilityValue.REQUIRED
