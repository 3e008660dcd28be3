"""
Tests for the axis normalizer: raw axis values -> required / none / unknown.
"""

import pytest

from archengine.ir.identifiers import CapabilityValue
from archengine.pipeline.axis_normalizer import (
    axis_confidence,
    is_confident,
    is_truthy,
    normalize_axis,
    raw_list,
    raw_number,
    raw_text,
    split_axis,
)
from archengine.schemas import AxisSignal

REQUIRED = CapabilityValue.REQUIRED
NONE = CapabilityValue.NONE
UNKNOWN = CapabilityValue.UNKNOWN


@pytest.mark.parametrize("raw", [None, "", "unknown", "  ", 42, 3.5, [True], {"other": 1}])
def test_unrecognised_values_are_unknown(raw):
    assert normalize_axis(raw) is UNKNOWN


@pytest.mark.parametrize("raw,expected", [
    (True, REQUIRED),
    (False, NONE),
    ("required", REQUIRED),
    (" Enabled ", REQUIRED),
    ("STRONG", REQUIRED),
    ("true", REQUIRED),
    ("regulated", REQUIRED),
    ("none", NONE),
    ("Disabled", NONE),
    ("false", NONE),
    ("no", NONE),
])
def test_scalar_tokens(raw, expected):
    assert normalize_axis(raw) is expected


class TestStructuredAxes:
    def test_confident_value_is_normalized(self):
        assert normalize_axis({"value": True, "confidence": 0.9}) is REQUIRED
        assert normalize_axis({"value": "none", "confidence": 0.8}) is NONE

    def test_low_confidence_forces_unknown(self):
        assert normalize_axis({"value": True, "confidence": 0.3}) is UNKNOWN
        assert normalize_axis({"value": False, "confidence": 0.59}) is UNKNOWN

    def test_floor_is_inclusive(self):
        assert normalize_axis({"value": True, "confidence": 0.6}) is REQUIRED

    def test_missing_or_bad_confidence_counts_as_zero(self):
        assert normalize_axis({"value": True}) is UNKNOWN
        assert normalize_axis({"value": True, "confidence": "high"}) is UNKNOWN
        assert normalize_axis({"value": True, "confidence": True}) is UNKNOWN

    @pytest.mark.parametrize("confidence", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_confidence_counts_as_zero(self, confidence):
        assert normalize_axis({"value": True, "confidence": confidence}) is UNKNOWN
        assert axis_confidence({"value": True, "confidence": confidence}) == 0.0

    def test_confidence_is_clamped(self):
        assert split_axis({"value": True, "confidence": 7})[1] == 1.0
        assert split_axis({"value": True, "confidence": -2})[1] == 0.0
        assert normalize_axis({"value": True, "confidence": -2}, threshold=-1) is REQUIRED

    def test_custom_threshold(self):
        assert normalize_axis({"value": True, "confidence": 0.5}, threshold=0.4) is REQUIRED

    def test_signal_objects_are_accepted(self):
        assert normalize_axis(AxisSignal(value="strong", confidence=0.8)) is REQUIRED
        assert normalize_axis(AxisSignal(value="strong", confidence=0.1)) is UNKNOWN


def test_split_axis_shapes():
    assert split_axis(None) == (None, 0.0, False)
    assert split_axis("yes") == ("yes", 1.0, False)
    assert split_axis({"value": 1, "confidence": 0.7}) == (1, 0.7, True)


def test_confidence_helpers():
    assert axis_confidence(True) == 1.0
    assert axis_confidence({"value": True}) == 0.0
    assert is_confident("anything")
    assert not is_confident(None)
    assert not is_confident({"value": "x", "confidence": 0.2})


def test_raw_helpers():
    assert raw_text({"value": " High ", "confidence": 0.1}) == "high"
    assert raw_text(None) == ""
    assert raw_number("99.99%") == 99.99
    assert raw_number(99) == 99.0
    assert raw_number("n/a") is None
    assert raw_number(True) is None
    assert raw_list("PCI, gdpr") == ["pci", "gdpr"]
    assert raw_list({"value": ["HIPAA", None, ""], "confidence": 0.9}) == ["hipaa"]
    assert raw_list(7) == []


def test_truthiness_ignores_confidence():
    assert is_truthy({"value": True, "confidence": 0.1})
    assert not is_truthy({"value": "no", "confidence": 1.0})
    assert not is_truthy(None)
