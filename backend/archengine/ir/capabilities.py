from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple

from archengine.ir.identifiers import CapabilityId, CapabilityValue, ServiceId


SECURITY_LEVELS = ("low", "medium", "high", "critical")


def max_security_level(current: str, candidate: Optional[str]) -> str:
    """Return the stricter of two security levels (unknown levels lose)."""
    if candidate not in SECURITY_LEVELS:
        return current
    if current not in SECURITY_LEVELS:
        return candidate
    return max(current, candidate, key=SECURITY_LEVELS.index)


@dataclass(frozen=True)
class StrictContract:
    """Floor a recognised domain puts under every architecture."""
    min_security_level: str
    required_services: Tuple[ServiceId, ...] = ()

    def to_dict(self) -> dict:
        return {
            "min_security_level": self.min_security_level,
            "required_services": [s.value for s in self.required_services],
        }


@dataclass(frozen=True)
class TierHints:
    scale_tier: str = "MEDIUM"
    latency_tier: str = "medium"
    availability_tier: str = "99.5"


def _empty_values() -> Mapping[CapabilityId, CapabilityValue]:
    return MappingProxyType({cap: CapabilityValue.UNKNOWN for cap in CapabilityId})


@dataclass(frozen=True)
class CapabilityMap:
    """
    Tri-state value for every catalog capability.

    Always complete: capabilities nothing spoke about are ``unknown``.
    Instances are immutable; refinement passes build a new map with
    ``with_values``.
    """
    values: Mapping[CapabilityId, CapabilityValue] = field(default_factory=_empty_values)
    tiers: TierHints = field(default_factory=TierHints)
    domain_id: Optional[str] = None
    contract: Optional[StrictContract] = None

    def get(self, capability: CapabilityId) -> CapabilityValue:
        return self.values.get(capability, CapabilityValue.UNKNOWN)

    def is_required(self, capability: CapabilityId) -> bool:
        return self.get(capability) is CapabilityValue.REQUIRED

    def is_none(self, capability: CapabilityId) -> bool:
        return self.get(capability) is CapabilityValue.NONE

    def is_known(self, capability: CapabilityId) -> bool:
        return self.get(capability) is not CapabilityValue.UNKNOWN

    def required(self) -> List[CapabilityId]:
        return [cap for cap in CapabilityId if self.is_required(cap)]

    def with_values(self, updates: Dict[CapabilityId, CapabilityValue], **changes) -> "CapabilityMap":
        merged = dict(self.values)
        merged.update(updates)
        return CapabilityMap(
            values=MappingProxyType(merged),
            tiers=changes.get("tiers", self.tiers),
            domain_id=changes.get("domain_id", self.domain_id),
            contract=changes.get("contract", self.contract),
        )

    def summary(self) -> Dict[str, List[str]]:
        out: Dict[str, List[str]] = {v.value: [] for v in CapabilityValue}
        for cap in CapabilityId:
            out[self.get(cap).value].append(cap.value)
        return out

    def to_dict(self) -> dict:
        return {
            "values": {cap.value: self.get(cap).value for cap in CapabilityId},
            "scale_tier": self.tiers.scale_tier,
            "latency_tier": self.tiers.latency_tier,
            "availability_tier": self.tiers.availability_tier,
            "domain_id": self.domain_id,
            "contract": self.contract.to_dict() if self.contract else None,
        }
