from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Optional, Tuple

from archengine.ir.capabilities import CapabilityMap, StrictContract


class DataModel(str, Enum):
    NONE = "none"
    RELATIONAL = "relational"
    DOCUMENT = "document"
    KV = "kv"
    GRAPH = "graph"


class TrafficTier(str, Enum):
    LOW = "low"
    STANDARD = "standard"
    HIGH = "high"


class ComputePreference(str, Enum):
    NONE = "none"
    SERVERLESS = "serverless"
    CONTAINER = "container"


@dataclass(frozen=True)
class NonFunctionalRequirements:
    availability: str = "99.5"
    latency: str = "medium"
    security_level: str = "medium"
    data_sensitivity: str = "low"

    @property
    def availability_value(self) -> float:
        try:
            return float(self.availability)
        except (TypeError, ValueError):
            return 0.0


@dataclass(frozen=True)
class Requirements:
    """
    Canonical requirement record for one request.

    Built by the requirement extractor and frozen afterwards. ``adjustments``
    lists every change the extractor made on top of the raw contributions
    (the stateful downgrade, text-derived exclusions).
    """
    stateful: bool = False
    realtime: bool = False
    payments: bool = False
    authentication: bool = False
    ml: bool = False
    mobile: bool = False

    workload_types: Tuple[str, ...] = ()
    data_stores: Tuple[str, ...] = ()
    compliance: Tuple[str, ...] = ()
    nfr: NonFunctionalRequirements = field(default_factory=NonFunctionalRequirements)

    capabilities: CapabilityMap = field(default_factory=CapabilityMap)
    terminal_exclusions: Tuple[str, ...] = ()

    scale_tier: str = "MEDIUM"
    primary_data_model: DataModel = DataModel.NONE
    compute_preference: ComputePreference = ComputePreference.NONE
    domain_id: Optional[str] = None
    contract: Optional[StrictContract] = None
    adjustments: Tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {
            "stateful": self.stateful,
            "realtime": self.realtime,
            "payments": self.payments,
            "authentication": self.authentication,
            "ml": self.ml,
            "mobile": self.mobile,
            "workload_types": list(self.workload_types),
            "data_stores": list(self.data_stores),
            "compliance": list(self.compliance),
            "nfr": asdict(self.nfr),
            "terminal_exclusions": list(self.terminal_exclusions),
            "scale_tier": self.scale_tier,
            "primary_data_model": self.primary_data_model.value,
            "compute_preference": self.compute_preference.value,
            "domain_id": self.domain_id,
            "contract": self.contract.to_dict() if self.contract else None,
            "adjustments": list(self.adjustments),
        }


@dataclass(frozen=True)
class CanonicalAxes:
    """Ground-truth view of a request, the only input of the pattern router."""
    static_content: bool = False
    api_backend: bool = False
    stateful: bool = False
    realtime: bool = False
    payments: bool = False
    authentication: bool = False
    ml: bool = False
    mobile: bool = False
    event_driven: bool = False
    iot: bool = False
    data_analytics: bool = False
    batch_processing: bool = False
    gaming: bool = False
    high_availability: bool = False
    pci: bool = False
    hipaa: bool = False
    database_requested: bool = False
    persistence_excluded: bool = False
    compute_excluded: bool = False
    primary_data_model: DataModel = DataModel.NONE
    traffic_tier: TrafficTier = TrafficTier.STANDARD
    compute_preference: ComputePreference = ComputePreference.NONE
    exclusions: Tuple[str, ...] = ()

    def to_dict(self) -> dict:
        out = asdict(self)
        out["primary_data_model"] = self.primary_data_model.value
        out["traffic_tier"] = self.traffic_tier.value
        out["compute_preference"] = self.compute_preference.value
        out["exclusions"] = list(self.exclusions)
        return out
