from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Any, Dict, List, Literal, Optional


# ---- Input ----

class AxisSignal(BaseModel):
    """One structured decision axis: a raw value and how sure the producer was."""
    value: Any = None
    confidence: Optional[float] = None


class Intent(BaseModel):
    axes: Dict[str, Any] = Field(default_factory=dict)  # raw decision axes by name
    domain: Optional[str] = None  # domain id or alias
    explicit_features: Dict[str, Any] = Field(default_factory=dict)
    inferred_features: Dict[str, Any] = Field(default_factory=dict)
    description: str = ""
    terminal_exclusions: List[str] = Field(default_factory=list)
    complexity: Optional[str] = None  # simple | moderate | complex

    @field_validator("terminal_exclusions", mode="before")
    @classmethod
    def _normalize_exclusions(cls, value):
        if value is None:
            return []
        if isinstance(value, str):
            value = [value]
        out = []
        for token in value:
            token = str(token).strip().lower()
            if token and token not in out:
                out.append(token)
        return out

    @field_validator("description", mode="before")
    @classmethod
    def _description_text(cls, value):
        return "" if value is None else str(value)

    @field_validator("complexity", mode="before")
    @classmethod
    def _complexity_token(cls, value):
        if value is None:
            return None
        return str(value).strip().lower() or None


# ---- Output ----

class ServiceSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    category: str
    description: str
    terraform_supported: bool
    required: bool
    source: str
    removable: bool
    reason: str = ""


class ArchitectureNode(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    label: str
    category: str
    shape: str
    color: str
    x: int
    y: int


class ArchitectureEdge(BaseModel):
    model_config = ConfigDict(frozen=True)

    source: str
    target: str
    relation: str
    style: str = "solid"


class ArchitectureContract(BaseModel):
    model_config = ConfigDict(frozen=True)

    pattern_name: str
    total_services: int
    required_services: int
    suggested_services: int
    deployable_services: int
    logical_services: int


class CanonicalArchitecture(BaseModel):
    model_config = ConfigDict(frozen=True)

    pattern_id: str
    pattern_name: str
    services: List[ServiceSummary] = Field(default_factory=list)
    deployable_services: List[str] = Field(default_factory=list)
    logical_services: List[str] = Field(default_factory=list)
    nodes: List[ArchitectureNode] = Field(default_factory=list)
    edges: List[ArchitectureEdge] = Field(default_factory=list)
    contract: ArchitectureContract
    diagnostics: List[Dict[str, Any]] = Field(default_factory=list)

    def service_ids(self) -> List[str]:
        return [s.id for s in self.services]

    def service(self, service_id: str) -> Optional[ServiceSummary]:
        for summary in self.services:
            if summary.id == service_id:
                return summary
        return None


class ArchitectureDecision(BaseModel):
    status: Literal["resolved", "invalid_intent", "needs_clarification"]
    architecture: Optional[CanonicalArchitecture] = None
    error: Optional[Dict[str, Any]] = None
    refusals: List[Dict[str, Any]] = Field(default_factory=list)
    resolution_layers: List[Dict[str, Any]] = Field(default_factory=list)  # layer diffs, in order
    ranking: Optional[Dict[str, Any]] = None  # advisory scoring router output
    capabilities: Dict[str, List[str]] = Field(default_factory=dict)
    requirements: Dict[str, Any] = Field(default_factory=dict)
    canonical_axes: Dict[str, Any] = Field(default_factory=dict)
    matched_gate: Optional[str] = None
    fit_warnings: List[str] = Field(default_factory=list)

    @property
    def is_resolved(self) -> bool:
        return self.status == "resolved"

    def to_dict(self) -> dict:
        return self.model_dump(mode="json")
