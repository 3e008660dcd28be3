from dataclasses import dataclass, field
from typing import List, Tuple

from archengine.ir.errors import ExclusionRefused
from archengine.ir.identifiers import PatternId, ResolutionSource, ServiceId, ServiceState


@dataclass(frozen=True)
class ResolutionEntry:
    service_id: ServiceId
    source: ResolutionSource
    removable: bool
    state: ServiceState
    reason: str = ""

    def to_dict(self) -> dict:
        return {
            "service_id": self.service_id.value,
            "source": self.source.value,
            "removable": self.removable,
            "state": self.state.value,
            "reason": self.reason,
        }


@dataclass(frozen=True)
class Removal:
    service_id: ServiceId
    reason: str


@dataclass
class LayerDiff:
    """What one resolution layer wants changed, with justification."""
    layer: str
    additions: List[ResolutionEntry] = field(default_factory=list)
    removals: List[Removal] = field(default_factory=list)
    refusals: List[ExclusionRefused] = field(default_factory=list)
    notes: List[str] = field(default_factory=list)

    def add(self, entry: ResolutionEntry):
        self.additions.append(entry)

    def remove(self, service_id: ServiceId, reason: str):
        self.removals.append(Removal(service_id, reason))

    @property
    def is_empty(self) -> bool:
        return not (self.additions or self.removals or self.refusals)

    def to_dict(self) -> dict:
        return {
            "layer": self.layer,
            "additions": [e.to_dict() for e in self.additions],
            "removals": [{"service_id": r.service_id.value, "reason": r.reason} for r in self.removals],
            "refusals": [r.to_dict() for r in self.refusals],
            "notes": list(self.notes),
        }


@dataclass(frozen=True)
class ResolutionResult:
    pattern_id: PatternId
    entries: Tuple[ResolutionEntry, ...]
    diffs: Tuple[LayerDiff, ...] = ()
    refusals: Tuple[ExclusionRefused, ...] = ()

    @property
    def service_ids(self) -> List[ServiceId]:
        return [e.service_id for e in self.entries]

    def entry_for(self, service_id: ServiceId):
        for entry in self.entries:
            if entry.service_id == service_id:
                return entry
        return None

    def diagnostics(self) -> List[Tuple[str, str, bool]]:
        """Ordered ``(service_id, source, removable)`` audit trail."""
        return [(e.service_id.value, e.source.value, e.removable) for e in self.entries]
