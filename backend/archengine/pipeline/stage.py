from abc import ABC, abstractmethod
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

from archengine.catalog.patterns import PatternDefinition
from archengine.catalog.registry import Catalog
from archengine.ir.identifiers import ServiceId
from archengine.ir.requirements import CanonicalAxes, Requirements
from archengine.ir.resolution import LayerDiff, ResolutionEntry


@dataclass(frozen=True)
class ResolutionState:
    """Read-only view a resolution layer works from."""
    pattern: PatternDefinition
    requirements: Requirements
    axes: CanonicalAxes
    catalog: Catalog
    entries: Mapping[ServiceId, ResolutionEntry]

    def has(self, service_id: ServiceId) -> bool:
        return service_id in self.entries

    def entry(self, service_id: ServiceId) -> Optional[ResolutionEntry]:
        return self.entries.get(service_id)

    def service_ids(self) -> Tuple[ServiceId, ...]:
        return tuple(self.entries)

    @staticmethod
    def freeze(entries) -> Mapping[ServiceId, ResolutionEntry]:
        return MappingProxyType(dict(entries))


class ResolutionLayer(ABC):
    name: str

    @abstractmethod
    def apply(self, state: ResolutionState) -> LayerDiff:
        """
        Must:
        - read from state
        - return every change as a diff
        - NEVER touch other layers or the entries directly
        """
        pass
