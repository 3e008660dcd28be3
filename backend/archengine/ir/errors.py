from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


# ============================================================
# RAISED: catalog / programmer defects
# ============================================================

class ArchEngineError(Exception):
    """Base class for engine failures that must not be handled as user input."""


class UnknownCatalogIdError(ArchEngineError):
    """A pattern or service id referenced by a rule is not in the catalog."""

    def __init__(self, kind: str, identifier):
        self.kind = kind
        self.identifier = getattr(identifier, "value", identifier)
        super().__init__(f"Unknown {kind} id: {self.identifier!r}")


class CatalogIntegrityError(ArchEngineError):
    """Startup integrity check found broken cross-references."""

    def __init__(self, issues: list):
        self.issues = issues
        lines = "; ".join(issue.message for issue in issues[:5])
        more = f" (+{len(issues) - 5} more)" if len(issues) > 5 else ""
        super().__init__(f"Catalog integrity check failed: {lines}{more}")


class DeployableLeakError(ArchEngineError):
    """A logical-only service ended up in the deployable service list."""

    def __init__(self, service_ids: List[str]):
        self.service_ids = service_ids
        super().__init__(
            "Non-deployable services leaked into deployable_services: "
            + ", ".join(service_ids)
        )


# ============================================================
# RETURNED: user-facing conditions
# ============================================================

class RoutingErrorKind(str, Enum):
    INVALID_INTENT = "INVALID_INTENT"
    NEEDS_CLARIFICATION = "NEEDS_CLARIFICATION"


@dataclass(frozen=True)
class RoutingError:
    kind: RoutingErrorKind
    reason: str
    requirement: Optional[str] = None  # what the intent asks for
    conflict: Optional[str] = None     # what contradicts it

    @classmethod
    def invalid_intent(cls, reason: str, requirement: str, conflict: str):
        return cls(RoutingErrorKind.INVALID_INTENT, reason, requirement, conflict)

    @classmethod
    def needs_clarification(cls, reason: str):
        return cls(RoutingErrorKind.NEEDS_CLARIFICATION, reason)

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "reason": self.reason,
            "requirement": self.requirement,
            "conflict": self.conflict,
        }


@dataclass(frozen=True)
class ExclusionRefused:
    """A terminal exclusion hit a service that may not be removed."""
    exclusion: str
    service_id: str
    source: str
    reason: str = "service is non-removable"

    def to_dict(self) -> dict:
        return {
            "exclusion": self.exclusion,
            "service_id": self.service_id,
            "source": self.source,
            "reason": self.reason,
        }


@dataclass
class CatalogIssue:
    code: str
    message: str
    object_id: str
    details: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "code": self.code,
            "message": self.message,
            "object_id": self.object_id,
            "details": self.details,
        }
