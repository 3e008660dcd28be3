# backend/archengine/catalog/registry.py
"""
Catalog Registry - the one read-only view of all static tables

Built once, validated once, then shared by every request. Nothing on a
Catalog instance may be mutated after ``build_catalog`` returns.
"""

from dataclasses import dataclass
from threading import Lock
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

import structlog

from archengine import config
from archengine.catalog.capability_map import CAPABILITY_TO_SERVICE, CapabilityServices
from archengine.catalog.patterns import PATTERN_CATALOG, PatternDefinition
from archengine.catalog.rules import REQUIREMENT_RULES, RequirementRule
from archengine.catalog.services import SERVICE_CATALOG, ServiceDefinition
from archengine.domain.loader import DomainProfile, DomainRulesLoader, build_alias_index
from archengine.ir.errors import CatalogIntegrityError, UnknownCatalogIdError
from archengine.ir.identifiers import CapabilityId, PatternId, ServiceId, lookup
from archengine.visual.edge_rules import EDGE_RULES, EdgeRule

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class Catalog:
    services: Mapping[ServiceId, ServiceDefinition]
    patterns: Mapping[PatternId, PatternDefinition]
    capability_services: Mapping[CapabilityId, CapabilityServices]
    requirement_rules: Tuple[RequirementRule, ...]
    edge_rules: Tuple[EdgeRule, ...]
    domains: Mapping[str, DomainProfile]
    domain_aliases: Mapping[str, str]
    fallback_pattern: Optional[PatternId]

    def service(self, service_id) -> ServiceDefinition:
        key = lookup(ServiceId, service_id)
        if key is None or key not in self.services:
            raise UnknownCatalogIdError("service", service_id)
        return self.services[key]

    def pattern(self, pattern_id) -> PatternDefinition:
        key = lookup(PatternId, pattern_id)
        if key is None or key not in self.patterns:
            raise UnknownCatalogIdError("pattern", pattern_id)
        return self.patterns[key]

    def domain(self, domain_id: Optional[str]) -> Optional[DomainProfile]:
        """Resolve a domain id or alias; unrecognised domains are just absent."""
        if not domain_id:
            return None
        canonical = self.domain_aliases.get(str(domain_id).strip().lower())
        return self.domains.get(canonical) if canonical else None


def build_catalog(domains_path: Optional[str] = None, validate: bool = True) -> Catalog:
    """Assemble the catalog from the static tables and the domain rule files."""
    domains = DomainRulesLoader(domains_path).load_all()

    catalog = Catalog(
        services=MappingProxyType({s.id: s for s in SERVICE_CATALOG}),
        patterns=MappingProxyType({p.id: p for p in PATTERN_CATALOG}),
        capability_services=CAPABILITY_TO_SERVICE,
        requirement_rules=REQUIREMENT_RULES,
        edge_rules=EDGE_RULES,
        domains=MappingProxyType(domains),
        domain_aliases=MappingProxyType(build_alias_index(domains)),
        fallback_pattern=lookup(PatternId, config.FALLBACK_PATTERN),
    )

    if validate:
        # Imported here: the validator module type-hints against Catalog
        from archengine.validation.catalog_validator import validate_catalog

        issues = validate_catalog(catalog)
        if issues:
            for issue in issues:
                logger.error("catalog_issue", code=issue.code, object_id=issue.object_id,
                             message=issue.message)
            raise CatalogIntegrityError(issues)

    logger.info(
        "catalog_loaded",
        services=len(catalog.services),
        patterns=len(catalog.patterns),
        domains=len(catalog.domains),
    )
    return catalog


# Global catalog instance
_global_catalog: Optional[Catalog] = None
_catalog_lock = Lock()


def get_catalog() -> Catalog:
    """Get or build the shared catalog (built once, thread-safe)."""
    global _global_catalog
    if _global_catalog is None:
        with _catalog_lock:
            if _global_catalog is None:
                _global_catalog = build_catalog()
    return _global_catalog
