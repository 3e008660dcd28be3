"""
Catalog Validator - cross-checks the static tables before any request is served.

Catches issues like:
- Enum members with no catalog definition
- Patterns whose mandatory/contract services are also forbidden
- Capability, rule, edge or domain references to uncatalogued services
- A fallback pattern that does not exist
"""

from typing import List

from archengine.catalog.registry import Catalog
from archengine.catalog.services import LOGICAL_ONLY_SERVICES
from archengine.ir.errors import CatalogIssue
from archengine.ir.identifiers import ServiceId


def validate_catalog(catalog: Catalog) -> List[CatalogIssue]:
    """Return every integrity issue found; an empty list means the catalog is sound."""
    issues: List[CatalogIssue] = []
    issues.extend(_check_service_definitions(catalog))
    issues.extend(_check_patterns(catalog))
    issues.extend(_check_capability_table(catalog))
    issues.extend(_check_rules(catalog))
    issues.extend(_check_domains(catalog))
    if catalog.fallback_pattern is None or catalog.fallback_pattern not in catalog.patterns:
        issues.append(CatalogIssue(
            code="UNKNOWN_FALLBACK_PATTERN",
            message="Configured fallback pattern is not in the pattern catalog",
            object_id=str(catalog.fallback_pattern),
        ))
    return issues


def _missing(catalog: Catalog, service_id) -> bool:
    return service_id not in catalog.services


def _check_service_definitions(catalog: Catalog) -> List[CatalogIssue]:
    issues = []
    for service_id in ServiceId:
        if service_id not in catalog.services:
            issues.append(CatalogIssue(
                code="UNDEFINED_SERVICE",
                message=f"Service id {service_id.value} has no catalog definition",
                object_id=service_id.value,
            ))
    for service_id, definition in catalog.services.items():
        logical = service_id in LOGICAL_ONLY_SERVICES
        if definition.terraform_supported == logical:
            issues.append(CatalogIssue(
                code="DEPLOYABILITY_MISMATCH",
                message=f"Service {service_id.value} terraform_supported disagrees with the logical-only list",
                object_id=service_id.value,
            ))
        if definition.id != service_id:
            issues.append(CatalogIssue(
                code="SERVICE_KEY_MISMATCH",
                message=f"Service {service_id.value} is registered under the wrong key",
                object_id=service_id.value,
            ))
    return issues


def _check_patterns(catalog: Catalog) -> List[CatalogIssue]:
    issues = []
    for pattern_id, pattern in catalog.patterns.items():
        lists = {
            "mandatory": pattern.mandatory_services,
            "optional": pattern.optional_services,
            "forbidden": pattern.forbidden_services,
            "contract": pattern.contract_services,
        }
        for list_name, services in lists.items():
            for service_id in services:
                if _missing(catalog, service_id):
                    issues.append(CatalogIssue(
                        code="UNKNOWN_PATTERN_SERVICE",
                        message=f"{pattern_id.value}.{list_name} references unknown service {service_id}",
                        object_id=pattern_id.value,
                        details={"list": list_name, "service": str(service_id)},
                    ))

        forbidden = set(pattern.forbidden_services)
        for service_id in pattern.contract:
            if service_id in forbidden:
                issues.append(CatalogIssue(
                    code="CONTRACT_FORBIDDEN_OVERLAP",
                    message=f"{pattern_id.value} both requires and forbids {service_id.value}",
                    object_id=pattern_id.value,
                    details={"service": service_id.value},
                ))
        if not pattern.mandatory_services:
            issues.append(CatalogIssue(
                code="EMPTY_PATTERN",
                message=f"{pattern_id.value} declares no mandatory services",
                object_id=pattern_id.value,
            ))
    return issues


def _check_capability_table(catalog: Catalog) -> List[CatalogIssue]:
    issues = []
    for capability, row in catalog.capability_services.items():
        for service_id in row.all():
            if _missing(catalog, service_id):
                issues.append(CatalogIssue(
                    code="UNKNOWN_CAPABILITY_SERVICE",
                    message=f"Capability {capability.value} maps to unknown service {service_id}",
                    object_id=capability.value,
                ))
    return issues


def _check_rules(catalog: Catalog) -> List[CatalogIssue]:
    issues = []
    for rule in catalog.requirement_rules:
        for service_id in rule.services:
            if _missing(catalog, service_id):
                issues.append(CatalogIssue(
                    code="UNKNOWN_RULE_SERVICE",
                    message=f"Requirement rule {rule.name} adds unknown service {service_id}",
                    object_id=rule.name,
                ))
    for rule in catalog.edge_rules:
        for service_id in rule.sources + rule.targets:
            if _missing(catalog, service_id):
                issues.append(CatalogIssue(
                    code="UNKNOWN_EDGE_SERVICE",
                    message=f"Edge rule '{rule.relation}' references unknown service {service_id}",
                    object_id=rule.relation,
                ))
    return issues


def _check_domains(catalog: Catalog) -> List[CatalogIssue]:
    issues = []
    for domain_id, profile in catalog.domains.items():
        if profile.contract is None:
            continue
        for service_id in profile.contract.required_services:
            if _missing(catalog, service_id):
                issues.append(CatalogIssue(
                    code="UNKNOWN_CONTRACT_SERVICE",
                    message=f"Domain {domain_id} contract requires unknown service {service_id}",
                    object_id=domain_id,
                ))
    seen = {}
    for domain_id, profile in catalog.domains.items():
        for alias in profile.aliases:
            owner = seen.setdefault(alias.lower(), domain_id)
            if owner != domain_id:
                issues.append(CatalogIssue(
                    code="DUPLICATE_DOMAIN_ALIAS",
                    message=f"Alias {alias} is claimed by {owner} and {domain_id}",
                    object_id=alias,
                ))
    return issues
