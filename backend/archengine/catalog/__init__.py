"""
Static catalogs

Services, patterns, the capability-to-service table and requirement
rules. Everything here is immutable data; ``get_catalog`` assembles and
validates it once.
"""

from archengine.catalog.services import ServiceDefinition, SERVICE_CATALOG
from archengine.catalog.patterns import PatternDefinition, PATTERN_CATALOG
from archengine.catalog.capability_map import CAPABILITY_TO_SERVICE, CapabilityServices
from archengine.catalog.registry import Catalog, build_catalog, get_catalog

__all__ = [
    "ServiceDefinition",
    "SERVICE_CATALOG",
    "PatternDefinition",
    "PATTERN_CATALOG",
    "CAPABILITY_TO_SERVICE",
    "CapabilityServices",
    "Catalog",
    "build_catalog",
    "get_catalog",
]
