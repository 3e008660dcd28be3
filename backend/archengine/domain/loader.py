from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Tuple
import os

import structlog
import yaml

from archengine import config
from archengine.ir.capabilities import SECURITY_LEVELS, StrictContract
from archengine.ir.errors import UnknownCatalogIdError
from archengine.ir.identifiers import CapabilityId, ServiceId, lookup

logger = structlog.get_logger(__name__)

REQUIREMENT_FLAGS = ("stateful", "realtime", "payments", "authentication", "ml", "mobile")


@dataclass(frozen=True)
class RequirementDefaults:
    flags: Mapping[str, bool] = field(default_factory=lambda: MappingProxyType({}))
    workload_types: Tuple[str, ...] = ()
    data_stores: Tuple[str, ...] = ()
    compliance: Tuple[str, ...] = ()


@dataclass(frozen=True)
class DomainProfile:
    id: str
    description: str = ""
    aliases: Tuple[str, ...] = ()
    capability_hints: Tuple[CapabilityId, ...] = ()
    contract: Optional[StrictContract] = None
    requirement_defaults: RequirementDefaults = field(default_factory=RequirementDefaults)


class DomainRulesLoader:
    """
    Loads domain capability hints, strict contracts and requirement
    defaults from config files.

    Directory structure:
    domains/
        ecommerce/
            domain_rules.yaml
        fintech/
            domain_rules.yaml
        ...

    Ids inside the files are checked against the catalog enums while
    loading; an unknown capability or service id raises straight away.
    """

    RULES_FILE = "domain_rules.yaml"

    def __init__(self, domains_path: Optional[str] = None):
        self.domains_path = domains_path or config.DOMAINS_PATH

    def load_all(self) -> Dict[str, DomainProfile]:
        """Load every domain under ``domains_path``, keyed by domain id."""
        profiles: Dict[str, DomainProfile] = {}
        if not os.path.isdir(self.domains_path):
            logger.warning("domains_path_missing", path=self.domains_path)
            return profiles

        for entry in sorted(os.listdir(self.domains_path)):
            rules_path = os.path.join(self.domains_path, entry, self.RULES_FILE)
            if not os.path.isfile(rules_path):
                continue
            profile = self.load_domain(entry)
            profiles[profile.id] = profile

        logger.debug("domains_loaded", count=len(profiles), path=self.domains_path)
        return profiles

    def load_domain(self, domain: str) -> DomainProfile:
        rules_path = os.path.join(self.domains_path, domain, self.RULES_FILE)
        with open(rules_path, "r") as f:
            data = yaml.safe_load(f) or {}
        return self.parse(data, default_id=domain)

    def parse(self, data: dict, default_id: str) -> DomainProfile:
        domain_id = str(data.get("id") or default_id)

        hints = tuple(
            self._capability(raw, domain_id) for raw in data.get("capability_hints", []) or []
        )

        contract = None
        contract_data = data.get("contract")
        if contract_data:
            level = str(contract_data.get("min_security_level", "medium"))
            if level not in SECURITY_LEVELS:
                raise UnknownCatalogIdError("security level", f"{domain_id}:{level}")
            contract = StrictContract(
                min_security_level=level,
                required_services=tuple(
                    self._service(raw, domain_id)
                    for raw in contract_data.get("required_services", []) or []
                ),
            )

        defaults = data.get("requirement_defaults") or {}
        flags = {}
        for key, value in defaults.items():
            if key in ("workload_types", "data_stores", "compliance"):
                continue
            if key not in REQUIREMENT_FLAGS:
                raise UnknownCatalogIdError("requirement flag", f"{domain_id}:{key}")
            flags[key] = bool(value)

        data_stores = tuple(defaults.get("data_stores", []) or [])
        for store in data_stores:
            self._service(store, domain_id)

        return DomainProfile(
            id=domain_id,
            description=str(data.get("description", "")),
            aliases=tuple(str(a) for a in data.get("aliases", []) or []),
            capability_hints=hints,
            contract=contract,
            requirement_defaults=RequirementDefaults(
                flags=MappingProxyType(flags),
                workload_types=tuple(defaults.get("workload_types", []) or []),
                data_stores=data_stores,
                compliance=tuple(str(c).upper() for c in defaults.get("compliance", []) or []),
            ),
        )

    @staticmethod
    def _capability(raw, domain_id: str) -> CapabilityId:
        capability = lookup(CapabilityId, raw)
        if capability is None:
            raise UnknownCatalogIdError("capability", f"{domain_id}:{raw}")
        return capability

    @staticmethod
    def _service(raw, domain_id: str) -> ServiceId:
        service_id = lookup(ServiceId, raw)
        if service_id is None:
            raise UnknownCatalogIdError("service", f"{domain_id}:{raw}")
        return service_id


def build_alias_index(profiles: Dict[str, DomainProfile]) -> Dict[str, str]:
    """Map every domain id and alias (lowercased) to its canonical domain id."""
    index: Dict[str, str] = {}
    for profile in profiles.values():
        index[profile.id.lower()] = profile.id
        for alias in profile.aliases:
            index.setdefault(alias.lower(), profile.id)
    return index