"""
Tests for the catalog registry, the domain rules loader and the startup
integrity check.
"""

import dataclasses
from types import MappingProxyType

import pytest
import yaml

from archengine.catalog.registry import build_catalog, get_catalog
from archengine.domain.loader import DomainRulesLoader, build_alias_index
from archengine.ir.errors import CatalogIntegrityError, UnknownCatalogIdError
from archengine.ir.identifiers import CapabilityId, PatternId, ServiceId
from archengine.validation.catalog_validator import validate_catalog


def write_domain(root, name, data):
    folder = root / name
    folder.mkdir()
    (folder / DomainRulesLoader.RULES_FILE).write_text(yaml.safe_dump(data))


# ============================================================
# SHIPPED CATALOG
# ============================================================

def test_shipped_catalog_is_sound(catalog):
    assert validate_catalog(catalog) == []


def test_every_id_is_defined(catalog):
    assert set(catalog.services) == set(ServiceId)
    assert set(catalog.patterns) == set(PatternId)
    assert catalog.fallback_pattern is PatternId.SERVERLESS_WEB_APP


def test_shipped_domains(catalog):
    assert len(catalog.domains) == 20
    fintech = catalog.domain("fintech")
    assert ServiceId.AUDIT_LOGGING in fintech.contract.required_services
    assert fintech.requirement_defaults.compliance == ("PCI",)
    assert catalog.domain("Marketplace").id == "ecommerce"
    assert catalog.domain(None) is None
    assert catalog.domain("nowhere") is None


def test_lookups_raise_for_unknown_ids(catalog):
    with pytest.raises(UnknownCatalogIdError):
        catalog.pattern("MAINFRAME")
    with pytest.raises(UnknownCatalogIdError):
        catalog.service("floppydisk")


def test_shared_catalog_is_built_once():
    assert get_catalog() is get_catalog()


# ============================================================
# DOMAIN LOADER
# ============================================================

class TestDomainRulesLoader:
    def test_parses_a_domain(self, tmp_path):
        write_domain(tmp_path, "kiosk", {
            "description": "Self-service kiosks",
            "aliases": ["Vending"],
            "capability_hints": ["payments", "api_backend"],
            "contract": {"min_security_level": "high", "required_services": ["waf"]},
            "requirement_defaults": {
                "payments": True,
                "realtime": False,
                "workload_types": ["backend_api"],
                "data_stores": ["cache"],
                "compliance": ["pci"],
            },
        })
        profile = DomainRulesLoader(str(tmp_path)).load_all()["kiosk"]

        assert profile.capability_hints == (CapabilityId.PAYMENTS, CapabilityId.API_BACKEND)
        assert profile.contract.min_security_level == "high"
        assert profile.contract.required_services == (ServiceId.WAF,)
        assert dict(profile.requirement_defaults.flags) == {"payments": True, "realtime": False}
        assert profile.requirement_defaults.compliance == ("PCI",)
        assert build_alias_index({"kiosk": profile}) == {"kiosk": "kiosk", "vending": "kiosk"}

    @pytest.mark.parametrize("data", [
        {"capability_hints": ["teleportation"]},
        {"contract": {"required_services": ["mainframe"]}},
        {"contract": {"min_security_level": "extreme"}},
        {"requirement_defaults": {"quantum": True}},
        {"requirement_defaults": {"data_stores": ["tape_library"]}},
    ])
    def test_unknown_ids_raise_while_loading(self, tmp_path, data):
        write_domain(tmp_path, "broken", data)
        with pytest.raises(UnknownCatalogIdError):
            DomainRulesLoader(str(tmp_path)).load_all()

    def test_missing_directory_loads_nothing(self, tmp_path):
        assert DomainRulesLoader(str(tmp_path / "absent")).load_all() == {}

    def test_folders_without_rules_are_skipped(self, tmp_path):
        (tmp_path / "empty").mkdir()
        write_domain(tmp_path, "blog", {"id": "blogging"})
        assert list(DomainRulesLoader(str(tmp_path)).load_all()) == ["blogging"]


# ============================================================
# INTEGRITY CHECK
# ============================================================

def test_missing_service_definition_is_reported(catalog):
    services = {k: v for k, v in catalog.services.items() if k is not ServiceId.CDN}
    issues = validate_catalog(dataclasses.replace(catalog, services=MappingProxyType(services)))
    codes = {issue.code for issue in issues}

    assert "UNDEFINED_SERVICE" in codes
    assert "UNKNOWN_PATTERN_SERVICE" in codes
    assert "UNKNOWN_CAPABILITY_SERVICE" in codes


def test_deployability_mismatch_is_reported(catalog):
    services = dict(catalog.services)
    services[ServiceId.WAF] = dataclasses.replace(services[ServiceId.WAF], terraform_supported=True)
    issues = validate_catalog(dataclasses.replace(catalog, services=MappingProxyType(services)))

    assert [(i.code, i.object_id) for i in issues] == [("DEPLOYABILITY_MISMATCH", "waf")]


def test_unknown_fallback_is_reported(catalog):
    issues = validate_catalog(dataclasses.replace(catalog, fallback_pattern=None))
    assert [i.code for i in issues] == ["UNKNOWN_FALLBACK_PATTERN"]


def test_duplicate_alias_fails_the_build(tmp_path):
    write_domain(tmp_path, "shop", {"aliases": ["store"]})
    write_domain(tmp_path, "retail", {"aliases": ["store"]})

    with pytest.raises(CatalogIntegrityError) as excinfo:
        build_catalog(str(tmp_path))
    assert excinfo.value.issues[0].code == "DUPLICATE_DOMAIN_ALIAS"
