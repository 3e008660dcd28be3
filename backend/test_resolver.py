"""
Tests for the layered service resolver.

Requirements are built by hand here so each test isolates one layer.
"""

import dataclasses
from types import MappingProxyType

import pytest

from archengine.ir.capabilities import CapabilityMap
from archengine.ir.errors import UnknownCatalogIdError
from archengine.ir.identifiers import (
    CapabilityId,
    CapabilityValue,
    PatternId,
    ResolutionSource,
    ServiceId,
    ServiceState,
)
from archengine.ir.requirements import NonFunctionalRequirements, Requirements
from archengine.pipeline.canonical_axes import project_axes
from archengine.pipeline.resolver import (
    PatternMandatoryLayer,
    resolve_exclusion,
    resolve_services,
)

P = PatternId
S = ServiceId
SRC = ResolutionSource


def resolve(catalog, pattern_id, **fields):
    requirements = Requirements(**fields)
    return resolve_services(pattern_id, requirements, project_axes(requirements), catalog)


def capabilities(*required):
    return CapabilityMap().with_values({cap: CapabilityValue.REQUIRED for cap in required})


def diff_for(result, layer):
    return next(d for d in result.diffs if d.layer == layer)


@pytest.mark.parametrize("pattern_id", list(PatternId))
def test_every_pattern_keeps_its_contract(catalog, pattern_id):
    result = resolve(catalog, pattern_id)
    pattern = catalog.pattern(pattern_id)
    present = set(result.service_ids)

    assert set(pattern.contract) <= present
    assert not present & set(pattern.forbidden_services)
    for service_id in pattern.mandatory_services:
        entry = result.entry_for(service_id)
        assert entry.source is SRC.PATTERN_MANDATORY
        assert not entry.removable


def test_forbidden_services_are_removed(catalog):
    # stateful_relational asks for a relational database, the pattern forbids it
    result = resolve(catalog, P.SERVERLESS_API, stateful=True)

    assert S.RELATIONAL_DATABASE not in result.service_ids
    removals = diff_for(result, "pattern_invariant").removals
    assert any(r.service_id is S.RELATIONAL_DATABASE and "forbidden" in r.reason for r in removals)


class TestTerminalExclusions:
    def test_mandatory_service_is_refused(self, catalog):
        result = resolve(
            catalog, P.E_COMMERCE_BACKEND,
            payments=True, stateful=True, terminal_exclusions=("paymentgateway",),
        )

        assert S.PAYMENT_GATEWAY in result.service_ids
        assert [r.to_dict() for r in result.refusals] == [{
            "exclusion": "paymentgateway",
            "service_id": "paymentgateway",
            "source": "pattern_mandatory",
            "reason": "service is non-removable",
        }]

    def test_removable_service_is_removed(self, catalog):
        result = resolve(
            catalog, P.SERVERLESS_API,
            authentication=True, terminal_exclusions=("identityauth",),
        )

        assert S.IDENTITY_AUTH not in result.service_ids
        assert result.refusals == ()

    def test_pattern_contract_service_is_refused(self, catalog):
        result = resolve(
            catalog, P.HIGH_AVAILABILITY_PLATFORM,
            stateful=True,
            nfr=NonFunctionalRequirements(availability="99.99"),
            terminal_exclusions=("backup",),
        )

        assert S.BACKUP in result.service_ids
        assert result.refusals[0].source == "pattern_contract"

    def test_unknown_token_becomes_a_note(self, catalog):
        result = resolve(catalog, P.SERVERLESS_API, terminal_exclusions=("warp_drive",))

        notes = diff_for(result, "terminal_exclusion").notes
        assert notes == ["exclusion 'warp_drive' names no known service"]

    def test_alias_removes_a_group(self, catalog):
        result = resolve(
            catalog, P.SERVERLESS_API,
            data_stores=("messagequeue",), terminal_exclusions=("queue",),
        )
        assert S.MESSAGE_QUEUE not in result.service_ids

    def test_token_resolution_order(self, catalog):
        assert resolve_exclusion("cache", catalog) == (S.CACHE,)
        assert resolve_exclusion("compute", catalog)[0] is S.COMPUTE_SERVERLESS
        assert resolve_exclusion("search", catalog) == (S.SEARCH_ENGINE,)
        assert resolve_exclusion("nothing", catalog) == ()


class TestRequirementRules:
    def test_non_removable_rule_wins_over_removable(self, catalog):
        result = resolve(
            catalog, P.CONTAINERIZED_WEB_APP,
            stateful=True, data_stores=("relationaldatabase",),
        )
        entry = result.entry_for(S.RELATIONAL_DATABASE)

        assert entry.source is SRC.REQUIREMENT_RULE
        assert entry.reason == "stateful_relational"
        assert not entry.removable

    def test_rules_do_not_downgrade_mandatory_entries(self, catalog):
        result = resolve(catalog, P.STATEFUL_WEB_PLATFORM, stateful=True, authentication=True)
        assert result.entry_for(S.IDENTITY_AUTH).source is SRC.PATTERN_MANDATORY


class TestCapabilityLayer:
    def test_suggestions_are_removable(self, catalog):
        result = resolve(
            catalog, P.STATEFUL_WEB_PLATFORM,
            stateful=True, capabilities=capabilities(CapabilityId.SEARCH),
        )
        entry = result.entry_for(S.SEARCH_ENGINE)

        assert entry.source is SRC.CAPABILITY
        assert entry.state is ServiceState.SUGGESTED
        assert entry.removable

    def test_forbidden_suggestions_are_skipped(self, catalog):
        result = resolve(
            catalog, P.STATIC_SITE, capabilities=capabilities(CapabilityId.API_BACKEND),
        )

        assert S.API_GATEWAY not in result.service_ids
        assert "apigateway skipped: forbidden by pattern" in diff_for(result, "capability").notes


class TestPatternInvariants:
    def test_stateless_requests_drop_databases(self, catalog):
        result = resolve(catalog, P.CONTAINERIZED_WEB_APP, data_stores=("relationaldatabase",))

        assert S.RELATIONAL_DATABASE not in result.service_ids
        removals = diff_for(result, "pattern_invariant").removals
        assert removals[0].reason == "stateless workload"

    def test_serverless_patterns_drop_containers(self, catalog):
        result = resolve(
            catalog, P.EVENT_DRIVEN_PLATFORM,
            capabilities=capabilities(CapabilityId.WORKFLOW_ORCHESTRATION),
        )

        assert S.COMPUTE_CONTAINER not in result.service_ids
        removals = diff_for(result, "pattern_invariant").removals
        assert [r.reason for r in removals if r.service_id is S.COMPUTE_CONTAINER] == [
            "serverless pattern",
        ]

    def test_mandatory_databases_survive(self, catalog):
        result = resolve(catalog, P.STATEFUL_WEB_PLATFORM)
        assert S.RELATIONAL_DATABASE in result.service_ids


def test_domain_contract_services_are_locked(catalog):
    profile = catalog.domain("ecommerce")
    result = resolve(
        catalog, P.STATEFUL_WEB_PLATFORM,
        stateful=True, domain_id=profile.id, contract=profile.contract,
        terminal_exclusions=("searchengine",),
    )
    entry = result.entry_for(S.SEARCH_ENGINE)

    assert entry.source is SRC.DOMAIN_CONTRACT
    assert not entry.removable
    assert result.refusals[0].source == "domain_contract"
    # already mandatory, so the source stays pattern_mandatory
    assert result.entry_for(S.LOAD_BALANCER).source is SRC.PATTERN_MANDATORY


def test_contract_completion_adds_pattern_contract(catalog):
    result = resolve(catalog, P.HIGH_AVAILABILITY_PLATFORM, stateful=True)

    for service_id in (S.COMPUTE_CONTAINER, S.BACKUP, S.DNS):
        entry = result.entry_for(service_id)
        assert entry.source is SRC.PATTERN_CONTRACT
        assert not entry.removable


def test_unknown_pattern_raises(catalog):
    with pytest.raises(UnknownCatalogIdError):
        resolve(catalog, "NOT_A_PATTERN")


def test_service_missing_from_catalog_raises(catalog):
    services = {k: v for k, v in catalog.services.items() if k is not S.CDN}
    broken = dataclasses.replace(catalog, services=MappingProxyType(services))

    with pytest.raises(UnknownCatalogIdError):
        resolve(broken, P.STATIC_SITE)


def test_custom_layer_sequence(catalog):
    requirements = Requirements(authentication=True)
    result = resolve_services(
        P.STATIC_SITE, requirements, project_axes(requirements), catalog,
        layers=(PatternMandatoryLayer(),),
    )

    assert result.service_ids == list(catalog.pattern(P.STATIC_SITE).mandatory_services)
    assert [d.layer for d in result.diffs] == ["pattern_mandatory"]


def test_resolution_is_deterministic(catalog):
    fields = dict(
        stateful=True, realtime=True, payments=True,
        capabilities=capabilities(CapabilityId.CACHING, CapabilityId.SEARCH),
        terminal_exclusions=("cache", "websocketgateway"),
    )
    first = resolve(catalog, P.HYBRID_PLATFORM, **fields)
    second = resolve(catalog, P.HYBRID_PLATFORM, **fields)

    assert first.diagnostics() == second.diagnostics()
    assert first.diagnostics()[0] == ("cdn", "pattern_mandatory", False)
