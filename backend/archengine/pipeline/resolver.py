"""
Service Resolver

Turns (pattern, requirements, axes) into the ordered, conflict-free list
of services. Resolution runs as named layers in a fixed order:

1. pattern_mandatory     - the pattern's mandatory services (locked)
2. domain_contract       - the domain's strict contract services (locked)
3. requirement_rule      - deterministic requirement rules
4. capability            - suggestions from required capabilities
5. terminal_exclusion    - user exclusions (never remove locked services)
6. pattern_invariant     - forbidden services and structural invariants
7. contract_completion   - re-add anything the pattern contract lacks

Each layer reads a frozen view and returns a LayerDiff; only the resolver
writes. Later layers win, except that a user exclusion can never remove
a non-removable entry.
"""

from typing import Dict, List, Optional, Tuple

import structlog

from archengine.catalog.registry import Catalog, get_catalog
from archengine.catalog.rules import EXCLUSION_ALIASES
from archengine.ir.errors import ExclusionRefused
from archengine.ir.identifiers import (
    CapabilityId,
    ResolutionSource,
    ServiceId,
    ServiceState,
    lookup,
)
from archengine.ir.requirements import CanonicalAxes, Requirements
from archengine.ir.resolution import LayerDiff, ResolutionEntry, ResolutionResult
from archengine.pipeline.stage import ResolutionLayer, ResolutionState

logger = structlog.get_logger(__name__)

_S = ServiceId
_SRC = ResolutionSource

COMPUTE_SERVICES = (_S.COMPUTE_SERVERLESS, _S.COMPUTE_CONTAINER, _S.COMPUTE_VM, _S.COMPUTE_BATCH)
BACKEND_SERVICES = COMPUTE_SERVICES + (_S.LOAD_BALANCER, _S.API_GATEWAY)
DATABASE_SERVICES = (_S.RELATIONAL_DATABASE, _S.NOSQL_DATABASE)


def _entry(service_id: ServiceId, source: ResolutionSource, removable: bool,
           state: ServiceState, reason: str) -> ResolutionEntry:
    return ResolutionEntry(service_id, source, removable, state, reason)


# ============================================================
# LAYERS
# ============================================================

class PatternMandatoryLayer(ResolutionLayer):
    name = "pattern_mandatory"

    def apply(self, state: ResolutionState) -> LayerDiff:
        diff = LayerDiff(self.name)
        for service_id in state.pattern.mandatory_services:
            diff.add(_entry(service_id, _SRC.PATTERN_MANDATORY, False, ServiceState.REQUIRED,
                            f"mandatory for {state.pattern.id.value}"))
        return diff


class DomainContractLayer(ResolutionLayer):
    name = "domain_contract"

    def apply(self, state: ResolutionState) -> LayerDiff:
        diff = LayerDiff(self.name)
        contract = state.requirements.contract
        if contract is None:
            return diff
        for service_id in contract.required_services:
            existing = state.entry(service_id)
            if existing is None or existing.removable:
                diff.add(_entry(service_id, _SRC.DOMAIN_CONTRACT, False, ServiceState.REQUIRED,
                                f"contract of domain {state.requirements.domain_id}"))
        return diff


class RequirementRuleLayer(ResolutionLayer):
    name = "requirement_rule"

    def apply(self, state: ResolutionState) -> LayerDiff:
        diff = LayerDiff(self.name)
        pending: Dict[ServiceId, ResolutionEntry] = {}
        for rule in state.catalog.requirement_rules:
            if not rule.when(state.requirements):
                continue
            for service_id in rule.services:
                entry = _entry(service_id, _SRC.REQUIREMENT_RULE, rule.removable,
                               ServiceState.REQUIRED, rule.name)
                existing = pending.get(service_id) or state.entry(service_id)
                if existing is None or (existing.removable and not entry.removable):
                    pending[service_id] = entry
        for entry in pending.values():
            diff.add(entry)
        return diff


class CapabilityLayer(ResolutionLayer):
    name = "capability"

    def apply(self, state: ResolutionState) -> LayerDiff:
        diff = LayerDiff(self.name)
        seen = set(state.service_ids())
        for capability in state.requirements.capabilities.required():
            row = state.catalog.capability_services.get(capability)
            if row is None:
                continue
            for service_id in row.required:
                if service_id in seen:
                    continue
                if state.pattern.forbids(service_id):
                    diff.notes.append(f"{service_id.value} skipped: forbidden by pattern")
                    continue
                seen.add(service_id)
                diff.add(_entry(service_id, _SRC.CAPABILITY, True, ServiceState.SUGGESTED,
                                capability.value))
        return diff


def resolve_exclusion(token: str, catalog: Catalog) -> Tuple[ServiceId, ...]:
    """Service ids an exclusion token names; empty when unrecognised."""
    service_id = lookup(ServiceId, token)
    if service_id is not None:
        return (service_id,)
    if token in EXCLUSION_ALIASES:
        return EXCLUSION_ALIASES[token]
    capability = lookup(CapabilityId, token)
    if capability is not None and capability in catalog.capability_services:
        return catalog.capability_services[capability].required
    return ()


class TerminalExclusionLayer(ResolutionLayer):
    name = "terminal_exclusion"

    def apply(self, state: ResolutionState) -> LayerDiff:
        diff = LayerDiff(self.name)
        removed = set()
        contract = set(state.pattern.contract)
        for token in state.requirements.terminal_exclusions:
            targets = resolve_exclusion(token, state.catalog)
            if not targets:
                diff.notes.append(f"exclusion '{token}' names no known service")
                continue
            for service_id in targets:
                entry = state.entry(service_id)
                if entry is None or service_id in removed:
                    continue
                if not entry.removable or service_id in contract:
                    source = entry.source.value if not entry.removable else _SRC.PATTERN_CONTRACT.value
                    diff.refusals.append(ExclusionRefused(
                        exclusion=token,
                        service_id=service_id.value,
                        source=source,
                    ))
                    logger.warning("exclusion_refused", exclusion=token,
                                   service=service_id.value, source=source)
                    continue
                removed.add(service_id)
                diff.remove(service_id, f"excluded by '{token}'")
        return diff


class PatternInvariantLayer(ResolutionLayer):
    name = "pattern_invariant"

    def apply(self, state: ResolutionState) -> LayerDiff:
        diff = LayerDiff(self.name)
        axes: CanonicalAxes = state.axes
        pattern = state.pattern

        for service_id, entry in state.entries.items():
            mandatory = entry.source is _SRC.PATTERN_MANDATORY
            if pattern.forbids(service_id):
                diff.remove(service_id, f"forbidden by {pattern.id.value}")
            elif axes.static_content and not axes.api_backend and service_id in BACKEND_SERVICES \
                    and not mandatory:
                diff.remove(service_id, "static content without a backend")
            elif not axes.stateful and not axes.static_content and service_id in DATABASE_SERVICES \
                    and not mandatory:
                diff.remove(service_id, "stateless workload")
            elif pattern.serverless and service_id is _S.COMPUTE_CONTAINER and not mandatory:
                diff.remove(service_id, "serverless pattern")
        return diff


class ContractCompletionLayer(ResolutionLayer):
    name = "contract_completion"

    def apply(self, state: ResolutionState) -> LayerDiff:
        diff = LayerDiff(self.name)
        for service_id in state.pattern.contract:
            if not state.has(service_id):
                diff.add(_entry(service_id, _SRC.PATTERN_CONTRACT, False, ServiceState.REQUIRED,
                                f"contract of {state.pattern.id.value}"))
        return diff


DEFAULT_LAYERS: Tuple[ResolutionLayer, ...] = (
    PatternMandatoryLayer(),
    DomainContractLayer(),
    RequirementRuleLayer(),
    CapabilityLayer(),
    TerminalExclusionLayer(),
    PatternInvariantLayer(),
    ContractCompletionLayer(),
)


# ============================================================
# RESOLVER
# ============================================================

def _apply_diff(entries: Dict[ServiceId, ResolutionEntry], diff: LayerDiff):
    for entry in diff.additions:
        existing = entries.get(entry.service_id)
        if existing is None or (existing.removable and not entry.removable):
            entries[entry.service_id] = entry
    for removal in diff.removals:
        entries.pop(removal.service_id, None)


def resolve_services(pattern_id, requirements: Requirements, axes: CanonicalAxes,
                     catalog: Optional[Catalog] = None,
                     layers: Tuple[ResolutionLayer, ...] = DEFAULT_LAYERS) -> ResolutionResult:
    """
    Run every resolution layer for one routed request.

    Raises UnknownCatalogIdError when ``pattern_id`` is not a catalog
    pattern; every other condition is reported in the result.
    """
    catalog = catalog or get_catalog()
    pattern = catalog.pattern(pattern_id)

    entries: Dict[ServiceId, ResolutionEntry] = {}
    diffs: List[LayerDiff] = []
    refusals: List[ExclusionRefused] = []

    for layer in layers:
        state = ResolutionState(
            pattern=pattern,
            requirements=requirements,
            axes=axes,
            catalog=catalog,
            entries=ResolutionState.freeze(entries),
        )
        diff = layer.apply(state)
        for entry in diff.additions:
            catalog.service(entry.service_id)
        _apply_diff(entries, diff)
        diffs.append(diff)
        refusals.extend(diff.refusals)
        if not diff.is_empty:
            logger.debug(
                "layer_applied",
                layer=layer.name,
                added=[e.service_id.value for e in diff.additions],
                removed=[r.service_id.value for r in diff.removals],
            )

    result = ResolutionResult(
        pattern_id=pattern.id,
        entries=tuple(entries.values()),
        diffs=tuple(diffs),
        refusals=tuple(refusals),
    )
    logger.info(
        "services_resolved",
        pattern=pattern.id.value,
        services=len(result.entries),
        refusals=len(result.refusals),
    )
    return result
