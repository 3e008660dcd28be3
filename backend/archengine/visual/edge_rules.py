"""
Structural edge rules

A fixed set of relationships drawn between resolved services. A rule only
produces an edge when both of its endpoints made it into the architecture;
``any_of`` sources and targets expand to every present member.
"""

from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple

from archengine.ir.identifiers import ServiceId
from archengine.ir.requirements import Requirements

_S = ServiceId

COMPUTE_SERVICES = (_S.COMPUTE_CONTAINER, _S.COMPUTE_SERVERLESS, _S.COMPUTE_VM)
DATABASE_SERVICES = (_S.RELATIONAL_DATABASE, _S.NOSQL_DATABASE)


@dataclass(frozen=True)
class EdgeRule:
    sources: Tuple[ServiceId, ...]
    targets: Tuple[ServiceId, ...]
    relation: str
    style: str = "solid"
    when: Optional[Callable[[Requirements], bool]] = None


def _rule(sources, targets, relation, style="solid", when=None) -> EdgeRule:
    if isinstance(sources, ServiceId):
        sources = (sources,)
    if isinstance(targets, ServiceId):
        targets = (targets,)
    return EdgeRule(tuple(sources), tuple(targets), relation, style, when)


EDGE_RULES: Tuple[EdgeRule, ...] = (
    # Ingress
    _rule(_S.DNS, _S.CDN, "resolves"),
    _rule(_S.CDN, _S.OBJECT_STORAGE, "serves static assets"),
    _rule(_S.CDN, _S.LOAD_BALANCER, "forwards requests"),
    _rule(_S.CDN, _S.API_GATEWAY, "forwards requests"),
    _rule(_S.WAF, (_S.CDN, _S.API_GATEWAY), "filters traffic", style="dashed"),
    _rule(_S.LOAD_BALANCER, COMPUTE_SERVICES, "distributes traffic"),
    _rule(_S.API_GATEWAY, COMPUTE_SERVICES, "invokes"),
    _rule(_S.API_GATEWAY, _S.ML_INFERENCE, "invokes"),
    _rule(_S.WEBSOCKET_GATEWAY, _S.MESSAGE_QUEUE, "forwards messages"),

    # Identity
    _rule(_S.IDENTITY_AUTH, COMPUTE_SERVICES, "authenticates"),
    _rule(_S.IDENTITY_AUTH, _S.RELATIONAL_DATABASE, "stores user data"),

    # Data access
    _rule(COMPUTE_SERVICES, DATABASE_SERVICES, "reads/writes"),
    _rule(COMPUTE_SERVICES, _S.CACHE, "caches"),
    _rule(COMPUTE_SERVICES, _S.OBJECT_STORAGE, "stores files"),
    _rule(COMPUTE_SERVICES, _S.MESSAGE_QUEUE, "publishes"),
    _rule(COMPUTE_SERVICES, _S.PAYMENT_GATEWAY, "charges"),
    _rule(COMPUTE_SERVICES, _S.SECRETS_MANAGEMENT, "reads secrets", style="dashed"),
    _rule(_S.ML_INFERENCE, _S.OBJECT_STORAGE, "loads models"),
    _rule(_S.COMPUTE_BATCH, _S.DATA_WAREHOUSE, "loads"),

    # IoT
    _rule(_S.IOT_CORE, _S.EVENT_STREAM, "publishes telemetry"),
    _rule(_S.EVENT_STREAM, _S.TIMESERIES_DATABASE, "stores metrics"),

    # Observability
    _rule(_S.LOGGING, _S.MONITORING, "feeds metrics"),
    _rule(
        _S.PAYMENT_GATEWAY, _S.MONITORING, "PCI compliance monitoring",
        style="dashed", when=lambda req: req.payments or "PCI" in req.compliance,
    ),
)


def match_edges(present: Sequence[ServiceId], requirements: Requirements,
                rules: Sequence[EdgeRule] = EDGE_RULES) -> List[Tuple[ServiceId, ServiceId, EdgeRule]]:
    """Return ``(source, target, rule)`` for every rule whose endpoints are present."""
    present_set = set(present)
    matched = []
    seen = set()
    for rule in rules:
        if rule.when is not None and not rule.when(requirements):
            continue
        for source in rule.sources:
            if source not in present_set:
                continue
            for target in rule.targets:
                if target not in present_set or target == source:
                    continue
                if (source, target) in seen:
                    continue
                seen.add((source, target))
                matched.append((source, target, rule))
    return matched
