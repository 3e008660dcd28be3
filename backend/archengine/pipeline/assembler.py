from collections import defaultdict
from typing import Dict, List, Optional

import structlog

from archengine.catalog.registry import Catalog, get_catalog
from archengine.catalog.services import LOGICAL_ONLY_SERVICES
from archengine.ir.errors import DeployableLeakError
from archengine.ir.identifiers import ServiceId, ServiceState
from archengine.ir.requirements import Requirements
from archengine.ir.resolution import ResolutionResult
from archengine.schemas import (
    ArchitectureContract,
    ArchitectureEdge,
    ArchitectureNode,
    CanonicalArchitecture,
    ServiceSummary,
)
from archengine.visual.edge_rules import match_edges
from archengine.visual.visual_style import node_position, style_for

logger = structlog.get_logger(__name__)


def assemble_architecture(pattern_id, resolution: ResolutionResult, requirements: Requirements,
                          catalog: Optional[Catalog] = None) -> CanonicalArchitecture:
    """
    Build the final architecture value from a resolution result.

    Splits services into deployable (terraform supported) and logical,
    lays nodes out by category and draws the structural edges whose two
    endpoints are both present.
    """
    catalog = catalog or get_catalog()
    pattern = catalog.pattern(pattern_id)

    services: List[ServiceSummary] = []
    deployable: List[str] = []
    logical: List[str] = []
    nodes: List[ArchitectureNode] = []
    per_category: Dict[str, int] = defaultdict(int)

    # -------------------------
    # SERVICES & NODES
    # -------------------------
    for entry in resolution.entries:
        definition = catalog.service(entry.service_id)
        services.append(ServiceSummary(
            id=definition.id.value,
            name=definition.name,
            category=definition.category.value,
            description=definition.description,
            terraform_supported=definition.terraform_supported,
            required=entry.state is ServiceState.REQUIRED,
            source=entry.source.value,
            removable=entry.removable,
            reason=entry.reason,
        ))
        (deployable if definition.terraform_supported else logical).append(definition.id.value)

        style = style_for(definition.category)
        position = node_position(definition.category, per_category[definition.category])
        per_category[definition.category] += 1
        nodes.append(ArchitectureNode(
            id=definition.id.value,
            label=definition.name,
            category=definition.category.value,
            shape=style["shape"],
            color=style["color"],
            x=position["x"],
            y=position["y"],
        ))

    leaked = [sid for sid in deployable if ServiceId(sid) in LOGICAL_ONLY_SERVICES]
    if leaked:
        raise DeployableLeakError(leaked)

    # -------------------------
    # EDGES
    # -------------------------
    edges = [
        ArchitectureEdge(
            source=source.value,
            target=target.value,
            relation=rule.relation,
            style=rule.style,
        )
        for source, target, rule in match_edges(resolution.service_ids, requirements, catalog.edge_rules)
    ]

    required_count = sum(1 for s in services if s.required)
    contract = ArchitectureContract(
        pattern_name=pattern.name,
        total_services=len(services),
        required_services=required_count,
        suggested_services=len(services) - required_count,
        deployable_services=len(deployable),
        logical_services=len(logical),
    )

    architecture = CanonicalArchitecture(
        pattern_id=pattern.id.value,
        pattern_name=pattern.name,
        services=services,
        deployable_services=deployable,
        logical_services=logical,
        nodes=nodes,
        edges=edges,
        contract=contract,
        diagnostics=[
            {"service_id": sid, "source": source, "removable": removable}
            for sid, source, removable in resolution.diagnostics()
        ],
    )
    logger.debug(
        "architecture_assembled",
        pattern=pattern.id.value,
        deployable=len(deployable),
        logical=len(logical),
        edges=len(edges),
    )
    return architecture
