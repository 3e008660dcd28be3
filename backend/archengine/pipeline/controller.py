from typing import Optional, Union

import structlog

from archengine.catalog.registry import Catalog, get_catalog
from archengine.ir.errors import RoutingErrorKind
from archengine.pipeline.assembler import assemble_architecture
from archengine.pipeline.canonical_axes import project_axes
from archengine.pipeline.capability_mapper import capability_summary, map_capabilities
from archengine.pipeline.requirement_extractor import extract_requirements
from archengine.pipeline.resolver import resolve_services
from archengine.pipeline.router import explain_route
from archengine.pipeline.scoring import rank_patterns
from archengine.schemas import ArchitectureDecision, Intent

logger = structlog.get_logger(__name__)

_ERROR_STATUS = {
    RoutingErrorKind.INVALID_INTENT: "invalid_intent",
    RoutingErrorKind.NEEDS_CLARIFICATION: "needs_clarification",
}


class DecisionController:
    """
    Runs the whole decision pipeline for one intent:

    axes -> capabilities -> requirements -> canonical axes -> pattern
    -> services -> architecture

    Holds no per-request state; one instance can serve any number of
    requests concurrently.
    """

    def __init__(self, catalog: Optional[Catalog] = None):
        self.catalog = catalog or get_catalog()

    def run(self, intent: Union[Intent, dict]) -> ArchitectureDecision:
        if not isinstance(intent, Intent):
            intent = Intent.model_validate(intent)

        capabilities = map_capabilities(intent.axes, intent.domain, self.catalog)
        requirements = extract_requirements(intent, capabilities, self.catalog)
        axes = project_axes(requirements)
        ranking = rank_patterns(capabilities, intent.complexity, self.catalog)
        outcome, gate = explain_route(axes)

        common = dict(
            ranking=ranking.to_dict(),
            capabilities=capability_summary(capabilities),
            requirements=requirements.to_dict(),
            canonical_axes=axes.to_dict(),
            matched_gate=gate,
        )

        if not outcome.is_resolved:
            status = _ERROR_STATUS[outcome.error.kind]
            logger.info("decision_unresolved", status=status, gate=gate,
                        reason=outcome.error.reason)
            return ArchitectureDecision(status=status, error=outcome.error.to_dict(), **common)

        pattern = self.catalog.pattern(outcome.pattern_id)
        resolution = resolve_services(pattern.id, requirements, axes, self.catalog)
        architecture = assemble_architecture(pattern.id, resolution, requirements, self.catalog)

        if ranking.selected != pattern.id:
            logger.debug("ranking_disagrees", routed=pattern.id.value,
                         ranked=ranking.selected.value)
        logger.info("decision_resolved", pattern=pattern.id.value, gate=gate,
                    services=len(architecture.services))

        return ArchitectureDecision(
            status="resolved",
            architecture=architecture,
            refusals=[r.to_dict() for r in resolution.refusals],
            resolution_layers=[d.to_dict() for d in resolution.diffs],
            fit_warnings=pattern.fit_warnings(axes),
            **common,
        )


def recommend_architecture(intent: Union[Intent, dict],
                           catalog: Optional[Catalog] = None) -> ArchitectureDecision:
    """Decide the architecture for one intent."""
    return DecisionController(catalog).run(intent)
