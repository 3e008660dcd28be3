"""
archengine - deterministic cloud architecture decisions.

    from archengine import recommend_architecture

    decision = recommend_architecture({"axes": {"static_content": True}})
    decision.architecture.deployable_services
"""

from archengine.pipeline.controller import DecisionController, recommend_architecture
from archengine.schemas import ArchitectureDecision, CanonicalArchitecture, Intent

__all__ = [
    "ArchitectureDecision",
    "CanonicalArchitecture",
    "DecisionController",
    "Intent",
    "recommend_architecture",
]
