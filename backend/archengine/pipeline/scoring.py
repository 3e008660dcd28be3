"""
Scoring Router (advisory)

Ranks every catalog pattern against the capability map. The gate router
stays authoritative; the ranking is reported next to its decision so a
reviewer can see how close the alternatives were.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import structlog

from archengine import config
from archengine.catalog.patterns import PatternDefinition
from archengine.catalog.registry import Catalog, get_catalog
from archengine.ir.capabilities import CapabilityMap
from archengine.ir.identifiers import PatternId

logger = structlog.get_logger(__name__)

MISSING_REQUIRED_PENALTY = 0.25
COMPLEXITY_PENALTY = 0.7


@dataclass(frozen=True)
class PatternScore:
    pattern_id: PatternId
    score: float

    def to_dict(self) -> dict:
        return {"pattern_id": self.pattern_id.value, "score": round(self.score, 4)}


@dataclass(frozen=True)
class PatternRanking:
    selected: PatternId
    score: float
    fallback_used: bool
    alternatives: Tuple[PatternScore, ...] = ()
    scores: Tuple[PatternScore, ...] = field(default=(), repr=False)

    def to_dict(self) -> dict:
        return {
            "selected": self.selected.value,
            "score": round(self.score, 4),
            "fallback_used": self.fallback_used,
            "alternatives": [a.to_dict() for a in self.alternatives],
        }


def score_pattern(pattern: PatternDefinition, capabilities: CapabilityMap,
                  complexity: Optional[str] = None) -> float:
    if any(capabilities.is_required(cap) for cap in pattern.forbidden_capabilities):
        return 0.0

    total = sum(pattern.score_weights.values())
    matched = sum(
        weight for cap, weight in pattern.score_weights.items()
        if capabilities.is_required(cap)
    )
    score = matched / total if total else 0.0

    missing = [cap for cap in pattern.required_capabilities if not capabilities.is_required(cap)]
    score -= MISSING_REQUIRED_PENALTY * len(missing)

    if complexity == "simple" and pattern.complexity == "complex":
        score *= COMPLEXITY_PENALTY
    return max(score, 0.0)


def rank_patterns(capabilities: CapabilityMap, complexity: Optional[str] = None,
                  catalog: Optional[Catalog] = None) -> PatternRanking:
    catalog = catalog or get_catalog()
    scores: List[PatternScore] = [
        PatternScore(pattern.id, score_pattern(pattern, capabilities, complexity))
        for pattern in catalog.patterns.values()
    ]
    # sorted() is stable, so equal scores keep catalog order
    ranked = sorted(scores, key=lambda s: s.score, reverse=True)
    best = ranked[0]

    if best.score >= config.SCORE_THRESHOLD:
        selected, fallback = best, False
    else:
        fallback_id = catalog.fallback_pattern
        selected = next(s for s in ranked if s.pattern_id == fallback_id)
        fallback = True

    alternatives = tuple(s for s in ranked if s.pattern_id != selected.pattern_id)[:3]
    logger.debug(
        "patterns_ranked",
        selected=selected.pattern_id.value,
        score=round(selected.score, 4),
        fallback_used=fallback,
    )
    return PatternRanking(
        selected=selected.pattern_id,
        score=selected.score,
        fallback_used=fallback,
        alternatives=alternatives,
        scores=tuple(scores),
    )
