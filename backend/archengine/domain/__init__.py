from archengine.domain.loader import (
    DomainProfile,
    DomainRulesLoader,
    RequirementDefaults,
    build_alias_index,
)

__all__ = [
    "DomainProfile",
    "DomainRulesLoader",
    "RequirementDefaults",
    "build_alias_index",
]
