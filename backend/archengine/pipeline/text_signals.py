"""
Free-text signal layer

Keyword heuristics over the project description. This is the lowest
trust source of the requirement extractor: it only fills facts nothing
structured spoke about, and a keyword preceded by a negator ("no",
"without", ...) inside the same clause counts against the fact instead
of for it.
"""

import re
from dataclasses import dataclass
from typing import FrozenSet, List, Optional, Tuple

from archengine import config

NEGATORS = frozenset({
    "no", "not", "without", "dont", "don't", "never", "none",
    "avoid", "skip", "exclude", "excluding",
})

# Words that end the reach of an earlier negator
CLAUSE_BREAKS = frozenset({"but", "however", "although", "though", "except"})

_CLAUSE_SPLIT = re.compile(r"[.;:!?\n,()]+")
_TOKEN = re.compile(r"[a-z0-9]+(?:['-][a-z0-9]+)*")


@dataclass(frozen=True)
class KeywordGroup:
    fact: str
    phrases: Tuple[Tuple[str, ...], ...]


def _group(fact: str, *phrases: str) -> KeywordGroup:
    return KeywordGroup(fact, tuple(tuple(p.split()) for p in phrases))


KEYWORD_GROUPS: Tuple[KeywordGroup, ...] = (
    # Workloads
    _group("workload:web_app", "web", "website", "web app", "webapp", "app", "apps"),
    _group("workload:backend_api", "api", "apis", "backend", "service", "services"),
    _group("workload:mobile_backend", "mobile", "ios", "android"),
    _group("workload:static_site", "static site", "landing page", "static website", "blog"),
    # Behaviour
    _group("stateful", "store", "save", "saves", "user", "users", "profile", "profiles",
           "session", "sessions", "database", "databases"),
    _group("realtime", "real-time", "realtime", "real time", "chat", "live", "streaming",
           "notifications"),
    _group("authentication", "login", "log in", "auth", "authentication", "sign in",
           "signup", "sign up", "user", "users", "profile", "profiles", "account", "accounts"),
    _group("payments", "payment", "payments", "checkout", "billing", "subscription",
           "subscriptions"),
    _group("ml", "machine learning", "ml model", "model inference", "recommendation",
           "recommendations", "prediction", "predictions"),
    # Persistence as a whole
    _group("persistence", "database", "databases", "db", "sql", "persistence",
           "persistent storage"),
    # Data stores
    _group("store:relationaldatabase", "sql", "database", "databases", "relational",
           "mysql", "postgres", "postgresql"),
    _group("store:cache", "cache", "caching", "redis", "memcached"),
    _group("store:messagequeue", "queue", "queues", "message queue", "kafka"),
    _group("store:objectstorage", "file", "files", "upload", "uploads", "document",
           "documents", "image", "images", "video", "videos"),
)


@dataclass(frozen=True)
class TextSignals:
    positive: FrozenSet[str] = frozenset()
    negated: FrozenSet[str] = frozenset()

    def has(self, fact: str) -> bool:
        return fact in self.positive

    def denies(self, fact: str) -> bool:
        """Only negated mentions of the fact, no positive one."""
        return fact in self.negated and fact not in self.positive

    def with_prefix(self, prefix: str) -> List[str]:
        return sorted(f[len(prefix):] for f in self.positive if f.startswith(prefix))


def _clauses(text: str) -> List[List[str]]:
    return [_TOKEN.findall(chunk) for chunk in _CLAUSE_SPLIT.split(text.lower()) if chunk.strip()]


def _is_negated(tokens: List[str], start: int, window: int) -> bool:
    for token in reversed(tokens[max(0, start - window):start]):
        if token in CLAUSE_BREAKS:
            return False
        if token in NEGATORS:
            return True
    return False


def _occurrences(tokens: List[str], phrase: Tuple[str, ...]):
    size = len(phrase)
    for i in range(len(tokens) - size + 1):
        if tuple(tokens[i:i + size]) == phrase:
            yield i


def scan_text(text: Optional[str], window: int = None) -> TextSignals:
    """Scan a description for positive and negated facts."""
    if not text or not isinstance(text, str):
        return TextSignals()
    window = config.NEGATION_WINDOW if window is None else window

    positive, negated = set(), set()
    for tokens in _clauses(text):
        for group in KEYWORD_GROUPS:
            for phrase in group.phrases:
                for start in _occurrences(tokens, phrase):
                    if _is_negated(tokens, start, window):
                        negated.add(group.fact)
                    else:
                        positive.add(group.fact)
    return TextSignals(frozenset(positive), frozenset(negated))
