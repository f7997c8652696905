"""
Exercise name resolution against a catalog of canonical names.

Resolution runs in a fixed order and stops at the first hit:

1. exact match
2. case-insensitive match
3. manual alias table (also tried with bracketed text removed)
4. normalized key match (punctuation, plurals and compound words folded)
5. normalized key match with bracketed text removed
6. token-set fuzzy match (strict mode) or representative match (relaxed mode)

Anything else resolves to the raw name with method "none". Resolution never
raises; results are cached per resolver instance.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Iterable, Literal

from .aliases import EXERCISE_ALIASES
from .config import (
    FUZZY_MIN_GAP_STRICT,
    FUZZY_MIN_SCORE_RELAXED,
    FUZZY_MIN_SCORE_STRICT,
    OVERLAP_BONUS,
)
from .models import ResolutionResult, TrainingEvent

logger = logging.getLogger(__name__)

ResolverMode = Literal["strict", "relaxed"]

# Tokens ignored when comparing names in strict mode
STOP_TOKENS: frozenset[str] = frozenset({
    "a", "an", "and", "or", "the", "to", "with", "on", "in", "of", "for", "at", "from",
    "version", "v", "ii", "iii", "iv",
    "smith", "band", "plate", "kettlebell", "bodyweight", "assisted",
    "straight", "bar", "grip", "wide", "close", "underhand", "overhand",
    "single", "arm", "one", "two", "left", "right", "neutral",
    "horizontal", "vertical",
})

# Relaxed mode keeps equipment and limb tokens so they can still discriminate
RELAXED_STOP_TOKENS: frozenset[str] = STOP_TOKENS - {
    "smith", "band", "plate", "kettlebell", "bodyweight", "assisted",
    "single", "arm", "horizontal", "vertical",
}

_DASHES_RE = re.compile("[\u2010-\u2015]")
_SPACES_RE = re.compile(r"\s+")
_BRACKETED_RE = re.compile(r"\([^)]*\)|\[[^\]]*\]|\{[^}]*\}")
_BRACKET_CHARS_RE = re.compile(r"[()\[\]{}]")
_NON_ALNUM_RE = re.compile(r"[^a-zA-Z0-9]+")

_COMPOUND_RULES: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"\btricep\b"), "triceps"),
    (re.compile(r"\bbicep\b"), "biceps"),
    (re.compile(r"\bdumbbells\b"), "dumbbell"),
    (re.compile(r"\bbarbells\b"), "barbell"),
    (re.compile(r"\bkettlebells\b"), "kettlebell"),
    (re.compile(r"\bplates\b"), "plate"),
    (re.compile(r"pull\s*down"), "pulldown"),
    (re.compile(r"push\s*down"), "pushdown"),
    (re.compile(r"chin\s*up"), "chinup"),
    (re.compile(r"\bchin\b"), "chinup"),
    (re.compile(r"pull\s*up"), "pullup"),
)


def _collapse(s: str) -> str:
    return _SPACES_RE.sub(" ", s).strip()


def normalize_name_basic(name: str | None) -> str:
    """Unify dash characters and collapse whitespace."""
    return _collapse(_DASHES_RE.sub("-", str(name if name is not None else "")))


def strip_bracketed(name: str) -> str:
    """Remove "(...)", "[...]" and "{...}" segments."""
    return _collapse(_BRACKETED_RE.sub(" ", name))


def normalize_alias_key(name: str) -> str:
    """
    Fold a name into the key used by the alias table and normalized lookups.

    "Tricep Push-Down (Cable)" -> "triceps pushdown cable"
    """
    s = normalize_name_basic(name)
    s = _collapse(_NON_ALNUM_RE.sub(" ", s.replace("&", " and "))).lower()
    for pattern, replacement in _COMPOUND_RULES:
        s = pattern.sub(replacement, s)
    return _collapse(s)


def name_tokens(name: str, mode: ResolverMode = "strict") -> frozenset[str]:
    """Token set used for fuzzy comparison, without digits or stop tokens."""
    stop = RELAXED_STOP_TOKENS if mode == "relaxed" else STOP_TOKENS
    base = normalize_alias_key(_collapse(_BRACKET_CHARS_RE.sub(" ", name)))
    return frozenset(t for t in base.split(" ") if t and not t.isdigit() and t not in stop)


def jaccard(a: frozenset[str], b: frozenset[str]) -> float:
    if not a and not b:
        return 1.0
    if not a or not b:
        return 0.0
    inter = len(a & b)
    return inter / (len(a) + len(b) - inter)


def overlap_coefficient(a: frozenset[str], b: frozenset[str]) -> float:
    if not a and not b:
        return 1.0
    if not a or not b:
        return 0.0
    return len(a & b) / min(len(a), len(b))


@dataclass
class ResolutionStats:
    """Counts from rewriting a batch of events."""

    fuzzy: int = 0
    representative: int = 0
    unmatched: set[str] = field(default_factory=set)


@dataclass
class _Candidate:
    name: str
    tokens: frozenset[str]


class ExerciseNameResolver:
    """
    Resolve free-text exercise names to catalog names.

    The instance owns its lookup tables and cache; build a new one when the
    catalog changes.
    """

    def __init__(self, names: Iterable[str], mode: ResolverMode = "strict") -> None:
        if mode not in ("strict", "relaxed"):
            raise ValueError(f"Unknown resolver mode: {mode}")
        self.mode: ResolverMode = mode
        candidates = [n for n in names if n]

        self._exact = set(candidates)
        self._lower: dict[str, str] = {}
        self._normalized: dict[str, str] = {}
        for n in candidates:
            self._lower.setdefault(n.lower(), n)
            self._normalized.setdefault(normalize_alias_key(n), n)

        self._candidates = [_Candidate(n, name_tokens(n, mode)) for n in candidates]
        self._cache: dict[str, ResolutionResult] = {}

    def _lookup(self, name: str) -> str | None:
        if name in self._exact:
            return name
        return self._lower.get(name.lower())

    def _from_aliases(self, key: str) -> str | None:
        for alias in EXERCISE_ALIASES.get(key, ()):
            chosen = self._lookup(alias)
            if chosen is not None:
                return chosen
        return None

    def _fuzzy(self, raw: str) -> ResolutionResult | None:
        tokens = name_tokens(raw, self.mode)
        if not tokens:
            return None

        best: _Candidate | None = None
        best_score = 0.0
        second_score = 0.0
        for c in self._candidates:
            score = max(jaccard(tokens, c.tokens), overlap_coefficient(tokens, c.tokens) * OVERLAP_BONUS)
            if best is None or score > best_score:
                if best is not None:
                    second_score = best_score
                best, best_score = c, score
            elif score == best_score:
                # Ties go to the more general candidate, then alphabetical
                if len(c.tokens) < len(best.tokens) or (
                    len(c.tokens) == len(best.tokens) and c.name < best.name
                ):
                    best = c
            elif score > second_score:
                second_score = score

        if best is None:
            return None

        if self.mode == "strict":
            if best_score >= FUZZY_MIN_SCORE_STRICT and best_score - second_score >= FUZZY_MIN_GAP_STRICT:
                return ResolutionResult(best.name, "fuzzy")
        elif best_score >= FUZZY_MIN_SCORE_RELAXED:
            return ResolutionResult(best.name, "representative")
        return None

    def _resolve_uncached(self, raw: str, raw_name: str) -> ResolutionResult:
        if raw in self._exact:
            return ResolutionResult(raw, "exact")

        lower = self._lower.get(raw.lower())
        if lower is not None:
            return ResolutionResult(lower, "case_insensitive")

        key = normalize_alias_key(raw)
        key_no_brackets = normalize_alias_key(strip_bracketed(raw))

        chosen = self._from_aliases(key)
        if chosen is None and key_no_brackets != key:
            chosen = self._from_aliases(key_no_brackets)
        if chosen is not None:
            return ResolutionResult(chosen, "alias")

        if key in self._normalized:
            return ResolutionResult(self._normalized[key], "normalized_exact")
        if key_no_brackets in self._normalized:
            return ResolutionResult(self._normalized[key_no_brackets], "normalized_case_insensitive")

        fuzzy = self._fuzzy(raw)
        if fuzzy is not None:
            logger.debug("Fuzzy match %r -> %r (%s)", raw, fuzzy.name, fuzzy.method)
            return fuzzy
        return ResolutionResult(raw_name, "none")

    def resolve(self, raw_name: str) -> ResolutionResult:
        """Resolve one raw name. Never raises."""
        raw = normalize_name_basic(raw_name)
        if not raw:
            return ResolutionResult(raw_name, "none")

        cached = self._cache.get(raw)
        if cached is not None:
            return cached

        result = self._resolve_uncached(raw, raw_name)
        self._cache[raw] = result
        return result

    def resolve_events(self, events: Iterable[TrainingEvent]) -> ResolutionStats:
        """
        Rewrite ``exercise_title`` of every event in place.

        Returns counts of fuzzy and representative rewrites and the set of
        raw names that stayed unmatched.
        """
        stats = ResolutionStats()
        for event in events:
            result = self.resolve(event.exercise_title)
            if result.method == "fuzzy":
                stats.fuzzy += 1
            elif result.method == "representative":
                stats.representative += 1
            elif result.method == "none":
                stats.unmatched.add(event.exercise_title)
            event.exercise_title = result.name
        return stats


def create_resolver(names: Iterable[str], mode: ResolverMode = "strict") -> ExerciseNameResolver:
    """Build a resolver over the given canonical names."""
    return ExerciseNameResolver(names, mode=mode)
