from __future__ import annotations

from collections.abc import Iterable, Sequence

from ..models.catalog import FieldDefinition
from ..models.parse_result import Suggestions

"""Column classification: map free-form header text onto semantic fields.

Scoring weights, strongest first:
    exact (case-insensitive) pattern     1.0
    substring either direction           0.8
    alias phrase containment             0.7
    fuzzy regex                          0.6
    edit-distance similarity > bar       similarity * 0.5
"""

__all__ = [
    "EXACT_SCORE",
    "SUBSTRING_SCORE",
    "ALIAS_SCORE",
    "FUZZY_SCORE",
    "SIMILARITY_WEIGHT",
    "levenshtein_distance",
    "similarity",
    "score_header",
    "classify_columns",
    "build_suggestions",
    "rank_candidates",
]

EXACT_SCORE = 1.0
SUBSTRING_SCORE = 0.8
ALIAS_SCORE = 0.7
FUZZY_SCORE = 0.6
SIMILARITY_WEIGHT = 0.5


def levenshtein_distance(a: str, b: str) -> int:
    """Classic edit distance (insert / delete / substitute, cost 1 each)."""
    if a == b:
        return 0
    if not a:
        return len(b)
    if not b:
        return len(a)
    previous = list(range(len(b) + 1))
    for i, ca in enumerate(a, start=1):
        current = [i]
        for j, cb in enumerate(b, start=1):
            cost = 0 if ca == cb else 1
            current.append(min(current[j - 1] + 1, previous[j] + 1, previous[j - 1] + cost))
        previous = current
    return previous[-1]


def similarity(a: str, b: str) -> float:
    """1 - distance / longer length, in [0, 1]."""
    longest = max(len(a), len(b))
    if longest == 0:
        return 1.0
    return 1 - levenshtein_distance(a, b) / longest


def score_header(header: str, definition: FieldDefinition, similarity_threshold: float = 0.7) -> float:
    """Score how well ``header`` names ``definition``'s field (0 = no match)."""
    normalized = header.lower().strip()
    if not normalized:
        return 0.0

    if normalized in definition.patterns:
        return EXACT_SCORE

    best = 0.0
    for pattern in definition.patterns:
        if pattern in normalized or normalized in pattern:
            best = SUBSTRING_SCORE
            break

    if best < ALIAS_SCORE:
        for alias in definition.aliases:
            if alias in normalized or normalized in alias:
                best = ALIAS_SCORE
                break

    if best < FUZZY_SCORE:
        for regex in definition.fuzzy_patterns:
            if regex.search(normalized):
                best = FUZZY_SCORE
                break

    for pattern in definition.patterns:
        sim = similarity(normalized, pattern)
        if sim > similarity_threshold:
            best = max(best, sim * SIMILARITY_WEIGHT)

    return best


def classify_columns(
    headers: Sequence[str],
    definitions: Iterable[FieldDefinition],
    match_threshold: float = 0.3,
    similarity_threshold: float = 0.7,
    overrides: dict[str, str] | None = None,
) -> dict[str, str]:
    """Assign at most one header per field, never reusing a header.

    Fields are processed in definition order; for each, the best scoring
    unclaimed header above ``match_threshold`` wins (ties keep the earlier
    header). ``overrides`` (field -> header) are applied first for headers
    that exist, and those headers are claimed before any scoring.
    """
    definitions = list(definitions)
    mapping: dict[str, str] = {}
    used: set[str] = set()

    pinned: dict[str, str] = {}
    known_fields = {d.field for d in definitions}
    for field, header in (overrides or {}).items():
        if field in known_fields and header in headers and header not in used:
            pinned[field] = header
            used.add(header)

    for definition in definitions:
        if definition.field in pinned:
            mapping[definition.field] = pinned[definition.field]
            continue
        best_header = ""
        best_score = 0.0
        for header in headers:
            if header in used:
                continue
            score = score_header(header, definition, similarity_threshold)
            if score > best_score and score > match_threshold:
                best_score = score
                best_header = header
        if best_header:
            mapping[definition.field] = best_header
            used.add(best_header)

    return mapping


def build_suggestions(
    headers: Sequence[str],
    mapping: dict[str, str],
    definitions: Iterable[FieldDefinition],
    suggestion_threshold: float = 0.2,
    similarity_threshold: float = 0.7,
) -> Suggestions:
    """Hints for a human reviewer.

    possible_sku / possible_stock list unmapped headers scoring above the low
    ``suggestion_threshold`` for that field; unmapped_columns lists every
    header left out of the mapping.
    """
    mapped = set(mapping.values())
    unmapped = [h for h in headers if h not in mapped]
    by_field = {d.field: d for d in definitions}

    def _candidates(field: str) -> list[str]:
        definition = by_field.get(field)
        if definition is None:
            return []
        return [h for h in unmapped if score_header(h, definition, similarity_threshold) > suggestion_threshold]

    return Suggestions(
        possible_sku=_candidates("sku"),
        possible_stock=_candidates("currentStock"),
        unmapped_columns=unmapped,
    )


def rank_candidates(
    headers: Sequence[str],
    definitions: Iterable[FieldDefinition],
    candidate_threshold: float = 0.1,
    similarity_threshold: float = 0.7,
    limit: int = 3,
) -> dict[str, dict[str, object]]:
    """Best headers per field for manual mapping, independent of claims.

    Returns field -> {"score": best score, "suggestions": [top headers]}.
    """
    ranked: dict[str, dict[str, object]] = {}
    for definition in definitions:
        scored = [
            (score_header(h, definition, similarity_threshold), idx, h)
            for idx, h in enumerate(headers)
        ]
        scored = [s for s in scored if s[0] > candidate_threshold]
        # highest score first, header order breaks ties
        scored.sort(key=lambda s: (-s[0], s[1]))
        ranked[definition.field] = {
            "score": scored[0][0] if scored else 0.0,
            "suggestions": [h for _, _, h in scored[:limit]],
        }
    return ranked
