from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

"""Catalog dataclasses: the static heuristics configuration of the engine.

These are built once by stock_ingest.config.loader from catalog.yml and are
shared read-only by every parse call. Scoring code takes them as plain
arguments so it can be unit tested without any I/O.
"""

__all__ = [
    "FieldDefinition",
    "PlatformProfile",
    "Thresholds",
    "Catalog",
]


@dataclass(frozen=True)
class FieldDefinition:
    """Matching and conversion rules for one semantic field.

    patterns are matched exactly / by containment, aliases are human phrases,
    fuzzy_patterns are compiled case-insensitive regexes. transformers run in
    order (raw -> typed) and validators run in order on the transformed value.
    """
    field: str  # canonical field name (sku, currentStock, name, price, category)
    patterns: tuple[str, ...]
    aliases: tuple[str, ...]
    fuzzy_patterns: tuple[re.Pattern[str], ...]
    transformers: tuple[Callable[[Any], Any], ...]
    validators: tuple[Callable[[Any], bool], ...]
    required: bool = False  # rows without this field are rejected


@dataclass(frozen=True)
class PlatformProfile:
    """Header vocabulary of one e-commerce platform export."""
    name: str
    indicators: tuple[str, ...]  # lower-case substrings looked up in headers
    ceiling: float  # maximum confidence when every indicator matches
    fallback: bool = False  # the generic profile reported when nothing specific matches


@dataclass(frozen=True)
class Thresholds:
    """Tunable scoring constants."""
    match: float = 0.3  # minimum score for a header to be mapped to a field
    suggestion: float = 0.2  # minimum score for possibleSku/possibleStock hints
    similarity: float = 0.7  # minimum edit-distance similarity considered
    candidate: float = 0.1  # minimum score listed by rank_candidates
    delimiter_sample_lines: int = 5  # lines sampled for delimiter detection


@dataclass(frozen=True)
class Catalog:
    """Root configuration object: field definitions, platform profiles, thresholds."""
    fields: tuple[FieldDefinition, ...]  # processing order matters (sku, stock first)
    platforms: tuple[PlatformProfile, ...]  # iteration order used for tie breaking
    thresholds: Thresholds

    @property
    def fallback_platform(self) -> PlatformProfile:
        for profile in self.platforms:
            if profile.fallback:
                return profile
        raise LookupError("catalog has no fallback platform profile")
