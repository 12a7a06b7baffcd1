from __future__ import annotations

from collections.abc import Iterable, Sequence

from ..models.catalog import PlatformProfile

"""Platform fingerprinting from header vocabulary alone (row values are never read).

confidence = matched indicators / total indicators * profile ceiling

The fallback profile (generic) is the starting point. A specific profile is
only eligible when at least one matched indicator is not also a fallback
indicator: words such as "quantity" appear in every export and say nothing
about the platform.
"""

__all__ = [
    "PlatformMatch",
    "detect_platform",
]

PlatformMatch = tuple[str, float]


def _matched_indicators(profile: PlatformProfile, lowered: Sequence[str]) -> list[str]:
    return [ind for ind in profile.indicators if any(ind in h for h in lowered)]


def detect_platform(headers: Iterable[str], profiles: Sequence[PlatformProfile]) -> PlatformMatch:
    """Return (platform name, confidence in [0, 1]) for a header set.

    Highest confidence wins; ties go to the higher ceiling, then to the
    profile listed first.
    """
    lowered = [h.lower() for h in headers]
    fallback = next((p for p in profiles if p.fallback), None)
    shared = set(fallback.indicators) if fallback else set()

    best_name = fallback.name if fallback else "generic"
    best_confidence = 0.0
    best_ceiling = fallback.ceiling if fallback else 0.0

    for profile in profiles:
        matched = _matched_indicators(profile, lowered)
        if not matched:
            continue
        if not profile.fallback and all(ind in shared for ind in matched):
            continue
        confidence = len(matched) / len(profile.indicators) * profile.ceiling
        if confidence > best_confidence or (
            confidence == best_confidence and profile.ceiling > best_ceiling
        ):
            best_name = profile.name
            best_confidence = confidence
            best_ceiling = profile.ceiling

    return best_name, round(best_confidence, 4)
