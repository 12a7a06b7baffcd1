from __future__ import annotations

import json
import os
import re
from functools import lru_cache
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.catalog import Catalog, FieldDefinition, PlatformProfile, Thresholds
from ..services.transforms import TRANSFORMERS, VALIDATORS

"""Catalog loader.

Responsibilities:
- Load the YAML heuristics catalog (packaged catalog.yml unless overridden)
- Validate it against catalog_schema.json
- Resolve transformer/validator names and compile fuzzy regexes
- Build the immutable Catalog used by every parse call
"""

__all__ = [
    "ConfigError",
    "CATALOG_ENV_VAR",
    "DEFAULT_CATALOG_PATH",
    "SCHEMA_PATH",
    "load_catalog",
    "default_catalog",
    "catalog_from_env",
]

_config_dir = Path(__file__).parent
DEFAULT_CATALOG_PATH = _config_dir / "catalog.yml"
SCHEMA_PATH = _config_dir / "catalog_schema.json"
CATALOG_ENV_VAR = "STOCK_INGEST_CATALOG"

# Fields the row normalizer needs to build a StockRecord
REQUIRED_FIELDS = ("sku", "currentStock")


class ConfigError(Exception):
    pass


def _validate_catalog_schema(data: dict[str, Any]) -> None:
    """Validate catalog data against the JSON schema.

    Raises:
        ConfigError: if the schema file is missing or unreadable, or the data
            violates it (missing keys, wrong types, unknown keys).
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"catalog schema not found: {SCHEMA_PATH}")

    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"catalog validation failed: {e.message}") from e


def _resolve(names: list[str], registry: dict[str, Any], kind: str, field: str) -> tuple[Any, ...]:
    resolved = []
    for name in names:
        if name not in registry:
            raise ConfigError(f"field '{field}': unknown {kind} '{name}'")
        resolved.append(registry[name])
    return tuple(resolved)


def _build_field(raw: dict[str, Any]) -> FieldDefinition:
    name = raw["field"]
    fuzzy = []
    for pattern in raw.get("fuzzy_patterns", []):
        try:
            fuzzy.append(re.compile(pattern, re.IGNORECASE))
        except re.error as e:
            raise ConfigError(f"field '{name}': invalid fuzzy pattern {pattern!r}: {e}") from e
    return FieldDefinition(
        field=name,
        # Pattern matching is case-insensitive; duplicates collapse
        patterns=tuple(dict.fromkeys(p.lower() for p in raw["patterns"])),
        aliases=tuple(a.lower() for a in raw.get("aliases", [])),
        fuzzy_patterns=tuple(fuzzy),
        transformers=_resolve(raw.get("transformers", []), TRANSFORMERS, "transformer", name),
        validators=_resolve(raw.get("validators", []), VALIDATORS, "validator", name),
        required=bool(raw.get("required", False)),
    )


def _build_catalog(data: dict[str, Any]) -> Catalog:
    fields = tuple(_build_field(f) for f in data["fields"])
    names = [f.field for f in fields]
    if len(set(names)) != len(names):
        raise ConfigError(f"duplicate field definitions: {names}")
    for required in REQUIRED_FIELDS:
        if required not in names:
            raise ConfigError(f"catalog must define field '{required}'")

    platforms = tuple(
        PlatformProfile(
            name=p["name"],
            indicators=tuple(i.lower() for i in p["indicators"]),
            ceiling=float(p["ceiling"]),
            fallback=bool(p.get("fallback", False)),
        )
        for p in data["platforms"]
    )
    fallbacks = [p.name for p in platforms if p.fallback]
    if len(fallbacks) != 1:
        raise ConfigError(f"exactly one fallback platform required, got {fallbacks}")

    th = data.get("thresholds", {})
    defaults = Thresholds()
    thresholds = Thresholds(
        match=float(th.get("match", defaults.match)),
        suggestion=float(th.get("suggestion", defaults.suggestion)),
        similarity=float(th.get("similarity", defaults.similarity)),
        candidate=float(th.get("candidate", defaults.candidate)),
        delimiter_sample_lines=int(th.get("delimiter_sample_lines", defaults.delimiter_sample_lines)),
    )
    return Catalog(fields=fields, platforms=platforms, thresholds=thresholds)


def load_catalog(path: Path | None = None) -> Catalog:
    """Load and validate a catalog file (the packaged default when path is None)."""
    path = path or DEFAULT_CATALOG_PATH
    if not path.exists():
        raise ConfigError(f"catalog file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"catalog root must be a mapping: {path}")

    _validate_catalog_schema(data)
    return _build_catalog(data)


@lru_cache(maxsize=1)
def default_catalog() -> Catalog:
    """Packaged catalog, loaded once per process."""
    return load_catalog(DEFAULT_CATALOG_PATH)


def catalog_from_env() -> Catalog:
    """Catalog named by $STOCK_INGEST_CATALOG, else the packaged default."""
    override = os.getenv(CATALOG_ENV_VAR)
    if override:
        return load_catalog(Path(override))
    return default_catalog()
