from __future__ import annotations

from dataclasses import asdict, dataclass, fields, replace
from typing import Any, Dict, Mapping


@dataclass(frozen=True)
class CaveConfig:
    rows: int = 30
    cols: int = 40
    fill_probability: float = 0.45
    smoothing_iterations: int = 5
    min_region_size: int = 20
    water_chance: float = 0.08
    crystal_chance: float = 0.02

    def merged(self, **overrides) -> "CaveConfig":
        """Return a copy with ``overrides`` applied (partial re-generation config)."""
        unknown = set(overrides) - _FIELD_NAMES
        if unknown:
            raise ValueError(f"unknown cave config field(s): {', '.join(sorted(unknown))}")
        return replace(self, **overrides)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


DEFAULT_CONFIG = CaveConfig()

# Upper bounds for client-supplied values; generation cost grows with rows * cols * passes
MAX_DIMENSION = 200
MAX_SMOOTHING_ITERATIONS = 50

_FIELD_NAMES = {f.name for f in fields(CaveConfig)}
_INT_FIELDS = {"rows", "cols", "smoothing_iterations", "min_region_size"}
_PROBABILITY_FIELDS = {"fill_probability", "water_chance", "crystal_chance"}
# JSON clients send camelCase keys
_CAMEL_ALIASES = {
    "fillProbability": "fill_probability",
    "smoothingIterations": "smoothing_iterations",
    "minRegionSize": "min_region_size",
    "waterChance": "water_chance",
    "crystalChance": "crystal_chance",
}


def _coerce(name: str, raw: Any):
    if isinstance(raw, bool):
        raise ValueError(f"{name} must be a number")
    if name in _INT_FIELDS:
        try:
            value = int(raw)
        except (TypeError, ValueError, OverflowError):
            raise ValueError(f"{name} must be an integer") from None
        if isinstance(raw, float) and raw != value:
            raise ValueError(f"{name} must be an integer")
        if name in ("rows", "cols") and value < 3:
            raise ValueError(f"{name} must be at least 3")
        if name in ("rows", "cols") and value > MAX_DIMENSION:
            raise ValueError(f"{name} must be at most {MAX_DIMENSION}")
        if name == "smoothing_iterations" and value > MAX_SMOOTHING_ITERATIONS:
            raise ValueError(f"{name} must be at most {MAX_SMOOTHING_ITERATIONS}")
        if value < 0:
            raise ValueError(f"{name} must not be negative")
        return value
    try:
        value = float(raw)
    except (TypeError, ValueError):
        raise ValueError(f"{name} must be a number") from None
    if not 0.0 <= value <= 1.0:
        raise ValueError(f"{name} must be between 0 and 1")
    return value


def from_mapping(data: Mapping[str, Any] | None, base: CaveConfig = DEFAULT_CONFIG) -> CaveConfig:
    """Build a config from loosely typed input (JSON body, CLI namespace).

    Keys may be snake_case or camelCase; missing keys fall back to ``base``.
    Raises ValueError naming the offending field.
    """
    if not data:
        return base
    overrides: Dict[str, Any] = {}
    for key, raw in data.items():
        name = _CAMEL_ALIASES.get(key, key)
        if name not in _FIELD_NAMES:
            raise ValueError(f"unknown cave config field: {key}")
        if raw is None:
            continue
        overrides[name] = _coerce(name, raw)
    return base.merged(**overrides)


__all__ = ["CaveConfig", "DEFAULT_CONFIG", "MAX_DIMENSION", "MAX_SMOOTHING_ITERATIONS", "from_mapping"]
