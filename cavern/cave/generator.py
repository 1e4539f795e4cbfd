"""Pipeline orchestration for cave generation.

Phases, in fixed order:
    1. initial_fill       random wall/floor noise, solid border
    2. smooth             cellular automaton passes (new grid each pass)
    3. label_regions      4-connected flood fill labeling
    4. prune_small        small pockets walled over
    5. connect_regions    tunnels until one region remains
    6. decorate           water pools and crystals (new grid)

Every phase draws from the same injected random source, so a seeded
``random.Random`` reproduces a cave exactly. Generation is synchronous;
callers only ever see the finished grid.
"""
from __future__ import annotations

import os
import random
import time
from typing import Any, Dict, Optional

from ..logging_utils import get_logger
from .automaton import initial_fill, smooth
from .config import DEFAULT_CONFIG, CaveConfig
from .connectivity import connect_regions
from .features import decorate
from .grid import Grid
from .metrics import init_metrics
from .regions import label_regions, prune_small_regions

log = get_logger("cavern.cave.generator")


def _metrics_enabled_default() -> bool:
    val = os.environ.get("CAVERN_ENABLE_GENERATION_METRICS")
    if val is not None:
        return val.lower() not in {"0", "false", "no", ""}
    # Flask app config overrides the default when generating inside a request
    from flask import current_app, has_app_context

    if has_app_context():
        return bool(current_app.config.get("CAVERN_ENABLE_GENERATION_METRICS", True))
    return True


class CaveGenerator:
    def __init__(
        self,
        config: CaveConfig = DEFAULT_CONFIG,
        rng=None,
        *,
        seed: Optional[int] = None,
        enable_metrics: Optional[bool] = None,
    ):
        self.config = config
        if rng is None:
            rng = random.Random(seed) if seed is not None else random.Random()
        self.rng = rng
        self.seed = seed
        self.enable_metrics = _metrics_enabled_default() if enable_metrics is None else enable_metrics
        self.grid: Optional[Grid] = None
        self.metrics: Dict[str, Any] = {}
        self._region_count = 0

    @property
    def region_count(self) -> int:
        return self._region_count

    def get_region_count(self) -> int:
        return self._region_count

    def generate(self) -> Grid:
        """Run every phase on a fresh grid and return it."""
        self.metrics = init_metrics() if self.enable_metrics else {}
        if self.enable_metrics:
            start = time.perf_counter()
            phase_times = {}
            def _phase(label, fn, *a, **k):
                ps = time.perf_counter(); r = fn(*a, **k); pe = time.perf_counter()
                phase_times[label] = int((pe-ps)*1000)
                return r
        else:
            def _phase(label, fn, *a, **k):
                return fn(*a, **k)
        cfg = self.config
        grid = _phase('fill', initial_fill, cfg, self.rng)
        grid = _phase('smooth', smooth, grid, cfg.smoothing_iterations)
        region_map = _phase('label', label_regions, grid)
        pruned = _phase('prune', prune_small_regions, grid, cfg.min_region_size, region_map)
        self._region_count = region_map.count - pruned
        report = _phase('connect', connect_regions, grid, self.rng)
        self._region_count = report.region_count
        grid = _phase('decorate', decorate, grid, cfg, self.rng)
        self.grid = grid

        if self.enable_metrics:
            m = self.metrics
            m['regions_initial'] = region_map.count
            m['regions_pruned'] = pruned
            m['regions_final'] = report.region_count
            m['tunnels_carved'] = report.tunnels
            m['cells_carved'] = report.cells_carved
            m['connect_iterations'] = report.iterations
            m['converged'] = report.converged
            for cell_type, n in grid.count_types().items():
                m[f'tiles_{cell_type}'] = n
            m['phase_ms'] = phase_times
            m['runtime_ms'] = int((time.perf_counter() - start) * 1000)
        log.debug(
            event="cave_generated",
            rows=cfg.rows,
            cols=cfg.cols,
            seed=self.seed,
            regions_initial=region_map.count,
            regions_pruned=pruned,
            regions=report.region_count,
            tunnels=report.tunnels,
        )
        return grid


def generate_cave(config: Optional[CaveConfig] = None, rng=None, seed: Optional[int] = None) -> Grid:
    """Functional form of ``CaveGenerator(config).generate()``."""
    return CaveGenerator(config or DEFAULT_CONFIG, rng, seed=seed, enable_metrics=False).generate()


__all__ = ["CaveGenerator", "generate_cave"]
