# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

"""
fairpool.core.config
====================

Typed configuration for the fair dispatcher and the SLA monitor.
- Optional JSON file loading, then env overrides, then explicit overrides.
- Derives millisecond fields and the SLA window capacity once, at construction.

The sampling cadence is fixed for the lifetime of a tracker: the periodic
runner reads `sla_sample_interval_ms` once and never recomputes it.
"""

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .types import MS_PER_SECOND


def _int_env(name: str) -> int | None:
    val = os.getenv(name)
    if not val or not val.strip().isdecimal():
        return None
    return int(val.strip())


def _try_load_json(path: Path | None) -> dict[str, Any]:
    if not path:
        return {}
    try:
        if path.exists():
            return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        # Fail soft; callers may still override
        pass
    return {}


@dataclass
class FairpoolConfig:
    """Dispatcher/SLA monitor configuration with derived millisecond fields."""

    # ---- SLA sampling (seconds)
    sla_sample_interval_sec: int = 30 * 60
    sla_retention_sec: int = 7 * 24 * 60 * 60

    # ---- Global env naming convention: <prefix><pool display name><suffix>
    sla_key_prefix: str = "poolmonitor."
    sla_key_suffix: str = ".sla"

    # ---- Figure geometry (pixels)
    figure_width: int = 336
    figure_height: int = 240

    # ---- Derived
    sla_sample_interval_ms: int = 0
    sla_retention_ms: int = 0
    sla_window_capacity: int = 0

    # ---- Methods ------------------------------------------------------------

    def __post_init__(self) -> None:
        if self.sla_sample_interval_sec <= 0:
            raise ValueError("sla_sample_interval_sec must be positive")
        if self.sla_retention_sec < self.sla_sample_interval_sec:
            raise ValueError("sla_retention_sec must be at least one sample interval")
        if not self.sla_key_prefix and not self.sla_key_suffix:
            raise ValueError("sla_key_prefix/sla_key_suffix must not both be empty")
        self.sla_sample_interval_ms = int(self.sla_sample_interval_sec * MS_PER_SECOND)
        self.sla_retention_ms = int(self.sla_retention_sec * MS_PER_SECOND)
        self.sla_window_capacity = self.sla_retention_ms // self.sla_sample_interval_ms

    def sla_key(self, pool_display_name: str) -> str:
        """Global env key holding the SLA threshold (minutes) of a pool."""
        return f"{self.sla_key_prefix}{pool_display_name}{self.sla_key_suffix}"

    @classmethod
    def load(cls, path: Path | str | None = None, *, overrides: dict[str, Any] | None = None) -> FairpoolConfig:
        """
        Load config from JSON file (if provided), then apply env and overrides.

        Env overrides:
          - FAIRPOOL_SLA_SAMPLE_INTERVAL_SEC
          - FAIRPOOL_SLA_RETENTION_SEC
        """
        data: dict[str, Any] = {}
        data.update(_try_load_json(Path(path) if path else None))

        interval = _int_env("FAIRPOOL_SLA_SAMPLE_INTERVAL_SEC")
        if interval is not None:
            data["sla_sample_interval_sec"] = interval
        retention = _int_env("FAIRPOOL_SLA_RETENTION_SEC")
        if retention is not None:
            data["sla_retention_sec"] = retention

        if overrides:
            data.update(overrides)

        return cls(**data)
