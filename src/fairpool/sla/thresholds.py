# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

"""
SLA thresholds from the host's global environment map.

A pool's threshold lives under `poolmonitor.<pool display name>.sla` and is a
whole number of minutes. Missing or malformed values mean "no SLA for this
pool"; they are never an error for the caller of `lookup_threshold`.
"""

from collections.abc import Mapping

from ..api.errors import MalformedConfiguration
from ..core.config import FairpoolConfig
from ..core.logging import get_logger

log = get_logger("sla.thresholds")


def parse_threshold(key: str, raw: str) -> int:
    """Parse a threshold in minutes; raises MalformedConfiguration unless a positive integer."""
    text = raw.strip()
    if not text.isdecimal():
        raise MalformedConfiguration(key, raw)
    minutes = int(text)
    if minutes <= 0:
        raise MalformedConfiguration(key, raw)
    return minutes


def lookup_threshold(env: Mapping[str, str] | None, pool: str, cfg: FairpoolConfig) -> int | None:
    """Configured SLA for `pool` in minutes, or None when absent/malformed."""
    if env is None:
        return None
    key = cfg.sla_key(pool)
    raw = env.get(key)
    if raw is None:
        return None
    try:
        return parse_threshold(key, raw)
    except MalformedConfiguration as e:
        log.debug(str(e), event="sla.threshold.malformed", pool=pool, key=key)
        return None
