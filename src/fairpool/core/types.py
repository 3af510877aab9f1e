# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

"""
fairpool.core.types
===================

Shared type aliases and constants. Keep this module tiny and dependency-free.
"""

from typing import Final

# ---- Time --------------------------------------------------------------------

Millis = int
Seconds = float
TimestampMs = int  # wall-clock epoch timestamp (ms)
MonotonicMs = int  # process-local monotonic time (ms)

# ---- Identifiers ------------------------------------------------------------

NodeName = str
LabelName = str
TaskName = str

# ---- Constants ---------------------------------------------------------------

MS_PER_SECOND: Final[int] = 1_000
MS_PER_MINUTE: Final[int] = 60_000
MS_PER_DAY: Final[int] = 24 * 60 * MS_PER_MINUTE


__all__ = [
    "Millis",
    "Seconds",
    "TimestampMs",
    "MonotonicMs",
    "NodeName",
    "LabelName",
    "TaskName",
    "MS_PER_SECOND",
    "MS_PER_MINUTE",
    "MS_PER_DAY",
]
