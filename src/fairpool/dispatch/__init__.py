# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

from .dispatcher import FairDispatcher
from .metrics import DispatchMetrics
from .selection import idle_labeled_nodes, least_used
from .usage import UsageHistogram, node_usage, total_usage

__all__ = [
    "DispatchMetrics",
    "FairDispatcher",
    "UsageHistogram",
    "idle_labeled_nodes",
    "least_used",
    "node_usage",
    "total_usage",
]
