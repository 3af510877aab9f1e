# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

"""
Low-cardinality Prometheus metrics for the fair dispatcher.

Labels are limited to the decision outcome and the rule that produced it;
node and task names are never used as label values.
"""

import threading
from dataclasses import dataclass
from typing import Any

from prometheus_client import REGISTRY, CollectorRegistry, Counter

_default: DispatchMetrics | None = None
_default_lock = threading.Lock()


@dataclass
class DispatchMetrics:
    decisions_total: Any
    degraded_total: Any

    @classmethod
    def create(cls, registry: CollectorRegistry | None = None) -> DispatchMetrics:
        reg = registry if registry is not None else REGISTRY
        decisions_total = Counter(
            "fairpool_dispatch_decisions_total",
            "Admission decisions by outcome and rule",
            ["outcome", "rule"],
            registry=reg,
        )
        degraded_total = Counter(
            "fairpool_dispatch_degraded_total",
            "Decisions that fell back to the node's own check after a fault",
            registry=reg,
        )
        return cls(decisions_total=decisions_total, degraded_total=degraded_total)

    @classmethod
    def default(cls) -> DispatchMetrics:
        """Process-wide instance registered once in the global registry."""
        global _default
        with _default_lock:
            if _default is None:
                _default = cls.create()
            return _default

    def observe(self, allowed: bool, rule: str) -> None:
        self.decisions_total.labels(outcome="allow" if allowed else "block", rule=rule).inc()
