# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

"""
Prometheus metrics for the SLA monitor.

Pool names are used as a label: pools are operator-defined and few, unlike
node or task names.
"""

import threading
from dataclasses import dataclass
from typing import Any

from prometheus_client import REGISTRY, CollectorRegistry, Counter, Gauge

_default: SLAMetrics | None = None
_default_lock = threading.Lock()


@dataclass
class SLAMetrics:
    cycles_total: Any
    breaches_total: Any
    average_wait_minutes: Any
    waiting_builds: Any

    @classmethod
    def create(cls, registry: CollectorRegistry | None = None) -> SLAMetrics:
        reg = registry if registry is not None else REGISTRY
        return cls(
            cycles_total=Counter("fairpool_sla_cycles_total", "Completed SLA sampling cycles", registry=reg),
            breaches_total=Counter(
                "fairpool_sla_breaches_total", "Samples whose average wait exceeded the pool SLA", ["pool"], registry=reg
            ),
            average_wait_minutes=Gauge(
                "fairpool_sla_average_wait_minutes", "Average queue wait at the last sample", ["pool"], registry=reg
            ),
            waiting_builds=Gauge(
                "fairpool_sla_waiting_builds", "Builds waiting at the last sample", ["pool"], registry=reg
            ),
        )

    @classmethod
    def default(cls) -> SLAMetrics:
        global _default
        with _default_lock:
            if _default is None:
                _default = cls.create()
            return _default
