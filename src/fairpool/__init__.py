# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

# Runtime package version from the installed distribution metadata.
try:
    from importlib.metadata import version as _pkg_version

    __version__ = _pkg_version("fairpool")
except Exception:  # pragma: no cover
    # source checkout without an install
    __version__ = "0.0.0"

from .cluster import ClusterView, is_true_pool
from .core.config import FairpoolConfig
from .dispatch.dispatcher import FairDispatcher
from .host import Dispatcher, FairScheduler
from .model import BlockReason, BuildRecord, Decision, Node, QueuedItem, Task
from .runtime.periodic import PeriodicRunner, PeriodicTask
from .sla.figure import LatestFigureCache, SLAFigure
from .sla.tracker import SLATracker
from .sla.widget import SLAWidget

__all__ = [
    "BlockReason",
    "BuildRecord",
    "ClusterView",
    "Decision",
    "Dispatcher",
    "FairDispatcher",
    "FairScheduler",
    "FairpoolConfig",
    "LatestFigureCache",
    "Node",
    "PeriodicRunner",
    "PeriodicTask",
    "QueuedItem",
    "SLAFigure",
    "SLATracker",
    "SLAWidget",
    "Task",
    "is_true_pool",
    "__version__",
]
