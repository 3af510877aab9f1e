# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

"""
Node usage histogram of a task.

Maps node -> number of retained builds of the task that ran there. The map
only holds nodes that can take the task right now: a node that built the
task in the past but has since been disabled, taken offline or relabeled is
excluded, otherwise the dispatcher would keep waiting for a least-used node
that can never serve the pool again.

Builds whose node was removed or renamed are unattributable and dropped.
"""

import logging
from collections.abc import Mapping

from ..cluster import ClusterView
from ..core.logging import get_logger
from ..model import Node, Task

log = get_logger("dispatch.usage")

UsageHistogram = dict[Node, int]


def node_usage(view: ClusterView, task: Task) -> UsageHistogram:
    """Build a fresh usage histogram for `task`; never cached across calls."""
    usage: UsageHistogram = {}
    if task.label is not None:
        for member in view.label_nodes(task.label):
            usage[member] = 0

    for build in view.builds(task):
        if build.built_on is None:
            continue
        node = view.get_node(build.built_on)
        if node is None:
            continue
        if view.native_can_take(node, task).allowed:
            usage[node] = usage.get(node, 0) + 1
        else:
            log.debug(
                f"node {node.name} used in build history can't take task {task.name} at this time",
                event="usage.node.excluded",
                task=task.name,
                node=node.name,
                build=build.number,
            )

    if log.isEnabledFor(logging.DEBUG):
        pairs = " ".join(f"{n.name}=>{c}" for n, c in usage.items())
        log.debug(f"node usage map for task {task.name}: {pairs}", event="usage.map", task=task.name)
    return usage


def total_usage(usage: Mapping[Node, int]) -> int:
    """Sum of builds over all nodes in the histogram."""
    return sum(usage.values())
