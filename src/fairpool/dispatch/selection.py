# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

"""
Node selection helpers for the fair dispatcher.

- `idle_labeled_nodes`: pool members that could start the task immediately.
- `least_used`: the node of a usage histogram with the fewest builds among
  nodes that have a free executor.

Ties in `least_used` go to the lowest node name, so the outcome never
depends on histogram iteration order.
"""

from collections.abc import Mapping

from ..cluster import ClusterView
from ..model import Node, Task


def idle_labeled_nodes(view: ClusterView, task: Task) -> list[Node]:
    """Online, fully idle nodes with executors that carry the task's label."""
    if task.label is None:
        return []
    found: list[Node] = []
    for node in view.nodes():
        labels = node.assigned_labels
        if labels and task.label in labels and node.online and node.idle and node.num_executors > 0:
            found.append(node)
    return found


def least_used(usage: Mapping[Node, int]) -> Node | None:
    """
    Least-used node that is online with at least one idle executor.

    Offline or fully busy nodes are never picked, even with the lowest count.
    Returns None when no node qualifies.
    """
    best: Node | None = None
    best_count = 0
    for node, count in usage.items():
        if not (node.online and node.has_idle_executor):
            continue
        if best is None or count < best_count or (count == best_count and node.name < best.name):
            best, best_count = node, count
    return best
