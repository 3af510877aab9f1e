# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

"""
Host cluster interface (scheduler-agnostic).

The host scheduler implements `ClusterView` over its own node registry, queue
and build history. All methods are reads; implementations are responsible for
their own synchronization, since the dispatcher calls them from arbitrary
scheduler threads.

Absence is reported with None (or an empty collection), never with an
exception: a missing node/label simply drops out of the computation.
"""

from collections.abc import Iterable, Mapping, Sequence
from typing import Protocol, runtime_checkable

from .core.types import LabelName, NodeName
from .model import BuildRecord, Decision, Node, QueuedItem, Task

__all__ = [
    "ClusterView",
    "is_true_pool",
    "true_pools",
]


@runtime_checkable
class ClusterView(Protocol):
    """Read-only view of the host scheduler state."""

    def nodes(self) -> Sequence[Node]:
        """Every known node."""
        ...

    def get_node(self, name: NodeName) -> Node | None:
        """Resolve a node by name; None when removed or renamed."""
        ...

    def labels(self) -> Sequence[LabelName]:
        """Global label list, including every node's implicit self label."""
        ...

    def label_nodes(self, label: LabelName) -> Sequence[Node]:
        """Current members of a label (empty for unknown labels)."""
        ...

    def builds(self, task: Task) -> Iterable[BuildRecord]:
        """Retained build history of a task."""
        ...

    def native_can_take(self, node: Node, task: Task) -> Decision:
        """The node's own admission check (label match, online, mode...)."""
        ...

    def buildable_items(self) -> Iterable[QueuedItem]:
        """Queued items that are buildable right now."""
        ...

    def global_env(self) -> Mapping[str, str] | None:
        """Host-wide key/value environment map; None if not configured."""
        ...


def is_true_pool(label: LabelName, members: Sequence[Node]) -> bool:
    """
    A label is a real pool unless its only member is a node named like the
    label, which is the synthetic self label every node carries.
    """
    return not (len(members) == 1 and members[0].name == label)


def true_pools(view: ClusterView) -> list[LabelName]:
    """True pool labels in global label order."""
    return [label for label in view.labels() if is_true_pool(label, view.label_nodes(label))]
