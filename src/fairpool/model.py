# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

"""
Read-only views of host scheduler state.

The host owns nodes, tasks, build history and the queue; fairpool only reads
snapshots of them. Nodes compare and hash by name so they can key a usage
histogram regardless of which snapshot instance a lookup returned.
"""

from dataclasses import dataclass, field
from enum import Enum

from .core.types import LabelName, NodeName, TaskName, TimestampMs


@dataclass(frozen=True)
class Node:
    """
    Worker node snapshot.

    Attributes:
        name: Node identity; also its implicit self label.
        online: Whether the node is connected and accepting work.
        num_executors: Configured executor slots.
        busy_executors: Executors currently running a build.
        labels: User-assigned labels (the self label is implicit).
    """

    name: NodeName
    online: bool = field(default=True, compare=False)
    num_executors: int = field(default=1, compare=False)
    busy_executors: int = field(default=0, compare=False)
    labels: frozenset[LabelName] = field(default_factory=frozenset, compare=False)

    @property
    def assigned_labels(self) -> frozenset[LabelName]:
        """User labels plus the implicit self label."""
        return self.labels | {self.name}

    @property
    def idle(self) -> bool:
        """No executor is running anything."""
        return self.busy_executors <= 0

    @property
    def has_idle_executor(self) -> bool:
        return self.busy_executors < self.num_executors

    @property
    def in_real_pool(self) -> bool:
        """False when the only label is the implicit self label."""
        return len(self.assigned_labels) > 1


@dataclass(frozen=True)
class Task:
    """
    Pending project/task.

    Attributes:
        name: Full display name.
        label: Assigned pool label; None for unlabeled tasks.
        last_built_on: Node name of the last build; None if never built or the
            node no longer exists.
        tracks_history: Whether the task exposes build history for usage counting.
    """

    name: TaskName
    label: LabelName | None = None
    last_built_on: NodeName | None = None
    tracks_history: bool = True


@dataclass(frozen=True)
class BuildRecord:
    """One retained build of a task; `built_on` is None when unattributable."""

    number: int
    built_on: NodeName | None = None


@dataclass(frozen=True)
class QueuedItem:
    """A queued, buildable item and the epoch ms at which it became buildable."""

    task: Task
    buildable_since_ms: TimestampMs


class BlockReason(str, Enum):
    """Why a node was refused for a task."""

    node_busy = "node_busy"
    reserved_for_pool = "reserved_for_pool"
    not_least_used = "not_least_used"
    last_built_here = "last_built_here"
    native_refused = "native_refused"
    indeterminate = "indeterminate"


@dataclass(frozen=True)
class Decision:
    """
    Admission verdict for one (node, task) pair.

    `allowed=True` means no objection; otherwise `reason` tells the host why
    the node should be treated as busy for this task.
    """

    allowed: bool
    reason: BlockReason | None = None
    node: NodeName | None = None

    @classmethod
    def allow(cls) -> Decision:
        return ALLOW

    @classmethod
    def block(cls, node: NodeName | None, reason: BlockReason = BlockReason.node_busy) -> Decision:
        return cls(allowed=False, reason=reason, node=node)

    def __bool__(self) -> bool:
        return self.allowed


ALLOW = Decision(allowed=True)


__all__ = [
    "ALLOW",
    "BlockReason",
    "BuildRecord",
    "Decision",
    "Node",
    "QueuedItem",
    "Task",
]
