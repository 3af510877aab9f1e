# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

"""
Fair dispatcher: per-(node, task) admission decision.

Assigns builds of a pooled task so that, over time, every node in the pool
gets an equal share. Best-effort: when the heuristics cannot find a good
match the node's own admission check decides.

Rules, evaluated in order:

1) Task has no label:
   - node has only its self label -> node's own check decides;
   - node belongs to a real pool   -> block (pooled capacity is reserved).
2) Task has a label:
   a) exactly one idle pool member and it is this node -> allow;
   b) usage history available (total > 0):
        least-used node is this node -> allow,
        no least-used node           -> node's own check decides,
        another node is least used   -> block;
   c) no usage history: block if the task was last built on this node,
      otherwise allow.

The dispatcher holds no state between calls and is safe to call from many
scheduler threads at once. It never raises: a fault while deciding falls
back to the node's own check.
"""

from ..api.errors import IndeterminateDecision, UnresolvableReference
from ..cluster import ClusterView
from ..core.logging import get_logger
from ..model import ALLOW, BlockReason, Decision, Node, Task
from .metrics import DispatchMetrics
from .selection import idle_labeled_nodes, least_used
from .usage import node_usage, total_usage


class FairDispatcher:
    """
    Admission heuristic consulted by the host's load balancer.

    Usage:
        dispatcher = FairDispatcher(view)
        if dispatcher.can_take(node, task).allowed:
            ...
    """

    def __init__(self, view: ClusterView, *, metrics: DispatchMetrics | None = None) -> None:
        self.view = view
        self.metrics = metrics or DispatchMetrics.default()
        self.log = get_logger("dispatch")

    # ---- public API ----------------------------------------------------------

    def can_take(self, node: Node, task: Task) -> Decision:
        try:
            if node is None or task is None:
                raise UnresolvableReference("node or task is missing")
            decision, rule = self._decide(node, task)
        except Exception as e:
            return self._degrade(node, task, e)
        self.metrics.observe(decision.allowed, rule)
        return decision

    # ---- rules ---------------------------------------------------------------

    def _decide(self, node: Node, task: Task) -> tuple[Decision, str]:
        if task.label is None:
            return self._decide_unlabeled(node, task)
        return self._decide_pooled(node, task)

    def _decide_unlabeled(self, node: Node, task: Task) -> tuple[Decision, str]:
        if not node.in_real_pool:
            decision = self.view.native_can_take(node, task)
            self.log.debug(
                f"for task {task.name}: node {node.name} has no label other than its name. "
                f"obey configuration. decision={_fmt(decision)}",
                event="dispatch.unlabeled.native",
                task=task.name,
                node=node.name,
            )
            return decision, "unlabeled_native"

        self.log.debug(
            f"for task {task.name}: task has no label. node *has* label. don't allow running on node: {node.name}",
            event="dispatch.unlabeled.reserved",
            task=task.name,
            node=node.name,
        )
        return Decision.block(node.name, BlockReason.reserved_for_pool), "reserved_for_pool"

    def _decide_pooled(self, node: Node, task: Task) -> tuple[Decision, str]:
        usage = node_usage(self.view, task) if task.tracks_history else None

        idle = idle_labeled_nodes(self.view, task)
        if len(idle) == 1 and idle[0] == node:
            self.log.debug(
                f"for task {task.name}: only node {node.name} available, take it regardless of other heuristics",
                event="dispatch.sole_idle",
                task=task.name,
                node=node.name,
            )
            return ALLOW, "sole_idle"

        if usage and total_usage(usage) > 0:
            try:
                best = self._preferred_node(usage)
            except IndeterminateDecision:
                decision = self.view.native_can_take(node, task)
                self.log.debug(
                    f"for task {task.name}: no least used node. fallback to node check. decision={_fmt(decision)}",
                    event="dispatch.fallback",
                    task=task.name,
                    node=node.name,
                )
                return decision, "native_fallback"

            if best == node:
                self.log.debug(
                    f"for task {task.name}: node {node.name} *is* the least used node. ALLOW.",
                    event="dispatch.least_used",
                    task=task.name,
                    node=node.name,
                )
                return ALLOW, "least_used"

            self.log.debug(
                f"for task {task.name}: node {node.name} *is not* the least used node {best.name}. reject.",
                event="dispatch.not_least_used",
                task=task.name,
                node=node.name,
                preferred=best.name,
            )
            return Decision.block(node.name, BlockReason.not_least_used), "not_least_used"

        if task.last_built_on is not None and task.last_built_on == node.name:
            self.log.debug(
                f"for task {task.name}: reject this node because the task was last run here: {node.name}",
                event="dispatch.last_built_here",
                task=task.name,
                node=node.name,
            )
            return Decision.block(node.name, BlockReason.last_built_here), "last_built_here"

        self.log.debug(
            f"for task {task.name}: task was not last run on this node. proceed to take this node: {node.name}",
            event="dispatch.no_history",
            task=task.name,
            node=node.name,
        )
        return ALLOW, "no_history"

    @staticmethod
    def _preferred_node(usage: dict[Node, int]) -> Node:
        best = least_used(usage)
        if best is None:
            raise IndeterminateDecision("no node with an idle executor in usage histogram")
        return best

    # ---- fallback ------------------------------------------------------------

    def _degrade(self, node: Node | None, task: Task | None, exc: Exception) -> Decision:
        self.metrics.degraded_total.inc()
        node_name = getattr(node, "name", None)
        task_name = getattr(task, "name", None)
        self.log.warning(
            "dispatch decision failed, falling back to node check",
            exc_info=exc,
            event="dispatch.degraded",
            task=task_name,
            node=node_name,
        )
        if node is None or task is None:
            return Decision.block(node_name, BlockReason.indeterminate)
        try:
            return self.view.native_can_take(node, task)
        except Exception as e:
            self.log.warning(
                "node check failed as well, blocking",
                exc_info=e,
                event="dispatch.native.failed",
                task=task_name,
                node=node_name,
            )
            return Decision.block(node_name, BlockReason.indeterminate)


def _fmt(decision: Decision) -> str:
    return "allow" if decision.allowed else f"block({decision.reason.value if decision.reason else '-'})"
