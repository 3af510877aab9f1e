# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

"""
Error taxonomy for fairpool.

None of these ever escape the admission decision path: the dispatcher turns
them into a fallback verdict, because a fault raised back into the host
scheduler would get the probed node marked unhealthy. The SLA monitor uses
them internally to classify what it skips.
"""


class FairpoolError(Exception):
    """Base class for all fairpool errors."""

    ...


class UnresolvableReference(FairpoolError):
    """
    A node, label or build-history entry no longer exists (removed or renamed).
    The item is excluded from the computation.
    """

    ...


class IndeterminateDecision(FairpoolError):
    """
    The fairness heuristic cannot establish a preferred node (no history, no
    idle node). Resolved by asking the node's own admission check.
    """

    ...


class MalformedConfiguration(FairpoolError):
    """An SLA threshold value is not a positive integer; treated as no SLA."""

    def __init__(self, key: str, raw: object) -> None:
        super().__init__(f"malformed value for {key!r}: {raw!r}")
        self.key = key
        self.raw = raw
