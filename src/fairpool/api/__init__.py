# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

from .errors import FairpoolError, IndeterminateDecision, MalformedConfiguration, UnresolvableReference

__all__ = [
    "FairpoolError",
    "IndeterminateDecision",
    "MalformedConfiguration",
    "UnresolvableReference",
]
