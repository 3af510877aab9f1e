# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

"""Side-panel widget exposing the SLA chart to the host UI."""

from typing import Any

from .figure import LatestFigureCache, SLAFigure


class SLAWidget:
    """Read-only UI handle over the latest-figure cache, mounted at `url_name`."""

    url_name = "sla"

    def __init__(self, cache: LatestFigureCache) -> None:
        self._cache = cache

    def get_figure(self) -> SLAFigure:
        return self._cache.get()

    def to_json(self) -> dict[str, Any]:
        return self._cache.get().model_dump(mode="json")
