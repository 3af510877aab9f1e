# conftest.py
from __future__ import annotations

import os
import uuid

import pytest
from prometheus_client import CollectorRegistry

from fairpool.core.config import FairpoolConfig
from fairpool.core.logging import bind_context, configure_from_env, enable_stdout_logging, get_logger, log_context
from fairpool.core.time import ManualClock
from fairpool.dispatch.dispatcher import FairDispatcher
from fairpool.dispatch.metrics import DispatchMetrics
from fairpool.sla.figure import LatestFigureCache
from fairpool.sla.metrics import SLAMetrics
from fairpool.sla.tracker import SLATracker
from tests.helpers import BuildSimulator, InMemoryCluster


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast isolated tests")
    config.addinivalue_line("markers", "dispatch: fair dispatcher tests")
    config.addinivalue_line("markers", "sla: SLA monitor tests")
    config.addinivalue_line("markers", "e2e: simulated scheduling scenarios")


def pytest_addoption(parser):
    parser.addoption(
        "--log-json",
        action="store_true",
        default=False,
        help="Emit fairpool logs in JSON format during tests",
    )


@pytest.fixture(scope="session", autouse=True)
def _configure_fairpool_logging(request):
    configure_from_env()
    prefer_json = request.config.getoption("--log-json")
    if os.getenv("FAIRPOOL_LOG_STDOUT", "").lower() not in ("1", "true", "yes", "on"):
        enable_stdout_logging(level="DEBUG", json_output=prefer_json, pretty=not prefer_json)
    bind_context(role="pytest")


@pytest.fixture(scope="session")
def session_run_id():
    return uuid.uuid4().hex[:8]


@pytest.fixture(autouse=True)
def _test_log_context(request, session_run_id):
    log = get_logger("test")
    with log_context(test=request.node.name, test_run=session_run_id):
        log.debug("pytest.test.start", event="pytest.test.start")
        yield


# ---- shared fixtures ----------------------------------------------------------


@pytest.fixture
def registry():
    """Private Prometheus registry so metric values do not leak across tests."""
    return CollectorRegistry()


@pytest.fixture
def cluster():
    return InMemoryCluster()


@pytest.fixture
def dispatcher(cluster, registry):
    return FairDispatcher(cluster, metrics=DispatchMetrics.create(registry))


@pytest.fixture
def simulator(cluster, dispatcher):
    return BuildSimulator(cluster, dispatcher)


@pytest.fixture
def manual_clock():
    return ManualClock(start_ms=1_700_000_000_000)


@pytest.fixture
def sla_cfg():
    # 1 minute samples, 3 minutes retention -> 3 samples per pool
    return FairpoolConfig(sla_sample_interval_sec=60, sla_retention_sec=180)


@pytest.fixture
def figure_cache():
    return LatestFigureCache()


@pytest.fixture
def tracker(cluster, figure_cache, sla_cfg, manual_clock, registry):
    return SLATracker(
        cluster,
        figure_cache,
        cfg=sla_cfg,
        clock=manual_clock,
        metrics=SLAMetrics.create(registry),
    )


@pytest.fixture
def tlog():
    return get_logger("test")
