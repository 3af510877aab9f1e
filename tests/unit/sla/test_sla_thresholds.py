from __future__ import annotations

import pytest

from fairpool.api.errors import MalformedConfiguration
from fairpool.core.config import FairpoolConfig
from fairpool.sla.thresholds import lookup_threshold, parse_threshold

pytestmark = [pytest.mark.unit, pytest.mark.sla]


@pytest.fixture
def cfg():
    return FairpoolConfig()


def test_key_follows_naming_convention(cfg):
    assert cfg.sla_key("linux-pool") == "poolmonitor.linux-pool.sla"


@pytest.mark.parametrize("raw,expected", [("15", 15), (" 30 ", 30), ("1", 1)])
def test_parse_accepts_positive_integers(raw, expected):
    assert parse_threshold("k", raw) == expected


@pytest.mark.parametrize("raw", ["", "   ", "abc", "10m", "-5", "0", "1.5", "+3"])
def test_parse_rejects_malformed_values(raw):
    with pytest.raises(MalformedConfiguration) as ei:
        parse_threshold("poolmonitor.p.sla", raw)
    assert ei.value.key == "poolmonitor.p.sla"


def test_lookup_returns_configured_minutes(cfg):
    assert lookup_threshold({"poolmonitor.pool.sla": "20"}, "pool", cfg) == 20


@pytest.mark.parametrize(
    "env",
    [None, {}, {"poolmonitor.other.sla": "5"}, {"poolmonitor.pool.sla": "soon"}],
)
def test_lookup_treats_absent_or_malformed_as_no_sla(cfg, env):
    assert lookup_threshold(env, "pool", cfg) is None
