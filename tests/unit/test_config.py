from __future__ import annotations

import json

import pytest

from fairpool.core.config import FairpoolConfig

pytestmark = [pytest.mark.unit]


def test_defaults_keep_a_week_of_half_hour_samples():
    cfg = FairpoolConfig()
    assert cfg.sla_sample_interval_ms == 30 * 60_000
    assert cfg.sla_retention_ms == 7 * 24 * 3_600_000
    assert cfg.sla_window_capacity == 336


@pytest.mark.parametrize(
    "kwargs",
    [
        {"sla_sample_interval_sec": 0},
        {"sla_sample_interval_sec": 600, "sla_retention_sec": 60},
        {"sla_key_prefix": "", "sla_key_suffix": ""},
    ],
)
def test_invalid_values_are_rejected(kwargs):
    with pytest.raises(ValueError):
        FairpoolConfig(**kwargs)


def test_load_layers_file_env_and_overrides(tmp_path, monkeypatch):
    path = tmp_path / "fairpool.json"
    path.write_text(json.dumps({"sla_sample_interval_sec": 120, "sla_key_prefix": "sla."}), encoding="utf-8")
    monkeypatch.setenv("FAIRPOOL_SLA_RETENTION_SEC", "1200")

    cfg = FairpoolConfig.load(path, overrides={"figure_width": 500})

    assert cfg.sla_sample_interval_ms == 120_000
    assert cfg.sla_window_capacity == 10
    assert cfg.sla_key("pool") == "sla.pool.sla"
    assert cfg.figure_width == 500


def test_load_ignores_missing_file_and_bad_env(tmp_path, monkeypatch):
    monkeypatch.setenv("FAIRPOOL_SLA_SAMPLE_INTERVAL_SEC", "often")
    monkeypatch.delenv("FAIRPOOL_SLA_RETENTION_SEC", raising=False)

    cfg = FairpoolConfig.load(tmp_path / "missing.json")

    assert cfg.sla_window_capacity == 336


def test_env_override_wins_over_file(tmp_path, monkeypatch):
    path = tmp_path / "fairpool.json"
    path.write_text(json.dumps({"sla_sample_interval_sec": 120}), encoding="utf-8")
    monkeypatch.setenv("FAIRPOOL_SLA_SAMPLE_INTERVAL_SEC", "300")
    monkeypatch.delenv("FAIRPOOL_SLA_RETENTION_SEC", raising=False)

    assert FairpoolConfig.load(path).sla_sample_interval_ms == 300_000
