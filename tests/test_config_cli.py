#!/usr/bin/env python3
"""
Tests for the YAML run configuration and the command-line interface.
"""

import json

import pytest
from scipy import stats

from coastal_risk_engine import DefenseVector, MonteCarloIntegrator, PointMass, QuadratureIntegrator
from coastal_risk_engine.cli import main
from coastal_risk_engine.config import (
    RunConfig,
    build_distribution,
    build_integrator,
    build_run_config,
    load_city_config,
    load_run_config,
    load_yaml,
)

EAD_CONFIG = """\
city:
  total_value: 1.0e+12
levers:
  D: 3.0
  R: 1.0
  P: 0.5
surge:
  distribution: gumbel_r
  params: {loc: 1.0, scale: 0.5}
simulation:
  mode: ead
  n_years: 5
  discount_rate: 0.03
  integrator: mc
  n_samples: 50
  seed: 3
"""

STOCHASTIC_CONFIG = """\
levers:
  D: 2.0
surge:
  distribution: norm
  params: {loc: 2.5, scale: 0.5}
simulation:
  mode: stochastic
  n_years: 3
  n_scenarios: 4
  seed: 11
"""


MC_TRACE_CONFIG = """\
levers:
  D: 2.0
surge:
  distribution: norm
  params: {loc: 2.5, scale: 0.5}
simulation:
  mode: ead
  n_years: 4
  discount_rate: 0.04
  integrator: mc
  n_samples: 50
  seed: 9
"""


@pytest.fixture
def write_config(tmp_path):
    def _write(text, name="run.yaml"):
        path = tmp_path / name
        path.write_text(text)
        return str(path)
    return _write


# --------------------------------------------------------------------------- #
# Config loading                                                               #
# --------------------------------------------------------------------------- #


class TestLoadYaml:

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_yaml(str(tmp_path / "absent.yaml"))

    def test_root_must_be_mapping(self, write_config):
        with pytest.raises(ValueError):
            load_yaml(write_config("- 1\n- 2\n"))

    def test_unknown_section(self, write_config):
        with pytest.raises(ValueError):
            load_yaml(write_config("weather: {}\n"))

    def test_empty_file_is_empty_config(self, write_config):
        assert load_yaml(write_config("")) == {}


class TestRunConfig:

    def test_full_ead_config(self, write_config):
        cfg = load_run_config(write_config(EAD_CONFIG))
        assert cfg.params.total_value == 1.0e12
        assert cfg.params.city_max_height == 17.0
        assert cfg.levers == DefenseVector(R=1.0, P=0.5, D=3.0)
        assert cfg.mode == "ead"
        assert cfg.n_years == 5
        assert cfg.discount_rate == 0.03
        assert cfg.integrator == MonteCarloIntegrator(50)
        assert cfg.seed == 3
        assert cfg.surge.mean() == pytest.approx(stats.gumbel_r(1.0, 0.5).mean())

    def test_defaults_from_city_parameters(self):
        cfg = build_run_config({"surge": {"distribution": "point", "params": {"value": 2.0}}})
        assert cfg.n_years == 50
        assert cfg.discount_rate == 0.04
        assert cfg.levers == DefenseVector.zero()
        assert cfg.surge == PointMass(2.0)
        assert isinstance(cfg.integrator, QuadratureIntegrator)

    def test_city_section_only(self, write_config):
        params = load_city_config(write_config("city:\n  seawall_height: 2.0\n"))
        assert params.seawall_height == 2.0

    def test_unknown_city_key(self):
        with pytest.raises(ValueError):
            build_run_config({"city": {"sea_wall": 2.0}, "surge": {"distribution": "point", "params": {"value": 1.0}}})

    def test_unknown_lever_key(self, write_config):
        path = write_config(EAD_CONFIG.replace("  D: 3.0", "  d: 3.0"))
        with pytest.raises(ValueError, match="Unknown levers"):
            load_run_config(path)

    def test_invalid_mode(self):
        with pytest.raises(ValueError):
            RunConfig(params=None, levers=DefenseVector.zero(), surge=PointMass(1.0), mode="annual")

    def test_bad_distribution(self):
        with pytest.raises(ValueError):
            build_distribution({"distribution": "not_a_distribution"})
        with pytest.raises(ValueError):
            build_distribution(None)

    def test_bad_integrator(self):
        with pytest.raises(ValueError):
            build_integrator({"integrator": "trapezoid"})


# --------------------------------------------------------------------------- #
# CLI                                                                          #
# --------------------------------------------------------------------------- #


class TestCli:

    def test_info(self, capsys):
        assert main(["info"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["total_value"] == 1.5e12
        assert data["threshold_exponent"] == 1.01

    def test_zones(self, capsys):
        assert main(["zones", "--W", "2", "--R", "3", "--P", "0.5", "--D", "5", "--B", "4"]) == 0
        out = capsys.readouterr().out
        for name in ("WITHDRAWN", "RESISTANT", "GAP", "PROTECTED", "ABOVE_BARRIER"):
            assert name in out

    def test_zones_infeasible(self, capsys):
        assert main(["zones", "--W", "10", "--D", "10"]) == 1
        assert "Infeasible" in capsys.readouterr().err

    def test_run_ead_with_trace(self, write_config, capsys):
        assert main(["run", write_config(EAD_CONFIG), "--trace"]) == 0
        result = json.loads(capsys.readouterr().out)
        assert result["mode"] == "ead"
        assert result["total_cost"] == pytest.approx(result["investment"] + result["damage"])
        assert [r["epoch"] for r in result["trace"]] == [1, 2, 3, 4, 5]

    def test_run_stochastic_to_file(self, write_config, tmp_path):
        output = tmp_path / "out" / "result.json"
        assert main(["run", write_config(STOCHASTIC_CONFIG), "--output", str(output)]) == 0
        result = json.loads(output.read_text())
        assert result["mode"] == "stochastic"
        assert set(result["summary"]) == {"investment", "damage", "total_cost"}

    def test_run_seed_override_is_deterministic(self, write_config, capsys):
        path = write_config(STOCHASTIC_CONFIG)
        main(["run", path, "--seed", "5"])
        first = capsys.readouterr().out
        main(["run", path, "--seed", "5"])
        assert capsys.readouterr().out == first

    def test_run_trace_matches_reported_totals(self, write_config, capsys):
        assert main(["run", write_config(MC_TRACE_CONFIG), "--trace"]) == 0
        result = json.loads(capsys.readouterr().out)
        rate = 0.04
        damage = sum(r["damage"] * (1.0 + rate) ** -r["epoch"] for r in result["trace"])
        investment = sum(r["investment"] * (1.0 + rate) ** -r["epoch"] for r in result["trace"])
        assert damage == pytest.approx(result["damage"], rel=1e-12)
        assert investment == pytest.approx(result["investment"], rel=1e-12)

    def test_zones_negative_lever(self, capsys):
        assert main(["zones", "--W=-1"]) == 1
        assert "Invalid levers" in capsys.readouterr().err
