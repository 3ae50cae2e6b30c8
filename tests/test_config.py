"""
Tests for Configuration and Command-Line Simulation
===================================================
"""

import json

import numpy as np
import pandas as pd
import pytest

from simcormult.config_schema import apply_defaults, load_config, validate_config
from simcormult.exceptions import InvalidCorrelationMatrix
from simcormult.simulation.bcl_simulator import BCLSimulator, main


@pytest.mark.unit
class TestConfigValidation:
    """Tests for configuration validation."""

    def test_valid_config(self, base_config):
        result = validate_config(base_config)
        assert result.is_valid
        assert result.errors == []

    def test_missing_sections(self):
        result = validate_config({'population': {'N': 10, 'T': 2}})
        assert not result.is_valid
        assert "Missing required key: categories" in result.errors
        assert "Missing required key: betas" in result.errors

    def test_exchangeable_requires_rho(self, base_config):
        del base_config['correlation']['rho']
        result = validate_config(base_config)
        assert not result.is_valid
        assert any('rho' in e for e in result.errors)

    def test_invalid_structure(self, base_config):
        base_config['correlation']['structure'] = 'unstructured'
        assert not validate_config(base_config).is_valid

    def test_too_few_categories(self, base_config):
        base_config['categories']['J'] = 1
        assert not validate_config(base_config).is_valid

    def test_cluster_size_must_be_positive_integer(self, base_config):
        base_config['population']['T'] = 0
        assert not validate_config(base_config).is_valid

    def test_unknown_margin(self, base_config):
        base_config['categories']['margin'] = 'weibull'
        result = validate_config(base_config)
        assert not result.is_valid

    def test_non_gumbel_margin_warns(self, base_config):
        base_config['categories']['margin'] = 'probit'
        result = validate_config(base_config)
        assert result.is_valid
        assert any('gumbel' in w for w in result.warnings)

    def test_missing_seed_warns(self, base_config):
        del base_config['population']['seed']
        result = validate_config(base_config)
        assert result.is_valid
        assert any('seed' in w for w in result.warnings)

    def test_defaults(self, base_config):
        del base_config['population']['seed']
        del base_config['correlation']
        config = apply_defaults(base_config)

        assert config['population']['seed'] == 42
        assert config['categories']['margin'] == 'gumbel'
        assert config['correlation']['structure'] == 'independent'
        assert 'correlation' not in base_config

    def test_load_invalid_config(self, tmp_path):
        path = tmp_path / 'bad.json'
        path.write_text(json.dumps({'population': {}}), encoding='utf-8')
        with pytest.raises(ValueError, match="Invalid configuration"):
            load_config(path)

    def test_load_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / 'absent.json')


@pytest.mark.simulation
class TestBCLSimulator:
    """Tests for config-driven simulation."""

    def test_intercept_only_run(self, config_file):
        sim = BCLSimulator(config_file)
        result = sim.run()

        assert result.responses.shape == (100, 2)
        assert sim.cor_matrix.shape == (6, 6)
        np.testing.assert_array_equal(sim.cor_matrix[:3, 3:], 0.5 * np.eye(3))

    def test_seed_reproducible(self, config_file):
        first = BCLSimulator(config_file).run()
        second = BCLSimulator(config_file).run()
        np.testing.assert_array_equal(first.responses, second.responses)

    def test_repeated_runs_identical(self, config_file):
        sim = BCLSimulator(config_file)
        first = sim.run()
        second = sim.run()
        np.testing.assert_array_equal(first.responses, second.responses)
        np.testing.assert_array_equal(first.latent, second.latent)

    def test_seed_override(self, config_file):
        first = BCLSimulator(config_file).run()
        second = BCLSimulator(config_file, seed=8).run()
        assert not np.array_equal(first.latent, second.latent)

    def test_design_from_csv(self, tmp_path, base_config):
        gen = np.random.default_rng(2)
        pd.DataFrame({
            'x1': gen.normal(size=60),
            'x2': gen.normal(size=60),
            'unused': 0.0,
        }).to_csv(tmp_path / 'covariates.csv', index=False)

        base_config['design'] = {'path': 'covariates.csv', 'columns': ['x1', 'x2']}
        del base_config['population']['N']
        base_config['betas'] = [0.1, 0.5, -0.5, 0.0, 0.2, 0.3]
        path = tmp_path / 'config.json'
        path.write_text(json.dumps(base_config), encoding='utf-8')

        result = BCLSimulator(path).run()

        assert result.responses.shape == (30, 2)
        assert list(result.simulated_table.columns) == ['y', 'x1', 'x2', 'id', 'time']

    def test_toeplitz_structure(self, tmp_path, base_config):
        base_config['population']['T'] = 3
        base_config['correlation'] = {'structure': 'toeplitz', 'values': [1.0, 0.6, 0.3]}
        path = tmp_path / 'config.json'
        path.write_text(json.dumps(base_config), encoding='utf-8')

        sim = BCLSimulator(path)
        assert sim.cor_matrix[0, 6] == pytest.approx(0.3)

    def test_toeplitz_needs_one_lag_per_occasion(self, tmp_path, base_config):
        base_config['correlation'] = {'structure': 'toeplitz', 'values': [1.0, 0.6, 0.3]}
        path = tmp_path / 'config.json'
        path.write_text(json.dumps(base_config), encoding='utf-8')

        with pytest.raises(InvalidCorrelationMatrix):
            BCLSimulator(path)

    def test_full_matrix_structure(self, tmp_path, base_config):
        base_config['correlation'] = {'structure': 'matrix', 'matrix': np.eye(6).tolist()}
        path = tmp_path / 'config.json'
        path.write_text(json.dumps(base_config), encoding='utf-8')

        sim = BCLSimulator(path)
        np.testing.assert_array_equal(sim.cor_matrix, np.eye(6))

    def test_export(self, tmp_path, config_file):
        out = tmp_path / 'sim.csv'
        latent_out = tmp_path / 'latent.csv'

        BCLSimulator(config_file).export(out, latent_path=latent_out)

        table = pd.read_csv(out)
        latent = pd.read_csv(latent_out)
        assert len(table) == 200
        assert set(table['y']).issubset({1, 2, 3})
        assert latent.shape == (100, 6)


@pytest.mark.simulation
class TestCommandLine:
    """Tests for the CLI entry point."""

    def test_main_writes_output(self, tmp_path, config_file):
        out = tmp_path / 'cli.csv'
        assert main(['--config', str(config_file), '--out', str(out), '--seed', '3']) == 0
        assert out.exists()

    def test_main_reports_invalid_config(self, tmp_path):
        path = tmp_path / 'bad.json'
        path.write_text(json.dumps({'population': {}}), encoding='utf-8')
        assert main(['--config', str(path), '--out', str(tmp_path / 'x.csv')]) == 1
