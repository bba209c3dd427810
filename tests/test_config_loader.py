"""Tests for configuration loading."""

import json

import pytest

from config.config_loader import load_clip_settings, load_config, load_default_bounds
from geometry_clip.bounds import Bounds


class TestLoadConfig:
    def test_load_project_config(self):
        config = load_config()
        assert 'settings' in config
        assert config['settings']['precision'] in ('single', 'double')

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / 'missing.json')

    def test_missing_settings_key(self, tmp_path):
        path = tmp_path / 'config.json'
        path.write_text(json.dumps({'default_bounds': [0, 0, 1, 1]}))
        with pytest.raises(KeyError):
            load_config(path)


class TestLoadClipSettings:
    def test_defaults(self):
        settings = load_clip_settings({'settings': {}})
        assert settings['resolution'] == 0.0
        assert settings['precision'] == 'double'
        assert settings['discard_degenerates'] is False
        assert settings['domain'] == 'longitude_latitude'
        assert settings['target_crs'] == 'EPSG:4326'
        assert settings['write_map_files'] is True

    def test_overrides(self):
        settings = load_clip_settings({'settings': {'precision': 'single', 'resolution': 0.01}})
        assert settings['precision'] == 'single'
        assert settings['resolution'] == 0.01
        assert settings['domain'] == 'longitude_latitude'

    def test_domain_follows_projected_target_crs(self):
        settings = load_clip_settings({'settings': {'target_crs': 'EPSG:3857'}})
        assert settings['domain'] == 'unbounded'

    def test_explicit_domain_wins_over_target_crs(self):
        settings = load_clip_settings(
            {'settings': {'target_crs': 'EPSG:3857', 'domain': 'longitude_latitude'}}
        )
        assert settings['domain'] == 'longitude_latitude'

    def test_project_config_follows_target_crs(self):
        settings = load_clip_settings(load_config())
        assert settings['domain'] == 'longitude_latitude'
        assert settings['discard_degenerates'] is False

    @pytest.mark.parametrize('override', [
        {'precision': 'half'},
        {'domain': 'mercator'},
        {'resolution': -0.5},
    ])
    def test_invalid_settings(self, override):
        with pytest.raises(ValueError):
            load_clip_settings({'settings': override})


class TestLoadDefaultBounds:
    def test_configured_bounds(self):
        bounds = load_default_bounds({'settings': {}, 'default_bounds': [-80, 35, -70, 45]})
        assert bounds == Bounds(-80.0, -70.0, 35.0, 45.0)

    def test_no_bounds(self):
        assert load_default_bounds({'settings': {}}) is None
