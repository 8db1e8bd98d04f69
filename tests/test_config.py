"""Tests for configuration loading."""

from pathlib import Path

import pytest

from quakerisk.config import Config, get_config, reload_config


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for var in (
        "QUAKERISK_DATA_DIR", "SOIL_FILE", "FAULTS_FILE", "QUAKES_FILE", "DEM_FILE",
        "DEFAULT_RADIUS_KM", "QUERY_PARALLEL", "QUERY_MAX_WORKERS",
        "SOIL_CLASS_ATTRIBUTE", "MAGNITUDE_ATTRIBUTE",
    ):
        monkeypatch.delenv(var, raising=False)


class TestDefaults:

    def test_defaults(self):
        config = Config()
        assert config.query.default_radius_km == 50.0
        assert config.query.max_radius_km == 300.0
        assert config.attributes.soil_class == "CLASE_TEX"
        assert config.attributes.magnitude == "mag"
        assert config.data.dem_path == Path("data") / "elevation_ensenada.tif"


class TestYaml:

    def test_yaml_overrides(self, tmp_path):
        (tmp_path / "quakerisk.yaml").write_text(
            "data:\n  data_dir: /srv/data\n"
            "query:\n  default_radius_km: 25\n  parallel: false\n"
            "attributes:\n  magnitude: magnitude\n",
            encoding="utf-8",
        )
        config = Config.load(tmp_path)
        assert config.data.data_dir == "/srv/data"
        assert config.query.default_radius_km == 25.0
        assert config.query.parallel is False
        assert config.attributes.magnitude == "magnitude"

    def test_empty_yaml_keeps_defaults(self, tmp_path):
        (tmp_path / "quakerisk.yaml").write_text("", encoding="utf-8")
        assert Config.load(tmp_path).query.default_radius_km == 50.0


class TestEnvironment:

    def test_env_overrides_yaml(self, tmp_path, monkeypatch):
        (tmp_path / "quakerisk.yaml").write_text("query:\n  default_radius_km: 25\n", encoding="utf-8")
        monkeypatch.setenv("DEFAULT_RADIUS_KM", "80")
        monkeypatch.setenv("QUERY_PARALLEL", "no")
        monkeypatch.setenv("QUAKERISK_DATA_DIR", "/tmp/quakes")

        config = Config.load(tmp_path)

        assert config.query.default_radius_km == 80.0
        assert config.query.parallel is False
        assert config.data.soil_path == Path("/tmp/quakes") / "soil_ensenada.geojson"


def test_reload_replaces_global(tmp_path):
    (tmp_path / "quakerisk.yaml").write_text("query:\n  max_workers: 2\n", encoding="utf-8")
    config = reload_config(tmp_path)
    assert get_config() is config
    assert config.query.max_workers == 2
    reload_config()
