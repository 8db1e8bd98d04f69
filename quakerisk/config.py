"""Configuration management for the quake risk service."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv


@dataclass
class DataConfig:
    """Dataset file locations."""

    data_dir: str = "data"
    soil_file: str = "soil_ensenada.geojson"
    faults_file: str = "faults_global.geojson"
    quakes_file: str = "earthquakes_recent.geojson"
    dem_file: str = "elevation_ensenada.tif"

    def path(self, filename: str) -> Path:
        return Path(self.data_dir) / filename

    @property
    def soil_path(self) -> Path:
        return self.path(self.soil_file)

    @property
    def faults_path(self) -> Path:
        return self.path(self.faults_file)

    @property
    def quakes_path(self) -> Path:
        return self.path(self.quakes_file)

    @property
    def dem_path(self) -> Path:
        return self.path(self.dem_file)


@dataclass
class QueryConfig:
    """Risk query behaviour."""

    default_radius_km: float = 50.0
    max_radius_km: float = 300.0
    parallel: bool = True
    max_workers: int = 4


@dataclass
class AttributeConfig:
    """Feature attribute names."""

    soil_class: str = "CLASE_TEX"
    magnitude: str = "mag"


@dataclass
class Config:
    """Main configuration container."""

    data: DataConfig = field(default_factory=DataConfig)
    query: QueryConfig = field(default_factory=QueryConfig)
    attributes: AttributeConfig = field(default_factory=AttributeConfig)

    @classmethod
    def load(cls, config_dir: Path | None = None) -> "Config":
        """Load configuration from files and environment variables."""
        # Load .env file if present
        env_file = Path(__file__).parent.parent / ".env"
        if env_file.exists():
            load_dotenv(env_file)

        config = cls()

        if config_dir and config_dir.exists():
            config_file = config_dir / "quakerisk.yaml"
            if config_file.exists():
                config._load_yaml(config_file)

        config._load_from_env()

        return config

    def _load_yaml(self, path: Path) -> None:
        """Load configuration from a YAML file."""
        with open(path) as f:
            data = yaml.safe_load(f)
            if data:
                self._apply_yaml_config(data)

    def _apply_yaml_config(self, data: dict[str, Any]) -> None:
        """Apply YAML configuration data."""
        if "data" in data:
            section = data["data"]
            for key in ("data_dir", "soil_file", "faults_file", "quakes_file", "dem_file"):
                if key in section:
                    setattr(self.data, key, str(section[key]))

        if "query" in data:
            query = data["query"]
            if "default_radius_km" in query:
                self.query.default_radius_km = float(query["default_radius_km"])
            if "max_radius_km" in query:
                self.query.max_radius_km = float(query["max_radius_km"])
            if "parallel" in query:
                self.query.parallel = bool(query["parallel"])
            if "max_workers" in query:
                self.query.max_workers = int(query["max_workers"])

        if "attributes" in data:
            attrs = data["attributes"]
            if "soil_class" in attrs:
                self.attributes.soil_class = attrs["soil_class"]
            if "magnitude" in attrs:
                self.attributes.magnitude = attrs["magnitude"]

    def _load_from_env(self) -> None:
        """Override configuration from environment variables."""
        # Data
        if data_dir := os.getenv("QUAKERISK_DATA_DIR"):
            self.data.data_dir = data_dir
        if soil_file := os.getenv("SOIL_FILE"):
            self.data.soil_file = soil_file
        if faults_file := os.getenv("FAULTS_FILE"):
            self.data.faults_file = faults_file
        if quakes_file := os.getenv("QUAKES_FILE"):
            self.data.quakes_file = quakes_file
        if dem_file := os.getenv("DEM_FILE"):
            self.data.dem_file = dem_file

        # Query
        if radius := os.getenv("DEFAULT_RADIUS_KM"):
            self.query.default_radius_km = float(radius)
        if parallel := os.getenv("QUERY_PARALLEL"):
            self.query.parallel = parallel.lower() in ("true", "1", "yes")
        if workers := os.getenv("QUERY_MAX_WORKERS"):
            self.query.max_workers = int(workers)

        # Attributes
        if soil_class := os.getenv("SOIL_CLASS_ATTRIBUTE"):
            self.attributes.soil_class = soil_class
        if magnitude := os.getenv("MAGNITUDE_ATTRIBUTE"):
            self.attributes.magnitude = magnitude


# Global config instance
_config: Config | None = None


def get_config() -> Config:
    """Get or create the global configuration instance."""
    global _config
    if _config is None:
        config_dir = Path(__file__).parent.parent / "config"
        _config = Config.load(config_dir)
    return _config


def reload_config(config_dir: Path | None = None) -> Config:
    """Reload configuration (useful for testing)."""
    global _config
    _config = Config.load(config_dir)
    return _config
