"""
Configuration settings for CampusCoffee
"""

from dataclasses import dataclass, field
from typing import Tuple
import os


@dataclass
class OsmApiConfig:
    """OpenStreetMap API endpoint and request settings"""
    # Node lookup endpoint; {id} is replaced with the OSM node id
    node_url_template: str = field(default_factory=lambda: os.environ.get(
        "CAMPUS_COFFEE_OSM_URL",
        "https://www.openstreetmap.org/api/0.6/node/{id}"
    ))

    # Request settings (seconds)
    connect_timeout_s: float = 5.0
    read_timeout_s: float = 10.0

    # OSM API usage policy requires an identifying user agent
    user_agent: str = field(default_factory=lambda: os.environ.get(
        "CAMPUS_COFFEE_USER_AGENT",
        "CampusCoffee/0.1 (student use); contact: campus-coffee@uni-heidelberg.de"
    ))


@dataclass
class ImportConfig:
    """Rules for turning an OSM node into a POS"""
    # Every key must resolve to a non-blank tag value
    required_tags: Tuple[str, ...] = ("name", "addr:street", "addr:housenumber")

    # Coordinates are informational unless this is enabled
    require_coordinates: bool = False


@dataclass
class AppConfig:
    """Application configuration"""
    osm: OsmApiConfig = field(default_factory=OsmApiConfig)
    imports: ImportConfig = field(default_factory=ImportConfig)


# Global config instance
config = AppConfig()


def get_config() -> AppConfig:
    """Get global configuration"""
    return config


def validate_config(config: AppConfig) -> None:
    """
    Validate that all required configuration values are set.
    Raises ValueError if any required value is missing or invalid.
    """
    errors = []

    if config.osm is None:
        errors.append("osm configuration is required but not set")
    else:
        if not config.osm.node_url_template:
            errors.append("osm.node_url_template is required but not set")
        elif "{id}" not in config.osm.node_url_template:
            errors.append(f"osm.node_url_template must contain '{{id}}', got {config.osm.node_url_template}")
        if config.osm.connect_timeout_s is None or config.osm.connect_timeout_s <= 0:
            errors.append(f"osm.connect_timeout_s must be positive, got {config.osm.connect_timeout_s}")
        if config.osm.read_timeout_s is None or config.osm.read_timeout_s <= 0:
            errors.append(f"osm.read_timeout_s must be positive, got {config.osm.read_timeout_s}")
        if not config.osm.user_agent or not config.osm.user_agent.strip():
            errors.append("osm.user_agent is required but not set")

    if config.imports is None:
        errors.append("imports configuration is required but not set")
    else:
        if not config.imports.required_tags:
            errors.append("imports.required_tags must name at least one tag")
        elif any(not key or not key.strip() for key in config.imports.required_tags):
            errors.append("imports.required_tags must not contain blank keys")

    if errors:
        error_msg = "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
        raise ValueError(error_msg)
