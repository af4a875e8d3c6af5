"""
Runtime Settings

Loads ingest settings from a YAML file. A missing or unreadable file leaves the
defaults in place.
"""

import logging
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import List, Optional, Union

import yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("config") / "ingest.yaml"


@dataclass
class IngestSettings:
    """Settings for batch ingest runs."""
    store_path: str = "output/inventory.json"
    output_dir: str = "output"
    max_workers: int = 4
    file_patterns: List[str] = field(default_factory=lambda: ["*.pdf", "*.txt"])
    save_parsed_json: bool = True
    log_level: str = "INFO"


def load_settings(path: Optional[Union[str, Path]] = None) -> IngestSettings:
    """
    Load settings from a YAML file.

    Args:
        path: Settings file; defaults to config/ingest.yaml

    Returns:
        IngestSettings, with defaults for anything not set in the file
    """
    settings = IngestSettings()
    config_path = Path(path) if path else DEFAULT_CONFIG_PATH

    if not config_path.exists():
        if path:
            logger.warning(f"Settings file not found: {config_path}. Using defaults.")
        return settings

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            config_data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.warning(f"Failed to load settings file {config_path}: {e}. Using defaults.")
        return settings

    if not isinstance(config_data, dict):
        logger.warning(f"Settings file {config_path} is not a mapping. Using defaults.")
        return settings

    known = {f.name for f in fields(IngestSettings)}
    for key, value in config_data.items():
        if key not in known:
            logger.warning(f"Ignoring unknown setting '{key}' in {config_path}")
            continue
        setattr(settings, key, value)

    if isinstance(settings.file_patterns, str):
        settings.file_patterns = [settings.file_patterns]

    try:
        settings.max_workers = max(1, int(settings.max_workers))
    except (TypeError, ValueError):
        logger.warning(f"Invalid max_workers '{settings.max_workers}'; using 4")
        settings.max_workers = 4

    logger.info(f"Loaded settings from {config_path}")
    return settings
