"""Configuration loading from YAML."""

import logging
from pathlib import Path
from typing import Optional

import yaml

from .i18n import LANGUAGES
from .models import AppConfig, DeviceConfig

logger = logging.getLogger(__name__)


def _positive(value, cast, name: str, default):
    """Cast a config value, falling back to the default if invalid or not positive."""
    if value is None:
        return default
    try:
        result = cast(value)
    except (TypeError, ValueError):
        logger.warning("Invalid %s value: %s", name, value)
        return default
    if result <= 0:
        logger.warning("%s must be positive, got %s", name, value)
        return default
    return result


def load_config(config_path: Optional[Path] = None) -> AppConfig:
    """Load configuration from a YAML file.

    A missing path gives the defaults; invalid entries are logged and
    replaced by their defaults.
    """
    if config_path is None or not config_path.exists():
        if config_path is not None:
            logger.info("No configuration file at %s, using defaults", config_path)
        return AppConfig()

    with open(config_path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if not isinstance(data, dict):
        data = {}

    defaults = DeviceConfig()
    d_data = data.get("device") or {}
    if not isinstance(d_data, dict):
        logger.warning("Invalid device configuration: %s", d_data)
        d_data = {}

    address = d_data.get("address")
    if address is None or not str(address).strip():
        address = defaults.address

    device = DeviceConfig(
        address=str(address).strip(),
        poll_interval=_positive(d_data.get("poll_interval"), float, "poll_interval", defaults.poll_interval),
        history_size=_positive(d_data.get("history_size"), int, "history_size", defaults.history_size),
        request_timeout=_positive(d_data.get("request_timeout"), float, "request_timeout", None),
    )
    logger.debug("Loaded device configuration: %s", device)

    language = data.get("language", "en")
    if language not in LANGUAGES:
        logger.warning("Unsupported language %r, using English", language)
        language = "en"

    download_dir = Path(str(data.get("download_dir") or ".")).expanduser()

    config = AppConfig(device=device, language=language, download_dir=download_dir)
    logger.info("Loaded configuration for device %s", device.address)
    return config
