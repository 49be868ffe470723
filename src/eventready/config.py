"""Configuration management for eventready."""

import logging
import os
from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

logger = logging.getLogger(__name__)

EVENTREADY_HOME = Path(os.environ.get("EVENTREADY_HOME", Path.home() / "eventready"))
CONFIG_FILE = EVENTREADY_HOME / "config" / "eventready.conf"
DATA_DIR = EVENTREADY_HOME / "data"


@dataclass
class Config:
    """eventready configuration."""

    google_maps_api_key: str = ""
    timezone: str = "America/New_York"
    tenant_id: str = ""
    staff_directory_file: str = ""
    state_file: str = ""
    default_sort: str = "date_asc"
    default_date_range: str = "upcoming"
    task_date_range_days: int = 14
    request_timeout: int = 10

    def tz(self) -> ZoneInfo | None:
        """Tenant timezone, or None (system local) if unknown."""
        try:
            return ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError):
            logger.warning(f"Unknown timezone {self.timezone!r}, using system local time")
            return None

    def today(self) -> date:
        """Today's date in the tenant's timezone."""
        return datetime.now(self.tz()).date()

    def state_path(self) -> Path:
        if self.state_file:
            return Path(self.state_file).expanduser()
        return DATA_DIR / "state.json"


def _unquote(value: str) -> str:
    """Strip surrounding quotes, or an inline comment from unquoted values."""
    for quote in ('"', "'"):
        if value.startswith(quote):
            end_quote = value.find(quote, 1)
            return value[1:end_quote] if end_quote != -1 else value[1:]
    if "#" in value:
        value = value.split("#")[0].strip()
    return value


def _parse_int(key: str, value: str, default: int) -> int:
    try:
        return int(value)
    except ValueError:
        logger.warning(f"Invalid integer for {key.upper()}: {value!r}, using {default}")
        return default


def load_config(path: Path | None = None) -> Config:
    """Load configuration from eventready.conf, then apply environment overrides."""
    config = Config()
    path = path or CONFIG_FILE

    if path.exists():
        for line in path.read_text().splitlines():
            line = line.strip()
            if not line or line.startswith("#"):
                continue

            if "=" not in line:
                continue

            key, _, value = line.partition("=")
            key = key.strip().lower()
            value = _unquote(value.strip())

            match key:
                case "google_maps_api_key":
                    config.google_maps_api_key = value
                case "timezone":
                    config.timezone = value
                case "tenant_id":
                    config.tenant_id = value
                case "staff_directory_file":
                    config.staff_directory_file = value
                case "state_file":
                    config.state_file = value
                case "default_sort":
                    config.default_sort = value
                case "default_date_range":
                    config.default_date_range = value
                case "task_date_range_days":
                    config.task_date_range_days = _parse_int(key, value, config.task_date_range_days)
                case "request_timeout":
                    config.request_timeout = _parse_int(key, value, config.request_timeout)
                case _:
                    logger.debug(f"Ignoring unknown config key {key!r}")

    env_key = os.environ.get("GOOGLE_MAPS_API_KEY")
    if env_key:
        config.google_maps_api_key = env_key

    return config
