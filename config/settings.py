"""
Site Settings

Resolves the server configuration from, lowest precedence first: built-in
defaults, an optional YAML/JSON config file, and environment variables
(with ``.env`` / ``.env.local`` loaded when present).
"""

import os
import logging
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from dotenv import load_dotenv

from config.config_loader import load_config_file

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parent.parent

DEFAULT_PORT = 5000
DEFAULT_MAX_PAYLOAD_SIZE = 1024 * 100  # 100 KB
CONFIG_BASE_NAME = "portfolio"
CONFIG_EXTENSIONS = (".yaml", ".yml", ".json")
PATH_SETTINGS = ("public_dir", "data_dir", "contacts_file")

# setting name -> environment variable
ENV_VARS = {
    "host": "HOST",
    "port": "PORT",
    "allowed_origin": "ALLOWED_ORIGIN",
    "public_dir": "PUBLIC_DIR",
    "data_dir": "DATA_DIR",
    "contacts_file": "CONTACTS_FILE",
    "max_payload_size": "MAX_PAYLOAD_SIZE",
    "log_level": "LOG_LEVEL",
    "log_format": "LOG_FORMAT",
}


@dataclass(frozen=True)
class Settings:
    """Immutable server configuration."""
    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT
    allowed_origin: str = "*"
    public_dir: Path = PROJECT_ROOT / "public"
    data_dir: Path = PROJECT_ROOT / "data"
    contacts_file: Optional[Path] = None
    max_payload_size: int = DEFAULT_MAX_PAYLOAD_SIZE
    log_level: str = "INFO"
    log_format: str = "console"

    def __post_init__(self):
        # frozen dataclass: normalise through object.__setattr__
        object.__setattr__(self, "public_dir", Path(self.public_dir).resolve())
        object.__setattr__(self, "data_dir", Path(self.data_dir).resolve())
        contacts = self.contacts_file
        if contacts is None:
            contacts = self.data_dir / "contacts.json"
        object.__setattr__(self, "contacts_file", Path(contacts).resolve())

    def with_overrides(self, **overrides: Any) -> "Settings":
        """Return a copy with the given fields replaced; ``None`` values are skipped."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


def _parse_positive_int(value: Any, default: int, name: str) -> int:
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        logger.warning(f"Ignoring invalid {name}={value!r}, using {default}")
        return default
    if parsed <= 0:
        logger.warning(f"Ignoring non-positive {name}={value!r}, using {default}")
        return default
    return parsed


def _coerce(raw: Dict[str, Any], base_dir: Optional[Path] = None) -> Dict[str, Any]:
    """
    Convert raw string/config values into Settings field types.

    Relative paths are joined onto ``base_dir`` when given, otherwise they
    resolve against the working directory.
    """
    values: Dict[str, Any] = {}
    for key, value in raw.items():
        if key not in ENV_VARS or value is None or value == "":
            continue
        if key == "port":
            values[key] = _parse_positive_int(value, DEFAULT_PORT, "port")
        elif key == "max_payload_size":
            values[key] = _parse_positive_int(
                value, DEFAULT_MAX_PAYLOAD_SIZE, "max_payload_size"
            )
        elif key in PATH_SETTINGS:
            path = Path(str(value)).expanduser()
            if base_dir is not None and not path.is_absolute():
                path = base_dir / path
            values[key] = path
        elif key == "log_level":
            values[key] = str(value).upper()
        elif key == "log_format":
            values[key] = str(value).lower()
        else:
            values[key] = str(value)
    return values


def find_project_config(project_root: Optional[Path] = None) -> Optional[Path]:
    """Return the first ``portfolio.{yaml,yml,json}`` under ``config/`` or the project root."""
    if project_root is None:
        project_root = PROJECT_ROOT
    for directory in (project_root / "config", project_root):
        for ext in CONFIG_EXTENSIONS:
            candidate = directory / f"{CONFIG_BASE_NAME}{ext}"
            if candidate.is_file():
                logger.info(f"Found configuration file: {candidate}")
                return candidate
    return None


def _load_file_values(environ: Mapping[str, str]) -> Dict[str, Any]:
    config_path = environ.get("PORTFOLIO_CONFIG") or find_project_config()
    if not config_path:
        return {}

    data = load_config_file(str(config_path))
    unknown = sorted(set(data) - set(ENV_VARS))
    if unknown:
        logger.warning(f"Ignoring unknown settings in {config_path}: {', '.join(unknown)}")
    return data


def load_dotenv_files(project_root: Optional[Path] = None) -> Optional[Path]:
    """Load ``.env.local`` or ``.env`` from the project root without overriding."""
    if project_root is None:
        project_root = PROJECT_ROOT
    for path in (project_root / ".env.local", project_root / ".env"):
        if path.exists():
            load_dotenv(path, override=False)
            logger.info(f"Loaded environment from {path}")
            return path
    return None


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build Settings from defaults, config file and environment.

    Args:
        environ: Environment mapping. Defaults to ``os.environ`` after loading
                 any ``.env`` file found in the project root.

    Returns:
        Settings instance
    """
    if environ is None:
        load_dotenv_files()
        environ = os.environ

    merged: Dict[str, Any] = {}
    # paths in the config file are relative to the project, not the launch directory
    merged.update(_coerce(_load_file_values(environ), base_dir=PROJECT_ROOT))
    merged.update(_coerce({
        key: environ.get(env_name) for key, env_name in ENV_VARS.items()
    }))

    return Settings(**merged)
