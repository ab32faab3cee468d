from __future__ import annotations
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from ssap.log import get_logger
from tvremote.errors import ConfigError

logger = get_logger(__name__)

DEFAULT_ADDR = "192.168.1.237:3000"
DEFAULT_KEY_FILE = "key"

_KNOWN_KEYS = {"addr", "key_file", "socks5_proxy", "log_level"}


def default_config_path() -> Path:
    return Path(os.getenv("TVREMOTE_CONFIG", Path.home() / ".config" / "tvremote" / "config.yaml"))


@dataclass
class Settings:
    addr: str = DEFAULT_ADDR
    key_file: Path = Path(DEFAULT_KEY_FILE)
    socks5_proxy: Optional[str] = None
    log_level: Optional[str] = None


def load_file(path: Path) -> Dict[str, Any]:
    """
    Read the optional YAML config:

        addr: 192.168.1.50:3000
        key_file: ~/.config/tvremote/key
        socks5_proxy: 127.0.0.1:1080
        log_level: DEBUG
    """
    if not path.exists():
        return {}
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Failed to read config {path}: {e}")

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config {path} must be a mapping")

    unknown = set(data) - _KNOWN_KEYS
    if unknown:
        logger.warning("Ignoring unknown config keys in %s: %s", path, ", ".join(sorted(unknown)))
    return {k: v for k, v in data.items() if k in _KNOWN_KEYS and v is not None}


def resolve_settings(
    *,
    addr: Optional[str] = None,
    key_file: Optional[Path] = None,
    socks5_proxy: Optional[str] = None,
    log_level: Optional[str] = None,
    config_path: Optional[Path] = None,
) -> Settings:
    """Command line beats environment, environment beats the config file."""
    file_values = load_file(config_path or default_config_path())

    def pick(explicit: Any, env_name: str, key: str, default: Any) -> Any:
        if explicit is not None:
            return explicit
        env_value = os.getenv(env_name)
        if env_value:
            return env_value
        if key in file_values:
            return file_values[key]
        return default

    proxy = pick(socks5_proxy, "TVREMOTE_SOCKS5_PROXY", "socks5_proxy", None)

    return Settings(
        addr=str(pick(addr, "TVREMOTE_ADDR", "addr", DEFAULT_ADDR)),
        key_file=Path(str(pick(key_file, "TVREMOTE_KEY_FILE", "key_file", DEFAULT_KEY_FILE))).expanduser(),
        socks5_proxy=str(proxy) if proxy else None,
        log_level=pick(log_level, "TVREMOTE_LOG_LEVEL", "log_level", None),
    )
