"""
Configuration management for cratedui.

YAML configuration file at ~/.config/cratedui/config.yaml, merged over
dataclass defaults. The file is written with the defaults on first start.

Sections:
- keybindings: keys for the main actions
- ui: colour theme, refresh intervals, initial running-only filter
- docker: daemon URL and API timeout
- logging: level, file path and rotation

Missing or invalid files fall back to defaults with an error log.
"""

import yaml
import logging
from dataclasses import asdict, dataclass, field, fields, is_dataclass
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


@dataclass
class KeyBindings:
    quit: str = "q"
    filter: str = "/"
    toggle_running: str = "o"
    stats: str = "t"
    start: str = "s"
    stop: str = "x"
    remove: str = "d"
    actions: str = "enter"


@dataclass
class ColorTheme:
    """Rich styles for the symbolic tints used by the views."""
    name: str = "default"
    active: str = "green"
    muted: str = "grey50"
    actionable: str = "blue"
    warning: str = "dark_orange"
    accent: str = "cyan"

    TINTS = ("active", "muted", "actionable", "warning", "accent")

    def style_for(self, tint: str) -> str:
        return getattr(self, tint) if tint in self.TINTS else ""


@dataclass
class UIConfig:
    color_theme: ColorTheme = field(default_factory=ColorTheme)
    stats_refresh_interval: float = 5.0  # seconds
    list_refresh_interval: float = 2.0  # seconds
    show_only_running: bool = False
    show_disk_usage: bool = True


@dataclass
class DockerConfig:
    base_url: Optional[str] = None  # None: DOCKER_HOST / default socket
    timeout: int = 60


@dataclass
class LogConfig:
    level: str = "INFO"
    file_path: Optional[str] = None  # None for default
    max_size_mb: int = 10
    backup_count: int = 5


@dataclass
class AppConfig:
    keybindings: KeyBindings = field(default_factory=KeyBindings)
    ui: UIConfig = field(default_factory=UIConfig)
    docker: DockerConfig = field(default_factory=DockerConfig)
    logging: LogConfig = field(default_factory=LogConfig)


class ConfigManager:
    """Configuration manager with YAML file support."""

    def __init__(self, config_dir: Optional[Path] = None):
        self.config_dir = config_dir or Path.home() / ".config" / "cratedui"
        self.config_file = self.config_dir / "config.yaml"
        self._config: AppConfig = AppConfig()
        self.load_config()

    def load_config(self) -> None:
        try:
            if self.config_file.exists():
                with open(self.config_file, 'r') as f:
                    user_config = yaml.safe_load(f) or {}
                if not isinstance(user_config, dict):
                    raise ValueError("top level must be a mapping")
                self._config = AppConfig()
                self._merge_dataclass(self._config, user_config)
                logger.debug(f"Loaded configuration from {self.config_file}")
            else:
                self.save_config()
                logger.info(f"Created default configuration at {self.config_file}")
        except Exception as e:
            logger.error(f"Failed to load config: {e}, using defaults")
            self._config = AppConfig()

    def save_config(self) -> None:
        try:
            self.config_dir.mkdir(parents=True, exist_ok=True)
            with open(self.config_file, 'w') as f:
                yaml.dump(asdict(self._config), f, default_flow_style=False, indent=2)
            logger.debug(f"Saved configuration to {self.config_file}")
        except Exception as e:
            logger.error(f"Failed to save config: {e}")

    def get_config(self) -> AppConfig:
        return self._config

    def _merge_dataclass(self, obj: Any, updates: Dict[str, Any]) -> None:
        """Merge updates into a (nested) dataclass; unknown keys are ignored."""
        known = {f.name for f in fields(obj)}
        for key, value in updates.items():
            if key not in known:
                logger.warning(f"Unknown config key: {key}")
                continue
            current = getattr(obj, key)
            if is_dataclass(current) and isinstance(value, dict):
                self._merge_dataclass(current, value)
            else:
                setattr(obj, key, value)

    def get_key_binding(self, action: str) -> str:
        return getattr(self._config.keybindings, action, '')

    def is_key_binding(self, key: str, action: str) -> bool:
        binding = self.get_key_binding(action)
        return bool(binding) and key == binding

    def get_log_level(self) -> str:
        return str(self._config.logging.level).upper()

    def get_custom_log_path(self) -> Optional[str]:
        return self._config.logging.file_path

    def get_stats_refresh_interval(self) -> float:
        return float(self._config.ui.stats_refresh_interval)

    def get_list_refresh_interval(self) -> float:
        return float(self._config.ui.list_refresh_interval)


_config_manager: Optional[ConfigManager] = None


def get_config_manager() -> ConfigManager:
    """Process-wide ConfigManager, created on first use."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager
