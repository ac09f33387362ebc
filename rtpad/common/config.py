"""Configuration file loading and management"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

SUPPORTED_BACKENDS = ("portal", "x11")


@dataclass
class PortalConfig:
    """RemoteDesktop portal backend settings"""
    bus: str = "SESSION"
    parent_window: str = ""
    session_handle_token: str = "rtpad"
    response_timeout: Optional[float] = None  # None waits for the portal forever


@dataclass
class X11Config:
    """X11 XTest backend settings"""
    display: Optional[str] = None
    scroll_step: float = 10.0


@dataclass
class KeysymsConfig:
    """Keysym table generator paths"""
    header: str = "/usr/include/X11/keysymdef.h"
    output: str = str(Path(__file__).resolve().parent.parent / "keysyms" / "generated.py")


@dataclass
class LoggingConfig:
    """Logging configuration settings"""
    level: str = "INFO"
    file: Optional[str] = None
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@dataclass
class Config:
    """Complete application configuration"""
    backends: List[str] = field(default_factory=lambda: list(SUPPORTED_BACKENDS))
    portal: PortalConfig = field(default_factory=PortalConfig)
    x11: X11Config = field(default_factory=X11Config)
    keysyms: KeysymsConfig = field(default_factory=KeysymsConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


class ConfigLoader:
    """Loads and parses configuration from YAML files"""

    DEFAULT_CONFIG_PATHS = [
        "config.yml",
        "~/.config/rtpad/config.yml",
        "/etc/rtpad/config.yml",
    ]

    @staticmethod
    def configFile_find() -> Optional[Path]:
        """
        Find configuration file in standard locations

        Returns:
            Path to config file, or None if not found
        """
        for config_path in ConfigLoader.DEFAULT_CONFIG_PATHS:
            path = Path(config_path).expanduser().resolve()
            if path.exists() and path.is_file():
                return path
        return None

    @staticmethod
    def yaml_load(file_path: Path) -> Dict[str, Any]:
        """
        Load YAML configuration file

        Args:
            file_path: Path to YAML file

        Returns:
            Parsed configuration dictionary

        Raises:
            FileNotFoundError: If file does not exist
            yaml.YAMLError: If file is not valid YAML
        """
        with open(file_path, "r") as f:
            data = yaml.safe_load(f)

        if not isinstance(data, dict):
            raise ValueError(f"Config file {file_path} must contain a YAML dictionary")

        return data

    @staticmethod
    def backends_parse(value: Any) -> List[str]:
        """
        Validate the backend order list

        Args:
            value: Raw `backends` value

        Returns:
            Lower-cased backend names in probe order

        Raises:
            ValueError: If the list is empty or names an unknown backend
        """
        if isinstance(value, str):
            value = [value]
        if not isinstance(value, list) or not value:
            raise ValueError("'backends' must be a non-empty list")
        backends = [str(name).lower() for name in value]
        for name in backends:
            if name not in SUPPORTED_BACKENDS:
                raise ValueError(
                    f"Unsupported backend '{name}'. Supported: {', '.join(SUPPORTED_BACKENDS)}."
                )
        return backends

    @staticmethod
    def config_parse(data: Dict[str, Any]) -> Config:
        """
        Parse configuration dictionary into Config object

        Every section is optional; missing keys keep their defaults.

        Args:
            data: Raw configuration dictionary

        Returns:
            Parsed Config object

        Raises:
            ValueError: If a value is invalid
        """
        config = Config()

        if "backends" in data:
            config.backends = ConfigLoader.backends_parse(data["backends"])

        portal_data = data.get("portal") or {}
        timeout = portal_data.get("response_timeout", config.portal.response_timeout)
        config.portal = PortalConfig(
            bus=portal_data.get("bus", config.portal.bus),
            parent_window=portal_data.get("parent_window", config.portal.parent_window),
            session_handle_token=portal_data.get(
                "session_handle_token", config.portal.session_handle_token
            ),
            response_timeout=float(timeout) if timeout is not None else None,
        )

        x11_data = data.get("x11") or {}
        scroll_step = float(x11_data.get("scroll_step", config.x11.scroll_step))
        if scroll_step <= 0:
            raise ValueError("'x11.scroll_step' must be positive")
        config.x11 = X11Config(
            display=x11_data.get("display", config.x11.display),
            scroll_step=scroll_step,
        )

        keysyms_data = data.get("keysyms") or {}
        config.keysyms = KeysymsConfig(
            header=keysyms_data.get("header", config.keysyms.header),
            output=keysyms_data.get("output", config.keysyms.output),
        )

        logging_data = data.get("logging") or {}
        config.logging = LoggingConfig(
            level=logging_data.get("level", config.logging.level),
            file=logging_data.get("file", config.logging.file),
            format=logging_data.get("format", config.logging.format),
        )

        return config

    @staticmethod
    def config_load(file_path: Optional[Path] = None) -> Config:
        """
        Load configuration from file

        Args:
            file_path: Optional path to config file. If None, searches standard
                locations and falls back to defaults when nothing is found.

        Returns:
            Parsed Config object

        Raises:
            FileNotFoundError: If an explicit config file does not exist
            ValueError: If config file is invalid
        """
        if file_path is None:
            file_path = ConfigLoader.configFile_find()
            if file_path is None:
                return Config()

        data = ConfigLoader.yaml_load(file_path)
        return ConfigLoader.config_parse(data)

    @staticmethod
    def configWithOverrides_load(
        file_path: Optional[Path] = None,
        **overrides: Any
    ) -> Config:
        """
        Load configuration and apply command-line overrides

        Args:
            file_path: Optional path to config file
            **overrides: Key-value pairs to override config values

        Returns:
            Config object with overrides applied

        Example:
            config = ConfigLoader.configWithOverrides_load(
                backend="x11",
                display=":1"
            )
        """
        config = ConfigLoader.config_load(file_path)

        if overrides.get("backend") is not None:
            config.backends = ConfigLoader.backends_parse(overrides["backend"])
        if overrides.get("display") is not None:
            config.x11.display = overrides["display"]
        if overrides.get("keysymdef") is not None:
            config.keysyms.header = overrides["keysymdef"]
        if overrides.get("output") is not None:
            config.keysyms.output = overrides["output"]
        if overrides.get("log_level") is not None:
            config.logging.level = overrides["log_level"]

        return config
