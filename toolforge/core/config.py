"""
Configuration management system.

Supports:
- YAML configuration files
- .env files and environment variable overrides
- Sensible defaults
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml
from dotenv import find_dotenv, load_dotenv


@dataclass
class LLMConfig:
    """Completion API configuration."""
    model: str = "gpt-4o"
    base_url: str = "https://api.openai.com/v1"
    api_key: str = ""
    timeout: float = 600.0  # 0 disables the timeout


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str = "INFO"
    log_file: Optional[str] = None
    console: bool = True
    json_format: bool = False


@dataclass
class PluginsConfig:
    """Plugin directory and synthesis settings."""
    directory: str = "functions"
    allow_synthesis: bool = True
    validate_synthesis: bool = False


@dataclass
class ServerConfig:
    """HTTP server configuration."""
    host: str = "127.0.0.1"
    port: int = 3000
    public_dir: str = "public"


@dataclass
class Config:
    """Main configuration object."""
    llm: LLMConfig = field(default_factory=LLMConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    plugins: PluginsConfig = field(default_factory=PluginsConfig)
    server: ServerConfig = field(default_factory=ServerConfig)


def load_config(config_path: Optional[Path] = None) -> Config:
    """
    Load configuration from file with environment variable overrides.

    Args:
        config_path: Path to config.yaml file. If None, looks for config.yaml
                    in current directory, then ~/.config/toolforge/config.yaml

    Returns:
        Loaded configuration object
    """
    # Values from .env never override variables already set in the process
    load_dotenv(find_dotenv(usecwd=True))

    config_dict: dict[str, Any] = {}

    if config_path is None:
        if Path("config.yaml").exists():
            config_path = Path("config.yaml")
        elif Path.home().joinpath(".config", "toolforge", "config.yaml").exists():
            config_path = Path.home().joinpath(".config", "toolforge", "config.yaml")

    if config_path and config_path.exists():
        with open(config_path) as f:
            file_config = yaml.safe_load(f) or {}
            config_dict.update(file_config)

    env_overrides = {
        "llm": {
            "model": os.getenv("TOOLFORGE_MODEL"),
            "base_url": os.getenv("TOOLFORGE_BASE_URL"),
            "api_key": os.getenv("TOOLFORGE_API_KEY") or os.getenv("OPENAI_API_KEY"),
            "timeout": _parse_float(os.getenv("TOOLFORGE_TIMEOUT")),
        },
        "logging": {
            "level": os.getenv("TOOLFORGE_LOG_LEVEL"),
            "log_file": os.getenv("TOOLFORGE_LOG_FILE"),
            "console": _parse_bool(os.getenv("TOOLFORGE_LOG_CONSOLE")),
            "json_format": _parse_bool(os.getenv("TOOLFORGE_LOG_JSON")),
        },
        "plugins": {
            "directory": os.getenv("TOOLFORGE_PLUGINS_DIR"),
            "allow_synthesis": _parse_bool(os.getenv("TOOLFORGE_ALLOW_SYNTHESIS")),
            "validate_synthesis": _parse_bool(os.getenv("TOOLFORGE_VALIDATE_SYNTHESIS")),
        },
        "server": {
            "host": os.getenv("TOOLFORGE_HOST"),
            "port": _parse_int(os.getenv("TOOLFORGE_PORT")),
            "public_dir": os.getenv("TOOLFORGE_PUBLIC_DIR"),
        },
    }

    # Merge environment overrides (only if value is not None)
    for section, values in env_overrides.items():
        if not isinstance(config_dict.get(section), dict):
            config_dict[section] = {}
        for key, value in values.items():
            if value is not None:
                config_dict[section][key] = value

    return Config(
        llm=LLMConfig(**config_dict.get("llm", {})),
        logging=LoggingConfig(**config_dict.get("logging", {})),
        plugins=PluginsConfig(**config_dict.get("plugins", {})),
        server=ServerConfig(**config_dict.get("server", {})),
    )


def _parse_int(value: Optional[str]) -> Optional[int]:
    """Parse string to int, return None if invalid."""
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def _parse_float(value: Optional[str]) -> Optional[float]:
    """Parse string to float, return None if invalid."""
    if value is None:
        return None
    try:
        return float(value)
    except ValueError:
        return None


def _parse_bool(value: Optional[str]) -> Optional[bool]:
    """Parse string to bool, return None if invalid."""
    if value is None:
        return None
    return value.lower() in ("true", "1", "yes", "y")
