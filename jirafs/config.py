"""
Configuration management for jirafs.

Handles loading and saving user configuration from:
- XDG config directory: ~/.config/jirafs/config.json
- Fallback: ~/.jirafs/config.json

The JIRA_API_ROOT environment variable overrides the configured API root.
"""

import json
import logging
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

API_ROOT_ENV = "JIRA_API_ROOT"


@dataclass
class ServerConfig:
    """Jira server connection settings."""
    api_root: Optional[str] = None
    timeout: float = 30.0


@dataclass
class CLIConfig:
    """CLI default options."""
    verbose: bool = False
    color: bool = True


@dataclass
class JiraFSConfig:
    """Main jirafs configuration."""
    server: ServerConfig = field(default_factory=ServerConfig)
    cli: CLIConfig = field(default_factory=CLIConfig)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "server": asdict(self.server),
            "cli": asdict(self.cli),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'JiraFSConfig':
        """Create from dictionary."""
        return cls(
            server=ServerConfig(**data.get("server", {})),
            cli=CLIConfig(**data.get("cli", {})),
        )


def get_config_path() -> Path:
    """
    Get configuration file path.

    Follows XDG Base Directory specification:
    1. ~/.config/jirafs/config.json
    2. Fallback: ~/.jirafs/config.json

    Returns:
        Path to config file
    """
    xdg_config_home = Path.home() / ".config"
    if xdg_config_home.exists():
        config_dir = xdg_config_home / "jirafs"
    else:
        config_dir = Path.home() / ".jirafs"

    return config_dir / "config.json"


def load_config(apply_env: bool = True) -> JiraFSConfig:
    """
    Load configuration from file and environment.

    Returns:
        JiraFSConfig instance with loaded values or defaults
    """
    config_path = get_config_path()
    config = JiraFSConfig()

    if config_path.exists():
        try:
            with open(config_path, 'r') as f:
                config = JiraFSConfig.from_dict(json.load(f))
        except (json.JSONDecodeError, OSError, TypeError) as e:
            logger.warning(f"Failed to load config from {config_path}: {e}; using defaults")
            config = JiraFSConfig()

    env_root = os.environ.get(API_ROOT_ENV) if apply_env else None
    if env_root:
        config.server.api_root = env_root

    return config


def save_config(config: JiraFSConfig) -> Path:
    """
    Save configuration to file.

    Args:
        config: Configuration to save

    Returns:
        Path the configuration was written to
    """
    config_path = get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, 'w') as f:
        json.dump(config.to_dict(), f, indent=2)

    logger.info(f"Configuration saved to {config_path}")
    return config_path


def update_config(
    api_root: Optional[str] = None,
    timeout: Optional[float] = None,
    verbose: Optional[bool] = None,
    color: Optional[bool] = None,
) -> JiraFSConfig:
    """
    Update configuration.

    Only updates provided values, leaving others unchanged.
    """
    config = load_config(apply_env=False)

    if api_root is not None:
        config.server.api_root = api_root
    if timeout is not None:
        config.server.timeout = timeout
    if verbose is not None:
        config.cli.verbose = verbose
    if color is not None:
        config.cli.color = color

    save_config(config)
    return config
