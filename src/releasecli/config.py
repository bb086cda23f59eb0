"""Configuration file support for release-cli.

This module handles loading and parsing the .release-cli.yaml configuration
file. Every section is optional. Example:

    repository:
      trunk: master
      remote: origin
      tag_prefix: v
      branch_prefix: v

    divergence:
      max_steps: 10

    forge:
      timeout: 3
      label_color: "0e8a16"
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional
import logging
import yaml

from .errors import ConfigurationError
from .engine.divergence import DEFAULT_MAX_DIVERGENCE_STEPS

log = logging.getLogger(__name__)


DEFAULT_CONFIG_PATH = ".release-cli.yaml"


@dataclass
class RepositoryConfig:
    """Naming conventions of the repository.

    Attributes:
        trunk: Name of the trunk branch.
        remote: Remote whose URL identifies the hosted repository.
        tag_prefix: Prefix of version tags (``v`` in ``v1.12.0``).
        branch_prefix: Prefix of stabilization branches (``v`` in ``v1.12``).
    """

    trunk: str = "master"
    remote: str = "origin"
    tag_prefix: str = "v"
    branch_prefix: str = "v"

    @classmethod
    def from_dict(cls, data: dict) -> "RepositoryConfig":
        return cls(
            trunk=data.get("trunk", cls.trunk),
            remote=data.get("remote", cls.remote),
            tag_prefix=data.get("tag_prefix", cls.tag_prefix),
            branch_prefix=data.get("branch_prefix", cls.branch_prefix),
        )


@dataclass
class DivergenceConfig:
    """Configuration of the divergence point search.

    Attributes:
        max_steps: How many parents to step back before giving up.
    """

    max_steps: int = DEFAULT_MAX_DIVERGENCE_STEPS

    @classmethod
    def from_dict(cls, data: dict) -> "DivergenceConfig":
        max_steps = data.get("max_steps", cls.max_steps)
        if not isinstance(max_steps, int) or max_steps < 0:
            raise ConfigurationError(
                f"divergence.max_steps must be a non-negative integer, got {max_steps!r}"
            )
        return cls(max_steps=max_steps)


@dataclass
class ForgeConfig:
    """Configuration of the GitHub client.

    Attributes:
        timeout: Per-call timeout in seconds.
        label_color: Color of the version labels created by submit.
    """

    timeout: int = 3
    label_color: str = "0e8a16"

    @classmethod
    def from_dict(cls, data: dict) -> "ForgeConfig":
        return cls(
            timeout=data.get("timeout", cls.timeout),
            label_color=str(data.get("label_color", cls.label_color)),
        )


@dataclass
class ReleaseConfig:
    """Configuration settings for release-cli.

    Attributes:
        repository: Branch, tag and remote naming.
        divergence: Divergence search settings.
        forge: GitHub client settings.
    """

    repository: RepositoryConfig = field(default_factory=RepositoryConfig)
    divergence: DivergenceConfig = field(default_factory=DivergenceConfig)
    forge: ForgeConfig = field(default_factory=ForgeConfig)

    @classmethod
    def from_dict(cls, data: dict) -> "ReleaseConfig":
        """Create a ReleaseConfig from a dictionary. Unknown sections are ignored."""
        for section in ("repository", "divergence", "forge"):
            if not isinstance(data.get(section) or {}, dict):
                raise ConfigurationError(f"config section '{section}' must be a mapping")

        return cls(
            repository=RepositoryConfig.from_dict(data.get("repository") or {}),
            divergence=DivergenceConfig.from_dict(data.get("divergence") or {}),
            forge=ForgeConfig.from_dict(data.get("forge") or {}),
        )


def load_config(config_path: Optional[str] = None, base_dir: str = ".") -> ReleaseConfig:
    """Load configuration from a YAML file.

    If config_path is explicitly provided and the file doesn't exist, raises an error.
    If config_path is None and the default file doesn't exist in base_dir,
    returns the default config.

    Args:
        config_path: Path to the config file, or None to use the default path.
        base_dir: Directory holding the default config file (the repository root).

    Returns:
        ReleaseConfig instance with loaded or default values.

    Raises:
        ConfigurationError: If the explicit file is missing, is not valid YAML,
            or does not contain a mapping.
    """
    explicit_path = config_path is not None
    path = Path(config_path) if config_path else Path(base_dir) / DEFAULT_CONFIG_PATH

    if not path.exists():
        if explicit_path:
            raise ConfigurationError(f"Config file not found: {path}")
        return ReleaseConfig()

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in config file {path}: {e}")

    # Handle empty file or file with only comments
    if data is None:
        return ReleaseConfig()

    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Config file {path} must contain a YAML mapping (dictionary)"
        )

    log.debug(f"loaded config from {path}")
    return ReleaseConfig.from_dict(data)
