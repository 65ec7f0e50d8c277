"""Configuration loader with Hydra and Pydantic validation."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Optional

from hydra import compose, initialize_config_dir
from hydra.core.global_hydra import GlobalHydra
from omegaconf import DictConfig, OmegaConf
from pydantic import ValidationError

from clusterstudy.config.models import Config
from clusterstudy.config.utils import (
    compute_config_hash,
    save_config_with_hash,
    validate_config_reproducibility,
)

logger = logging.getLogger(__name__)

# Packaged defaults (src/clusterstudy/conf)
DEFAULT_CONFIG_DIR = Path(__file__).resolve().parent.parent / "conf"


class ConfigLoader:
    """Configuration loader with validation and hashing."""

    def __init__(
        self,
        config_dir: str | Path = DEFAULT_CONFIG_DIR,
        config_name: str = "base",
    ) -> None:
        """Initialize config loader.

        Args:
            config_dir: Path to configuration directory
            config_name: Name of base config file
        """
        self.config_dir = Path(config_dir).resolve()
        self.config_name = config_name
        self._config: Optional[Config] = None
        self._raw_config: Optional[DictConfig] = None

    def load(
        self,
        overrides: list[str] | None = None,
        compute_hash: bool = True,
    ) -> Config:
        """Load configuration with overrides.

        Args:
            overrides: List of config overrides (Hydra format, e.g. "kmeans.k=3")
            compute_hash: Whether to record the config hash

        Returns:
            Validated configuration

        Raises:
            ValidationError: If config validation fails
        """
        GlobalHydra.instance().clear()

        with initialize_config_dir(
            config_dir=str(self.config_dir),
            version_base="1.3",
        ):
            self._raw_config = compose(
                config_name=self.config_name,
                overrides=overrides or [],
            )

        config_dict = OmegaConf.to_container(
            self._raw_config,
            resolve=True,
            throw_on_missing=True,
        )
        self._config = _build_config(config_dict, compute_hash=compute_hash)
        return self._config

    def save(self, output_dir: str | Path) -> Path:
        """Save configuration to directory with its hash in the filename.

        Args:
            output_dir: Directory to save configuration

        Returns:
            Path to saved configuration file
        """
        if self._config is None:
            raise ValueError("No configuration loaded")

        config_file = save_config_with_hash(self._config.model_dump(mode="json"), output_dir)
        logger.info(f"Configuration saved to: {config_file}")
        return Path(config_file)

    @property
    def config(self) -> Config:
        """Get loaded configuration."""
        if self._config is None:
            raise ValueError("No configuration loaded")
        return self._config

    @property
    def raw_config(self) -> DictConfig:
        """Get raw Hydra configuration."""
        if self._raw_config is None:
            raise ValueError("No configuration loaded")
        return self._raw_config

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return self.config.model_dump(mode="json")


def _build_config(config_dict: Dict[str, Any], compute_hash: bool = True) -> Config:
    if compute_hash:
        config_hash = compute_config_hash(config_dict)
        config_dict.setdefault('experiment', {})['config_hash'] = config_hash
        logger.info(f"Config hash: {config_hash}")

    try:
        config = Config(**config_dict)
        logger.info("Configuration validation successful")
    except ValidationError as e:
        logger.error(f"Configuration validation failed:\n{e}")
        raise

    is_reproducible, issues = validate_config_reproducibility(config_dict)
    if not is_reproducible:
        logger.warning("Configuration may not be reproducible:")
        for issue in issues:
            logger.warning(f"  - {issue}")

    return config


def load_config(
    config_path: str | Path | None = None,
    config_dir: str | Path = DEFAULT_CONFIG_DIR,
    config_name: str = "base",
    overrides: list[str] | None = None,
) -> Config:
    """Load configuration from file or directory.

    Args:
        config_path: Path to specific YAML file (overrides dir/name)
        config_dir: Configuration directory (if config_path not provided)
        config_name: Base config name (if config_path not provided)
        overrides: List of dotlist overrides

    Returns:
        Validated configuration
    """
    if config_path is not None:
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        raw_config = OmegaConf.load(config_path)
        if overrides:
            raw_config = OmegaConf.merge(raw_config, OmegaConf.from_dotlist(overrides))

        config_dict = OmegaConf.to_container(raw_config, resolve=True)
        return _build_config(config_dict)

    return ConfigLoader(config_dir, config_name).load(overrides)
