# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Mesh engine configuration - single source of truth.
YAML is king. Env vars ONLY for deployment specific values.
"""

import os
import yaml
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from arbiter_mesh.core.errors import ConfigurationError


DEFAULT_CONFIG_PATH = "configs/mesh.yaml"

LOG_FORMATS = ("json", "text")

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


# =============================================================================
# CONFIGURATION DATACLASS
# =============================================================================

@dataclass(frozen=True)
class MeshConfig:
    """
    Immutable engine configuration.
    All values from YAML. No hidden state.
    """

    # -- Mesh execution --
    max_iterations: int = 10
    max_agent_depth: int = 8
    execution_id_prefix: str = "exec"

    # -- Agent runtime --
    agent_runtime_url: Optional[str] = None
    agent_runtime_timeout: Optional[float] = None  # None: wait indefinitely

    # -- Logging --
    log_level: str = "INFO"
    log_format: str = "json"

    def __post_init__(self):
        if self.max_iterations < 1:
            raise ConfigurationError(
                f"max_iterations must be at least 1, got {self.max_iterations}"
            )
        if self.max_agent_depth < 1:
            raise ConfigurationError(
                f"max_agent_depth must be at least 1, got {self.max_agent_depth}"
            )
        if not self.execution_id_prefix:
            raise ConfigurationError("execution_id_prefix cannot be empty")
        if str(self.log_level).upper() not in LOG_LEVELS:
            raise ConfigurationError(
                f"log_level must be one of {LOG_LEVELS}, got '{self.log_level}'"
            )
        if self.log_format not in LOG_FORMATS:
            raise ConfigurationError(
                f"log_format must be one of {LOG_FORMATS}, got '{self.log_format}'"
            )


# =============================================================================
# LOADER
# =============================================================================

def load_config(path: str = DEFAULT_CONFIG_PATH) -> MeshConfig:
    """
    Load configuration from YAML.
    Returns defaults if file doesn't exist.
    """
    if not Path(path).exists():
        return MeshConfig()

    try:
        with open(path) as f:
            y = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path}: {e}", config_file=path)

    # Helper to safely navigate nested dicts
    def get(d: dict, *keys, default=None):
        for k in keys:
            if not isinstance(d, dict):
                return default
            d = d.get(k, {})
        return d if d != {} else default

    try:
        return MeshConfig(
            # Mesh execution
            max_iterations=int(get(y, "mesh", "max_iterations", default=10)),
            max_agent_depth=int(get(y, "mesh", "max_agent_depth", default=8)),
            execution_id_prefix=get(y, "mesh", "execution_id_prefix") or "exec",

            # Agent runtime
            agent_runtime_url=os.getenv("AGENT_RUNTIME_URL") or get(y, "agent_runtime", "url"),
            agent_runtime_timeout=get(y, "agent_runtime", "timeout"),

            # Logging
            log_level=os.getenv("LOG_LEVEL") or get(y, "logging", "level") or "INFO",
            log_format=get(y, "logging", "format") or "json",
        )
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid configuration value in {path}: {e}", config_file=path)


# =============================================================================
# GLOBAL INSTANCE
# =============================================================================

_config: Optional[MeshConfig] = None


def get_config() -> MeshConfig:
    """Get or create global config instance."""
    global _config
    if _config is None:
        config_path = os.getenv("ARBITER_MESH_CONFIG", DEFAULT_CONFIG_PATH)
        _config = load_config(config_path)
    return _config


def reload_config() -> MeshConfig:
    """Force reload configuration."""
    global _config
    _config = None
    return get_config()
