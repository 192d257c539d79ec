# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Core utilities shared by the mesh engine.

This package contains:
- config: Configuration management
- errors: Custom exceptions
- logging: Structured logging
"""

from arbiter_mesh.core.config import get_config, MeshConfig
from arbiter_mesh.core.errors import ArbiterError, ConfigurationError
from arbiter_mesh.core.logging import get_logger

__all__ = [
    "get_config",
    "MeshConfig",
    "ArbiterError",
    "ConfigurationError",
    "get_logger",
]
