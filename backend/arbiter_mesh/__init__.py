# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Arbiter mesh execution engine.

Runs hierarchical agent workflows where every agent on level N+1 is a
callable tool for the agents on level N.
"""

from arbiter_mesh.mesh.engine import WorkflowEngine
from arbiter_mesh.mesh.models import (
    AgentConfig,
    Execution,
    ExecutionStatus,
    LevelConfig,
    TriggerEvent,
    WorkflowConfig,
)

__version__ = "1.0.0"

__all__ = [
    "WorkflowEngine",
    "AgentConfig",
    "Execution",
    "ExecutionStatus",
    "LevelConfig",
    "TriggerEvent",
    "WorkflowConfig",
]
