# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Shared fixtures for mesh engine tests
"""

import logging

import pytest
from unittest.mock import AsyncMock

from arbiter_mesh.core.config import MeshConfig
from arbiter_mesh.mesh.engine import WorkflowEngine
from arbiter_mesh.mesh.logging import ExecutionLogger
from arbiter_mesh.mesh.models import TriggerEvent

from .factories import completed, make_workflow


@pytest.fixture
def config():
    return MeshConfig(max_iterations=10, max_agent_depth=8, log_format="text")


@pytest.fixture
def execution_logger():
    return ExecutionLogger(logging.getLogger("arbiter.mesh.tests"))


@pytest.fixture
def engine(config, execution_logger):
    """Engine without a bound runtime (stub answers every decision)"""
    return WorkflowEngine(config=config, execution_logger=execution_logger)


@pytest.fixture
def mock_agent_runtime():
    """Mock AgentRuntime"""
    runtime = AsyncMock()
    runtime.execute_agent = AsyncMock(return_value=completed())
    return runtime


@pytest.fixture
def event():
    return TriggerEvent(id="test-event", type="manual", source="test", data={"x": 1})


@pytest.fixture
def context(engine, event):
    """Registered execution context for a minimal workflow"""
    return engine.executions.create(make_workflow(), event)
