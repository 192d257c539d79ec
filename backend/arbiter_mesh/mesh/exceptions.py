# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Mesh Exceptions

Custom exceptions for the mesh execution engine.
"""

from typing import Optional, Sequence

from arbiter_mesh.core.errors import ArbiterError


class WorkflowError(ArbiterError):
    """Workflow-level failure"""
    def __init__(self, message: str, workflow_id: Optional[str] = None, details: dict = None):
        super().__init__(message, code="WORKFLOW_ERROR", details=details)
        self.workflow_id = workflow_id

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["workflow_id"] = self.workflow_id
        return data


class WorkflowValidationError(WorkflowError):
    """Workflow validation failed"""
    def __init__(self, message: str, workflow_id: Optional[str] = None, field: str = None):
        super().__init__(message, workflow_id)
        self.code = "VALIDATION_ERROR"
        self.field = field


class AgentRuntimeError(ArbiterError):
    """Agent runtime could not produce a decision"""
    def __init__(self, message: str, agent_id: str, details: dict = None):
        super().__init__(message, code="AGENT_RUNTIME_ERROR", details=details)
        self.agent_id = agent_id


class AgentRecursionError(ArbiterError):
    """Nested agent tools revisited an agent or nested too deeply"""
    def __init__(self, message: str, agent_id: str, chain: Sequence[str] = ()):
        super().__init__(message, code="AGENT_RECURSION_ERROR", details={"chain": list(chain)})
        self.agent_id = agent_id
        self.chain = tuple(chain)


class ToolExecutionError(ArbiterError):
    """Externally bound tool failed"""
    def __init__(self, message: str, tool_name: str, details: dict = None):
        super().__init__(message, code="TOOL_EXECUTION_ERROR", details=details)
        self.tool_name = tool_name
