# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Mesh Execution Context

Tracks execution state for a workflow run.
"""

from typing import Dict, Any

from .models import (
    AgentExecutionResult,
    Execution,
    ExecutionStatus,
    WorkflowConfig,
    utc_now,
)


class ExecutionContext:
    """
    Execution context for a workflow run.

    Tracks:
    - The execution record
    - The originating workflow and event data
    - Free-form state shared by the agents of this run
    - The latest result of every agent that decided
    """

    def __init__(self, execution: Execution, workflow: WorkflowConfig, event_data: Any = None):
        self.execution = execution
        self.workflow = workflow
        self.event_data = event_data

        self.state: Dict[str, Any] = {}
        self.agent_responses: Dict[str, AgentExecutionResult] = {}  # agent_id -> latest result

    @property
    def execution_id(self) -> str:
        return self.execution.id

    @property
    def workflow_id(self) -> str:
        return self.workflow.id

    @property
    def is_cancelled(self) -> bool:
        """True once the execution was cancelled"""
        return self.execution.status is ExecutionStatus.CANCELLED

    def record_agent_response(self, agent_id: str, result: AgentExecutionResult) -> None:
        """Remember the latest decision of an agent"""
        self.agent_responses[agent_id] = result

    def finalize(self) -> None:
        """Stamp the end time unless cancellation already did"""
        if self.execution.end_time is None:
            self.execution.end_time = utc_now()
