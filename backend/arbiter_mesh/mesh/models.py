# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Mesh Models

Pydantic models for workflow definitions, execution records and the
agent/tool exchange of the mesh engine.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


# ============================================================================
# Workflow Definition Models
# ============================================================================

class DefinitionModel(BaseModel):
    """Definitions accept both camelCase wire names and snake_case names"""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class AgentConfig(DefinitionModel):
    """Single agent of a workflow hierarchy"""
    id: Optional[str] = ""  # Blank or null ids are reported by validation
    name: Optional[str] = ""
    description: str = ""
    system_prompt: Optional[str] = ""
    model: str = ""
    available_tools: List[str] = []
    level: int = 0
    input_schema: Optional[Dict[str, Any]] = None
    output_schema: Optional[Dict[str, Any]] = None
    metadata: Dict[str, Any] = {}


class LevelConfig(DefinitionModel):
    """One rank of the agent hierarchy"""
    level: int
    agents: Optional[List[AgentConfig]] = None  # None is rejected by validation
    execution_mode: str = "parallel"


class WorkflowConfig(DefinitionModel):
    """Complete workflow definition"""
    id: str
    name: str = ""
    description: str = ""
    version: str = "1.0.0"
    root_agent: Optional[AgentConfig] = None  # Required, enforced by validation
    levels: List[LevelConfig] = []
    user_prompt: Optional[str] = None
    metadata: Dict[str, Any] = {}

    def agents_at_level(self, level: int) -> List[AgentConfig]:
        """Agents declared for the given level index"""
        for level_config in self.levels:
            if level_config.level == level:
                return list(level_config.agents or [])
        return []


class TriggerEvent(DefinitionModel):
    """Event that triggered a workflow run"""
    id: str
    type: str = "manual"  # "webhook", "cron", "manual", "file-watch", "api"
    source: str = ""
    timestamp: datetime = Field(default_factory=utc_now)
    data: Any = None


# ============================================================================
# Agent / Tool Exchange Models
# ============================================================================

class AgentStatus(str, Enum):
    """Status reported by one decide step"""
    WORKING = "working"
    COMPLETED = "completed"
    ERROR = "error"


class ToolCall(BaseModel):
    """Tool invocation requested by a deciding agent"""
    tool_name: Optional[str] = None
    parameters: Any = None
    purpose: Optional[str] = None
    sequence_order: Optional[int] = None  # Ordering for logs only


class AgentExecutionResult(BaseModel):
    """Outcome of one decide step"""
    reasoning: str = ""
    tool_calls: List[ToolCall] = []
    next_steps: str = ""
    status: AgentStatus
    raw_response: Optional[Any] = None

    @classmethod
    def failure(cls, reasoning: str, next_steps: str, raw_response: Any = None) -> "AgentExecutionResult":
        """Synthetic terminal error result"""
        return cls(
            reasoning=reasoning,
            tool_calls=[],
            next_steps=next_steps,
            status=AgentStatus.ERROR,
            raw_response=raw_response,
        )


class ToolResult(BaseModel):
    """What a tool returns from execute()"""
    success: bool
    data: Any = None
    error: Optional[str] = None
    metadata: Dict[str, Any] = {}


class ToolCallResult(BaseModel):
    """Normalized result of one dispatched tool call"""
    tool_name: Optional[str] = None
    success: bool
    data: Any = None
    error: Optional[str] = None
    metadata: Dict[str, Any] = {}


# ============================================================================
# Execution Models
# ============================================================================

class ExecutionStatus(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES


TERMINAL_STATUSES = frozenset({
    ExecutionStatus.COMPLETED,
    ExecutionStatus.FAILED,
    ExecutionStatus.CANCELLED,
})

_STATUS_RANK = {
    ExecutionStatus.PENDING: 0,
    ExecutionStatus.RUNNING: 1,
    ExecutionStatus.COMPLETED: 2,
    ExecutionStatus.FAILED: 2,
    ExecutionStatus.CANCELLED: 2,
}


class ExecutionLogEntry(BaseModel):
    """Single log entry during workflow execution"""
    timestamp: datetime = Field(default_factory=utc_now)
    level: str  # "debug", "info", "warn", "error"
    message: str
    agent_id: Optional[str] = None
    data: Any = None


class Execution(BaseModel):
    """One run of a workflow against one triggering event"""
    id: str
    workflow_id: str
    status: ExecutionStatus = ExecutionStatus.PENDING
    start_time: datetime = Field(default_factory=utc_now)
    end_time: Optional[datetime] = None
    event_data: Any = None
    current_level: int = 0
    current_agent: Optional[str] = None
    execution_log: List[ExecutionLogEntry] = []
    result: Optional[AgentExecutionResult] = None
    error: Optional[str] = None

    def transition(self, status: ExecutionStatus) -> bool:
        """
        Move to a new status.

        Statuses only move forward; once terminal the record never changes
        status again. Returns False when the move is refused.
        """
        if self.status.is_terminal:
            return False
        if _STATUS_RANK[status] <= _STATUS_RANK[self.status]:
            return False
        self.status = status
        return True
