# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Mesh Workflow Engine

Entry point: validates a workflow, runs its root agent through the mesh and
returns the finished execution record.
"""

from typing import Any, Dict, List, Optional, Union

from arbiter_mesh.core.config import MeshConfig, get_config
from arbiter_mesh.core.errors import sanitize_error_for_user

from .context import ExecutionContext
from .dispatcher import ToolCallDispatcher
from .exceptions import WorkflowValidationError
from .executor import MeshExecutor
from .logging import ExecutionLogger
from .manager import ExecutionManager
from .models import (
    AgentExecutionResult,
    AgentStatus,
    Execution,
    ExecutionStatus,
    TriggerEvent,
    WorkflowConfig,
)
from .runtime import AgentRuntime, HttpAgentRuntime
from .tools import AgentToolFactory, Tool
from .validation import validate_workflow


class WorkflowEngine:
    """
    Mesh workflow engine.

    Owns the execution registry, the executor and the tool factory. One
    instance is created by the composition root and shared by everything
    that starts, inspects or cancels executions.
    """

    def __init__(
        self,
        agent_runtime: Optional[AgentRuntime] = None,
        config: Optional[MeshConfig] = None,
        execution_logger: Optional[ExecutionLogger] = None
    ):
        self.config = config or get_config()
        self.execution_logger = execution_logger or ExecutionLogger()

        self.executions = ExecutionManager(self.execution_logger, self.config.execution_id_prefix)
        self.dispatcher = ToolCallDispatcher(self.execution_logger)
        self.executor = MeshExecutor(
            self.dispatcher,
            self.execution_logger,
            agent_runtime=agent_runtime,
            max_iterations=self.config.max_iterations
        )
        self.external_tools: Dict[str, Tool] = {}
        self.tool_factory = AgentToolFactory(
            self.executor,
            self.external_tools,
            max_depth=self.config.max_agent_depth
        )

    @classmethod
    def from_config(cls, config: Optional[MeshConfig] = None) -> "WorkflowEngine":
        """Engine with an HTTP agent runtime bound when one is configured"""
        config = config or get_config()
        runtime = None
        if config.agent_runtime_url:
            runtime = HttpAgentRuntime(config.agent_runtime_url, timeout=config.agent_runtime_timeout)
        return cls(agent_runtime=runtime, config=config)

    @property
    def agent_runtime(self) -> Optional[AgentRuntime]:
        return self.executor.agent_runtime

    def set_agent_runtime(self, agent_runtime: Optional[AgentRuntime]) -> None:
        """Bind a runtime; None falls back to the offline stub"""
        self.executor.agent_runtime = agent_runtime

    def register_tool(self, tool: Tool) -> None:
        """Make an external tool available to agents that list it in availableTools"""
        self.external_tools[tool.name] = tool

    async def aclose(self) -> None:
        """Close HTTP clients held by the bound runtime and registered tools"""
        closeables = [self.agent_runtime, *self.external_tools.values()]
        for resource in closeables:
            aclose = getattr(resource, "aclose", None)
            if aclose is not None:
                await aclose()

    async def execute_workflow(
        self,
        workflow: WorkflowConfig,
        event: Union[TriggerEvent, Dict[str, Any]]
    ) -> Execution:
        """
        Run a workflow for one triggering event.

        Blocks until the root agent reaches a terminal state, then returns
        the final execution record. Never raises for workflow problems:
        they end up as a failed execution.
        """
        if not isinstance(event, TriggerEvent):
            event = TriggerEvent.model_validate(event)

        context = self.executions.create(workflow, event)
        execution = context.execution

        try:
            execution.transition(ExecutionStatus.RUNNING)
            self.execution_logger.log(context, "info", "Starting workflow execution", data={
                "workflowId": workflow.id,
                "eventType": event.type,
            })

            validate_workflow(workflow)

            root_result = await self._execute_root_agent(context)

            if root_result.status == AgentStatus.COMPLETED:
                if execution.transition(ExecutionStatus.COMPLETED):
                    execution.result = root_result
                    self.execution_logger.log(context, "info", "Workflow completed successfully")
            elif execution.transition(ExecutionStatus.FAILED):
                execution.error = root_result.reasoning
                self.execution_logger.log(context, "error", "Workflow failed", data={
                    "error": root_result.reasoning,
                })

        except WorkflowValidationError as e:
            if execution.transition(ExecutionStatus.FAILED):
                execution.error = e.message
                self.execution_logger.log(context, "error", "Workflow validation failed", data=e.to_dict())

        except Exception as e:
            if execution.transition(ExecutionStatus.FAILED):
                execution.error = sanitize_error_for_user(e)
                self.execution_logger.log(context, "error", "Workflow execution failed", data={
                    "error": execution.error,
                })

        finally:
            self.executions.finalize(context)

        return execution

    async def _execute_root_agent(self, context: ExecutionContext) -> AgentExecutionResult:
        workflow = context.workflow
        root_agent = workflow.root_agent

        self.execution_logger.log(context, "info", "Executing root agent", agent_id=root_agent.id)

        available_tools = self.tool_factory.tools_for(root_agent, context, (root_agent.id,))

        return await self.executor.run(
            root_agent,
            available_tools,
            context.event_data,
            context,
            user_prompt=workflow.user_prompt
        )

    # Read/control surface for request handlers

    def get_active_executions(self) -> List[ExecutionContext]:
        return self.executions.get_active()

    def get_execution(self, execution_id: str) -> Optional[ExecutionContext]:
        return self.executions.get(execution_id)

    def cancel_execution(self, execution_id: str) -> bool:
        return self.executions.cancel(execution_id)
