# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Mesh Executor

Per-agent decide/invoke loop.
"""

from typing import Any, Dict, List, Mapping, Optional

from arbiter_mesh.core.errors import sanitize_error_for_user

from .context import ExecutionContext
from .dispatcher import ToolCallDispatcher
from .logging import ExecutionLogger
from .models import AgentConfig, AgentExecutionResult, AgentStatus, ToolCallResult
from .runtime import AgentRuntime, StubAgentRuntime, coerce_result
from .tools import Tool


DEFAULT_MAX_ITERATIONS = 10


class MeshExecutor:
    """
    Drives one agent invocation until it reaches a terminal status.

    Each round asks the agent runtime for a decision. A ``working`` decision
    with tool calls dispatches them and feeds the results, together with the
    decision's reasoning, into the next round. ``completed`` and ``error``
    end the loop. Running out of rounds ends it with a synthetic error.
    """

    def __init__(
        self,
        dispatcher: ToolCallDispatcher,
        execution_logger: ExecutionLogger,
        agent_runtime: Optional[AgentRuntime] = None,
        max_iterations: int = DEFAULT_MAX_ITERATIONS
    ):
        self.dispatcher = dispatcher
        self.execution_logger = execution_logger
        self.agent_runtime = agent_runtime
        self.max_iterations = max_iterations
        self._stub_runtime = StubAgentRuntime()

    @property
    def runtime(self) -> AgentRuntime:
        """Bound runtime, or the offline stub when none is bound"""
        return self.agent_runtime or self._stub_runtime

    async def run(
        self,
        agent: AgentConfig,
        available_tools: Mapping[str, Tool],
        input: Any,
        context: ExecutionContext,
        user_prompt: Optional[str] = None
    ) -> AgentExecutionResult:
        """Run the decide/invoke loop for ``agent``; never raises"""
        self._mark_current(agent, context)

        iterations = 0
        while iterations < self.max_iterations:
            if context.is_cancelled:
                return self._cancelled(agent, context)

            iterations += 1
            self.execution_logger.log(
                context,
                "debug",
                f"Agent iteration {iterations}",
                agent_id=agent.id
            )

            try:
                result = coerce_result(await self.runtime.execute_agent(
                    agent.id,
                    input,
                    user_prompt,
                    {
                        "workflowId": context.workflow_id,
                        "executionId": context.execution_id,
                        "metadata": context.event_data,
                    }
                ))
                context.record_agent_response(agent.id, result)

                if result.status in (AgentStatus.COMPLETED, AgentStatus.ERROR):
                    return result

                if result.tool_calls:
                    if context.is_cancelled:
                        return self._cancelled(agent, context)

                    tool_results = await self.dispatcher.execute_tool_calls(
                        result.tool_calls,
                        available_tools,
                        context
                    )
                    input = self._next_input(input, tool_results, result.reasoning)
                    # Nested agent tools moved the pointer; this agent decides next
                    self._mark_current(agent, context)

            except Exception as e:
                error = sanitize_error_for_user(e)
                self.execution_logger.log(
                    context,
                    "error",
                    "Agent execution failed",
                    data={"error": error},
                    agent_id=agent.id
                )
                return AgentExecutionResult.failure(
                    "Agent execution failed",
                    "Workflow terminated due to error",
                    raw_response=error
                )

        self.execution_logger.log(
            context,
            "warn",
            "Agent reached maximum iterations",
            data={"iterations": iterations},
            agent_id=agent.id
        )
        return AgentExecutionResult.failure(
            "Maximum iterations reached",
            "Workflow terminated due to iteration limit",
            raw_response="Maximum iterations exceeded"
        )

    @staticmethod
    def _mark_current(agent: AgentConfig, context: ExecutionContext) -> None:
        context.execution.current_agent = agent.id
        context.execution.current_level = agent.level

    def _cancelled(self, agent: AgentConfig, context: ExecutionContext) -> AgentExecutionResult:
        self.execution_logger.log(context, "info", "Agent stopped: execution cancelled", agent_id=agent.id)
        return AgentExecutionResult.failure(
            "Execution cancelled",
            "Workflow terminated due to cancellation",
            raw_response="Execution cancelled"
        )

    @staticmethod
    def _next_input(input: Any, tool_results: List[ToolCallResult], reasoning: str) -> Dict[str, Any]:
        """Previous input plus this round's tool results and reasoning"""
        base = dict(input) if isinstance(input, Mapping) else {"input": input}
        base["tool_results"] = [result.model_dump() for result in tool_results]
        base["previous_reasoning"] = reasoning
        return base
