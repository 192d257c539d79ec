# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Unit tests for the mesh executor decide/invoke loop
"""

import pytest
from unittest.mock import AsyncMock

from arbiter_mesh.mesh.dispatcher import ToolCallDispatcher
from arbiter_mesh.mesh.executor import MeshExecutor
from arbiter_mesh.mesh.models import AgentStatus, ExecutionStatus, ToolResult
from arbiter_mesh.mesh.tools import FunctionTool

from .factories import completed, failed, make_agent, working


@pytest.fixture
def executor(execution_logger, mock_agent_runtime):
    """Create executor with mocks"""
    return MeshExecutor(
        ToolCallDispatcher(execution_logger),
        execution_logger,
        agent_runtime=mock_agent_runtime,
        max_iterations=10
    )


@pytest.fixture
def agent():
    return make_agent("R")


@pytest.mark.asyncio
async def test_completes_on_first_decision(executor, mock_agent_runtime, agent, context):
    result = await executor.run(agent, {}, {"x": 1}, context, user_prompt="Go")

    assert result.status == AgentStatus.COMPLETED
    mock_agent_runtime.execute_agent.assert_awaited_once()
    args = mock_agent_runtime.execute_agent.await_args.args
    assert args[0] == "R"
    assert args[1] == {"x": 1}
    assert args[2] == "Go"
    assert args[3]["executionId"] == context.execution_id
    assert args[3]["workflowId"] == context.workflow_id
    assert args[3]["metadata"] == {"x": 1}
    assert context.agent_responses["R"] is result


@pytest.mark.asyncio
async def test_agent_reported_error_is_terminal(executor, mock_agent_runtime, agent, context):
    mock_agent_runtime.execute_agent.return_value = failed("Could not parse input")

    result = await executor.run(agent, {}, {}, context)

    assert result.status == AgentStatus.ERROR
    assert result.reasoning == "Could not parse input"
    assert mock_agent_runtime.execute_agent.await_count == 1


@pytest.mark.asyncio
async def test_tool_results_feed_next_round(executor, mock_agent_runtime, agent, context):
    lookup = FunctionTool("lookup", lambda params: {"found": params["q"]})
    mock_agent_runtime.execute_agent.side_effect = [
        working("lookup", reasoning="Look it up"),
        completed("All done"),
    ]

    result = await executor.run(agent, {"lookup": lookup}, {"x": 1}, context)

    assert result.reasoning == "All done"
    second_input = mock_agent_runtime.execute_agent.await_args_list[1].args[1]
    assert second_input["x"] == 1
    assert second_input["previous_reasoning"] == "Look it up"
    assert second_input["tool_results"][0]["tool_name"] == "lookup"
    assert second_input["tool_results"][0]["success"] is True
    assert second_input["tool_results"][0]["data"] == {"found": "lookup"}


@pytest.mark.asyncio
async def test_non_mapping_input_is_wrapped(executor, mock_agent_runtime, agent, context):
    mock_agent_runtime.execute_agent.side_effect = [working("missing"), completed()]

    await executor.run(agent, {}, "plain text", context)

    second_input = mock_agent_runtime.execute_agent.await_args_list[1].args[1]
    assert second_input["input"] == "plain text"
    assert second_input["tool_results"][0]["success"] is False


@pytest.mark.asyncio
async def test_iteration_ceiling(executor, mock_agent_runtime, agent, context):
    """Always-working agent stops after exactly max_iterations rounds"""
    mock_agent_runtime.execute_agent.return_value = working("missing")

    result = await executor.run(agent, {}, {}, context)

    assert result.status == AgentStatus.ERROR
    assert result.reasoning == "Maximum iterations reached"
    assert mock_agent_runtime.execute_agent.await_count == 10
    assert any(e.message == "Agent reached maximum iterations" for e in context.execution.execution_log)


@pytest.mark.asyncio
async def test_custom_iteration_ceiling(execution_logger, mock_agent_runtime, agent, context):
    executor = MeshExecutor(
        ToolCallDispatcher(execution_logger),
        execution_logger,
        agent_runtime=mock_agent_runtime,
        max_iterations=3
    )
    mock_agent_runtime.execute_agent.return_value = working("missing")

    result = await executor.run(agent, {}, {}, context)

    assert result.reasoning == "Maximum iterations reached"
    assert mock_agent_runtime.execute_agent.await_count == 3


@pytest.mark.asyncio
async def test_completion_on_last_round_is_honoured(executor, mock_agent_runtime, agent, context):
    mock_agent_runtime.execute_agent.side_effect = [working("missing")] * 9 + [completed("Just in time")]

    result = await executor.run(agent, {}, {}, context)

    assert result.status == AgentStatus.COMPLETED
    assert result.reasoning == "Just in time"


@pytest.mark.asyncio
async def test_working_without_tools_decides_again(executor, mock_agent_runtime, agent, context):
    mock_agent_runtime.execute_agent.side_effect = [working(), completed()]

    result = await executor.run(agent, {}, {"x": 1}, context)

    assert result.status == AgentStatus.COMPLETED
    second_input = mock_agent_runtime.execute_agent.await_args_list[1].args[1]
    assert second_input == {"x": 1}


@pytest.mark.asyncio
async def test_runtime_exception_becomes_error_result(executor, mock_agent_runtime, agent, context):
    mock_agent_runtime.execute_agent.side_effect = ConnectionError("runtime down")

    result = await executor.run(agent, {}, {}, context)

    assert result.status == AgentStatus.ERROR
    assert result.reasoning == "Agent execution failed"
    assert result.raw_response == "runtime down"
    assert result.tool_calls == []


@pytest.mark.asyncio
async def test_malformed_runtime_payload_becomes_error_result(executor, mock_agent_runtime, agent, context):
    mock_agent_runtime.execute_agent.return_value = {"reasoning": "?", "status": "need_info"}

    result = await executor.run(agent, {}, {}, context)

    assert result.status == AgentStatus.ERROR
    assert result.reasoning == "Agent execution failed"


@pytest.mark.asyncio
async def test_mapping_results_are_accepted(executor, mock_agent_runtime, agent, context):
    mock_agent_runtime.execute_agent.return_value = {"reasoning": "ok", "status": "completed"}

    result = await executor.run(agent, {}, {}, context)

    assert result.status == AgentStatus.COMPLETED


@pytest.mark.asyncio
async def test_stub_used_when_no_runtime_bound(execution_logger, agent, context):
    executor = MeshExecutor(ToolCallDispatcher(execution_logger), execution_logger)

    result = await executor.run(agent, {}, {}, context)

    assert result.status == AgentStatus.COMPLETED
    assert "Agent R processed the input" in result.reasoning


@pytest.mark.asyncio
async def test_cancelled_execution_stops_before_dispatch(executor, mock_agent_runtime, agent, context, engine):
    tool = AsyncMock(return_value=ToolResult(success=True))

    async def decide(*args):
        engine.cancel_execution(context.execution_id)
        return working("slow")

    mock_agent_runtime.execute_agent.side_effect = decide

    result = await executor.run(agent, {"slow": FunctionTool("slow", tool)}, {}, context)

    assert result.reasoning == "Execution cancelled"
    assert context.execution.status == ExecutionStatus.CANCELLED
    tool.assert_not_awaited()
    assert mock_agent_runtime.execute_agent.await_count == 1


@pytest.mark.asyncio
async def test_cancelled_execution_does_not_decide(executor, mock_agent_runtime, agent, context, engine):
    engine.cancel_execution(context.execution_id)

    result = await executor.run(agent, {}, {}, context)

    assert result.reasoning == "Execution cancelled"
    mock_agent_runtime.execute_agent.assert_not_awaited()


@pytest.mark.asyncio
async def test_tracks_current_agent(executor, context):
    await executor.run(make_agent("A", level=1), {}, {}, context)

    assert context.execution.current_agent == "A"
    assert context.execution.current_level == 1


@pytest.mark.asyncio
async def test_deciding_agent_is_current_again_after_tool_round(executor, mock_agent_runtime, context):
    def nested_agent(params):
        context.execution.current_agent = "A"
        context.execution.current_level = 1
        return "nested done"

    mock_agent_runtime.execute_agent.side_effect = [working("sub"), completed()]

    await executor.run(make_agent("R"), {"sub": FunctionTool("sub", nested_agent)}, {}, context)

    assert context.execution.current_agent == "R"
    assert context.execution.current_level == 0
