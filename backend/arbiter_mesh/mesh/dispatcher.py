# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Mesh Tool Call Dispatcher

Runs one round of tool calls concurrently and normalizes every outcome.
"""

import asyncio
import time
from typing import Dict, List, Mapping, Sequence, Union

from arbiter_mesh.core.errors import sanitize_error_for_user

from .context import ExecutionContext
from .logging import ExecutionLogger
from .models import ToolCall, ToolCallResult
from .tools import Tool


class ToolCallDispatcher:
    """
    Concurrent tool dispatch.

    Every call yields exactly one ToolCallResult. Unknown tools and tools
    that raise turn into failure results for that call only; siblings are
    never cancelled and the dispatcher itself never raises.
    """

    def __init__(self, execution_logger: ExecutionLogger):
        self.execution_logger = execution_logger

    async def execute_tool_calls(
        self,
        tool_calls: Sequence[Union[ToolCall, Mapping]],
        available_tools: Mapping[str, Tool],
        context: ExecutionContext
    ) -> List[ToolCallResult]:
        """
        Dispatch every call at once and wait for all of them to settle.

        Calls are ordered by sequence_order (missing counts as 0) before
        dispatch. The order only shapes the log and the result list; it does
        not serialize execution.
        """
        calls = [self._as_tool_call(call) for call in tool_calls]
        ordered = sorted(calls, key=lambda call: call.sequence_order or 0)

        tasks = [
            self._execute_one(call, available_tools, context)
            for call in ordered
        ]

        # Wait for every call; _execute_one already converts failures
        results = await asyncio.gather(*tasks, return_exceptions=True)

        normalized = []
        for call, result in zip(ordered, results):
            if isinstance(result, BaseException):
                if not isinstance(result, Exception):
                    raise result
                result = self._failure(call, sanitize_error_for_user(result), {})
            normalized.append(result)
        return normalized

    async def _execute_one(
        self,
        call: ToolCall,
        available_tools: Mapping[str, Tool],
        context: ExecutionContext
    ) -> ToolCallResult:
        tool = available_tools.get(call.tool_name) if call.tool_name else None

        if tool is None:
            self.execution_logger.log(context, "warn", f"Tool not found: {call.tool_name}")
            return self._failure(call, f"Tool {call.tool_name} not found", {"execution_time": 0})

        start_time = time.monotonic()
        try:
            self.execution_logger.log(
                context,
                "info",
                f"Executing tool: {call.tool_name}",
                data={"parameters": call.parameters, "sequence_order": call.sequence_order}
            )

            result = await tool.execute(call.parameters)

            metadata: Dict = dict(result.metadata)
            metadata.setdefault("execution_time", _elapsed_ms(start_time))

            self.execution_logger.log(
                context,
                "info",
                f"Tool completed: {call.tool_name}",
                data={"success": result.success, "executionTime": metadata["execution_time"]}
            )

            return ToolCallResult(
                tool_name=call.tool_name,
                success=result.success,
                data=result.data,
                error=result.error,
                metadata=metadata,
            )

        except Exception as e:
            error = sanitize_error_for_user(e)
            self.execution_logger.log(
                context,
                "error",
                f"Tool execution failed: {call.tool_name}",
                data={"error": error}
            )
            return self._failure(call, error, {"execution_time": _elapsed_ms(start_time)})

    @staticmethod
    def _as_tool_call(call: Union[ToolCall, Mapping]) -> ToolCall:
        if isinstance(call, ToolCall):
            return call
        try:
            return ToolCall.model_validate(call)
        except ValueError:
            # Keep the slot so the result count still matches the call count
            name = call.get("tool_name") if isinstance(call, Mapping) else None
            return ToolCall(tool_name=name if isinstance(name, str) else None)

    @staticmethod
    def _failure(call: ToolCall, error: str, metadata: Dict) -> ToolCallResult:
        return ToolCallResult(
            tool_name=call.tool_name,
            success=False,
            data=None,
            error=error,
            metadata=metadata,
        )


def _elapsed_ms(start_time: float) -> int:
    return int((time.monotonic() - start_time) * 1000)
