# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Mesh Tools

A tool is anything an agent can invoke by name. Agent-backed tools wrap a
lower-tier agent and lazily expose that agent's own next level when they
run, which is what turns a workflow into a mesh.
"""

import inspect
import time
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Callable, Dict, Optional, Tuple

import httpx

from .context import ExecutionContext
from .exceptions import AgentRecursionError, ToolExecutionError
from .models import AgentConfig, AgentStatus, ToolResult

if TYPE_CHECKING:
    from .executor import MeshExecutor


class Tool(ABC):
    """Single capability: execute(params) -> ToolResult"""

    def __init__(self, name: str, description: str = "", parameters: Optional[Dict[str, Any]] = None):
        self.name = name
        self.description = description
        self.parameters = parameters or {}

    @abstractmethod
    async def execute(self, params: Any) -> ToolResult:
        ...

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"


class FunctionTool(Tool):
    """Externally bound tool backed by a sync or async callable"""

    def __init__(
        self,
        name: str,
        func: Callable[[Any], Any],
        description: str = "",
        parameters: Optional[Dict[str, Any]] = None
    ):
        super().__init__(name, description or (func.__doc__ or "").strip(), parameters)
        self.func = func

    async def execute(self, params: Any) -> ToolResult:
        result = self.func(params)
        if inspect.isawaitable(result):
            result = await result
        if isinstance(result, ToolResult):
            return result
        return ToolResult(success=True, data=result)


class HttpTool(Tool):
    """Externally bound tool that posts its parameters to an HTTP endpoint"""

    def __init__(
        self,
        name: str,
        url: str,
        description: str = "",
        parameters: Optional[Dict[str, Any]] = None,
        timeout: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None
    ):
        super().__init__(name, description, parameters)
        self.url = url
        self.client = client or httpx.AsyncClient(timeout=timeout)

    async def execute(self, params: Any) -> ToolResult:
        try:
            response = await self.client.post(self.url, json=params)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise ToolExecutionError(
                f"Tool endpoint returned HTTP {e.response.status_code}",
                self.name,
                details={"url": self.url}
            )
        except httpx.HTTPError as e:
            raise ToolExecutionError(f"Tool endpoint unreachable: {e}", self.name, details={"url": self.url})

        try:
            data = response.json()
        except ValueError:
            data = response.text

        return ToolResult(
            success=True,
            data=data,
            metadata={"status_code": response.status_code}
        )

    async def aclose(self) -> None:
        """Close HTTP client"""
        await self.client.aclose()


class AgentTool(Tool):
    """
    Agent exposed as a tool.

    ``lineage`` holds the ids of the agents that are already deciding above
    this tool in the current call chain.
    """

    def __init__(
        self,
        agent: AgentConfig,
        context: ExecutionContext,
        factory: "AgentToolFactory",
        lineage: Tuple[str, ...] = ()
    ):
        super().__init__(agent.name, agent.description, agent.input_schema or {})
        self.agent = agent
        self.context = context
        self.factory = factory
        self.lineage = lineage

    async def execute(self, params: Any) -> ToolResult:
        start_time = time.monotonic()

        try:
            self.factory.check_lineage(self.agent, self.lineage)

            chain = self.lineage + (self.agent.id,)
            nested_tools = self.factory.tools_for(self.agent, self.context, chain)

            result = await self.factory.executor.run(
                self.agent,
                nested_tools,
                params,
                self.context
            )

            return ToolResult(
                success=result.status == AgentStatus.COMPLETED,
                data=result,
                metadata=self._metadata(start_time),
            )

        except AgentRecursionError as e:
            self.factory.executor.execution_logger.log(
                self.context,
                "warn",
                e.message,
                data={"chain": list(e.chain)},
                agent_id=self.agent.id
            )
            return ToolResult(
                success=False,
                data=None,
                error=e.message,
                metadata=self._metadata(start_time),
            )

    def _metadata(self, start_time: float) -> Dict[str, Any]:
        return {
            "agent_id": self.agent.id,
            "execution_time": int((time.monotonic() - start_time) * 1000),
            "model": self.agent.model,
        }


class AgentToolFactory:
    """
    Wraps agent definitions as tools.

    Nothing is pre-built: an agent tool discovers and wraps the agents of
    the following level only when it is executed.
    """

    def __init__(
        self,
        executor: "MeshExecutor",
        external_tools: Optional[Dict[str, Tool]] = None,
        max_depth: int = 8
    ):
        self.executor = executor
        self.external_tools = external_tools if external_tools is not None else {}
        self.max_depth = max_depth

    def create_agent_tool(
        self,
        agent: AgentConfig,
        context: ExecutionContext,
        lineage: Tuple[str, ...] = ()
    ) -> AgentTool:
        return AgentTool(agent, context, self, lineage)

    def tools_for(
        self,
        agent: AgentConfig,
        context: ExecutionContext,
        lineage: Tuple[str, ...] = ()
    ) -> Dict[str, Tool]:
        """
        Tools offered to ``agent``: its registered external tools plus one
        agent tool per agent of the next level.
        """
        tools: Dict[str, Tool] = {}

        for tool_name in agent.available_tools:
            tool = self.external_tools.get(tool_name)
            if tool is None:
                self.executor.execution_logger.log(
                    context,
                    "debug",
                    f"Tool not registered: {tool_name}",
                    agent_id=agent.id
                )
                continue
            tools[tool_name] = tool

        for next_agent in context.workflow.agents_at_level(agent.level + 1):
            tools[next_agent.name] = self.create_agent_tool(next_agent, context, lineage)

        return tools

    def check_lineage(self, agent: AgentConfig, lineage: Tuple[str, ...]) -> None:
        """Raise AgentRecursionError when running ``agent`` would loop or nest too deep"""
        if agent.id in lineage:
            raise AgentRecursionError(
                f"Agent cycle detected: {' -> '.join(map(str, lineage + (agent.id,)))}",
                agent.id,
                lineage
            )
        if len(lineage) + 1 > self.max_depth:
            raise AgentRecursionError(
                f"Maximum agent depth exceeded ({self.max_depth})",
                agent.id,
                lineage
            )
