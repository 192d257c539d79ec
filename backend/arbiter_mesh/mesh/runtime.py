# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Agent Runtime seam

The mesh never talks to a language model itself. Every decide step is
delegated to an AgentRuntime; when none is bound the deterministic
StubAgentRuntime answers instead.
"""

import logging
from typing import Any, Dict, Optional, Protocol, Union, runtime_checkable

import httpx
from pydantic import ValidationError

from .exceptions import AgentRuntimeError
from .models import AgentExecutionResult, AgentStatus

logger = logging.getLogger(__name__)


@runtime_checkable
class AgentRuntime(Protocol):
    """Collaborator that produces one decision for an agent"""

    async def execute_agent(
        self,
        agent_id: str,
        input: Any,
        user_prompt: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> Union[AgentExecutionResult, Dict[str, Any]]:
        ...


class StubAgentRuntime:
    """
    Offline runtime.

    Always reports ``completed`` without requesting tools, so workflows can
    run end to end without a model behind them.
    """

    async def execute_agent(
        self,
        agent_id: str,
        input: Any,
        user_prompt: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> AgentExecutionResult:
        return AgentExecutionResult(
            reasoning=f"Agent {agent_id} processed the input and determined next steps",
            tool_calls=[],
            next_steps="Analysis complete",
            status=AgentStatus.COMPLETED,
            raw_response="Simulated agent response",
        )


class HttpAgentRuntime:
    """
    Runtime reached over HTTP.

    POST {base_url}/agents/{agent_id}/execute with the decide payload; the
    JSON response body must be an AgentExecutionResult.
    """

    def __init__(self, base_url: str, timeout: Optional[float] = None, client: Optional[httpx.AsyncClient] = None):
        self.base_url = base_url.rstrip("/")
        self.client = client or httpx.AsyncClient(timeout=timeout)

    async def execute_agent(
        self,
        agent_id: str,
        input: Any,
        user_prompt: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> AgentExecutionResult:
        url = f"{self.base_url}/agents/{agent_id}/execute"
        payload = {
            "input": input,
            "user_prompt": user_prompt,
            "context": context or {},
        }

        try:
            response = await self.client.post(url, json=payload)
            response.raise_for_status()
            body = response.json()
        except httpx.HTTPStatusError as e:
            raise AgentRuntimeError(
                f"Agent runtime returned HTTP {e.response.status_code}",
                agent_id,
                details={"url": url}
            )
        except httpx.HTTPError as e:
            raise AgentRuntimeError(f"Agent runtime unreachable: {e}", agent_id, details={"url": url})
        except ValueError as e:
            raise AgentRuntimeError(f"Agent runtime returned invalid JSON: {e}", agent_id)

        try:
            return AgentExecutionResult.model_validate(body)
        except ValidationError as e:
            logger.debug("Rejected agent runtime payload", extra={"agent_id": agent_id, "body": body})
            raise AgentRuntimeError(f"Agent runtime returned a malformed result: {e}", agent_id)

    async def aclose(self) -> None:
        """Close HTTP client"""
        await self.client.aclose()


def coerce_result(result: Union[AgentExecutionResult, Dict[str, Any]]) -> AgentExecutionResult:
    """Accept plain mappings from runtimes that do not build models"""
    if isinstance(result, AgentExecutionResult):
        return result
    return AgentExecutionResult.model_validate(result)
