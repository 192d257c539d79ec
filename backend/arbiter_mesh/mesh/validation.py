# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Workflow Validation

Structural precondition checks run once before any mesh work starts.
"""

from .models import AgentConfig, WorkflowConfig
from .exceptions import WorkflowValidationError


def validate_workflow(workflow: WorkflowConfig) -> None:
    """
    Validate workflow structure.

    Fails fast: the first violation found is raised, nothing is aggregated.

    Raises WorkflowValidationError if validation fails.
    """
    workflow_id = workflow.id

    # 1. Root agent
    root = workflow.root_agent
    if root is None:
        raise WorkflowValidationError("Root agent is required", workflow_id, field="rootAgent")

    if not root.id or not root.name:
        raise WorkflowValidationError(
            "Root agent must have id and name",
            workflow_id,
            field="rootAgent"
        )

    if _is_blank(root.system_prompt):
        raise WorkflowValidationError(
            "Root agent system prompt cannot be empty",
            workflow_id,
            field="rootAgent.systemPrompt"
        )

    # 2. Level shape
    for level in workflow.levels:
        if not isinstance(level.agents, list):
            raise WorkflowValidationError(
                f"Level {level.level} must have agents array",
                workflow_id,
                field=f"levels[{level.level}].agents"
            )

    # 3. Every agent needs a usable system prompt
    for level in workflow.levels:
        for agent in level.agents:
            _validate_agent(agent, workflow_id, level.level)


def _validate_agent(agent: AgentConfig, workflow_id: str, level: int) -> None:
    if _is_blank(agent.system_prompt):
        raise WorkflowValidationError(
            f"Agent {agent.id} system prompt cannot be empty",
            workflow_id,
            field=f"levels[{level}].agents[{agent.id}].systemPrompt"
        )


def _is_blank(value) -> bool:
    return not isinstance(value, str) or value.strip() == ""
