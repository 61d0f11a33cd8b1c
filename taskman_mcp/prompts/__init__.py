"""Prompt templates for task, project and workflow guidance."""

import logging

from taskman_mcp.exceptions import ValidationError
from taskman_mcp.metrics import MetricsSink, NullMetrics
from taskman_mcp.prompts.base import Prompt, PromptArgs, PromptArgument, PromptResult
from taskman_mcp.prompts.project import PROJECT_PROMPTS
from taskman_mcp.prompts.task import TASK_PROMPTS
from taskman_mcp.prompts.workflow import WORKFLOW_PROMPTS

logger = logging.getLogger(__name__)

PROMPTS: dict[str, Prompt] = {
    p.name: p for p in (*TASK_PROMPTS, *PROJECT_PROMPTS, *WORKFLOW_PROMPTS)
}


def generate_prompt(
    name: str,
    args: PromptArgs | None = None,
    metrics: MetricsSink | None = None,
) -> PromptResult:
    """Fill in a prompt template.

    Args:
        name: Prompt name, e.g. ``plan_task``.
        args: Prompt arguments. Missing ones become defaults or empty strings.
        metrics: Sink receiving one ``prompt_generations`` count.

    Returns:
        The prompt description and message text.

    Raises:
        ValidationError: If no prompt has that name.
    """
    prompt = PROMPTS.get(name)
    if prompt is None:
        raise ValidationError(f"unknown prompt: {name}")

    logger.info("Generating %s prompt", name)
    (metrics or NullMetrics()).increment("prompt_generations", prompt=name)
    return prompt.build(args or {})


__all__ = [
    "PROMPTS",
    "Prompt",
    "PromptArgument",
    "PromptResult",
    "generate_prompt",
]
