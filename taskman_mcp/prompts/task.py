"""Task prompts: creation, planning, status updates, review and breakdown."""

from taskman_mcp.prompts.base import (
    Prompt,
    PromptArgs,
    PromptArgument,
    PromptResult,
    arg,
    checklist,
    join_blocks,
    section,
)

_COMPLEXITY_STRATEGY = {
    "Simple": [
        "Name the one deliverable this task produces",
        "Pick a realistic finish date",
        "Decide who owns the work",
        "Schedule a single progress check",
    ],
    "Complex": [
        "Split the work into 3-5 phases with a milestone each",
        "Identify the critical path between phases",
        "Schedule regular reviews and stakeholder updates",
        "Consider a pilot or proof of concept first",
        "Agree how work is handed over between phases",
    ],
}

_MEDIUM_STRATEGY = [
    "Split the work into 2-3 work packages",
    "Set an intermediate milestone for each package",
    "Plan a midpoint review to adjust course",
    "Define what each package delivers",
]


def create_task(args: PromptArgs) -> PromptResult:
    task_name = arg(args, "task_name")
    project_id = arg(args, "project_id")

    lines = ["Create a new task with the following details:", "", f"Task Name: {task_name}"]
    if project_id:
        lines.append(f"Project ID: {project_id}")
    lines.extend([
        "",
        "Please provide:",
        "1. A detailed description for this task",
        "2. Appropriate priority level (Low, Medium, High)",
        "3. Estimated completion timeline",
        "4. Any dependencies or prerequisites",
        "5. Success criteria for completion",
    ])
    return PromptResult("Task creation guidance prompt", "\n".join(lines))


def plan_task(args: PromptArgs) -> PromptResult:
    """Planning checklist whose implementation strategy depends on complexity."""
    task_name = arg(args, "task_name")
    project_context = arg(args, "project_context")
    complexity = arg(args, "complexity", "Medium")

    overview = [
        "## Task Overview",
        f"**Task Name:** {task_name}",
        f"**Complexity Level:** {complexity}",
    ]
    if project_context:
        overview.append(f"**Project Context:** {project_context}")

    strategy = _COMPLEXITY_STRATEGY.get(complexity, _MEDIUM_STRATEGY)
    text = join_blocks(
        f"# Task Planning Guide: {task_name}",
        "\n".join(overview),
        "## Planning Checklist",
        section(
            "1. Requirements",
            "What outcome does this task deliver?",
            "What are the acceptance criteria?",
            "Who benefits from the result?",
            "Which constraints apply?",
        ),
        section(
            "2. Resources",
            "Which skills are needed?",
            "Which tools, systems or access are needed?",
            "How much time will it take?",
        ),
        section(
            "3. Dependencies",
            "Which tasks must finish first?",
            "Who must be consulted?",
            "Which decisions or approvals are pending?",
        ),
        section(
            "4. Risks",
            "What could delay the work?",
            "What is the fallback plan?",
            "What would justify escalating or changing scope?",
        ),
        "### 5. Implementation Strategy\n" + checklist(strategy),
        "## Task Creation\n"
        "Use this analysis to create the task with a clear name and description, "
        "a priority that reflects urgency and impact, a due date that respects the "
        "dependencies, and an initial planning note that records the key findings.",
    )
    return PromptResult("Comprehensive task planning guidance", text)


_STATUS_GUIDANCE = {
    "In Progress": section(
        "Starting work",
        "Are all prerequisites in place?",
        "Is the approach clear?",
        "What is the next action for the coming 1-2 days?",
        "When is the first checkpoint?",
    ),
    "Blocked": section(
        "Documenting the blocker",
        "What exactly is preventing progress?",
        "Who or what can remove it?",
        "Is it a dependency, resource or decision blocker?",
        "Who needs to be told, and is there parallel work to pick up?",
    ),
    "Review": section(
        "Ready for review",
        "Are all acceptance criteria met?",
        "Has the work been checked or tested?",
        "Who reviews it, and by when?",
        "What criteria will the reviewer use?",
    ),
    "Complete": section(
        "Closing the task",
        "Have stakeholders accepted the result?",
        "Is the documentation stored where others can find it?",
        "Are related tasks updated?",
        "What lessons are worth recording?",
    ),
}

_DEFAULT_STATUS_GUIDANCE = section(
    "General update",
    "What work has been completed?",
    "What remains to be done?",
    "Are there new risks or blockers?",
)


def update_task_status(args: PromptArgs) -> PromptResult:
    """Status change template with guidance specific to the new status."""
    task_id = arg(args, "task_id")
    current_status = arg(args, "current_status")
    new_status = arg(args, "new_status")

    text = join_blocks(
        f"# Task Status Update: {task_id}",
        f"## Status Transition\n**From:** {current_status} → **To:** {new_status}",
        section(
            "Progress Summary",
            "What was accomplished since the last update?",
            "How much of the work is done?",
            "Anything unexpected worth noting?",
        ),
        _STATUS_GUIDANCE.get(new_status, _DEFAULT_STATUS_GUIDANCE),
        "## Progress Note\n"
        "Summarise the above in a progress note and record it with the "
        "update_task_progress tool together with the new status.",
    )
    return PromptResult("Task status update guidance and documentation template", text)


def task_review(args: PromptArgs) -> PromptResult:
    task_id = arg(args, "task_id")
    completion_date = arg(args, "completion_date")

    overview = [f"**Task ID:** {task_id}"]
    if completion_date:
        overview.append(f"**Completion Date:** {completion_date}")

    text = join_blocks(
        f"# Task Completion Review: {task_id}",
        "## Review Overview\n" + "\n".join(overview),
        section(
            "1. Outcome",
            "Were all acceptance criteria met?",
            "Did the result match what stakeholders expected?",
            "Was it delivered on time?",
        ),
        section(
            "2. Process",
            "How did actual effort compare with the estimate?",
            "Which blockers came up and how were they resolved?",
            "What worked well?",
        ),
        section(
            "3. Lessons Learned",
            "What would you do differently next time?",
            "Which practices should be reused?",
            "Is there follow-up work to create as new tasks?",
        ),
        "## Documentation\nRecord the key findings as a note on the task.",
    )
    return PromptResult("Comprehensive task completion review and lessons learned template", text)


def task_breakdown(args: PromptArgs) -> PromptResult:
    """Subtask breakdown guide; a team size of 1 gets solo advice."""
    parent_task = arg(args, "parent_task")
    timeline = arg(args, "timeline")
    team_size = arg(args, "team_size", "1")

    overview = [f"**Parent Task:** {parent_task}", f"**Team Size:** {team_size}"]
    if timeline:
        overview.append(f"**Timeline:** {timeline}")

    if team_size == "1":
        allocation = section(
            "4. Working Solo",
            "Order subtasks sequentially to avoid context switching",
            "Keep each subtask to 1-3 days of work",
            "Build in natural stopping points for review",
            "Leave buffer time for learning and problem-solving",
        )
    else:
        allocation = section(
            "4. Working as a Team",
            "Assign subtasks by expertise",
            "Define clear interfaces between people's work",
            "Plan regular integration points",
            "Agree how blockers and dependencies are communicated",
        )

    text = join_blocks(
        f"# Task Breakdown Analysis: {parent_task}",
        "## Overview\n" + "\n".join(overview),
        section(
            "1. Scope",
            "What is the final deliverable?",
            "Which distinct pieces of work does it need?",
        ),
        section(
            "2. Subtasks",
            "List each subtask with a clear outcome",
            "Estimate the effort for each",
            "Give each subtask an owner",
        ),
        section(
            "3. Dependencies",
            "Which subtasks must run in sequence?",
            "Which can run in parallel?",
            "Where are the bottlenecks?",
        ),
        allocation,
        "## Next Step\n"
        "Create each subtask with create_task_with_context and link them to the "
        "same project.",
    )
    return PromptResult(
        "Comprehensive guide for breaking down complex tasks into manageable subtasks", text
    )


TASK_PROMPTS = [
    Prompt(
        name="create_task",
        description="Template for creating a new task with proper context",
        build=create_task,
        arguments=(
            PromptArgument("task_name", "Name of the task to create", required=True),
            PromptArgument("project_id", "Optional project ID to associate with the task"),
        ),
    ),
    Prompt(
        name="plan_task",
        description=(
            "Guide comprehensive task planning with context gathering and requirement analysis"
        ),
        build=plan_task,
        arguments=(
            PromptArgument(
                "task_name", "Name or brief description of the task to plan", required=True
            ),
            PromptArgument("project_context", "Optional project context or ID for this task"),
            PromptArgument("complexity", "Estimated complexity level (Simple, Medium, Complex)"),
        ),
    ),
    Prompt(
        name="update_task_status",
        description="Template for updating task status with proper documentation and next steps",
        build=update_task_status,
        arguments=(
            PromptArgument("task_id", "ID of the task being updated", required=True),
            PromptArgument("current_status", "Current status of the task", required=True),
            PromptArgument("new_status", "Desired new status for the task", required=True),
        ),
    ),
    Prompt(
        name="task_review",
        description="Template for comprehensive task completion review and lessons learned",
        build=task_review,
        arguments=(
            PromptArgument("task_id", "ID of the completed task to review", required=True),
            PromptArgument("completion_date", "Date when the task was completed"),
        ),
    ),
    Prompt(
        name="task_breakdown",
        description="Break down complex tasks into manageable subtasks with dependencies",
        build=task_breakdown,
        arguments=(
            PromptArgument(
                "parent_task", "Description of the complex task to break down", required=True
            ),
            PromptArgument("timeline", "Optional timeline or deadline for the parent task"),
            PromptArgument("team_size", "Number of people who will work on this task"),
        ),
    ),
]
