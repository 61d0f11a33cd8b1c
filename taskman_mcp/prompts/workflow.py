"""Workflow prompts: standups, weekly planning and task handoffs."""

from taskman_mcp.prompts.base import (
    Prompt,
    PromptArgs,
    PromptArgument,
    PromptResult,
    arg,
    join_blocks,
    section,
)

_STANDUP_EXTRAS = {
    "team": "## Team Coordination\n\n" + section(
        "Collaboration",
        "Where can you help a teammate?",
        "What are you waiting on from the team?",
        "What are you delivering to others today?",
    ),
    "cross-team": "## Cross-Team Updates\n\n" + section(
        "External Dependencies",
        "Which other teams does your work depend on?",
        "What do other teams need to know from you?",
        "Which cross-team decisions are pending?",
        "Does anything need escalating?",
    ),
}


def daily_standup(args: PromptArgs) -> PromptResult:
    """Standup template; team and cross-team standups add a coordination section."""
    user_id = arg(args, "user_id")
    standup_type = arg(args, "standup_type", "individual")

    text = join_blocks(
        f"# Daily Standup Report - {user_id}",
        "## Standup Overview\n"
        f"**User:** {user_id}\n"
        f"**Standup Type:** {standup_type}",
        section(
            "Yesterday",
            "Which tasks did you finish?",
            "What progress did you make on the rest?",
        ),
        section(
            "Today",
            "Which tasks will you work on?",
            "What is the single most important outcome for today?",
        ),
        section(
            "Blockers",
            "What is slowing you down?",
            "Who can help remove it?",
        ),
        _STANDUP_EXTRAS.get(standup_type, ""),
        "## Data\nUse the get_my_work tool to list your active tasks before the standup.",
    )
    return PromptResult("Daily standup preparation and work planning template", text)


_HORIZON_FOCUS = {
    "next_week": section(
        "Preparing Next Week",
        "What must finish this week so next week can start cleanly?",
        "Which tools, access or support must be arranged?",
        "Which conversations or decisions are needed first?",
    ),
    "upcoming": section(
        "Looking 2-4 Weeks Ahead",
        "Which milestones are approaching?",
        "Which skills or support need arranging?",
        "Which workflows should be improved before the load increases?",
    ),
}

_THIS_WEEK_FOCUS = section(
    "This Week",
    "What are the top 3 outcomes for this week?",
    "How much capacity is left after meetings?",
    "Which tasks can be deferred or delegated?",
)


def weekly_planning(args: PromptArgs) -> PromptResult:
    """Weekly planning template whose focus depends on the planning horizon."""
    user_id = arg(args, "user_id")
    planning_horizon = arg(args, "planning_horizon", "this_week")

    text = join_blocks(
        f"# Weekly Planning Session - {user_id}",
        "## Planning Overview\n"
        f"**User:** {user_id}\n"
        f"**Planning Period:** {planning_horizon}",
        section(
            "1. Review",
            "What got done last week?",
            "What slipped, and why?",
        ),
        section(
            "2. Capacity",
            "How many hours are available for focused work?",
            "Which commitments are already fixed?",
        ),
        section(
            "3. Priorities",
            "Which tasks are due or overdue?",
            "Which high-priority tasks have not started?",
        ),
        _HORIZON_FOCUS.get(planning_horizon, _THIS_WEEK_FOCUS),
    )
    return PromptResult("Comprehensive weekly planning and priority setting template", text)


def task_handoff(args: PromptArgs) -> PromptResult:
    task_id = arg(args, "task_id")
    from_user = arg(args, "from_user")
    to_user = arg(args, "to_user")

    text = join_blocks(
        "# Task Handoff Documentation",
        "## Handoff Overview\n"
        f"**Task ID:** {task_id}\n"
        f"**From:** {from_user}\n"
        f"**To:** {to_user}",
        section(
            "1. Context",
            "What is the task meant to achieve?",
            "Why does it matter and to whom?",
            "What is its current status?",
        ),
        section(
            "2. Work So Far",
            "What has been done?",
            "Which decisions were made and why?",
            "Where do the related files and links live?",
        ),
        section(
            "3. Remaining Work",
            "What is left to do?",
            "Which blockers or risks are open?",
            "Who are the key contacts?",
        ),
        section(
            "4. Transfer",
            "Schedule a walkthrough between both owners",
            "Reassign the task with update_task_progress",
            "Record this handoff as a note on the task",
        ),
    )
    return PromptResult(
        "Comprehensive task handoff documentation and knowledge transfer template", text
    )


WORKFLOW_PROMPTS = [
    Prompt(
        name="daily_standup",
        description="Generate daily work summaries and planning templates for team standups",
        build=daily_standup,
        arguments=(
            PromptArgument("user_id", "User ID for personalized daily summary", required=True),
            PromptArgument("standup_type", "Type of standup (individual, team, cross-team)"),
        ),
    ),
    Prompt(
        name="weekly_planning",
        description="Weekly priority and capacity planning template for effective work organization",
        build=weekly_planning,
        arguments=(
            PromptArgument("user_id", "User ID for personalized weekly planning", required=True),
            PromptArgument(
                "planning_horizon", "Planning timeframe (this_week, next_week, upcoming)"
            ),
        ),
    ),
    Prompt(
        name="task_handoff",
        description="Template for transferring tasks between team members with complete context",
        build=task_handoff,
        arguments=(
            PromptArgument("task_id", "ID of the task being handed off", required=True),
            PromptArgument("from_user", "Current task owner who is handing off", required=True),
            PromptArgument("to_user", "New task owner receiving the handoff", required=True),
        ),
    ),
]
