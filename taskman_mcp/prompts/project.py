"""Project prompts: planning, status reviews and retrospectives."""

from taskman_mcp.prompts.base import (
    Prompt,
    PromptArgs,
    PromptArgument,
    PromptResult,
    arg,
    join_blocks,
    section,
)

_DEVELOPMENT_PHASES = """\
**Phase 1: Planning & Design** (weeks 1-2)
- Gather requirements and agree on the architecture
- Break the work down into tasks

**Phase 2: Core Development** (weeks 3-6)
- Build the core features with continuous testing
- Demo to stakeholders and collect feedback

**Phase 3: Testing & Refinement** (weeks 7-8)
- Fix defects and run acceptance testing
- Tune performance

**Phase 4: Deployment & Closure** (weeks 9-10)
- Deploy to production
- Hand over documentation and hold a retrospective"""

_RESEARCH_PHASES = """\
**Phase 1: Research Design** (weeks 1-2)
- Review existing work and design the method
- Plan data collection

**Phase 2: Data Collection** (weeks 3-6)
- Gather primary and secondary data
- Check progress and adjust the method

**Phase 3: Analysis** (weeks 7-8)
- Analyse the data and validate findings
- Hold a peer review of preliminary conclusions

**Phase 4: Reporting** (weeks 9-10)
- Write the final report
- Present recommendations to stakeholders"""

_GENERIC_PHASES = """\
**Phase 1: Preparation** (20% of the timeline)
- Plan in detail and allocate resources

**Phase 2: Execution** (60% of the timeline)
- Deliver the main work with regular check-ins

**Phase 3: Completion** (20% of the timeline)
- Verify deliverables, hand over and close out"""


def _phases_for(project_type: str) -> str:
    if project_type in ("Development", "Software"):
        return _DEVELOPMENT_PHASES
    if project_type == "Research":
        return _RESEARCH_PHASES
    return _GENERIC_PHASES


def create_project_plan(args: PromptArgs) -> PromptResult:
    """Planning guide whose phase outline depends on the project type."""
    project_name = arg(args, "project_name")
    project_type = arg(args, "project_type")
    duration = arg(args, "duration")

    overview = [f"**Project Name:** {project_name}"]
    if project_type:
        overview.append(f"**Project Type:** {project_type}")
    if duration:
        overview.append(f"**Target Duration:** {duration}")

    text = join_blocks(
        f"# Project Planning Guide: {project_name}",
        "## Project Overview\n" + "\n".join(overview),
        section(
            "1. Definition & Scope",
            "What is the goal of the project?",
            "How will success be measured?",
            "What is explicitly out of scope?",
        ),
        section(
            "2. Stakeholders & Team",
            "Who sponsors the project and who uses the result?",
            "Which roles are needed and who fills them?",
        ),
        section(
            "3. Risks",
            "What are the biggest risks?",
            "How will each be mitigated?",
        ),
        "## 4. Timeline & Phases\n" + _phases_for(project_type),
        "## 5. Initial Tasks\n"
        "Turn the first phase into concrete tasks and create them together with the "
        "project using create_project_with_initial_tasks.",
    )
    return PromptResult("Comprehensive project planning guidance and template", text)


_PERIOD_FOCUS = {
    "daily": section(
        "Daily Focus",
        "What is blocking progress today?",
        "Are there coordination problems in the team?",
        "What are the top 3 priorities for tomorrow?",
    ),
    "monthly": section(
        "Strategic Assessment",
        "Has the scope changed?",
        "Should assignments or focus areas shift?",
        "Does the timeline need adjusting?",
        "Are the original goals still right?",
    ),
}
_PERIOD_FOCUS["milestone"] = _PERIOD_FOCUS["monthly"]

_WEEKLY_FOCUS = section(
    "Weekly Focus",
    "Which tasks were completed this week?",
    "Which tasks slipped and why?",
    "What are the goals for next week?",
    "Is the team's workload balanced?",
)


def project_status_review(args: PromptArgs) -> PromptResult:
    """Health check template whose focus depends on the review period."""
    project_id = arg(args, "project_id")
    review_period = arg(args, "review_period", "weekly")

    text = join_blocks(
        f"# Project Status Review: {project_id}",
        "## Review Overview\n"
        f"**Project ID:** {project_id}\n"
        f"**Review Period:** {review_period}",
        section(
            "1. Progress",
            "Which phase is the project in?",
            "Is it on track against the plan?",
            "What is the next milestone and its date?",
        ),
        section(
            "2. Risks & Issues",
            "Which tasks are overdue or blocked?",
            "Have new risks appeared?",
        ),
        section(
            "3. Team",
            "Is anyone overloaded?",
            "Does anyone need help or a decision?",
        ),
        _PERIOD_FOCUS.get(review_period, _WEEKLY_FOCUS),
        "## Data\nUse the get_project_status tool for the current task figures.",
    )
    return PromptResult("Comprehensive project status review and health check template", text)


def project_retrospective(args: PromptArgs) -> PromptResult:
    project_id = arg(args, "project_id")
    project_outcome = arg(args, "project_outcome")

    overview = [f"**Project ID:** {project_id}"]
    if project_outcome:
        overview.append(f"**Project Outcome:** {project_outcome}")

    text = join_blocks(
        f"# Project Retrospective: {project_id}",
        "## Overview\n" + "\n".join(overview),
        section(
            "1. Results",
            "Which goals were met and which were not?",
            "How did the schedule compare with the plan?",
        ),
        section(
            "2. What Went Well",
            "Which practices helped most?",
            "Which decisions paid off?",
        ),
        section(
            "3. What To Improve",
            "Where did work stall?",
            "Which risks were missed?",
            "What would you change in planning?",
        ),
        section(
            "4. Actions",
            "Which improvements carry over to the next project?",
            "Who owns each improvement?",
        ),
    )
    return PromptResult(
        "Comprehensive post-project retrospective analysis and lessons learned template", text
    )


PROJECT_PROMPTS = [
    Prompt(
        name="create_project_plan",
        description=(
            "Guide comprehensive project planning with goals, scope, and initial task structure"
        ),
        build=create_project_plan,
        arguments=(
            PromptArgument("project_name", "Name of the project to plan", required=True),
            PromptArgument(
                "project_type", "Type or category of project (Development, Research, Process, etc.)"
            ),
            PromptArgument("duration", "Expected project duration or deadline"),
        ),
    ),
    Prompt(
        name="project_status_review",
        description="Template for regular project health checks and status assessments",
        build=project_status_review,
        arguments=(
            PromptArgument("project_id", "ID of the project to review", required=True),
            PromptArgument("review_period", "Time period for this review (weekly, monthly, milestone)"),
        ),
    ),
    Prompt(
        name="project_retrospective",
        description=(
            "Comprehensive post-project analysis template for lessons learned and improvement"
        ),
        build=project_retrospective,
        arguments=(
            PromptArgument("project_id", "ID of the completed project to analyze", required=True),
            PromptArgument("project_outcome", "Overall outcome (Success, Partial Success, Challenge)"),
        ),
    ),
]
