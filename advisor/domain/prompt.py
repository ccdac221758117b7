"""
Advisor prompt construction.

The client sends a summary of the user's tracked work and financial
goals; it becomes the system prompt for the completion provider.
"""
from dataclasses import dataclass, fields
from typing import Any, Dict

SECTION_RULE = "=" * 43


@dataclass(frozen=True)
class AdvisorContext:
    """Work and finance summary supplied by the client."""

    today_hours: float = 0.0
    today_pay: float = 0.0
    today_sessions: int = 0
    period_total_hours: float = 0.0
    period_total_sessions: int = 0
    period_total_pay: float = 0.0
    period_avg_session: float = 0.0
    period_longest_session: float = 0.0
    avg_weekly_income: float = 0.0
    avg_daily_hours: float = 0.0
    consistency_score: float = 0.0
    categories_summary: str = ""
    best_weekday: str = ""
    worst_weekday: str = ""
    weekday_summary: str = ""
    goals_count: int = 0
    goals_summary: str = ""
    total_debt: float = 0.0
    total_savings_target: float = 0.0
    recent_sessions_summary: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AdvisorContext":
        """
        Build a context from request data, ignoring unknown keys.

        Args:
            data: Context mapping from the request

        Returns:
            AdvisorContext

        Raises:
            ValueError: If a numeric field is not a number
        """
        values = {}
        for field in fields(cls):
            if field.name not in data or data[field.name] is None:
                continue
            raw = data[field.name]
            if field.type is str:
                values[field.name] = str(raw)
            else:
                values[field.name] = field.type(raw)
        return cls(**values)


def _section(title: str, body: str) -> str:
    return f"{SECTION_RULE}\n{title}\n{SECTION_RULE}\n{body}"


def build_system_prompt(ctx: AdvisorContext) -> str:
    """
    Render the advisor system prompt.

    Args:
        ctx: Client supplied context

    Returns:
        System prompt text
    """
    sections = [
        _section(
            "TODAY'S SNAPSHOT",
            f"- Hours worked: {ctx.today_hours:.1f}h\n"
            f"- Sessions completed: {ctx.today_sessions}\n"
            f"- Pay earned: ${ctx.today_pay:.2f}",
        ),
        _section(
            "LAST 30 DAYS ANALYTICS",
            f"- Total hours: {ctx.period_total_hours:.1f}h\n"
            f"- Total sessions: {ctx.period_total_sessions}\n"
            f"- Total pay: ${ctx.period_total_pay:.2f}\n"
            f"- Average session length: {ctx.period_avg_session:.1f}h\n"
            f"- Longest session: {ctx.period_longest_session:.1f}h\n"
            f"- Average daily hours: {ctx.avg_daily_hours:.1f}h\n"
            f"- Consistency score: {ctx.consistency_score:g}% (days with logged work)",
        ),
        _section("WORK PATTERNS BY CATEGORY", ctx.categories_summary),
        _section(
            "WEEKDAY PATTERNS",
            f"- Best day: {ctx.best_weekday}\n"
            f"- Lightest day: {ctx.worst_weekday}\n"
            f"{ctx.weekday_summary}",
        ),
        _section("INCOME", f"- Average weekly income: ${ctx.avg_weekly_income:.2f}"),
        _section(
            f"FINANCIAL GOALS ({ctx.goals_count} active)",
            f"{ctx.goals_summary}\n"
            f"- Total debt being paid: ${ctx.total_debt:.2f}\n"
            f"- Total savings target: ${ctx.total_savings_target:.2f}",
        ),
        _section("RECENT ACTIVITY", ctx.recent_sessions_summary),
    ]
    guidelines = (
        "ADVISOR GUIDELINES:\n"
        "- Be concise, practical, and encouraging\n"
        "- Reference specific data from above when relevant\n"
        "- Give actionable advice, not generic tips\n"
        "- Identify patterns (good and concerning)\n"
        "- Keep responses under 250 words unless detailed analysis requested\n"
        "- Don't repeat all the stats back, the user can see them\n"
        "- Focus on insights, trends, and recommendations"
    )
    intro = (
        "You are a helpful financial and productivity advisor for Chrono, "
        "a work tracking app.\n"
        "The user tracks work sessions across different categories and "
        "manages financial goals."
    )
    return "\n\n".join([intro, *sections, guidelines])
