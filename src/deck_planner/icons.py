"""Icon prompts for the external image generator, keyed off section titles."""

from typing import Tuple

ICON_PROMPTS: Tuple[Tuple[Tuple[str, ...], str], ...] = (
    (
        ("financial", "treasury", "receipt", "disbursement"),
        "A clean, modern icon representing financial data and monetary transactions",
    ),
    (
        ("membership", "attendance"),
        "A simple icon representing people and community engagement",
    ),
    (
        ("program", "activities", "ministries"),
        "An icon representing programs, activities, and ministry work",
    ),
    (
        ("youth", "children"),
        "A friendly icon representing youth and children programs",
    ),
    (
        ("outreach", "mission"),
        "An icon representing community outreach and mission work",
    ),
)

DEFAULT_ICON_PROMPT = "A professional icon representing church ministry and administration"

SUMMARY_ICON_PROMPT = "A minimalist icon representing key performance metrics and summary statistics"


def icon_prompt_for(section_title: str) -> str:
    """Return the first matching keyword group's prompt, else the default."""
    title = (section_title or "").lower()
    for keywords, prompt in ICON_PROMPTS:
        if any(keyword in title for keyword in keywords):
            return prompt
    return DEFAULT_ICON_PROMPT


def chart_icon_prompt(chart_type) -> str:
    chart_type = getattr(chart_type, "value", chart_type)
    return f"A {chart_type} chart icon representing data visualization"
