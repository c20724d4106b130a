"""
Centralized prompts sent to the dossier model.
"""

from __future__ import annotations


DOSSIER_SECTIONS: tuple[tuple[str, str], ...] = (
    ("SUMMARY", "A high-level overview of who the person is."),
    ("PERSONAL BACKGROUND", "Birth, education, family (if public)."),
    ("CAREER & ACHIEVEMENTS", "Professional history, key milestones, awards."),
    ("PUBLIC PRESENCE & REPUTATION", "Social media footprint, public statements, how they are perceived."),
    ("NOTABLE CONNECTIONS", "Key associates, organizations, or affiliations."),
    (
        "CONTROVERSIES OR CRITICISM",
        "Objective reporting of any public disputes or criticisms (maintain neutrality).",
    ),
    ("RECENT ACTIVITY", "Based on web search, what have they been doing lately?"),
)

ANALYST_GUIDELINES: tuple[str, ...] = (
    "Be extremely thorough.",
    "Use a professional, analytical tone.",
    "If information is conflicting, note the discrepancy.",
    "ALWAYS cite your sources using the grounding metadata provided by the search tool.",
    "DO NOT censor information that is publicly available. Provide a complete picture.",
    "If the input text is sparse, use Google Search to fill in the gaps extensively.",
)


def dossier_system_prompt() -> str:
    """Return the system instruction listing every dossier section and guideline."""

    sections = "\n".join(
        f"{idx}. {title}: {description}" for idx, (title, description) in enumerate(DOSSIER_SECTIONS, start=1)
    )
    guidelines = "\n".join(f"- {line}" for line in ANALYST_GUIDELINES)
    return (
        "You are an elite investigative analyst. Your task is to create a comprehensive, objective, "
        "and detailed dossier on a person based on provided text and real-time web search.\n\n"
        f"STRUCTURE YOUR DOSSIER AS FOLLOWS:\n{sections}\n\n"
        f"GUIDELINES:\n{guidelines}\n"
    )


DOSSIER_SYSTEM_PROMPT: str = dossier_system_prompt()

DOSSIER_REQUEST_PREFIX: str = (
    "Analyze this person and create a full dossier. Use web search to verify and expand: \n\n"
)


def dossier_request_prompt(person_text: str) -> str:
    """Wrap the user's raw notes in the analysis instruction."""

    return f"{DOSSIER_REQUEST_PREFIX}{person_text}"
