"""Prompt templates for resume critiques."""
from __future__ import annotations

SYSTEM_PROMPT = (
    "You are an experienced technical recruiter. You review resumes against a job "
    "description and give candid, actionable feedback."
)

_STANDARD_INSTRUCTIONS = """\
Compare the resume with the job description and respond in plain text with:
1. Match: an overall match percentage (for example "Match: 75%").
2. Strengths: the resume points that best fit the role.
3. Gaps: required skills or experience that are missing or weak.
4. Suggestions: concrete edits that would improve the resume for this role."""

_ADVANCED_INSTRUCTIONS = """\
Compare the resume with the job description in depth and respond in plain text with:
1. Match: an overall match percentage (for example "Match: 75%") with a one-line rationale.
2. Keyword coverage: job description keywords found and missing in the resume.
3. Strengths: the resume points that best fit the role, with evidence.
4. Gaps: required skills or experience that are missing or weak, ordered by impact.
5. Section review: comments on summary, experience, skills and education sections.
6. Rewrites: up to three bullet points rewritten to better target the role.
7. Suggestions: a prioritised list of edits."""


def build_messages(
    resume_text: str,
    job_description: str,
    *,
    advanced: bool = False,
) -> list[dict[str, str]]:
    """Return chat messages asking for a critique of *resume_text*."""

    instructions = _ADVANCED_INSTRUCTIONS if advanced else _STANDARD_INSTRUCTIONS
    user_content = (
        f"{instructions}\n\n"
        f"Job description:\n{job_description.strip()}\n\n"
        f"Resume:\n{resume_text.strip()}"
    )
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": user_content},
    ]


__all__ = ["SYSTEM_PROMPT", "build_messages"]
