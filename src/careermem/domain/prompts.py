"""Prompt templates for oracle requests.

Builders take already truncated inputs; callers own the size limits.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

    from careermem.domain.model import ExternalRepository, Payload

FILE_BREAK = "\n\n--- FILE BREAK ---\n\n"

MEMORY_SCHEMA_HINT = (
    "{\n"
    '  "personalInfo": {"fullName": "", "email": "", "phone": "", "location": "",'
    ' "linkedin": "", "website": "", "summary": ""},\n'
    '  "experiences": [{"id": "", "role": "", "company": "", "startDate": "", "endDate": "",'
    ' "description": ""}],\n'
    '  "educations": [{"id": "", "degree": "", "school": "", "year": ""}],\n'
    '  "projects": [{"id": "", "name": "", "description": "", "link": "", "repoLink": ""}],\n'
    '  "leadershipActivities": [{"id": "", "name": "", "description": "", "dateRange": ""}],\n'
    '  "skills": [""]\n'
    "}"
)

RESUME_SCHEMA_HINT = (
    "{\n"
    '  "title": "",\n'
    '  "personalInfo": {"fullName": "", "email": "", "phone": "", "location": "",'
    ' "linkedin": "", "website": "", "summary": ""},\n'
    '  "experience": [{"role": "", "company": "", "startDate": "", "endDate": "",'
    ' "description": ""}],\n'
    '  "education": [{"degree": "", "school": "", "year": ""}],\n'
    '  "projects": [{"name": "", "description": "", "link": "", "repoLink": ""}],\n'
    '  "leadershipActivities": [{"name": "", "description": "", "dateRange": ""}],\n'
    '  "skills": [""],\n'
    '  "hiddenKeywords": [""]\n'
    "}"
)


def _dump(payload: object) -> str:
    return json.dumps(payload, ensure_ascii=False, default=str)


def build_merge_prompt(profile_payload: Payload, new_text: str) -> str:
    return (
        "You maintain a candidate's career memory profile.\n\n"
        "Current memory profile (JSON):\n"
        f"{_dump(profile_payload)}\n\n"
        "New raw data:\n"
        f"{new_text}\n\n"
        "Extract and merge all personal information, experiences, education, projects, "
        "leadership activities and skills from the new data into the profile.\n"
        "Rules:\n"
        "1) Keep every existing entry and its \"id\". Update an entry in place when the new data "
        "describes the same fact, even if worded differently.\n"
        "2) Add genuinely new facts as new entries without an \"id\".\n"
        "3) Internships are experiences.\n"
        "4) Only include information that is explicitly present or clearly inferable. "
        "Do not hallucinate.\n"
        "5) Output ONLY the complete updated profile as JSON with this shape:\n"
        f"{MEMORY_SCHEMA_HINT}\n"
    )


def build_extraction_prompt(document: str, schema_hint: str) -> str:
    return (
        "Extract structured resume data from the document below.\n"
        "Output ONLY JSON matching this shape; leave unknown fields empty:\n"
        f"{schema_hint}\n\n"
        "Document:\n"
        f"{document}\n"
    )


def build_enrichment_prompt(
    record: ExternalRepository,
    *,
    readme: str | None = None,
    target_role: str | None = None,
) -> str:
    lines = [
        "Analyze the following repository for use on a resume.",
        f"Repository Name: {record.name or record.full_name}",
        f"Full Name: {record.full_name}",
        f"Description: {record.description or 'No description provided.'}",
        f"URL: {record.html_url}",
        f"Language: {record.language or 'Not specified.'}",
        f"Stars: {record.stars}",
        f"Forks: {record.forks}",
        f"Last Pushed: {record.pushed_at}",
        f"Topics: {', '.join(record.topics) or 'No topics.'}",
        f"Has Issues: {'Yes' if record.has_issues else 'No'}",
        f"Has Homepage: {'Yes' if record.homepage else 'No'}",
        f"Archived: {'Yes' if record.archived else 'No'}",
    ]
    if readme:
        lines.extend(["", "README Content:", readme])
    if target_role:
        lines.extend(["", f"Target Role: {target_role}"])
    lines.extend(
        [
            "",
            "Return JSON with these properties:",
            "- completenessScore (number 0-100: how complete and production-ready it appears)",
            "- workingStatus ('unknown' | 'working' | 'not working')",
            "- activityLevel ('low' | 'medium' | 'high')",
            "- technologies (string[]: advanced technologies or algorithms used)",
            "- majorProject (boolean: is this a significant, impactful project?)",
            "- domainTags (string[]: e.g. 'web development', 'machine learning')",
            "- summary (string: a concise summary suitable for a resume)",
            "- suggestedBullets (string[]: 3-5 concise, quantified resume bullet points)",
        ]
    )
    if target_role:
        lines.append("- relevanceScore (number 0-100: relevance to the target role)")
    return "\n".join(lines) + "\n"


def build_research_prompt(query: str, context: str) -> str:
    return f"Research: {query}. Context: {context}"


def build_questions_prompt(profile_payload: Payload, count: int) -> str:
    return (
        f"Ask {count} clarifying questions that would fill the biggest gaps in this career "
        "profile.\n"
        'Output ONLY a JSON array of objects: [{"question": "", "options": [""]}]\n\n'
        "Profile:\n"
        f"{_dump(profile_payload)}\n"
    )


def build_skill_optimization_prompt(skills: Sequence[str]) -> str:
    return (
        "You are an ATS optimization engine.\n\n"
        "Input skills:\n"
        f"{_dump(list(skills))}\n\n"
        "Remove duplicates and weak variations, normalize naming to industry standards, add "
        "missing but highly relevant skills and order them by market demand.\n"
        'Output ONLY JSON: {"skills": ["Skill 1", "Skill 2"]}\n'
    )


def build_document_prompt(profile_payload: Payload, research: str) -> str:
    return (
        "Generate a resume from the career memory below. Use only facts present in the memory.\n"
        "Output ONLY JSON with this shape:\n"
        f"{RESUME_SCHEMA_HINT}\n\n"
        "Memory:\n"
        f"{_dump(profile_payload)}\n\n"
        "Research:\n"
        f"{research}\n"
    )


def build_tailor_prompt(document_payload: Payload, job_description: str, research: str) -> str:
    return (
        "Tailor the resume below to the target job.\n\n"
        "Target job description:\n"
        f"{job_description}\n\n"
        "Research insights:\n"
        f"{research}\n\n"
        "Candidate resume:\n"
        f"{_dump(document_payload)}\n\n"
        "Mirror the job's language where truthful, surface missing critical keywords naturally "
        "and emphasize relevant achievements. Do not invent experience.\n"
        "Output ONLY the full resume as JSON with this shape:\n"
        f"{RESUME_SCHEMA_HINT}\n"
    )


def build_enhance_prompt(content: str, context: str) -> str:
    return (
        "You are an executive resume strategist. Rewrite the content below as a concise, "
        "high-impact resume passage for recruiters and ATS scanners.\n\n"
        f"Context: {context}\n\n"
        "Rules:\n"
        '- One-line bullets, each starting with "* " and a strong action verb\n'
        "- Action + what + how + impact; no passive voice, no filler\n"
        "- Put quantified results in **bold**; infer realistic metrics only from the context\n\n"
        "Content:\n"
        f'"{content}"\n\n'
        'Output ONLY JSON: {"refinedText": "...", "impactScore": 1-10, '
        '"changes": "short summary of what changed"}\n'
    )


def build_section_prompt(profile_payload: Payload, section_type: str, context: str) -> str:
    return (
        "You are a senior resume architect.\n\n"
        "Memory:\n"
        f"{_dump(profile_payload)}\n\n"
        f'Write the "{section_type}" section of a resume using ONLY facts from the memory.\n'
        f"Context: {context}\n\n"
        'Output bullet points only, each starting with "* ": action + result + metric + '
        "tool. Put metrics in **bold** and embed relevant skill keywords naturally. "
        "No headers, explanations or commentary.\n"
    )


def format_qna_answers(pairs: Sequence[tuple[str, str]]) -> str:
    """Render answered questions as one block of merge text."""

    return "\n\n".join(f"Question: {question}\nAnswer: {answer}" for question, answer in pairs)
