from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from careermem.app import (
    answer_questions,
    ask_questions,
    enhance_content,
    generate_resume,
    generate_section,
    import_github_projects,
    ingest_files,
    optimize_skills,
    show_profile,
)
from careermem.config import InvalidConfigurationError, configure_logging
from careermem.domain.model import QnAAnswer, SectionType
from careermem.domain.reconciliation import DEFAULT_ENHANCE_CONTEXT

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)

DEFAULT_USER_ID = "local"


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Maintain a career memory profile")
    subparsers = parser.add_subparsers(dest="command", required=True)

    ingest = subparsers.add_parser("ingest", help="Merge resumes and notes into the profile")
    ingest.add_argument(
        "files",
        nargs="+",
        type=Path,
        help="Files to ingest (.txt .md .json .pdf .docx)",
    )

    answer = subparsers.add_parser("answer", help="Merge answers to open questions")
    answer.add_argument(
        "--question",
        action="append",
        required=True,
        help="Question being answered; repeat once per answer",
    )
    answer.add_argument(
        "--answer",
        action="append",
        required=True,
        help="Answer to the question in the same position",
    )

    ask = subparsers.add_parser("ask", help="Propose follow-up questions about profile gaps")
    ask.add_argument("--count", type=int, help="Number of questions to add (defaults to config)")

    github = subparsers.add_parser("import-github", help="Analyze and import GitHub repositories")
    github.add_argument("--target-role", type=str, help="Role to score repository relevance for")
    github.add_argument(
        "--max-repositories",
        type=int,
        help="Maximum number of repositories to list before stopping",
    )

    subparsers.add_parser("optimize-skills", help="Deduplicate and group the skill list")

    generate = subparsers.add_parser("generate-resume", help="Generate a resume from the profile")
    generate.add_argument(
        "--job-file",
        type=Path,
        help="Text file with the job description to target",
    )

    enhance = subparsers.add_parser("enhance", help="Rewrite one resume passage for impact")
    enhance.add_argument("text", help="Passage to rewrite; '-' reads standard input")
    enhance.add_argument(
        "--context",
        default=DEFAULT_ENHANCE_CONTEXT,
        help="Where the passage is used (default: %(default)s)",
    )

    section = subparsers.add_parser(
        "generate-section", help="Write bullets for one resume section from the profile"
    )
    section.add_argument("section", choices=[kind.value for kind in SectionType])
    section.add_argument("--context", default="", help="Target role or job to write for")

    subparsers.add_parser("show", help="Print the stored profile as JSON")

    for subparser in subparsers.choices.values():
        subparser.add_argument(
            "--user-id",
            type=str,
            default=DEFAULT_USER_ID,
            help="Profile owner (default: %(default)s)",
        )

    return parser.parse_args(list(argv))


def _build_answers(args: argparse.Namespace) -> list[QnAAnswer]:
    questions: list[str] = args.question
    answers: list[str] = args.answer
    if len(questions) != len(answers):
        raise ValueError(
            f"Got {len(questions)} --question and {len(answers)} --answer values; "
            "pass exactly one --answer per --question"
        )
    return [QnAAnswer(question=q, answer=a) for q, a in zip(questions, answers, strict=True)]


def _write_json(payload: object) -> None:
    sys.stdout.write(json.dumps(payload, indent=2, ensure_ascii=False) + "\n")


def _run(args: argparse.Namespace) -> None:
    user_id: str = args.user_id
    if args.command == "ingest":
        ingest_files(args.files, user_id=user_id)
    elif args.command == "answer":
        answer_questions(_build_answers(args), user_id=user_id)
    elif args.command == "ask":
        profile = ask_questions(user_id=user_id, count=args.count)
        for item in profile.qna:
            log.info("Open question [%s]: %s", item.id, item.question)
    elif args.command == "import-github":
        import_github_projects(
            user_id=user_id,
            target_role=args.target_role,
            max_repositories=args.max_repositories,
        )
    elif args.command == "optimize-skills":
        profile = optimize_skills(user_id=user_id)
        log.info("Profile now lists %d skills", len(profile.skills))
    elif args.command == "generate-resume":
        job = args.job_file.read_text(encoding="utf-8") if args.job_file else None
        document = generate_resume(user_id=user_id, job_description=job)
        _write_json(document.as_payload())
    elif args.command == "enhance":
        text = sys.stdin.read() if args.text == "-" else args.text
        _write_json(enhance_content(text, context=args.context).as_payload())
    elif args.command == "generate-section":
        bullets = generate_section(
            user_id=user_id, section_type=args.section, context=args.context
        )
        sys.stdout.write(bullets + "\n")
    elif args.command == "show":
        _write_json(show_profile(user_id=user_id).as_payload())
    else:
        raise ValueError(f"Unsupported command: {args.command}")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    load_dotenv()
    try:
        configure_logging()
    except InvalidConfigurationError as exc:
        configure_logging(level=logging.INFO)
        log.warning("%s; logging at INFO instead", exc)
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
        if parsed_args.command == "answer":
            _build_answers(parsed_args)
    except ValueError:
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        _run(parsed_args)
    except Exception:
        log.exception("Command %s failed", parsed_args.command)
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


if __name__ == "__main__":
    signal(SIGINT, sigint_handler)
    main()
