"""
``prepare-commit-msg`` hook (``gw-prepare-commit-msg``).

When a plain ``git commit`` opens the editor, this hook first asks for
the conventional-commit fields and writes the composed message into the
file git passes as the first argument. It stays out of the way for
commits that already have a message (``-m``, templates, merges, squashes,
amends, rebases, cherry-picks) and for non-interactive sessions.

Install :data:`HOOK_SHIM` as ``.git/hooks/prepare-commit-msg`` (executable).
It hands over the terminal only when one can be opened, so commits from CI
or GUI clients go through untouched.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

import click

from git_wizard import ui
from git_wizard.config.loader import load_config
from git_wizard.conventional.lint import lint_message
from git_wizard.conventional.message import (
    COMMIT_TYPES,
    CommitDraft,
    compose_message,
    infer_scope_from_branch,
    sentence_case,
    validate_subject,
)
from git_wizard.errors import EXIT_SUCCESS, UserCancelled, ValidationFailed
from git_wizard.vcs.git_client import GitClient, GitError

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


HOOK_SHIM = """\
#!/bin/sh
if (: < /dev/tty) 2>/dev/null; then
    exec gw-prepare-commit-msg "$@" < /dev/tty
fi
exit 0
"""

SKIPPED_SOURCES = {"message", "template", "merge", "squash", "commit"}
IN_PROGRESS_MARKERS = ("MERGE_HEAD", "REBASE_HEAD", "CHERRY_PICK_HEAD")


def has_message(text: str) -> bool:
    """True if ``text`` holds anything besides comments and blank lines."""
    return any(
        line.strip() and not line.startswith("#") for line in text.splitlines()
    )


def should_skip(msg_file: Path, source: Optional[str], git_dir: Path) -> bool:
    if source in SKIPPED_SOURCES:
        return True
    if any((git_dir / marker).exists() for marker in IN_PROGRESS_MARKERS):
        return True
    if msg_file.exists() and has_message(msg_file.read_text(encoding="utf-8")):
        return True
    return False


def _required_subject(value: str) -> str:
    try:
        return validate_subject(sentence_case(value))
    except ValidationFailed as exc:
        raise click.BadParameter(str(exc)) from exc


def prompt_draft(suggestion: Optional[str]) -> CommitDraft:
    commit_type = ui.prompt_select(
        "Select the type of change you're committing:",
        [(t.value, f"{t.title:<12} {ui.muted(t.description)}") for t in COMMIT_TYPES],
    )
    scope = ui.prompt_text("What is the scope of this change (optional):", default=suggestion)
    subject = click.prompt(
        "   Write a short, imperative mood description of the change",
        value_proc=_required_subject,
    )
    body = ui.prompt_text("Provide a longer description of the change (optional):")
    breaking = ui.prompt_text("List any breaking changes (optional):")
    issues = ui.prompt_text("List any issues closed by this change (optional):")
    return CommitDraft(
        type=commit_type,
        scope=scope or None,
        subject=subject,
        body=body or None,
        breaking=breaking or None,
        issues=f"Closes: {issues}" if issues else None,
    )


def run_hook(msg_file: Path, client: GitClient, body_max_line_length: int = 100) -> int:
    """Prompt for a message and write it to ``msg_file``."""
    try:
        suggestion = infer_scope_from_branch(client.get_current_branch())
    except GitError:
        click.echo("Failed to fetch current branch")
        suggestion = None

    draft = prompt_draft(suggestion)
    message = compose_message(draft)
    for problem in lint_message(message, body_max_line_length=body_max_line_length):
        ui.print_warning(problem, indent=1)

    if not ui.confirm("Confirm commit with the above details?", default=True):
        raise UserCancelled("Commit creation canceled")

    msg_file.write_text(message, encoding="utf-8")
    click.echo("\n✅ Commit message created successfully!")
    click.echo(f"📝 Message: {message}")
    return EXIT_SUCCESS


@click.command()
@click.argument("msg_file", type=click.Path(dir_okay=False, path_type=Path))
@click.argument("source", required=False)
@click.argument("sha", required=False)
def main(msg_file: Path, source: Optional[str], sha: Optional[str]) -> None:
    """Compose MSG_FILE interactively for plain ``git commit`` runs."""
    def flow() -> int:
        client = GitClient.discover(Path.cwd())
        if should_skip(msg_file, source, client.git_dir):
            logger.debug("Skipping hook for source=%s", source)
            return EXIT_SUCCESS
        if not sys.stdin.isatty():
            return EXIT_SUCCESS
        config = load_config(client.repo_root)
        ui.configure_logging(config["verbose"])
        return run_hook(msg_file, client, config["body_max_line_length"])

    ui.run_wizard(flow, "Commit creation canceled")


if __name__ == "__main__":
    main()
