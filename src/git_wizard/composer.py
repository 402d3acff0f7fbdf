"""
Interactive conventional-commit wizard (``gw-commit``).

Walks the user through the fields of a conventional commit (type, scope,
subject, body, breaking-change note, issue references), previews the
assembled message and commits the index with it. Nothing is written to
the repository until the final confirmation.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import click

from git_wizard import ui
from git_wizard.config.loader import DEFAULT_CONFIG, load_config
from git_wizard.conventional.lint import lint_message
from git_wizard.conventional.message import (
    COMMIT_TYPES,
    DEFAULT_BREAKING_NOTE,
    CommitDraft,
    common_scope_names,
    compose_message,
    infer_scope_from_branch,
    scope_description,
    validate_subject,
)
from git_wizard.errors import (
    EXIT_SUCCESS,
    CommitFailed,
    NoStagedFiles,
    UserCancelled,
    ValidationFailed,
)
from git_wizard.vcs.git_client import GitClient, GitError

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


OTHER_SCOPE = "other"

SCOPE_MODES = [
    ("common", "Common scope"),
    ("custom", "Custom scope"),
    ("none", "No scope"),
]


def _subject_proc(value: str) -> str:
    try:
        return validate_subject(value.strip())
    except ValidationFailed as exc:
        raise click.BadParameter(str(exc)) from exc


def scope_suggestion(client: GitClient) -> Optional[str]:
    """Scope inferred from the current branch name, if any."""
    try:
        return infer_scope_from_branch(client.get_current_branch())
    except GitError as exc:
        logger.debug("Could not read current branch: %s", exc)
        return None


def prompt_type() -> str:
    options = [(t.value, f"{t.title:<12} {ui.muted(t.description)}") for t in COMMIT_TYPES]
    return ui.prompt_select("Select the type of change:", options)


def prompt_scope(scopes: Sequence[str], suggestion: Optional[str]) -> Optional[str]:
    """Ask for the scope; returns ``None`` when the commit has no scope."""
    mode = ui.prompt_select("Select a scope type:", SCOPE_MODES)
    if mode == "none":
        return None
    if mode == "common":
        options = [
            (name, f"{name:<8} {ui.muted(scope_description(name))}") for name in scopes
        ]
        options.append((OTHER_SCOPE, f"{OTHER_SCOPE:<8} {ui.muted('Custom scope (specify)')}"))
        scope = ui.prompt_select("Select scope:", options)
        if scope != OTHER_SCOPE:
            return scope
    return ui.prompt_text("Enter custom scope:", default=suggestion) or None


def collect_draft(
    scopes: Sequence[str], suggestion: Optional[str]
) -> CommitDraft:
    """Prompt for every field and return the resulting draft."""
    commit_type = prompt_type()
    scope = prompt_scope(scopes, suggestion)
    subject = click.prompt(
        "   Enter a short description",
        value_proc=_subject_proc,
    )
    body = ui.prompt_text("Provide a longer description (optional):") or None

    breaking = None
    if ui.confirm("Does this change contain breaking changes?", default=False):
        breaking = ui.prompt_text("Describe the breaking changes:") or DEFAULT_BREAKING_NOTE

    issues = None
    if ui.confirm("Does this change affect any open issues?", default=False):
        issues = ui.prompt_text('Add issue references (e.g., "Fixes #123"):') or None

    return CommitDraft(
        type=commit_type,
        scope=scope,
        subject=subject,
        body=body,
        breaking=breaking,
        issues=issues,
    )


def show_lint_warnings(message: str, body_max_line_length: int) -> List[str]:
    problems = lint_message(message, body_max_line_length=body_max_line_length)
    for problem in problems:
        ui.print_warning(problem, indent=1)
    return problems


def run_composer(client: GitClient, config: Optional[Dict[str, Any]] = None) -> int:
    """Drive the commit wizard against ``client`` and return the exit code."""
    config = config or DEFAULT_CONFIG

    staged = client.staged_files()
    if not staged:
        raise NoStagedFiles(
            "No staged files found. Please stage your changes with: git add <files>"
        )

    click.echo(ui.highlight("🔍 Files to be committed:"))
    for path in staged:
        click.echo(ui.muted(f"  - {path}"))
    click.echo("")

    suggestion = scope_suggestion(client)
    if suggestion:
        logger.debug("Scope suggested by branch name: %s", suggestion)

    draft = collect_draft(common_scope_names(config["common_scopes"]), suggestion)
    message = compose_message(draft)

    click.echo("")
    click.echo(ui.highlight("📝 Generated Commit Message:"))
    ui.print_message_box(message)
    show_lint_warnings(message, config["body_max_line_length"])

    if not ui.confirm("Create commit with this message?", default=True):
        raise UserCancelled("Commit cancelled")

    try:
        client.commit(message)
    except GitError as exc:
        raise CommitFailed(f"Failed to create commit: {exc}") from exc
    click.echo(ui.success("\n✅ Commit created successfully!"))
    return EXIT_SUCCESS


@click.command()
def main() -> None:
    """✨ Create a conventional commit from the staged changes."""
    def flow() -> int:
        client = GitClient.discover(Path.cwd())
        config = load_config(client.repo_root)
        ui.configure_logging(config["verbose"])
        ui.print_banner(
            "✨ COMMIT WIZARD ✨",
            "Create beautiful conventional commit messages with ease",
            "Follow the prompts to craft your commit message",
        )
        return run_composer(client, config)

    ui.run_wizard(flow, "Commit creation canceled")


if __name__ == "__main__":
    main()
