"""
Interactive staging wizard (``gw-add``).

Shows the working-tree status, lets the user pick the files to stage
(all of them, individually, by extension or by regular expression),
stages the selection with one ``git add`` call and finally offers to
continue with the commit wizard.
"""

from __future__ import annotations

import logging
import os
import re
import subprocess
import sys
from pathlib import Path
from typing import Dict, List, Sequence

import click

from git_wizard import ui
from git_wizard.config.loader import load_config
from git_wizard.errors import (
    EXIT_SUCCESS,
    EmptySelection,
    NoMatch,
    StagingFailed,
    UserCancelled,
    ValidationFailed,
)
from git_wizard.vcs.git_client import FileChange, GitClient, GitError

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


SELECTION_MODES = [
    ("all", "Stage all files"),
    ("individual", "Select individual files"),
    ("type", "Stage by file type"),
    ("pattern", "Stage by pattern"),
]

_INDEX_COLORS: Dict[str, str] = {
    "M": "yellow",
    "A": "green",
    "D": "red",
    "R": "yellow",
}


# ---------------------------------------------------------------------------
# Selection rules
# ---------------------------------------------------------------------------

def unstaged(changes: Sequence[FileChange]) -> List[FileChange]:
    return [change for change in changes if not change.is_staged]


def select_all(changes: Sequence[FileChange]) -> List[str]:
    return [change.path for change in unstaged(changes)]


def file_extension(path: str) -> str:
    """Lower-cased extension of ``path`` including the dot, or ``""``."""
    return os.path.splitext(path)[1].lower()


def collect_extensions(changes: Sequence[FileChange]) -> List[str]:
    """Distinct extensions among unstaged changes, in first-seen order."""
    extensions: List[str] = []
    for change in unstaged(changes):
        ext = file_extension(change.path)
        if ext and ext not in extensions:
            extensions.append(ext)
    return extensions


def select_by_extensions(
    changes: Sequence[FileChange], extensions: Sequence[str]
) -> List[str]:
    wanted = {ext.lower() for ext in extensions}
    return [
        change.path
        for change in unstaged(changes)
        if file_extension(change.path) in wanted
    ]


def filter_by_pattern(paths: Sequence[str], pattern: str) -> List[str]:
    """Return the ``paths`` in which ``pattern`` finds a match.

    The pattern is applied in process with :func:`re.search`; it is never
    handed to a shell.

    Raises
    ------
    ValidationFailed
        If the pattern is empty or not a valid regular expression.
    NoMatch
        If no path matches.
    """
    if not pattern:
        raise ValidationFailed("No pattern entered")
    try:
        regex = re.compile(pattern)
    except re.error as exc:
        raise ValidationFailed(f"Invalid pattern '{pattern}': {exc}") from exc
    matched = [path for path in paths if regex.search(path)]
    if not matched:
        raise NoMatch(f"No files match the pattern: {pattern}")
    return matched


# ---------------------------------------------------------------------------
# Interactive steps
# ---------------------------------------------------------------------------

def choose_files(client: GitClient, changes: Sequence[FileChange]) -> List[str]:
    """Ask for a selection mode and return the paths to stage."""
    pending = unstaged(changes)
    mode = ui.prompt_select("How would you like to select files?", SELECTION_MODES)
    logger.debug("Selection mode: %s", mode)

    if mode == "all":
        return select_all(changes)

    if mode == "individual":
        selected = ui.prompt_multiselect(
            "Select files to stage",
            [(c.path, f"{ui.status_label(c.status)} {c.path}") for c in pending],
        )
        if not selected:
            raise EmptySelection("No files selected")
        return selected

    if mode == "type":
        extensions = collect_extensions(changes)
        if not extensions:
            raise NoMatch("No file extensions detected")
        chosen = ui.prompt_multiselect(
            "Select file types to stage", [(ext, ext) for ext in extensions]
        )
        if not chosen:
            raise EmptySelection("No file types selected")
        return select_by_extensions(changes, chosen)

    pattern = ui.prompt_text("Enter a regular expression (e.g. ^src/.*\\.py$)")
    return filter_by_pattern(client.modified_and_untracked(), pattern)


def show_status(client: GitClient) -> None:
    click.echo(ui.highlight("📦 Current staging area:"))
    for line in client.short_status():
        color = _INDEX_COLORS.get(line[:1])
        text = f"  {line}"
        click.echo(click.style(text, fg=color) if color else ui.muted(text))
    click.echo("")


def launch_composer() -> int:
    """Run the commit wizard as a child process sharing this terminal."""
    click.echo(ui.success("\n🚀 Launching commit wizard...\n"))
    result = subprocess.run([sys.executable, "-m", "git_wizard.composer"])
    return result.returncode


def offer_commit(message: str) -> int:
    if ui.confirm(message, default=True):
        return launch_composer()
    click.echo(ui.muted("\nRun 'gw-commit' when you're ready to commit your changes."))
    return EXIT_SUCCESS


def run_stager(client: GitClient) -> int:
    """Drive the staging wizard against ``client`` and return the exit code."""
    branch = client.get_current_branch() or "(detached HEAD)"
    click.echo(f"{ui.highlight('🔍 Current branch:')} {ui.command(branch)}")
    click.echo("")

    changes = client.list_changes()
    if not changes:
        ui.print_warning("No changes detected in the working directory")
        click.echo(ui.muted("Make some changes before running this command"))
        return EXIT_SUCCESS

    staged = [c for c in changes if c.is_staged]
    pending = unstaged(changes)

    if staged:
        click.echo(ui.success("🎯 Files already staged:"))
        for change in staged:
            click.echo(f"  {ui.status_label(change.status)} {ui.muted(change.path)}")
        click.echo("")

    if not pending:
        ui.print_warning("No unstaged changes available")
        click.echo(ui.muted("All changes are already staged"))
        return offer_commit("All changes are staged. Would you like to proceed to commit?")

    click.echo(ui.highlight("📄 Changes available to stage:"))
    for number, change in enumerate(pending, start=1):
        click.echo(f"  {number}. {ui.status_label(change.status)} {change.path}")
    click.echo("")

    paths = choose_files(client, changes)
    if not paths:
        raise EmptySelection("No files selected")

    click.echo(ui.highlight("\n📋 Files selected for staging:"))
    for path in paths:
        click.echo(ui.muted(f"  - {path}"))
    click.echo("")

    if not ui.confirm(f"Stage {len(paths)} file(s)?", default=True):
        raise UserCancelled("Staging canceled")

    click.echo(ui.progress("\n🔄 Staging files..."))
    try:
        client.stage(paths)
    except GitError as exc:
        raise StagingFailed(f"Failed to stage files: {exc}") from exc
    ui.print_success("Files staged successfully!")
    click.echo("")

    show_status(client)
    return offer_commit("Would you like to proceed to commit?")


@click.command()
def main() -> None:
    """📁 Select and stage files for your next commit."""
    def flow() -> int:
        client = GitClient.discover(Path.cwd())
        config = load_config(client.repo_root)
        ui.configure_logging(config["verbose"])
        ui.print_banner(
            "📁 ADD WIZARD 📁",
            "Select files to stage for your next commit",
            "Choose which changes you want to include",
        )
        return run_stager(client)

    ui.run_wizard(flow, "Staging canceled")


if __name__ == "__main__":
    main()
