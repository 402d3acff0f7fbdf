"""
Interactive push wizard (``gw-push``).

Lets the user choose the remote, the remote branch name and whether to
force, shows the commits that are about to be pushed and runs a single
``git push`` while a spinner animates. Success is decided by the exit
code of git alone; the output classification below only affects colors.
"""

from __future__ import annotations

import enum
import logging
import re
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import click

from git_wizard import ui
from git_wizard.config.loader import DEFAULT_CONFIG, load_config
from git_wizard.errors import EXIT_SUCCESS, PushFailed, UserCancelled, WizardError
from git_wizard.vcs.git_client import GitClient, OutstandingCommits

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


@dataclass(frozen=True)
class PushPlan:
    """Where and how to push."""

    remote: str
    local_branch: str
    remote_branch: str
    force: bool = False

    @property
    def refspec(self) -> str:
        return f"{self.local_branch}:{self.remote_branch}"

    def command_line(self) -> str:
        force = "--force " if self.force else ""
        return f"git push {force}{self.remote} {self.refspec}"


class PushLineKind(enum.Enum):
    ENUMERATING = "enumerating"
    COUNTING = "counting"
    COMPRESSING = "compressing"
    WRITING = "writing"
    TOTAL = "total"
    REMOTE = "remote"
    REF_UPDATE = "ref-update"
    OTHER = "other"


_REF_UPDATE_RE = re.compile(r"[a-f0-9]+\.\.[a-f0-9]+ +")

_LINE_MARKERS = (
    ("Enumerating objects", PushLineKind.ENUMERATING),
    ("Counting objects", PushLineKind.COUNTING),
    ("Compressing objects", PushLineKind.COMPRESSING),
    ("Writing objects", PushLineKind.WRITING),
    ("Total", PushLineKind.TOTAL),
    ("remote:", PushLineKind.REMOTE),
)

_KIND_STYLES = {
    PushLineKind.ENUMERATING: ui.highlight,
    PushLineKind.COUNTING: ui.progress,
    PushLineKind.COMPRESSING: ui.progress,
    PushLineKind.WRITING: ui.progress,
    PushLineKind.TOTAL: ui.highlight,
    PushLineKind.REMOTE: ui.muted,
    PushLineKind.REF_UPDATE: ui.success,
}


def classify_push_line(line: str) -> PushLineKind:
    """Classify one line of ``git push`` output for display."""
    for marker, kind in _LINE_MARKERS:
        if marker in line:
            return kind
    if _REF_UPDATE_RE.search(line):
        return PushLineKind.REF_UPDATE
    return PushLineKind.OTHER


def format_push_output(output: str) -> str:
    """Color ``git push`` output line by line, dropping blank lines."""
    formatted: List[str] = []
    # git redraws progress lines with carriage returns; keep the last frame.
    for raw in output.split("\n"):
        line = raw.rstrip("\r").split("\r")[-1]
        if not line.strip():
            continue
        style = _KIND_STYLES.get(classify_push_line(line))
        formatted.append(style(line) if style else line)
    return "\n".join(formatted)


def default_remote(remotes: Sequence[str], preferred: str = "origin") -> str:
    """``preferred`` when it is configured, otherwise the first remote."""
    if preferred in remotes:
        return preferred
    return remotes[0]


def plan_push(
    current_branch: str,
    remotes: Sequence[str],
    preferred_remote: str = "origin",
) -> PushPlan:
    """Ask for remote, remote branch and force flag."""
    initial = default_remote(remotes, preferred_remote)
    remote = ui.prompt_select(
        "Select remote to push to:",
        [(name, name) for name in remotes],
        default_index=list(remotes).index(initial),
    )
    remote_branch = ui.prompt_text("Branch to push to remote:", default=current_branch)
    force = ui.confirm("Use force push? (--force)", default=False)
    return PushPlan(
        remote=remote,
        local_branch=current_branch,
        remote_branch=remote_branch or current_branch,
        force=force,
    )


def find_outstanding(client: GitClient, plan: PushPlan) -> OutstandingCommits:
    return client.unpushed_commits(plan.remote, plan.remote_branch, plan.local_branch)


def show_outstanding(outstanding: OutstandingCommits, limit: int = 5) -> None:
    if outstanding.new_branch:
        click.echo(ui.highlight("📦 This appears to be a new branch on the remote"))
        return
    click.echo(ui.highlight("\n📦 Commits to be pushed:"))
    for commit in outstanding.commits[:limit]:
        click.echo(ui.muted(f"  - {commit}"))
    hidden = len(outstanding.commits) - limit
    if hidden > 0:
        click.echo(ui.muted(f"  - ... and {hidden} more commits"))
    click.echo("")


def make_renderer(plan: PushPlan, interval: float):
    """Spinner on an interactive terminal, nothing otherwise."""
    if sys.stdout.isatty():
        return ui.Spinner(f"Pushing to {plan.remote}/{plan.remote_branch}", interval)
    return ui.NullRenderer()


def execute_push(client: GitClient, plan: PushPlan, renderer=None) -> str:
    """Run the push once inside ``renderer`` and return its output.

    Raises
    ------
    PushFailed
        If git exits non-zero; the raw output is attached to the error.
    """
    renderer = renderer or ui.NullRenderer()
    with renderer:
        result = client.push(
            plan.remote, plan.local_branch, plan.remote_branch, force=plan.force
        )
    logger.debug("git push exited with %s", result.exit_code)
    if not result.ok:
        raise PushFailed("Push failed!", output=result.stdout)
    return result.stdout


def run_pusher(
    client: GitClient,
    config: Optional[Dict[str, Any]] = None,
    renderer=None,
) -> int:
    """Drive the push wizard against ``client`` and return the exit code."""
    config = config or DEFAULT_CONFIG

    current_branch = client.get_current_branch()
    if not current_branch:
        raise WizardError("Not on a branch (detached HEAD); check out a branch first")
    remotes = client.remotes()
    if not remotes:
        raise WizardError("No remotes configured; add one with: git remote add <name> <url>")

    plan = plan_push(current_branch, remotes, config["default_remote"])

    outstanding = find_outstanding(client, plan)
    if not outstanding.new_branch and not outstanding.commits:
        ui.print_warning("No unpushed commits detected")
        if not ui.confirm("Continue with push anyway?", default=False):
            click.echo(ui.muted("\n🚫 Push canceled"))
            return EXIT_SUCCESS
    else:
        show_outstanding(outstanding, config["max_preview_commits"])

    click.echo(ui.highlight("\n🔄 Executing:"))
    click.echo(ui.command(f"  {plan.command_line()}"))
    click.echo("")

    suffix = " (FORCE PUSH)" if plan.force else ""
    if not ui.confirm(
        f"Push {plan.local_branch} to {plan.remote}/{plan.remote_branch}?{suffix}",
        default=True,
    ):
        raise UserCancelled("Push canceled")

    click.echo("")
    if renderer is None:
        renderer = make_renderer(plan, config["spinner_interval"])
    try:
        output = execute_push(client, plan, renderer)
    except PushFailed as exc:
        click.echo(exc.output, err=True)
        click.echo(ui.error("Try resolving the issues and pushing again.\n"), err=True)
        raise

    ui.print_success("Push successful!")
    click.echo("")
    formatted = format_push_output(output)
    if formatted:
        click.echo(formatted)
    click.echo(ui.success("\n🎉 Changes pushed successfully to remote!\n"))
    return EXIT_SUCCESS


@click.command()
def main() -> None:
    """🚀 Push your commits to a remote with interactive feedback."""
    def flow() -> int:
        client = GitClient.discover(Path.cwd())
        config = load_config(client.repo_root)
        ui.configure_logging(config["verbose"])
        ui.print_banner(
            "🚀 PUSH WIZARD 🚀",
            "Push your commits to remote with interactive feedback",
            "Follow the prompts to push your changes",
        )
        return run_pusher(client, config)

    ui.run_wizard(flow, "Push canceled")


if __name__ == "__main__":
    main()
