"""
Git client implementation for git_wizard.

This module wraps the handful of Git operations the wizards need. Every
command goes through a single capability, :func:`run_git`, which is
injected into :class:`GitClient` so that the interactive flows can be
tested against an in-memory fake without spawning processes. Arguments
are always passed as a list; no shell command string is ever built.
"""

from __future__ import annotations

import enum
import logging
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional, Sequence


logger = logging.getLogger(__name__)
# Attach a null handler to avoid logging errors when the root logger is not
# configured. Logs will propagate to the root when configured by the CLI.
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


class FileStatus(str, enum.Enum):
    """Display classification of a porcelain status code."""

    MODIFIED = "Modified"
    ADDED = "Added"
    DELETED = "Deleted"
    RENAMED = "Renamed"
    UNTRACKED = "Untracked"
    UNMERGED = "Unmerged"


# Checked in order; the first letter found in the two-character code wins.
_STATUS_PRECEDENCE = (
    ("M", FileStatus.MODIFIED),
    ("A", FileStatus.ADDED),
    ("D", FileStatus.DELETED),
    ("R", FileStatus.RENAMED),
    ("?", FileStatus.UNTRACKED),
    ("U", FileStatus.UNMERGED),
)


@dataclass
class FileChange:
    """Representation of a single file change in the working tree."""

    path: str
    status: FileStatus
    is_staged: bool = False


@dataclass
class GitResult:
    """Outcome of a single git invocation."""

    exit_code: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


@dataclass
class OutstandingCommits:
    """Commits reachable from the local branch but not from the remote one.

    ``new_branch`` is set when the remote-tracking branch does not exist
    yet; ``commits`` is then empty.
    """

    new_branch: bool = False
    commits: List[str] = field(default_factory=list)


class GitError(Exception):
    """Raised when a Git command fails."""

    pass


GitRunner = Callable[..., GitResult]


def run_git(
    args: Sequence[str],
    cwd: Optional[Path] = None,
    merge_output: bool = False,
) -> GitResult:
    """Run ``git`` with ``args`` and capture its output.

    Parameters
    ----------
    args : Sequence[str]
        Arguments passed to git, without the leading ``git``.
    cwd : Path, optional
        Working directory for the process.
    merge_output : bool
        When True stderr is folded into stdout, preserving the
        interleaving git produces (used for push progress output).
    """
    full_cmd = ["git"] + list(args)
    logger.debug("Executing Git command: %s", " ".join(full_cmd))
    try:
        result = subprocess.run(
            full_cmd,
            cwd=cwd,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT if merge_output else subprocess.PIPE,
            text=True,
            encoding="utf-8",
            errors="replace",
        )
    except FileNotFoundError as exc:
        raise GitError("git executable not found on PATH") from exc
    return GitResult(
        exit_code=result.returncode,
        stdout=result.stdout or "",
        stderr=result.stderr or "",
    )


# ----------------------------------------------------------------------
# Porcelain parsing
# ----------------------------------------------------------------------
def classify_status(code: str) -> FileStatus:
    """Map a two-character porcelain status code to a :class:`FileStatus`.

    Codes that carry none of the known letters (copies, type changes) are
    reported as modifications.
    """
    for letter, status in _STATUS_PRECEDENCE:
        if letter in code:
            return status
    return FileStatus.MODIFIED


def parse_status_entry(entry: str) -> Optional[FileChange]:
    """Parse one record of ``git status --porcelain -z``.

    Records are ``XY <path>`` with the path printed verbatim, never
    quoted. Returns ``None`` for records too short to carry a path.
    """
    if len(entry) < 4:
        return None
    code = entry[:2]
    path = entry[3:]
    return FileChange(
        path=path,
        status=classify_status(code),
        is_staged=code[0] not in (" ", "?"),
    )


def parse_porcelain(output: str) -> List[FileChange]:
    """Parse NUL-terminated porcelain output into unique :class:`FileChange` entries.

    A rename or copy record is followed by an extra record holding the
    original path, which is skipped; the new path is the one to stage.
    """
    changes: List[FileChange] = []
    seen = set()
    entries = iter(output.split("\0"))
    for entry in entries:
        change = parse_status_entry(entry)
        if change is None:
            continue
        if "R" in entry[:2] or "C" in entry[:2]:
            next(entries, None)
        if change.path in seen:
            continue
        seen.add(change.path)
        changes.append(change)
    return changes


def split_nul(output: str) -> List[str]:
    """Split ``-z`` output into its non-empty records, dropping duplicates."""
    paths: List[str] = []
    for path in output.split("\0"):
        if path and path not in paths:
            paths.append(path)
    return paths


class GitClient:
    """Client for interacting with a Git repository."""

    def __init__(self, repo_root: Path, runner: GitRunner = run_git) -> None:
        self.repo_root = repo_root
        self._runner = runner

    # ------------------------------------------------------------------
    # Static helpers
    # ------------------------------------------------------------------
    @staticmethod
    def find_repo_root(start: Path) -> Optional[Path]:
        """Find the root of the Git repository starting from ``start``.

        Walk upwards until a ``.git`` entry is found or the filesystem
        root is reached.
        """
        current = start.resolve()
        while True:
            if (current / ".git").exists():
                return current
            if current.parent == current:
                return None
            current = current.parent

    @classmethod
    def discover(cls, start: Path) -> "GitClient":
        """Return a client for the repository containing ``start``.

        Raises
        ------
        GitError
            If ``start`` is not inside a Git repository.
        """
        root = cls.find_repo_root(start)
        if root is None:
            raise GitError("Not inside a Git repository")
        return cls(root)

    @property
    def git_dir(self) -> Path:
        """Return the repository's Git directory.

        Asks git rather than assuming ``<root>/.git``, which is a file in
        linked worktrees and submodules.
        """
        result = self._run(["rev-parse", "--git-dir"])
        path = Path(result.stdout.strip())
        if not path.is_absolute():
            path = self.repo_root / path
        return path

    # ------------------------------------------------------------------
    # Basic Git commands
    # ------------------------------------------------------------------
    def _run(
        self,
        args: List[str],
        check: bool = True,
        merge_output: bool = False,
    ) -> GitResult:
        """Run a Git command in the repository root.

        Raises
        ------
        GitError
            If the command exits with a non-zero status when ``check`` is True.
        """
        result = self._runner(args, cwd=self.repo_root, merge_output=merge_output)
        if check and not result.ok:
            logger.error(
                "Git command failed: git %s\nSTDOUT: %s\nSTDERR: %s",
                " ".join(args),
                result.stdout,
                result.stderr,
            )
            raise GitError(result.stderr.strip() or result.stdout.strip())
        return result

    # ------------------------------------------------------------------
    # Status and change detection
    # ------------------------------------------------------------------
    # Path listings use -z so names come back verbatim instead of
    # C-quoted (non-ASCII, quotes, control characters).
    def list_changes(self) -> List[FileChange]:
        """Return the working-tree status snapshot, untracked files included."""
        result = self._run(["status", "--porcelain", "-z"])
        return parse_porcelain(result.stdout)

    def short_status(self) -> List[str]:
        """Return the lines of ``git status -s`` (for display)."""
        result = self._run(["status", "-s"])
        return [line for line in result.stdout.splitlines() if line.strip()]

    def modified_and_untracked(self) -> List[str]:
        """List modified tracked files and untracked, non-ignored files."""
        result = self._run(
            ["ls-files", "-z", "--modified", "--others", "--exclude-standard"]
        )
        # Deleted files are reported once per matching flag.
        return split_nul(result.stdout)

    def staged_files(self) -> List[str]:
        """Return the paths currently in the index relative to HEAD."""
        result = self._run(["diff", "--cached", "--name-only", "-z"])
        return split_nul(result.stdout)

    # ------------------------------------------------------------------
    # Branch and remote information
    # ------------------------------------------------------------------
    def get_current_branch(self) -> str:
        """Return the current branch name, empty on a detached HEAD."""
        result = self._run(["branch", "--show-current"])
        return result.stdout.strip()

    def remotes(self) -> List[str]:
        result = self._run(["remote"])
        return [line.strip() for line in result.stdout.splitlines() if line.strip()]

    def remote_branch_exists(self, remote: str, branch: str) -> bool:
        """Return True if ``<remote>/<branch>`` is a known remote-tracking ref."""
        result = self._run(
            ["rev-parse", "--verify", "--quiet", f"refs/remotes/{remote}/{branch}"],
            check=False,
        )
        return result.ok

    def unpushed_commits(
        self, remote: str, remote_branch: str, local_branch: str
    ) -> OutstandingCommits:
        """Return the commits on ``local_branch`` missing from the remote branch."""
        if not self.remote_branch_exists(remote, remote_branch):
            logger.debug("%s/%s does not exist yet", remote, remote_branch)
            return OutstandingCommits(new_branch=True)
        result = self._run(
            ["log", "--oneline", f"{remote}/{remote_branch}..{local_branch}"]
        )
        commits = [line for line in result.stdout.splitlines() if line.strip()]
        return OutstandingCommits(new_branch=False, commits=commits)

    # ------------------------------------------------------------------
    # Staging, committing, pushing
    # ------------------------------------------------------------------
    def stage(self, paths: Sequence[str]) -> None:
        """Stage all ``paths`` with a single ``git add`` invocation."""
        if not paths:
            return
        self._run(["add", "--"] + list(paths))

    def commit(self, message: str) -> None:
        """Create a commit with the given message.

        Multi-line commit messages are supported. If the commit fails,
        a GitError is raised.
        """
        self._run(["commit", "-m", message])

    def push(
        self,
        remote: str,
        local_branch: str,
        remote_branch: str,
        force: bool = False,
    ) -> GitResult:
        """Push ``local_branch`` to ``remote_branch`` on ``remote``.

        Unlike the other commands this never raises on a non-zero exit;
        the caller inspects the returned :class:`GitResult`, whose
        ``stdout`` holds the combined output of the push.
        """
        args = ["push"]
        if force:
            args.append("--force")
        args += [remote, f"{local_branch}:{remote_branch}"]
        return self._run(args, check=False, merge_output=True)
