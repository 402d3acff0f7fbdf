"""
Terminal helpers shared by the wizards.

Styling, prompts, the push spinner and the top-level error mapping used
by every command's ``main``. All prompting goes through :mod:`click` so
that the commands can be driven by :class:`click.testing.CliRunner` with
scripted input.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Any, Callable, List, Optional, Sequence, Tuple

import click

from git_wizard.config.loader import ConfigError
from git_wizard.errors import EXIT_FAILURE, UserCancelled, WizardError
from git_wizard.vcs.git_client import FileStatus, GitError

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


# ---------------------------------------------------------------------------
# Styles
# ---------------------------------------------------------------------------

def title(text: str) -> str:
    return click.style(text, fg="magenta", bold=True)


def subtitle(text: str) -> str:
    return click.style(text, fg="cyan")


def success(text: str) -> str:
    return click.style(text, fg="green")


def error(text: str) -> str:
    return click.style(text, fg="red")


def warning(text: str) -> str:
    return click.style(text, fg="yellow")


def highlight(text: str) -> str:
    return click.style(text, fg="bright_yellow")


def muted(text: str) -> str:
    return click.style(text, fg="bright_black")


def progress(text: str) -> str:
    return click.style(text, fg="blue")


def command(text: str) -> str:
    return click.style(text, fg="bright_red")


_STATUS_COLORS = {
    FileStatus.MODIFIED: "yellow",
    FileStatus.ADDED: "green",
    FileStatus.DELETED: "red",
    FileStatus.RENAMED: "yellow",
    FileStatus.UNTRACKED: "cyan",
    FileStatus.UNMERGED: "bright_red",
}


def status_label(status: FileStatus) -> str:
    """Return ``[Status]`` colored by the kind of change."""
    return click.style(f"[{status.value}]", fg=_STATUS_COLORS[status])


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------

def print_banner(heading: str, tagline: str, hint: str) -> None:
    """Print the framed banner shown when a wizard starts."""
    width = 48
    click.echo("")
    click.echo(title("╔" + "═" * width + "╗"))
    click.echo(title("║" + " " * width + "║"))
    click.echo(title("║" + heading.center(width) + "║"))
    click.echo(title("║" + " " * width + "║"))
    click.echo(title("╚" + "═" * width + "╝"))
    click.echo("")
    click.echo(subtitle(tagline))
    click.echo(muted(hint))
    click.echo("")


def print_info(message: str, indent: int = 0):
    """Print an info message."""
    prefix = "  " * indent
    click.echo(f"{prefix}ℹ {message}")


def print_success(message: str, indent: int = 0):
    """Print a success message."""
    prefix = "  " * indent
    click.echo(f"{prefix}{success('✓ ' + message)}")


def print_warning(message: str, indent: int = 0):
    """Print a warning message."""
    prefix = "  " * indent
    click.echo(f"{prefix}{warning('⚠ ' + message)}")


def print_error(message: str, indent: int = 0):
    """Print an error message to stderr."""
    prefix = "  " * indent
    click.echo(f"{prefix}{error('✗ ' + message)}", err=True)


def print_message_box(message: str, width: int = 50) -> None:
    """Print a commit message framed in a box, wrapping long lines."""
    inner = width - 2
    click.echo("╭─" + "─" * width + "╮")
    for index, line in enumerate(message.split("\n")):
        chunks = [line[i:i + inner] for i in range(0, len(line), inner)] or [""]
        for chunk in chunks:
            text = chunk.ljust(width)
            styled = success(text) if index == 0 else muted(text)
            click.echo("│ " + styled + "│")
    click.echo("╰─" + "─" * width + "╯")


# ---------------------------------------------------------------------------
# Prompts
# ---------------------------------------------------------------------------

def parse_selection(raw: str, count: int) -> List[int]:
    """Parse ``"1, 3 5-7"`` into zero-based indexes.

    ``"all"`` or ``"*"`` selects everything. Duplicates are dropped while
    keeping the order of first mention.

    Raises
    ------
    ValueError
        If a token is not a number or range within ``1..count``.
    """
    text = raw.strip().lower()
    if text in ("all", "*"):
        return list(range(count))
    indexes: List[int] = []
    for token in text.replace(",", " ").split():
        if "-" in token:
            start_text, _, end_text = token.partition("-")
            start, end = int(start_text), int(end_text)
            if start > end:
                raise ValueError(f"invalid range '{token}'")
            numbers = range(start, end + 1)
        else:
            numbers = range(int(token), int(token) + 1)
        for number in numbers:
            if not 1 <= number <= count:
                raise ValueError(f"{number} is not between 1 and {count}")
            if number - 1 not in indexes:
                indexes.append(number - 1)
    return indexes


def prompt_select(
    message: str,
    options: Sequence[Tuple[Any, str]],
    default_index: int = 0,
) -> Any:
    """Show a numbered menu and return the value of the chosen option."""
    click.echo(highlight(message))
    for number, (_, label) in enumerate(options, start=1):
        click.echo(f"  {number}. {label}")
    choice = click.prompt(
        "   Choose",
        type=click.IntRange(1, len(options)),
        default=default_index + 1,
        show_default=True,
    )
    return options[choice - 1][0]


def prompt_multiselect(message: str, options: Sequence[Tuple[Any, str]]) -> List[Any]:
    """Show a numbered menu and return the values of every chosen option.

    An empty answer returns an empty list; the caller decides whether
    that is acceptable.
    """
    click.echo(highlight(message))
    for number, (_, label) in enumerate(options, start=1):
        click.echo(f"  {number}. {label}")
    while True:
        raw = click.prompt(
            "   Numbers (e.g. 1,3 or 2-4, 'all' for everything)",
            default="",
            show_default=False,
        )
        try:
            indexes = parse_selection(raw, len(options))
        except ValueError as exc:
            print_warning(f"Invalid selection: {exc}", indent=1)
            continue
        return [options[i][0] for i in indexes]


def prompt_text(message: str, default: Optional[str] = None) -> str:
    """Prompt for optional free text; returns the stripped answer."""
    value = click.prompt(
        f"   {message}",
        default=default or "",
        show_default=bool(default),
    )
    return value.strip()


def confirm(message: str, default: bool = True) -> bool:
    return click.confirm(f"   {message}", default=default)


# ---------------------------------------------------------------------------
# Progress rendering
# ---------------------------------------------------------------------------

class NullRenderer:
    """Progress renderer that draws nothing."""

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        return False


class Spinner:
    """Animated spinner drawn from a background thread.

    The animation is cosmetic: it advances on a fixed interval and is not
    tied to the progress of the work it wraps. Leaving the ``with`` block
    always stops the thread and clears the line.
    """

    FRAMES = ["⠋", "⠙", "⠹", "⠸", "⠼", "⠴", "⠦", "⠧", "⠇", "⠏"]

    def __init__(self, message: str, interval: float = 0.08, width: int = 80):
        self.message = message
        self.interval = interval
        self.width = width
        self.frames_drawn = 0
        self.elapsed = 0.0
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._start_time = 0.0

    def _draw(self) -> None:
        frame = self.FRAMES[self.frames_drawn % len(self.FRAMES)]
        click.echo(f"\r{progress(frame)} {self.message}...", nl=False)
        self.frames_drawn += 1

    def _spin(self) -> None:
        self._draw()
        while not self._stop.wait(self.interval):
            self._draw()

    def __enter__(self):
        self._start_time = time.time()
        self._stop.clear()
        self._thread = threading.Thread(target=self._spin, daemon=True)
        self._thread.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self._stop.set()
        if self._thread is not None:
            self._thread.join()
        self.elapsed = time.time() - self._start_time
        click.echo("\r" + " " * self.width + "\r", nl=False)
        return False


# ---------------------------------------------------------------------------
# Entry-point plumbing
# ---------------------------------------------------------------------------

def configure_logging(verbose: bool = False) -> None:
    # force=True so repeated invocations (tests) reconfigure the handlers.
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
        force=True,
    )


def run_wizard(flow: Callable[[], int], cancel_message: str) -> None:
    """Run ``flow`` and turn its outcome into a process exit.

    ``flow`` returns the exit code on normal completion. Wizard errors,
    git and configuration errors, and prompt aborts are reported on
    stderr and mapped to their exit codes; anything else is logged with
    its traceback and mapped to exit code 1.
    """
    try:
        code = flow()
    except UserCancelled as exc:
        print_error(str(exc) or cancel_message)
        raise click.exceptions.Exit(exc.exit_code)
    except WizardError as exc:
        print_error(str(exc))
        raise click.exceptions.Exit(exc.exit_code)
    except GitError as exc:
        print_error(f"Git error: {exc}")
        raise click.exceptions.Exit(EXIT_FAILURE)
    except ConfigError as exc:
        print_error(f"Configuration error: {exc}")
        raise click.exceptions.Exit(EXIT_FAILURE)
    except click.Abort:
        click.echo("", err=True)
        print_error(cancel_message)
        raise click.exceptions.Exit(EXIT_FAILURE)
    except click.exceptions.Exit:
        raise
    except Exception as exc:
        logging.exception("Unhandled error: %s", exc)
        print_error(f"Unexpected error: {exc}")
        raise click.exceptions.Exit(EXIT_FAILURE)
    raise click.exceptions.Exit(code)
