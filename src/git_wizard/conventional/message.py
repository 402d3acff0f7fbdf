"""
Conventional-commit draft model and message formatting.

A :class:`CommitDraft` is built from the answers collected by the commit
wizard and consumed once by :func:`compose_message`. Everything here is
pure: no prompts, no git, so the formatting rules can be unit tested in
isolation.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from git_wizard.errors import ValidationFailed


@dataclass(frozen=True)
class CommitType:
    """A selectable commit type together with its menu decoration."""

    value: str
    emoji: str
    description: str

    @property
    def title(self) -> str:
        return f"{self.emoji} {self.value}"


COMMIT_TYPES: Tuple[CommitType, ...] = (
    CommitType("feat", "✨", "A new feature"),
    CommitType("fix", "🐛", "A bug fix"),
    CommitType("docs", "📚", "Documentation only changes"),
    CommitType("style", "💄", "Changes that do not affect the meaning of the code"),
    CommitType("refactor", "♻️", "A code change that neither fixes a bug nor adds a feature"),
    CommitType("perf", "⚡", "A code change that improves performance"),
    CommitType("test", "🧪", "Adding missing tests or correcting existing tests"),
    CommitType("build", "🛠️", "Changes that affect the build system or external dependencies"),
    CommitType("ci", "👷", "Changes to our CI configuration files and scripts"),
    CommitType("chore", "🧹", "Other changes that don't modify src or test files"),
    CommitType("revert", "⏪", "Reverts a previous commit"),
)

TYPE_VALUES: Tuple[str, ...] = tuple(t.value for t in COMMIT_TYPES)

COMMON_SCOPES: Tuple[Tuple[str, str], ...] = (
    ("api", "API-related changes"),
    ("ui", "User interface related"),
    ("auth", "Authentication/Authorization"),
    ("core", "Core functionality"),
    ("data", "Data models or handling"),
    ("deps", "Dependencies"),
    ("config", "Configuration changes"),
)

DEFAULT_BREAKING_NOTE = "Breaking changes introduced"

_BRANCH_SCOPE_RE = re.compile(
    r"^(?:feature|feat|fix|docs|style|refactor|perf|test|build|ci|chore|revert)/([^-]+)"
)


@dataclass(frozen=True)
class CommitDraft:
    """The fields of a conventional commit.

    Attributes
    ----------
    type : str
        One of :data:`TYPE_VALUES`.
    subject : str
        Sentence-case summary without a trailing period.
    scope : str, optional
        Kebab-case area of the change; ``None`` when absent, never ``""``.
    body, breaking, issues : str, optional
        Optional sections; empty values are treated as absent.
    """

    type: str
    subject: str
    scope: Optional[str] = None
    body: Optional[str] = None
    breaking: Optional[str] = None
    issues: Optional[str] = None

    def __post_init__(self) -> None:
        if self.type not in TYPE_VALUES:
            raise ValidationFailed(
                f"Unknown commit type '{self.type}'. "
                f"Expected one of: {', '.join(TYPE_VALUES)}"
            )
        if self.scope is not None and not self.scope:
            raise ValidationFailed("Scope must not be empty; omit it instead")
        validate_subject(self.subject)


def validate_subject(subject: str) -> str:
    """Check a commit subject and return it unchanged.

    Raises
    ------
    ValidationFailed
        If the subject is empty, does not start with an uppercase letter,
        or ends with a period.
    """
    if not subject:
        raise ValidationFailed("Description is required")
    if not subject[0].isupper():
        raise ValidationFailed("Description must start with uppercase letter")
    if subject.endswith("."):
        raise ValidationFailed("Description should not end with a period")
    return subject


def compose_message(draft: CommitDraft) -> str:
    """Render ``draft`` as a commit message.

    The header is ``type(scope): subject``; body, breaking-change note and
    issue references follow as separate paragraphs, each omitted when the
    corresponding field is empty.
    """
    scope_text = f"({draft.scope})" if draft.scope else ""
    sections: List[str] = [f"{draft.type}{scope_text}: {draft.subject}"]
    if draft.body:
        sections.append(draft.body)
    if draft.breaking:
        sections.append(f"BREAKING CHANGE: {draft.breaking}")
    if draft.issues:
        sections.append(draft.issues)
    return "\n\n".join(sections)


def infer_scope_from_branch(branch: str) -> Optional[str]:
    """Suggest a scope from a branch named like ``feat/auth-login``.

    >>> infer_scope_from_branch("feat/auth-login")
    'auth'
    >>> infer_scope_from_branch("main") is None
    True
    """
    match = _BRANCH_SCOPE_RE.match(branch or "")
    if match and match.group(1):
        return match.group(1)
    return None


def common_scope_names(scopes: Optional[Sequence[str]] = None) -> List[str]:
    """Return the selectable common scopes, defaulting to :data:`COMMON_SCOPES`."""
    if scopes is None:
        return [name for name, _ in COMMON_SCOPES]
    return list(scopes)


def scope_description(scope: str) -> str:
    for name, description in COMMON_SCOPES:
        if name == scope:
            return description
    return ""


def sentence_case(text: str) -> str:
    """Uppercase the first character and drop trailing periods."""
    text = text.strip().rstrip(".").rstrip()
    if not text:
        return text
    return text[0].upper() + text[1:]
