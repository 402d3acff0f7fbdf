"""
Lint rules for conventional commit messages.

:data:`COMMITLINT_RULES` is the declarative rule table shared with the
external commit linter (same rule names, levels and arguments).
:func:`lint_message` applies the same rules to a composed message so the
wizards can warn before a commit is created. Warnings never block.
"""

from __future__ import annotations

import re
from typing import Any, Dict, List, Tuple

from git_wizard.conventional.message import TYPE_VALUES

ERROR = 2

# rule name -> (level, applicability, value)
COMMITLINT_RULES: Dict[str, Tuple[Any, ...]] = {
    "type-enum": (ERROR, "always", list(TYPE_VALUES)),
    "type-empty": (ERROR, "never"),
    "scope-case": (ERROR, "always", "kebab-case"),
    "subject-case": (ERROR, "always", "sentence-case"),
    "subject-empty": (ERROR, "never"),
    "subject-full-stop": (ERROR, "never", "."),
    "body-max-line-length": (ERROR, "always", 100),
    "body-leading-blank": (ERROR, "always"),
    "footer-leading-blank": (ERROR, "always"),
}

_HEADER_RE = re.compile(r"^(?P<type>[^(!:\s]*)(?:\((?P<scope>[^)]*)\))?!?: ?(?P<subject>.*)$")
_KEBAB_RE = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
_FOOTER_RE = re.compile(r"^(?:BREAKING CHANGE|[\w-]+)(?:: | #)")


def _footer_start(lines: List[str]) -> int:
    """Index of the first footer line after the header, or -1.

    Only the last paragraph can hold the footer, so ``Note: x`` inside an
    earlier body paragraph is body text.
    """
    blanks = [index for index, line in enumerate(lines) if not line.strip()]
    start = max(2, blanks[-1] + 1) if blanks else 2
    for index in range(start, len(lines)):
        if _FOOTER_RE.match(lines[index]):
            return index
    return -1


def lint_message(message: str, body_max_line_length: int = 100) -> List[str]:
    """Return the rule violations found in ``message``.

    Each entry reads ``"<rule>: <explanation>"``. An empty list means the
    message passes.
    """
    problems: List[str] = []
    lines = message.splitlines()
    header = lines[0] if lines else ""

    match = _HEADER_RE.match(header)
    if not match or not match.group("type"):
        problems.append("type-empty: type may not be empty")
        return problems

    commit_type = match.group("type")
    scope = match.group("scope")
    subject = match.group("subject")

    if commit_type not in TYPE_VALUES:
        problems.append(
            f"type-enum: type must be one of [{', '.join(TYPE_VALUES)}]"
        )
    if scope is not None and not _KEBAB_RE.match(scope):
        problems.append(f"scope-case: scope '{scope}' must be kebab-case")
    if not subject:
        problems.append("subject-empty: subject may not be empty")
    else:
        if not subject[0].isupper():
            problems.append("subject-case: subject must be sentence-case")
        if subject.endswith("."):
            problems.append("subject-full-stop: subject may not end with full stop")

    if len(lines) > 1 and lines[1].strip():
        problems.append("body-leading-blank: body must have leading blank line")

    footer = _footer_start(lines)
    if footer > 0 and lines[footer - 1].strip():
        problems.append("footer-leading-blank: footer must have leading blank line")

    body_end = footer if footer > 0 else len(lines)
    for number, line in enumerate(lines[1:body_end], start=2):
        if len(line) > body_max_line_length:
            problems.append(
                f"body-max-line-length: line {number} is longer than "
                f"{body_max_line_length} characters"
            )
    return problems
