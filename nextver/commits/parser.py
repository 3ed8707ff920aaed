"""Conventional Commit Parser - Split commit messages into type, scope, subject and footer notes."""

import re
from dataclasses import dataclass, field

BREAKING_CHANGE = 'BREAKING CHANGE'

# type(scope)!: subject
HEADER_PATTERN = re.compile(
    r'^(?P<type>[A-Za-z0-9_-]+)'
    r'(?:\((?P<scope>[^()\n]+)\))?'
    r'(?P<bang>!)?'
    r':\s*(?P<subject>\S.*)$'
)

# "Token: value", "Token #value", "BREAKING CHANGE: value"
FOOTER_PATTERN = re.compile(r'^(?P<token>BREAKING[ -]CHANGE|[A-Za-z0-9-]+)(?::[ \t]+|:$| #)(?P<text>.*)$')


class CommitParseError(ValueError):
    """Raised when a message does not follow the conventional commit format."""
    pass


@dataclass(frozen=True)
class Note:
    """A single footer note, e.g. BREAKING CHANGE: drops node 14."""
    title: str
    text: str = ""


@dataclass(frozen=True)
class ParsedCommit:
    """A conventional commit split into its parts."""
    type: str
    subject: str
    scope: str | None = None
    body: str = ""
    notes: tuple[Note, ...] = field(default_factory=tuple)
    breaking_marker: bool = False

    @property
    def breaking_notes(self) -> list[Note]:
        return [note for note in self.notes if note.title == BREAKING_CHANGE]

    @property
    def breaking(self) -> bool:
        return bool(self.breaking_notes)


def _normalize_token(token: str) -> str:
    # BREAKING-CHANGE is a synonym for BREAKING CHANGE in footers
    if token in ('BREAKING CHANGE', 'BREAKING-CHANGE'):
        return BREAKING_CHANGE
    return token


def _split_footer(lines: list[str]) -> tuple[list[str], list[str]]:
    """Split the lines after the header into (body, footer).

    The footer starts at the first line that follows a blank line and
    looks like a footer token.
    """
    for idx in range(1, len(lines)):
        if not lines[idx - 1].strip() and FOOTER_PATTERN.match(lines[idx]):
            return lines[:idx], lines[idx:]
    return lines, []


def _parse_notes(lines: list[str]) -> list[Note]:
    entries = []
    for line in lines:
        match = FOOTER_PATTERN.match(line)
        if match:
            entries.append([_normalize_token(match.group('token')), match.group('text')])
        elif entries:
            # Continuation of the previous note
            entries[-1][1] += '\n' + line
    return [Note(title=title, text=text.strip()) for title, text in entries]


def parse_commit(message: str) -> ParsedCommit:
    """Parse a raw commit message.

    Raises:
        CommitParseError: if the header is not `type(scope)!: subject`
    """
    text = (message or '').replace('\r\n', '\n').strip()
    if not text:
        raise CommitParseError("Empty commit message")

    lines = text.split('\n')
    match = HEADER_PATTERN.match(lines[0])
    if not match:
        raise CommitParseError(f"Invalid conventional commit header: {lines[0][:50]}")

    body_lines, footer_lines = _split_footer(lines[1:])
    notes = _parse_notes(footer_lines)

    subject = match.group('subject').strip()
    breaking_marker = match.group('bang') == '!'
    if breaking_marker and not any(note.title == BREAKING_CHANGE for note in notes):
        notes.insert(0, Note(title=BREAKING_CHANGE, text=subject))

    return ParsedCommit(
        type=match.group('type'),
        subject=subject,
        scope=match.group('scope'),
        body='\n'.join(body_lines).strip(),
        notes=tuple(notes),
        breaking_marker=breaking_marker,
    )
