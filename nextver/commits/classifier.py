"""Bump Classifier - Fold conventional commits into a single version bump decision."""

from dataclasses import dataclass, field, replace
from enum import Enum
from functools import reduce
from typing import Iterable

from nextver import BUMP_TYPES
from nextver.commits.parser import CommitParseError, parse_commit


class BumpType(Enum):
    """Semver bump severity."""
    MAJOR = 'major'
    MINOR = 'minor'
    PATCH = 'patch'
    NONE = 'none'


@dataclass(frozen=True)
class BumpTally:
    """Per-run counters. Only ever incremented."""
    major: int = 0
    minor: int = 0
    patch: int = 0

    def add(self, bump: BumpType, count: int = 1) -> 'BumpTally':
        if bump is BumpType.NONE or count == 0:
            return self
        return replace(self, **{bump.value: getattr(self, bump.value) + count})

    @property
    def is_empty(self) -> bool:
        return self.major == 0 and self.minor == 0 and self.patch == 0


@dataclass(frozen=True)
class ClassifiedCommit:
    """Outcome for one commit, kept for log narration."""
    sha: str
    type: str | None = None
    severity: BumpType = BumpType.NONE
    breaking_notes: int = 0
    valid: bool = True


@dataclass(frozen=True)
class Classification:
    """Result of folding over a commit range."""
    tally: BumpTally = field(default_factory=BumpTally)
    commits: tuple[ClassifiedCommit, ...] = field(default_factory=tuple)

    @property
    def decision(self) -> BumpType:
        return decide(self.tally)


def severity_for(commit_type: str) -> BumpType:
    """Map a commit type to its bump severity. Types match exactly; unlisted types map to NONE."""
    for bump in (BumpType.MAJOR, BumpType.MINOR, BumpType.PATCH):
        if commit_type in BUMP_TYPES[bump.value]:
            return bump
    return BumpType.NONE


def classify_commit(sha: str, message: str) -> ClassifiedCommit:
    """Classify a single commit message. Parse failures yield an invalid record."""
    try:
        parsed = parse_commit(message)
    except CommitParseError:
        return ClassifiedCommit(sha=sha, valid=False)

    return ClassifiedCommit(
        sha=sha,
        type=parsed.type,
        severity=severity_for(parsed.type),
        breaking_notes=len(parsed.breaking_notes),
    )


def _accumulate(result: Classification, commit: ClassifiedCommit) -> Classification:
    # A breaking note counts towards major on top of the type's own severity
    tally = result.tally.add(commit.severity).add(BumpType.MAJOR, commit.breaking_notes)
    return Classification(tally=tally, commits=result.commits + (commit,))


def _unpack(commit) -> tuple[str, str]:
    if isinstance(commit, tuple):
        return commit
    return commit.sha, commit.message


def classify(commits: Iterable) -> Classification:
    """Classify commits given as (sha, message) pairs or objects with .sha and .message."""
    classified = (classify_commit(*_unpack(commit)) for commit in commits)
    return reduce(_accumulate, classified, Classification())


def decide(tally: BumpTally) -> BumpType:
    """Resolve the tally by priority: major > minor > patch > none."""
    if tally.major > 0:
        return BumpType.MAJOR
    if tally.minor > 0:
        return BumpType.MINOR
    if tally.patch > 0:
        return BumpType.PATCH
    return BumpType.NONE
