"""Commit Classification Package"""

from nextver.commits.parser import BREAKING_CHANGE, CommitParseError, Note, ParsedCommit, parse_commit
from nextver.commits.classifier import (
    BumpTally,
    BumpType,
    Classification,
    ClassifiedCommit,
    classify,
    classify_commit,
    decide,
    severity_for,
)

__all__ = [
    "BREAKING_CHANGE",
    "CommitParseError",
    "Note",
    "ParsedCommit",
    "parse_commit",
    "BumpTally",
    "BumpType",
    "Classification",
    "ClassifiedCommit",
    "classify",
    "classify_commit",
    "decide",
    "severity_for",
]
