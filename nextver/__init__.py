"""
Next Version

Compute the next semantic version from conventional commits since the latest tag.
"""

__version__ = "1.0.0"

# Centralized bump table - single source of truth
# Used by: commits/classifier.py (severity lookup), cli/commands.py (display)
BUMP_TYPES = {
    'major': (),
    'minor': ('feat', 'feature'),
    'patch': ('fix', 'bugfix', 'perf', 'refactor', 'test', 'tests'),
}

# Note on breaking changes: a "BREAKING CHANGE:" footer or "feat!:" header forces a major bump
# regardless of which list the type is in.
