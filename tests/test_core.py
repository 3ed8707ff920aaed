"""
Unit tests for core modules: commit parser, bump classifier, versioning, pagination, Config.

Run with:
    pytest tests/test_core.py -v
"""

import json

import pytest

from nextver.commits import (
    BREAKING_CHANGE,
    BumpTally,
    BumpType,
    CommitParseError,
    classify,
    classify_commit,
    decide,
    parse_commit,
    severity_for,
)
from nextver.config import Config, ConfigManager, resolve_settings
from nextver.github import Commit, CommitPage, collect_commits, iter_pages
from nextver.versioning import VersionError, increment, next_version, split_prefix


# ---------------------------------------------------------------------------
# Conventional commit parser — headers
# ---------------------------------------------------------------------------

class TestParseHeader:

    def test_type_and_subject(self):
        parsed = parse_commit("fix: handle empty response")
        assert parsed.type == "fix"
        assert parsed.subject == "handle empty response"
        assert parsed.scope is None
        assert parsed.notes == ()

    def test_scope(self):
        parsed = parse_commit("feat(api): add tags endpoint")
        assert parsed.type == "feat"
        assert parsed.scope == "api"
        assert parsed.subject == "add tags endpoint"

    def test_bang_adds_breaking_note(self):
        parsed = parse_commit("refactor(core)!: drop python 3.8")
        assert parsed.breaking_marker is True
        assert parsed.breaking is True
        assert parsed.notes[0].title == BREAKING_CHANGE
        assert parsed.notes[0].text == "drop python 3.8"

    @pytest.mark.parametrize("message", [
        "",
        "   \n  ",
        "Merge pull request #12 from octo/feature",
        "update readme",
        "feat add thing",
        "feat():",
        "feat: ",
        "(scope): missing type",
    ])
    def test_invalid_headers(self, message):
        with pytest.raises(CommitParseError):
            parse_commit(message)

    def test_crlf_line_endings(self):
        parsed = parse_commit("fix: a\r\n\r\nBREAKING CHANGE: b\r\n")
        assert parsed.breaking is True
        assert parsed.notes[0].text == "b"


# ---------------------------------------------------------------------------
# Conventional commit parser — body and footers
# ---------------------------------------------------------------------------

class TestParseFooter:

    def test_body_without_footer(self):
        parsed = parse_commit("fix: a\n\nlonger explanation\nover two lines")
        assert parsed.body == "longer explanation\nover two lines"
        assert parsed.notes == ()

    def test_breaking_change_footer(self):
        parsed = parse_commit("fix: a\n\nBREAKING CHANGE: drops support")
        assert parsed.type == "fix"
        assert parsed.breaking is True
        assert parsed.breaking_notes[0].text == "drops support"

    def test_breaking_change_hyphen_is_normalized(self):
        parsed = parse_commit("feat: a\n\nBREAKING-CHANGE: config moved")
        assert parsed.notes[0].title == BREAKING_CHANGE

    def test_body_then_footers(self):
        message = (
            "feat(cli): add --verbose\n"
            "\n"
            "Prints page counts.\n"
            "\n"
            "Refs #42\n"
            "Signed-off-by: Dev <dev@example.com>"
        )
        parsed = parse_commit(message)
        assert parsed.body == "Prints page counts."
        assert [note.title for note in parsed.notes] == ["Refs", "Signed-off-by"]
        assert parsed.notes[0].text == "42"
        assert parsed.breaking is False

    def test_multiline_note(self):
        message = "fix: a\n\nBREAKING CHANGE: first line\ncontinues here"
        parsed = parse_commit(message)
        assert parsed.notes[0].text == "first line\ncontinues here"

    def test_footer_requires_blank_line(self):
        parsed = parse_commit("fix: a\nBREAKING CHANGE: not a footer")
        assert parsed.breaking is False

    def test_lowercase_breaking_change_is_not_breaking(self):
        parsed = parse_commit("fix: a\n\nbreaking change: maybe")
        assert parsed.breaking is False

    def test_bang_with_footer_counts_once(self):
        parsed = parse_commit("feat!: a\n\nBREAKING CHANGE: b")
        assert len(parsed.breaking_notes) == 1
        assert parsed.breaking_notes[0].text == "b"


# ---------------------------------------------------------------------------
# Bump classifier — severity table
# ---------------------------------------------------------------------------

class TestSeverityFor:

    @pytest.mark.parametrize("commit_type, expected", [
        ("feat", BumpType.MINOR),
        ("feature", BumpType.MINOR),
        ("fix", BumpType.PATCH),
        ("bugfix", BumpType.PATCH),
        ("perf", BumpType.PATCH),
        ("refactor", BumpType.PATCH),
        ("test", BumpType.PATCH),
        ("tests", BumpType.PATCH),
        ("Feat", BumpType.NONE),
        ("FIX", BumpType.NONE),
        ("chore", BumpType.NONE),
        ("docs", BumpType.NONE),
        ("ci", BumpType.NONE),
    ])
    def test_mapping(self, commit_type, expected):
        assert severity_for(commit_type) == expected


# ---------------------------------------------------------------------------
# Bump classifier — fold and decision
# ---------------------------------------------------------------------------

class TestClassify:

    def _classify(self, *messages):
        return classify([(f"sha{i}", message) for i, message in enumerate(messages)])

    def test_fix_and_feat_is_minor(self):
        result = self._classify("fix: a", "feat: b")
        assert result.tally == BumpTally(major=0, minor=1, patch=1)
        assert result.decision == BumpType.MINOR

    def test_two_fixes_is_patch(self):
        result = self._classify("fix: a", "fix: b")
        assert result.tally == BumpTally(patch=2)
        assert result.decision == BumpType.PATCH

    def test_unlisted_type_is_none(self):
        result = self._classify("chore: x")
        assert result.tally.is_empty
        assert result.decision == BumpType.NONE
        assert result.commits[0].valid is True
        assert result.commits[0].severity == BumpType.NONE

    def test_capitalized_type_is_none(self):
        result = self._classify("Fix: typo")
        assert result.commits[0].valid is True
        assert result.commits[0].type == "Fix"
        assert result.decision == BumpType.NONE

    def test_breaking_footer_dual_increment(self):
        result = self._classify("fix: a\n\nBREAKING CHANGE: drops support")
        assert result.tally == BumpTally(major=1, patch=1)
        assert result.decision == BumpType.MAJOR

    def test_breaking_note_on_unlisted_type(self):
        result = self._classify("chore!: drop node 14")
        assert result.tally == BumpTally(major=1)
        assert result.decision == BumpType.MAJOR

    def test_major_wins_over_many_minor_and_patch(self):
        messages = ["feat: a"] * 5 + ["fix: b"] * 5 + ["docs: c\n\nBREAKING CHANGE: d"]
        assert self._classify(*messages).decision == BumpType.MAJOR

    def test_invalid_commits_never_change_tally(self):
        with_invalid = self._classify("fix: a", "WIP stuff", "Merge branch 'main'")
        without = self._classify("fix: a")
        assert with_invalid.tally == without.tally
        assert [c.valid for c in with_invalid.commits] == [True, False, False]

    def test_invalid_message_mentioning_breaking_change(self):
        result = self._classify("oops\n\nBREAKING CHANGE: ignored")
        assert result.tally.is_empty
        assert result.decision == BumpType.NONE

    def test_order_does_not_change_decision(self):
        messages = ["fix: a", "feat: b", "chore: c", "bad"]
        forward = self._classify(*messages)
        backward = self._classify(*reversed(messages))
        assert forward.tally == backward.tally
        assert forward.decision == backward.decision

    def test_empty_sequence(self):
        result = classify([])
        assert result.tally.is_empty
        assert result.commits == ()
        assert result.decision == BumpType.NONE

    def test_accepts_commit_objects(self):
        result = classify([Commit(sha="abc1234", message="feat: x")])
        assert result.commits[0].sha == "abc1234"
        assert result.decision == BumpType.MINOR

    def test_classify_commit_invalid(self):
        record = classify_commit("abc", "not conventional")
        assert record.valid is False
        assert record.type is None
        assert record.breaking_notes == 0


class TestDecide:

    @pytest.mark.parametrize("tally, expected", [
        (BumpTally(), BumpType.NONE),
        (BumpTally(patch=3), BumpType.PATCH),
        (BumpTally(minor=1, patch=9), BumpType.MINOR),
        (BumpTally(major=1), BumpType.MAJOR),
        (BumpTally(major=1, minor=4, patch=4), BumpType.MAJOR),
    ])
    def test_priority(self, tally, expected):
        assert decide(tally) == expected

    def test_tally_is_immutable(self):
        tally = BumpTally()
        bumped = tally.add(BumpType.MINOR)
        assert tally.minor == 0
        assert bumped.minor == 1

    def test_tally_ignores_none(self):
        assert BumpTally().add(BumpType.NONE) == BumpTally()


# ---------------------------------------------------------------------------
# Versioning
# ---------------------------------------------------------------------------

class TestVersioning:

    @pytest.mark.parametrize("tag, expected", [
        ("v1.2.3", ("v", "1.2.3")),
        ("1.2.3", ("", "1.2.3")),
        ("release-2.0.0", ("release-", "2.0.0")),
    ])
    def test_split_prefix(self, tag, expected):
        assert split_prefix(tag) == expected

    @pytest.mark.parametrize("base, bump, expected", [
        ("v1.2.3", BumpType.MAJOR, "2.0.0"),
        ("v1.2.3", BumpType.MINOR, "1.3.0"),
        ("v1.2.3", BumpType.PATCH, "1.2.4"),
        ("v1.2.3-beta.1", BumpType.PATCH, "1.2.3"),
        ("v1.3.0-rc.1", BumpType.MINOR, "1.3.0"),
        ("v2.0.0-rc.1", BumpType.MAJOR, "2.0.0"),
    ])
    def test_increment(self, base, bump, expected):
        assert increment(base, bump) == expected

    def test_increment_none_raises(self):
        with pytest.raises(VersionError):
            increment("v1.2.3", BumpType.NONE)

    @pytest.mark.parametrize("tag", ["latest", "v1.2", "vnext"])
    def test_invalid_tag_raises(self, tag):
        with pytest.raises(VersionError):
            increment(tag, BumpType.PATCH)

    def test_next_version_keeps_tag_prefix(self):
        version = next_version("release-1.0.0", BumpType.MINOR)
        assert version.prefixed == "release-1.1.0"
        assert version.strict == "1.1.0"

    def test_next_version_uses_default_prefix(self):
        version = next_version("1.0.0", BumpType.PATCH)
        assert version.prefixed == "v1.0.1"
        assert version.strict == "1.0.1"

    def test_next_version_custom_default_prefix(self):
        assert next_version("1.0.0", BumpType.MAJOR, default_prefix="").prefixed == "2.0.0"

    @pytest.mark.parametrize("messages, expected", [
        (["fix: a", "feat: b"], "v1.3.0"),
        (["fix: a", "fix: b"], "v1.2.4"),
        (["fix: a\n\nBREAKING CHANGE: drops support"], "v2.0.0"),
    ])
    def test_scenarios(self, messages, expected):
        decision = classify([(str(i), m) for i, m in enumerate(messages)]).decision
        assert next_version("v1.2.3", decision).prefixed == expected


# ---------------------------------------------------------------------------
# Pagination
# ---------------------------------------------------------------------------

class FakePages:
    """Serves a fixed list of commits in pages and records requested page numbers."""

    def __init__(self, total, per_page=100, reported_total=None):
        self.commits = [Commit(sha=f"{i:040x}", message=f"fix: {i}") for i in range(total)]
        self.per_page = per_page
        self.reported_total = total if reported_total is None else reported_total
        self.requested = []

    def __call__(self, page):
        self.requested.append(page)
        start = (page - 1) * self.per_page
        chunk = self.commits[start:start + self.per_page]
        return CommitPage(commits=chunk, total_count=self.reported_total, page=page)


class TestPagination:

    @pytest.mark.parametrize("total, per_page, pages", [
        (1, 100, [1]),
        (100, 100, [1]),
        (101, 100, [1, 2]),
        (250, 100, [1, 2, 3]),
        (7, 3, [1, 2, 3]),
    ])
    def test_stops_at_total(self, total, per_page, pages):
        fake = FakePages(total, per_page=per_page)
        commits = collect_commits(fake)
        assert len(commits) == total
        assert fake.requested == pages

    def test_empty_range_fetches_one_page(self):
        fake = FakePages(0)
        assert collect_commits(fake) == []
        assert fake.requested == [1]

    def test_empty_page_stops_when_total_unreachable(self):
        fake = FakePages(5, per_page=5, reported_total=50)
        assert len(collect_commits(fake)) == 5
        assert fake.requested == [1, 2]

    def test_iter_pages_is_lazy(self):
        fake = FakePages(300)
        pages = iter_pages(fake)
        assert fake.requested == []
        first = next(pages)
        assert first.page == 1
        assert fake.requested == [1]

    def test_on_page_callback(self):
        seen = []
        collect_commits(FakePages(150), on_page=lambda page: seen.append(page.page))
        assert seen == [1, 2]

    def test_preserves_order(self):
        fake = FakePages(205)
        commits = collect_commits(fake)
        assert [c.sha for c in commits] == [c.sha for c in fake.commits]


# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------

class TestConfig:

    def test_defaults(self):
        config = Config()
        assert config.branch == "main"
        assert config.api_url == "https://api.github.com"
        assert config.tag_prefix == "v"
        assert config.per_page == 100

    def test_from_dict_ignores_unknown_keys(self):
        config = Config.from_dict({"branch": "develop", "token": "secret"})
        assert config.branch == "develop"
        assert not hasattr(config, "token")

    def test_validate_per_page_out_of_range(self):
        config = Config(per_page=500)
        warnings = config.validate()
        assert any("per_page" in w for w in warnings)
        assert config.per_page == 100

    def test_validate_bad_repository(self):
        config = Config(repository="just-a-name")
        warnings = config.validate()
        assert len(warnings) == 1
        assert config.repository is None

    def test_validate_bad_api_url(self):
        config = Config(api_url="api.github.com")
        config.validate()
        assert config.api_url == "https://api.github.com"

    def test_validate_valid_config_no_warnings(self):
        assert Config(repository="octo/app").validate() == []

    def test_from_dict_triggers_validation(self, capsys):
        Config.from_dict({"timeout": -5})
        err = capsys.readouterr().err
        assert "Config warning" in err


class TestConfigManager:

    def test_load_returns_defaults_when_no_file(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setattr("pathlib.Path.home", lambda: tmp_path / "fakehome")
        config = ConfigManager().load()
        assert config.branch == "main"

    def test_load_reads_local_file(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / ".nextverrc").write_text(json.dumps({"branch": "trunk", "tag_prefix": "release-"}))

        manager = ConfigManager()
        config = manager.load()
        assert config.branch == "trunk"
        assert config.tag_prefix == "release-"
        assert manager.get_config_path().name == ".nextverrc"

    def test_load_reads_home_file(self, tmp_path, monkeypatch):
        home = tmp_path / "home"
        home.mkdir()
        (home / ".nextverrc").write_text(json.dumps({"repository": "octo/app"}))
        monkeypatch.chdir(tmp_path)
        monkeypatch.setattr("pathlib.Path.home", lambda: home)

        assert ConfigManager().load().repository == "octo/app"

    def test_malformed_json_returns_defaults(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / ".nextverrc").write_text("not valid json {{{")
        assert ConfigManager().load().branch == "main"

    def test_non_object_json_returns_defaults(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / ".nextverrc").write_text("[1, 2]")
        assert ConfigManager().load().branch == "main"


class TestResolveSettings:

    @pytest.fixture(autouse=True)
    def clean_env(self, monkeypatch):
        for name in ("INPUT_TOKEN", "NEXTVER_TOKEN", "GITHUB_TOKEN", "INPUT_BRANCH", "NEXTVER_BRANCH",
                     "GITHUB_REPOSITORY", "GITHUB_API_URL", "GITHUB_GRAPHQL_URL"):
            monkeypatch.delenv(name, raising=False)

    def test_config_values_used_without_overrides(self):
        settings = resolve_settings(Config(repository="octo/app", branch="develop"))
        assert (settings.owner, settings.repo) == ("octo", "app")
        assert settings.branch == "develop"
        assert settings.token is None

    def test_env_beats_config(self, monkeypatch):
        monkeypatch.setenv("GITHUB_REPOSITORY", "env/repo")
        monkeypatch.setenv("INPUT_BRANCH", "release")
        monkeypatch.setenv("GITHUB_TOKEN", "gh-token")
        settings = resolve_settings(Config(repository="octo/app", branch="develop"))
        assert (settings.owner, settings.repo) == ("env", "repo")
        assert settings.branch == "release"
        assert settings.token == "gh-token"

    def test_cli_beats_env(self, monkeypatch):
        monkeypatch.setenv("GITHUB_REPOSITORY", "env/repo")
        monkeypatch.setenv("GITHUB_TOKEN", "gh-token")
        settings = resolve_settings(Config(), token="cli-token", branch="cli", repository="cli/repo")
        assert settings.token == "cli-token"
        assert settings.branch == "cli"
        assert settings.owner == "cli"

    def test_action_input_token_wins(self, monkeypatch):
        monkeypatch.setenv("GITHUB_TOKEN", "gh-token")
        monkeypatch.setenv("INPUT_TOKEN", "input-token")
        assert resolve_settings(Config()).token == "input-token"

    def test_invalid_repository_leaves_owner_unset(self):
        settings = resolve_settings(Config(), repository="nope")
        assert settings.owner is None
        assert settings.repo is None

    def test_cli_api_url_ignores_runner_graphql_url(self, monkeypatch):
        monkeypatch.setenv("GITHUB_GRAPHQL_URL", "https://api.github.com/graphql")
        settings = resolve_settings(Config(), api_url="https://ghe.example.com/api/v3")
        assert settings.api_url == "https://ghe.example.com/api/v3"
        assert settings.graphql_url is None

    def test_empty_tag_prefix_from_cli(self):
        assert resolve_settings(Config(), tag_prefix="").tag_prefix == ""
