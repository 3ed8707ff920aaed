"""CLI Main Entry Point"""

from nextver.commits import BumpType, Classification, classify
from nextver.config import Settings, load_config, resolve_settings
from nextver.github import CommitPage, GitHubClient, GitHubError
from nextver.output import (
    ARROW, bold, bump_label, dim, export_variable, highlight, log,
    print_warning, set_failed, set_output, Spinner,
)
from nextver.versioning import VersionError, next_version

from nextver.cli.args import parse_args
from nextver.cli.commands import display_config, run_install_completion

NO_TAG_MESSAGE = "Couldn't find the latest tag. Make sure you have at least one tag created first."
NO_COMMITS_MESSAGE = "Couldn't find any commits between HEAD and latest tag."
NO_BUMP_MESSAGE = "No commit resulted in a version bump since last release!"


def _handle_subcommands(args):
    """Handle subcommands that exit early.

    Returns:
        tuple: (exit_code, should_exit) - exit_code if should_exit is True
    """
    if args.install_completion:
        return run_install_completion(), True
    if args.display_config:
        return display_config(), True
    return 0, False


def _get_settings(args) -> Settings:
    """Resolve settings from args, env, or config.

    Precedence: CLI args > environment variables > config file
    """
    return resolve_settings(
        load_config(),
        token=args.token,
        branch=args.branch,
        repository=args.repo,
        api_url=args.api_url,
        tag_prefix=args.tag_prefix,
    )


def _narrate(classification: Classification) -> None:
    """Log how each commit contributes to the bump."""
    for commit in classification.commits:
        if not commit.valid:
            log(f"{bump_label('INVALID')} Skipping commit {commit.sha} as it doesn't follow conventional commit format.")
            continue

        if commit.severity is BumpType.NONE:
            log(f"{bump_label('SKIP')} Commit {commit.sha} of type {commit.type} will not cause any version bump.")
        else:
            severity = commit.severity.value
            log(f"{bump_label(severity.upper())} Commit {commit.sha} of type {commit.type} "
                f"will cause a {severity} version bump.")

        for _ in range(commit.breaking_notes):
            log(f"{bump_label('MAJOR')} Commit {commit.sha} has a BREAKING CHANGE mention, "
                f"causing a major version bump.")


def _print_verbose_stats(args, classification: Classification) -> None:
    """Print tally and skipped commit counts."""
    if not args.verbose:
        return
    tally = classification.tally
    invalid = sum(1 for commit in classification.commits if not commit.valid)
    log()
    log(dim(f"  Tally: major={tally.major}, minor={tally.minor}, patch={tally.patch}"))
    if invalid:
        print_warning(f"{invalid} of {len(classification.commits)} commits are not conventional commits")


def _fetch_commits(args, client: GitHubClient, settings: Settings, base: str) -> list:
    """Collect the whole commit range between the tag and the branch."""
    def on_page(page: CommitPage) -> None:
        if args.verbose:
            log(dim(f"  Page {page.page}: {len(page.commits)} commits ({page.total_count} total)"))

    with Spinner():
        return client.fetch_commit_range(settings.owner, settings.repo, base, settings.branch, on_page=on_page)


def _emit(version) -> None:
    """Expose the version to later workflow steps."""
    export_variable('next', version.prefixed)
    export_variable('nextStrict', version.strict)
    set_output('next', version.prefixed)
    set_output('nextStrict', version.strict)


def _next_version_flow(args, settings: Settings) -> int:
    """Main tag -> commits -> bump -> version flow.

    Returns:
        int: Exit code
    """
    if not settings.owner or not settings.repo:
        return set_failed("No repository given. Pass --repo owner/name or set GITHUB_REPOSITORY.")

    try:
        client = GitHubClient(
            token=settings.token,
            api_url=settings.api_url,
            graphql_url=settings.graphql_url,
            per_page=settings.per_page,
            timeout=settings.timeout,
        )
        tag = client.fetch_latest_tag(settings.owner, settings.repo)
    except GitHubError as e:
        return set_failed(str(e))

    if tag is None:
        return set_failed(NO_TAG_MESSAGE)

    log(f"Comparing against latest tag: {bold(tag.name)}")

    try:
        commits = _fetch_commits(args, client, settings, tag.name)
    except GitHubError as e:
        return set_failed(str(e))

    if not commits:
        return set_failed(NO_COMMITS_MESSAGE)

    classification = classify(commits)
    _narrate(classification)
    _print_verbose_stats(args, classification)

    bump = classification.decision
    if bump is BumpType.NONE:
        return set_failed(NO_BUMP_MESSAGE)

    log(f"\n>>> Will bump version {tag.name} using {bump.value.upper()}\n")

    try:
        version = next_version(tag.name, bump, default_prefix=settings.tag_prefix)
    except VersionError as e:
        return set_failed(str(e))

    log(f"Next version is {highlight(version.prefixed)} {dim(f'({tag.name} {ARROW} {version.prefixed})')}")
    _emit(version)
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    args = parse_args(argv)

    # Handle subcommands that exit early
    exit_code, should_exit = _handle_subcommands(args)
    if should_exit:
        return exit_code

    return _next_version_flow(args, _get_settings(args))
