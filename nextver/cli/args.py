"""CLI Argument Parsing"""

import argparse
import argcomplete

from nextver import __version__


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog='nextver',
        description='Compute the next semantic version from conventional commits since the latest tag',
        epilog='Example: nextver --repo octo/app --branch main'
    )

    parser.add_argument('-v', '--version', action='version', version=f'%(prog)s {__version__}')

    # Repository options
    parser.add_argument('--token', type=str, metavar='TOKEN', help='GitHub token (default: $GITHUB_TOKEN)')
    parser.add_argument('-b', '--branch', type=str, metavar='REF', help='Branch or ref to compare against the latest tag')
    parser.add_argument('-r', '--repo', type=str, metavar='OWNER/NAME', help='Repository (default: $GITHUB_REPOSITORY)')
    parser.add_argument('--api-url', type=str, metavar='URL', help='GitHub API URL, for GitHub Enterprise')

    # Output options
    parser.add_argument('--tag-prefix', type=str, metavar='PREFIX', help="Prefix for tags without one (default: v)")
    parser.add_argument('--verbose', action='store_true', help='Show debug info (pages fetched, tally)')

    # Setup/config
    parser.add_argument('--display-config', action='store_true', help='Show current configuration')
    parser.add_argument('--install-completion', action='store_true', help='Install shell tab completion')

    argcomplete.autocomplete(parser)
    return parser.parse_args(argv)
