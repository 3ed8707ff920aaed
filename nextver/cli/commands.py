"""CLI Commands"""

import os
import sys

from nextver import BUMP_TYPES
from nextver.config import BRANCH_ENV_VARS, TOKEN_ENV_VARS, load_config, get_config_path
from nextver.output import bold, dim, info


def display_config() -> int:
    """Display current configuration."""
    config = load_config()
    config_path = get_config_path()

    print(f"\n{bold('Current Configuration')}\n")

    if config_path:
        print(f"  {dim('Loaded from:')} {config_path}")
    else:
        print(f"  {dim('Loaded from:')} defaults (no .nextverrc found)")

    env_names = [*TOKEN_ENV_VARS, *BRANCH_ENV_VARS, 'GITHUB_REPOSITORY', 'GITHUB_API_URL', 'GITHUB_GRAPHQL_URL']
    present = [name for name in env_names if os.environ.get(name)]
    if present:
        print(f"  {dim('Environment overrides:')}")
        for name in present:
            # Never echo credentials
            value = '***' if name in TOKEN_ENV_VARS else os.environ[name]
            print(f"    {name}={value}")

    print()
    print(f"  {bold('Settings:')}")
    print(f"    branch:      {info(config.branch)}")
    print(f"    repository:  {info(config.repository or 'from $GITHUB_REPOSITORY')}")
    print(f"    api_url:     {info(config.api_url)}")
    print(f"    graphql_url: {info(config.graphql_url or 'derived from api_url')}")
    print(f"    tag_prefix:  {info(config.tag_prefix)}")
    print(f"    per_page:    {info(str(config.per_page))}")
    print(f"    timeout:     {info(str(config.timeout))}")

    print()
    print(f"  {bold('Bump types:')}")
    for bump, types in BUMP_TYPES.items():
        print(f"    {bump + ':':<7}      {info(', '.join(types) or '-')}")
    print(f"    {dim('A BREAKING CHANGE note always bumps major.')}")

    print(f"\n  {dim('Config locations:')}")
    print(f"    Local:  .nextverrc (in current directory)")
    print(f"    Global: ~/.nextverrc\n")

    return 0


def run_install_completion() -> int:
    """Install shell tab completion."""
    shell = os.environ.get('SHELL', '')

    print(f"\n{bold('Tab Completion Setup')}\n")

    if 'zsh' in shell:
        rc_file = os.path.expanduser('~/.zshrc')
        line = 'eval "$(register-python-argcomplete nextver)"'
        print(f"Add this line to {dim(rc_file)}:\n")
        print(f"  {line}\n")
        print(f"Then run: {dim('source ~/.zshrc')}")
    elif 'bash' in shell:
        rc_file = os.path.expanduser('~/.bashrc')
        line = 'eval "$(register-python-argcomplete nextver)"'
        print(f"Add this line to {dim(rc_file)}:\n")
        print(f"  {line}\n")
        print(f"Then run: {dim('source ~/.bashrc')}")
    elif sys.platform == 'win32':
        print("For PowerShell, run:\n")
        print("  register-python-argcomplete --shell powershell nextver | Out-String | Invoke-Expression\n")
        print("To make it permanent, add to your $PROFILE:\n")
        print("  register-python-argcomplete --shell powershell nextver | Out-String | Invoke-Expression")
    else:
        print("Run one of these based on your shell:\n")
        print(f"  {dim('# Bash/Zsh')}")
        print('  eval "$(register-python-argcomplete nextver)"\n')
        print(f"  {dim('# PowerShell')}")
        print("  register-python-argcomplete --shell powershell nextver | Out-String | Invoke-Expression\n")
        print(f"  {dim('# Fish')}")
        print("  register-python-argcomplete --shell fish nextver | source")

    print(f"\n{dim('After setup, press TAB to autocomplete flags.')}")
    return 0
