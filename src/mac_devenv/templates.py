"""Declared configuration templates.

Every generated file is a pure function of Settings and the catalog, so
re-running with the same inputs produces byte-identical output.
"""

from __future__ import annotations

import json
from pathlib import Path

from mac_devenv.catalog import Catalog
from mac_devenv.config_writer import ConfigFragment
from mac_devenv.settings import Settings
from mac_devenv.types import WriteMode

SHELL_BLOCK_MARKER = "# mac-devenv: shell environment"

HOMEBREW_PATH_LINE = 'export PATH="/opt/homebrew/bin:/opt/homebrew/sbin:$PATH"'
LOCAL_BIN_PATH_LINE = 'export PATH="$HOME/.local/bin:$PATH"'

GHOSTTY_SETTINGS = {
    "font-family": '"JetBrains Mono"',
    "font-size": "14",
    "theme": '"catppuccin-mocha"',
    "window-decoration": "true",
    "window-padding-x": "10",
    "window-padding-y": "10",
    "shell-integration": "zsh",
    "copy-on-select": "true",
    "clipboard-read": "allow",
    "clipboard-write": "allow",
}

GEMINI_GUIDE = """\
# Gemini CLI Setup Guide

## Authentication Options

### Option 1: Login with Google Account (recommended, free tier)
```bash
gemini
# Follow prompts to login with Google account
```

### Option 2: API Key Authentication
```bash
# Get your API key from: https://aistudio.google.com/app/apikey
export GOOGLE_API_KEY="your-api-key-here"
gemini
```

## Usage Examples
```bash
gemini                    # Start interactive chat
gemini "What is AI?"      # Direct question
gemini --help             # Show all options
```

## Resources
- GitHub: https://github.com/google-gemini/gemini-cli
- Documentation: https://cloud.google.com/gemini/docs/codeassist/gemini-cli
"""

# Entry point of the MCP server inside the workspace clone
SERVER_ENTRY = Path("mcp-tools") / "pipeline-mcp" / "src" / "main.py"


def shell_path(path: Path, home: Path) -> str:
    """Render a path for a shell profile, using $HOME where possible."""
    try:
        relative = path.relative_to(home)
    except ValueError:
        return str(path)
    return f"$HOME/{relative}" if str(relative) != "." else "$HOME"


def workspace_clone(settings: Settings, catalog: Catalog) -> Path:
    return settings.workspace_dir / catalog.repositories.workspace_dir_name


def profile_path_fragments(settings: Settings) -> list[ConfigFragment]:
    """PATH exports for every existing shell profile."""
    fragments = []
    for profile in settings.profile_paths:
        fragments.append(
            ConfigFragment(
                target=profile,
                content=HOMEBREW_PATH_LINE,
                marker="/opt/homebrew/bin",
                only_if_exists=True,
            )
        )
        fragments.append(
            ConfigFragment(
                target=profile,
                content=LOCAL_BIN_PATH_LINE,
                marker="$HOME/.local/bin",
                only_if_exists=True,
            )
        )
    return fragments


def render_shell_block(settings: Settings, catalog: Catalog) -> str:
    """Environment variables and aliases appended to ~/.zshrc."""
    python = settings.python_executable
    workspace = shell_path(settings.workspace_dir, settings.home)
    system_dir = catalog.repositories.workspace_dir_name
    guide = shell_path(settings.gemini_guide, settings.home)
    lines = [
        "",
        SHELL_BLOCK_MARKER,
        f'export MCP_WORKSPACE="{workspace}"',
        f'export MCP_SYSTEM_PATH="$MCP_WORKSPACE/{system_dir}"',
        'export PYTHONPATH="$MCP_SYSTEM_PATH:$PYTHONPATH"',
        "",
        "# Ensure proper PATH ordering",
        'export PATH="/opt/homebrew/bin:/opt/homebrew/sbin:$HOME/.local/bin:/usr/local/bin:$PATH"',
        "",
        "# Gemini CLI (populate with your key or use 'gemini' login)",
        'export GOOGLE_API_KEY="${GOOGLE_API_KEY:-}"',
        "",
        "# Workspace aliases",
        'alias mcp-cd="cd $MCP_SYSTEM_PATH"',
        f'alias mcp-scan="cd $MCP_SYSTEM_PATH && {python} scripts/version_keeper.py"',
        f'alias mcp-fix="cd $MCP_SYSTEM_PATH && {python} scripts/claude_quality_patcher.py"',
        f'alias mcp-demo="cd $MCP_SYSTEM_PATH && {python} demo_semantic_catalog.py"',
        f'alias mcp-test="cd $MCP_SYSTEM_PATH && {python} test_rapid_semantic_fix.py"',
        "",
        "# Development aliases",
        'alias vim="nvim"',
        'alias vi="nvim"',
        'alias lazy="nvim"',
        'alias lv="nvim"',
        'alias docker-start="open -a Docker"',
        'alias gemini-help="gemini --help"',
        f'alias gemini-setup="cat {guide}"',
        "alias gemini-test=\"gemini 'Hello, this is a test connection'\"",
    ]
    return "\n".join(lines) + "\n"


def render_desktop_config(settings: Settings, catalog: Catalog) -> str:
    """Claude desktop config registering the workspace MCP server."""
    clone = workspace_clone(settings, catalog)
    config = {
        "mcpServers": {
            catalog.repositories.workspace_dir_name: {
                "command": settings.python_executable,
                "args": [str(clone / SERVER_ENTRY)],
                "env": {"PYTHONPATH": str(clone)},
            }
        }
    }
    return json.dumps(config, indent=2) + "\n"


def render_launcher(settings: Settings, catalog: Catalog) -> str:
    """Shell script that starts the MCP server from the workspace clone."""
    clone = workspace_clone(settings, catalog)
    return "\n".join(
        [
            "#!/bin/bash",
            'echo "Launching MCP System..."',
            f'cd "{clone}" || exit 1',
            'export PYTHONPATH="$(pwd):$PYTHONPATH"',
            f'exec {settings.python_executable} "{SERVER_ENTRY}" "$@"',
            "",
        ]
    )


def render_ghostty_config(values: dict[str, str] | None = None) -> str:
    """Flat ``key = value`` terminal config."""
    settings = GHOSTTY_SETTINGS if values is None else values
    return "".join(f"{key} = {value}\n" for key, value in settings.items())


def build_fragments(settings: Settings, catalog: Catalog) -> list[ConfigFragment]:
    """All configuration written by a setup run, in application order."""
    fragments = profile_path_fragments(settings)
    fragments.append(
        ConfigFragment(
            target=settings.home / ".zshrc",
            content=render_shell_block(settings, catalog),
            marker=SHELL_BLOCK_MARKER,
        )
    )
    fragments.extend(
        [
            ConfigFragment(
                target=settings.claude_desktop_config,
                content=render_desktop_config(settings, catalog),
                mode=WriteMode.OVERWRITE,
            ),
            ConfigFragment(
                target=settings.launcher_path,
                content=render_launcher(settings, catalog),
                mode=WriteMode.OVERWRITE,
                executable=True,
            ),
            ConfigFragment(
                target=settings.ghostty_config,
                content=render_ghostty_config(),
                mode=WriteMode.OVERWRITE,
            ),
            ConfigFragment(
                target=settings.gemini_guide,
                content=GEMINI_GUIDE,
                mode=WriteMode.OVERWRITE,
            ),
        ]
    )
    return fragments
