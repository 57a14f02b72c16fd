# Shiori CLI - Config Commands
"""
設定ファイルの表示・検証
"""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from shiori.cli.main import print_error, print_success, print_warning
from shiori.errors import ShioriError

console = Console()
config_app = typer.Typer(help="Configuration commands")


# デフォルト設定テンプレート
DEFAULT_CONFIG = """# Shiori Configuration File

# Content repository root (relative to this file)
repo_root: .

# Concurrent file reads / JSON writes
max_concurrent: 10

# ======================================
# Validation
# ======================================

# Maximum diagnostics to collect (0 = unlimited)
max_errors: 0

# Treat warnings as errors
strict_mode: false

# Validators to run (omit for all): frontmatter, naming, hierarchy, duplicate_id
# enabled_validators: [frontmatter, naming, hierarchy, duplicate_id]

# ======================================
# Metadata
# ======================================

# Read sha and timestamps from git (false: filesystem stat)
use_git: true

# Log level: debug, info, warning, error, critical
log_level: warning
"""


def _resolve_config(config: Optional[Path]) -> Optional[Path]:
    from shiori.api import find_config_file

    return config or find_config_file()


@config_app.command("show")
def config_show(
    config: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Config file path"
    ),
):
    """Show current configuration"""
    config_path = _resolve_config(config)

    if config_path is None or not config_path.exists():
        print_warning("No configuration file found")
        console.print("\nCreate one with:")
        console.print("  [cyan]shiori init[/cyan]")
        raise typer.Exit(1)

    try:
        content = config_path.read_text(encoding="utf-8")
    except OSError as e:
        print_error(f"Failed to read config file: {e}")
        raise typer.Exit(1)

    syntax = Syntax(content, "yaml", theme="monokai", line_numbers=True)
    console.print(Panel(
        syntax,
        title=str(config_path),
        border_style="cyan",
    ))


@config_app.command("validate")
def config_validate(
    config: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Config file path"
    ),
):
    """Validate configuration file"""
    config_path = _resolve_config(config) or Path("./shiori.yaml")

    if not config_path.exists():
        print_error(f"Config file not found: {config_path}")
        raise typer.Exit(1)

    try:
        from shiori.api import ConfigManager

        cfg = ConfigManager.from_yaml(config_path).config
    except ShioriError as e:
        print_error(f"Configuration error: {e.message}")
        raise typer.Exit(1)

    table = Table(title="Configuration Validation")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")
    table.add_column("Status")

    validators = cfg.enabled_validators
    checks = [
        ("Repository Root", str(cfg.repo_root)),
        ("Max Concurrent", str(cfg.max_concurrent)),
        ("Max Errors", str(cfg.max_errors)),
        ("Strict Mode", str(cfg.strict_mode)),
        ("Validators", ", ".join(validators) if validators is not None else "all"),
        ("Use Git", str(cfg.use_git)),
        ("Log Level", cfg.log_level),
    ]
    for name, value in checks:
        table.add_row(name, value, "[green]✓[/green]")

    console.print(table)

    if not cfg.repo_root.is_dir():
        print_warning(f"Repository root does not exist: {cfg.repo_root}")
    print_success("Configuration is valid")
