# Shiori CLI - Main Application
"""
メインアプリケーション構造
"""

import logging
from enum import Enum
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

# === アプリケーション初期化 ===

app = typer.Typer(
    name="shiori",
    help="Shiori - content tree validation and metadata generation for multi-locale docs",
    add_completion=False,
    no_args_is_help=True,
)

console = Console()


# === 出力フォーマット ===

class OutputFormat(str, Enum):
    """出力フォーマット"""
    text = "text"
    json = "json"


# === ユーティリティ関数 ===

def get_shiori(root: Optional[Path] = None, config_path: Optional[Path] = None):
    """Shioriインスタンスを取得

    Args:
        root: コンテンツリポジトリのルート（指定時は設定より優先）
        config_path: 設定ファイルパス（Noneの場合は探索）

    Returns:
        Shiori: 初期化済みインスタンス
    """
    from shiori.api import ConfigManager, Shiori, find_config_file
    from shiori.observability import ROOT_LOGGER_NAME, LogLevel

    path = config_path
    if path is None:
        path = find_config_file(root) if root else None
        path = path or find_config_file()

    manager = ConfigManager.from_yaml(path) if path else ConfigManager()
    config = manager.config
    if root is not None:
        config.repo_root = root

    # --verbose が指定されていない場合は設定ファイルのログレベルを使う
    level = LogLevel(config.log_level).to_logging_level()
    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    if level < root_logger.level:
        root_logger.setLevel(level)
    return Shiori(config)


def print_error(message: str):
    """エラーメッセージを表示"""
    console.print(f"[red]✗ Error:[/red] {escape(message)}")


def print_success(message: str):
    """成功メッセージを表示"""
    console.print(f"[green]✓[/green] {escape(message)}")


def print_warning(message: str):
    """警告メッセージを表示"""
    console.print(f"[yellow]⚠[/yellow] {escape(message)}")


# === グローバルオプション ===

@app.callback()
def main_callback(
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug logging"
    ),
):
    """Shiori command line interface"""
    from shiori.observability import LogLevel, ObservabilityConfig, configure_logging

    configure_logging(
        ObservabilityConfig(log_level=LogLevel.DEBUG if verbose else LogLevel.WARNING)
    )


# === バージョンコマンド ===

@app.command()
def version():
    """Show version information"""
    from shiori import __version__

    console.print(Panel.fit(
        f"[bold cyan]Shiori[/bold cyan] v{__version__}\n"
        "[dim]Content tree validation and metadata generation[/dim]",
        border_style="cyan"
    ))


# === initコマンド ===

@app.command()
def init(
    path: Path = typer.Argument(
        Path("."),
        help="Content repository to initialize",
    ),
    force: bool = typer.Option(
        False, "--force", "-f", help="Overwrite existing files"
    ),
):
    """Initialize a Shiori configuration in a content repository

    Creates shiori.yaml in the given directory.
    """
    from shiori.cli.commands.config_cmd import DEFAULT_CONFIG

    project_path = path.resolve()
    config_file = project_path / "shiori.yaml"

    if config_file.exists() and not force:
        print_warning(f"Project already initialized: {config_file}")
        console.print("Use --force to reinitialize")
        raise typer.Exit(1)

    try:
        project_path.mkdir(parents=True, exist_ok=True)
        config_file.write_text(DEFAULT_CONFIG, encoding="utf-8")
    except OSError as e:
        print_error(f"Failed to initialize project: {e}")
        raise typer.Exit(1)

    console.print(Panel.fit(
        f"[green]✓ Shiori project initialized![/green]\n\n"
        f"[bold]Created:[/bold]\n"
        f"  📄 {config_file.name}\n\n"
        f"[bold]Next steps:[/bold]\n"
        f"  1. Add [cyan]<locale>/locale.md[/cyan] and chapters with [cyan]index.md[/cyan]\n"
        f"  2. Validate: [cyan]shiori validate[/cyan]\n"
        f"  3. Generate metadata: [cyan]shiori generate[/cyan]",
        title="Project Initialized",
        border_style="green"
    ))


# === サブコマンドのアタッチ ===

def attach_commands():
    """サブコマンドをアタッチ"""
    from shiori.cli.commands import config_app, content

    app.command("validate")(content.validate)
    app.command("generate")(content.generate)
    app.command("update")(content.update)
    app.add_typer(config_app, name="config")


attach_commands()
