# Shiori CLI Commands
"""
コマンドモジュールのエクスポート
"""

from shiori.cli.commands import content
from shiori.cli.commands.config_cmd import config_app

__all__ = [
    "config_app",
    "content",
]
