"""
CLI runner module.

Provides commands:
- sync: One export pass (manual trigger or cron)
- check-config: Validate configuration
- init-config: Write a default config.yaml
"""

from .main import create_cli, main

__all__ = [
    "create_cli",
    "main",
]
