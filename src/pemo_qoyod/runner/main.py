"""
CLI main entry point.
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from ..config import Config, create_default_config, load_config
from ..services.sync_job import TRIGGER_METHOD, SyncJob

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def create_cli() -> argparse.ArgumentParser:
    """Create CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="pemo-qoyod",
        description="Export Pemo transactions to Qoyod and mark them as exported",
    )

    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=Path("config.yaml"),
        help="Path to config file (default: config.yaml, optional)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # sync command
    sync_parser = subparsers.add_parser(
        "sync", help="Run one export pass (Pemo → Qoyod → mark exported)"
    )
    sync_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Build Qoyod payloads without submitting them or marking Pemo transactions",
    )
    sync_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the endpoint-style JSON result instead of a summary",
    )

    # check-config command
    subparsers.add_parser("check-config", help="Validate configuration without network calls")

    # init-config command
    init_parser = subparsers.add_parser("init-config", help="Write a default config file")
    init_parser.add_argument(
        "--force",
        action="store_true",
        help="Overwrite an existing config file",
    )

    return parser


def cmd_sync(config: Config, dry_run: bool = False, as_json: bool = False) -> int:
    """Run one export pass."""
    job = SyncJob(config, dry_run=dry_run)
    result = job.run(TRIGGER_METHOD)

    if as_json:
        print(json.dumps(result.body, indent=2, ensure_ascii=False))
        return 0 if result.ok else 1

    if not result.ok:
        print(f"❌ Sync failed ({result.status_code}): {result.body.get('error')}")
        return 1

    summary = result.summary
    if summary is None or summary.fetched_count == 0:
        print("✓ No transactions to export")
        return 0

    print()
    print("📊 Sync Results" + (" (dry run)" if dry_run else ""))
    print("=" * 40)
    print(f"  Fetched:   {summary.fetched_count}")
    print(f"  Exported:  {summary.exported_count}")
    print(f"  Failed:    {len(summary.failed_ids)}")
    print(f"  Skipped:   {summary.skipped_count}")
    print()

    for txn_id in summary.exported_ids:
        print(f"  ✓ {txn_id}")
    for txn_id in summary.failed_ids:
        print(f"  ✗ {txn_id}")

    if summary.mark_succeeded is False:
        print("⚠️  Entries were created but Pemo could not mark them as exported")

    return 0


def cmd_check_config(config: Config) -> int:
    """Validate configuration."""
    errors = config.validate()
    if errors:
        print("❌ Configuration invalid:")
        for error in errors:
            print(f"   - {error}")
        return 1

    print("✓ Configuration complete")
    print(f"  Pemo:        {config.pemo.base_url}")
    print(f"  Qoyod:       {config.qoyod.base_url}")
    print(f"  Entry type:  {config.qoyod.entry_type}")
    return 0


def cmd_init_config(config_path: Path, force: bool = False) -> int:
    """Write a default config file."""
    if config_path.exists() and not force:
        print(f"❌ {config_path} already exists (use --force to overwrite)")
        return 1

    create_default_config(config_path)
    print(f"✓ Wrote {config_path}")
    return 0


def main(args: list[str] | None = None) -> int:
    """Main entry point."""
    parser = create_cli()
    parsed = parser.parse_args(args)

    setup_logging(parsed.verbose)

    if not parsed.command:
        parser.print_help()
        return 1

    if parsed.command == "init-config":
        return cmd_init_config(parsed.config, parsed.force)

    # Load config
    try:
        config = load_config(parsed.config)
    except Exception as e:
        print(f"❌ Failed to load config: {e}")
        return 1

    # Route to command
    if parsed.command == "sync":
        return cmd_sync(config, dry_run=parsed.dry_run, as_json=parsed.json)
    elif parsed.command == "check-config":
        return cmd_check_config(config)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
