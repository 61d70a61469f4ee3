"""Command line interface for the content migration application."""

import argparse
import json
import logging
import sys
from typing import Optional

from .errors import MigrationError
from .models.migration import MigrationConfig
from .loaders.api_client import APIRecordClient
from .orchestrator import MigrationOrchestrator

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Migrate exported content entries into a headless CMS"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command")

    # Shared input options
    inputs = argparse.ArgumentParser(add_help=False)
    inputs.add_argument("--config", help="Migration config JSON file")
    inputs.add_argument("--export", dest="export_file", help="Source export JSON file")
    inputs.add_argument("--schema", dest="schema_file", help="Target schema catalog JSON file")
    inputs.add_argument("--base-url", dest="target_base_url", help="Target API base URL")
    inputs.add_argument("--token", dest="target_api_token",
                        help="Target API token (defaults to $TARGET_API_TOKEN)")

    # run command
    run_parser = subparsers.add_parser("run", parents=[inputs], help="Run a migration")
    run_parser.add_argument("--concurrency", type=int, help="Create calls in flight at once")
    run_parser.add_argument("--dry-run", action="store_true", help="Simulate without writing")
    run_parser.add_argument("--no-publish", action="store_true",
                            help="Leave created records as drafts")
    run_parser.add_argument("--continue-on-error", action="store_true",
                            help="Publish what was created even if some creations failed")
    run_parser.add_argument("--output-dir", help="Directory for reports and the id map")

    # preview command
    preview_parser = subparsers.add_parser("preview", parents=[inputs],
                                           help="Show the attributes built for entries")
    preview_parser.add_argument("--limit", type=int, default=5, help="Number of entries to show")

    # schema command
    subparsers.add_parser("schema", parents=[inputs], help="Print the target schema catalog")

    return parser


def load_config(args) -> MigrationConfig:
    """Build the configuration from an optional file and command line overrides."""
    data = {}
    if getattr(args, "config", None):
        with open(args.config) as f:
            data = json.load(f)

    overrides = {
        "export_file": getattr(args, "export_file", None),
        "schema_file": getattr(args, "schema_file", None),
        "target_base_url": getattr(args, "target_base_url", None),
        "target_api_token": getattr(args, "target_api_token", None),
        "concurrency": getattr(args, "concurrency", None),
        "output_dir": getattr(args, "output_dir", None),
    }
    data.update({k: v for k, v in overrides.items() if v is not None})

    if getattr(args, "dry_run", False):
        data["dry_run"] = True
    if getattr(args, "no_publish", False):
        data["publish"] = False
    if getattr(args, "continue_on_error", False):
        data["continue_on_error"] = True

    return MigrationConfig.from_dict(data)


def main(argv: Optional[list] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    # Set up logging
    log_level = logging.DEBUG if getattr(args, "verbose", False) else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    commands = {
        "run": run_migration,
        "preview": run_preview,
        "schema": run_schema,
    }
    if args.command not in commands:
        parser.print_help()
        return 1

    try:
        return commands[args.command](args)
    except (MigrationError, ValueError, OSError) as e:
        logger.error(f"{args.command} failed: {e}")
        print(f"Error: {e}")
        return 1


def run_migration(args) -> int:
    """Run a migration."""
    config = load_config(args)
    orchestrator = MigrationOrchestrator(config)
    result = orchestrator.run_migration()

    print("\n" + "=" * 60)
    print("MIGRATION COMPLETE" if result.succeeded else "MIGRATION FAILED")
    print("=" * 60)
    print(f"Status: {result.status.value}")
    print(f"Records Created: {len(result.id_map)}")
    print(f"Records To Publish: {len(result.publish_list)}")
    print(f"Skipped: {result.total_records_skipped}")
    print(f"Failed: {result.total_records_failed}")
    if result.duration_seconds:
        print(f"Duration: {result.duration_seconds:.2f} seconds")
    for error in result.errors:
        print(f"Error ({error['phase']}): {error['error']}")

    return 0 if result.succeeded else 1


def run_preview(args) -> int:
    """Print the attributes that would be sent for the first entries."""
    config = load_config(args)
    config.save_report = False
    config.dry_run = config.dry_run or not config.target_api_token

    orchestrator = MigrationOrchestrator(config)
    for preview in orchestrator.preview(limit=args.limit):
        print(json.dumps(preview, indent=2, default=str, ensure_ascii=False))
        print("-" * 40)
    return 0


def run_schema(args) -> int:
    """Print the schema catalog, fetched from the API unless a file is given."""
    config = load_config(args)

    if config.schema_file:
        from .services.schema_registry import SchemaRegistry
        registry = SchemaRegistry.from_json_file(config.schema_file)
    else:
        client = APIRecordClient(config.target_base_url, config.target_api_token)
        try:
            registry = client.fetch_catalog()
        finally:
            client.close()

    print(json.dumps(registry.to_dict(), indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
