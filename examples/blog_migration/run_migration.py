#!/usr/bin/env python3
"""
Example: migrating a blog export into the target CMS

Uses the sample export and schema catalog next to this script.

Usage:
    # Dry run (simulation)
    python run_migration.py --dry-run

    # Full migration (needs TARGET_API_TOKEN)
    python run_migration.py
"""

import argparse
import logging
import sys
from pathlib import Path

# Add repository root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from content_migration.models.migration import MigrationConfig
from content_migration.orchestrator import MigrationOrchestrator

HERE = Path(__file__).parent

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
)
logger = logging.getLogger(__name__)


def create_config(dry_run: bool = True) -> MigrationConfig:
    """Create migration configuration programmatically."""
    return MigrationConfig(
        name="blog_migration",
        export_file=str(HERE / "export.json"),
        schema_file=str(HERE / "schema.json"),
        concurrency=5,
        dry_run=dry_run,
        output_dir=str(HERE / "output"),
    )


def main():
    parser = argparse.ArgumentParser(description="Blog content migration")
    parser.add_argument("--dry-run", action="store_true", help="Simulate without writing")
    args = parser.parse_args()

    config = create_config(dry_run=args.dry_run)
    run = MigrationOrchestrator(config).run_migration()

    logger.info(f"Status: {run.status.value}")
    logger.info(f"Created {len(run.id_map)} records, {len(run.publish_list)} published")
    return 0 if run.succeeded else 1


if __name__ == "__main__":
    sys.exit(main())
