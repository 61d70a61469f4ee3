"""Migration orchestrator - coordinates the complete migration process."""

import asyncio
import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from .errors import MigrationError, RecordCreationError
from .export import load_export_file
from .models.migration import (
    MigrationConfig,
    MigrationRun,
    MigrationStatus,
)
from .models.record import RunResult, SourceData
from .loaders.base import BaseRecordClient, DryRunRecordClient
from .loaders.api_client import APIRecordClient
from .loaders.scheduler import CreationScheduler
from .services.progress import ProgressReporter
from .services.record_builder import RecordAttributeBuilder
from .services.schema_registry import SchemaRegistry

logger = logging.getLogger(__name__)


class MigrationOrchestrator:
    """
    Orchestrates the complete migration process.

    Handles:
    - Reading the source export
    - Loading the target schema catalog
    - Creating records under bounded concurrency
    - Publishing records that were published at the source
    - Reporting, including partial results of a failed run
    """

    def __init__(
        self,
        config: MigrationConfig,
        registry: Optional[SchemaRegistry] = None,
        client: Optional[BaseRecordClient] = None,
        source_data: Optional[SourceData] = None,
        on_tick: Optional[Callable[[str], None]] = None
    ):
        """
        Initialize the orchestrator.

        Args:
            config: Migration configuration
            registry: Schema registry, loaded from the config when omitted
            client: Record client, created from the config when omitted
            source_data: Source data, read from the export file when omitted
            on_tick: Callback receiving progress status lines
        """
        self.config = config
        self.registry = registry
        self.client = client
        self.source_data = source_data
        self.on_tick = on_tick

        # Runtime state
        self.run: Optional[MigrationRun] = None
        self.result: Optional[RunResult] = None

        self._setup_directories()

    def _setup_directories(self):
        """Create output directories."""
        base = Path(self.config.output_dir)
        self.logs_dir = base / "logs"
        if self.config.save_report:
            self.logs_dir.mkdir(parents=True, exist_ok=True)

    def run_migration(self) -> MigrationRun:
        """
        Run the complete migration.

        Returns:
            MigrationRun with results and statistics
        """
        return asyncio.run(self.run_migration_async())

    async def run_migration_async(self) -> MigrationRun:
        """Run the complete migration inside an existing event loop."""
        self.run = MigrationRun(name=self.config.name, dry_run=self.config.dry_run)
        self.run.started_at = datetime.utcnow()

        try:
            # Phase 1: Source export
            logger.info("=== PHASE 1: READING EXPORT ===")
            self.run.status = MigrationStatus.LOADING_EXPORT
            self._load_source_data()

            # Phase 2: Target schema
            logger.info("=== PHASE 2: LOADING SCHEMA ===")
            self.run.status = MigrationStatus.LOADING_SCHEMA
            await self._load_registry()

            # Phase 3: Record creation
            logger.info("=== PHASE 3: CREATING RECORDS ===")
            self.run.status = MigrationStatus.CREATING
            await self._run_creation()

            # Phase 4: Publishing
            if self.config.publish:
                logger.info("=== PHASE 4: PUBLISHING RECORDS ===")
                self.run.status = MigrationStatus.PUBLISHING
                await self._run_publishing()

            self.run.status = MigrationStatus.COMPLETED
            logger.info("=== MIGRATION COMPLETED ===")

        except Exception as e:
            logger.error(f"Migration failed during {self.run.status.value}: {e}")
            self.run.errors.append({
                "phase": self.run.status.value,
                "error": str(e),
                "error_type": type(e).__name__,
                "timestamp": datetime.utcnow().isoformat(),
            })
            self.run.status = MigrationStatus.FAILED

        finally:
            self.run.completed_at = datetime.utcnow()
            self.run.update_totals()
            if self.result:
                self.run.id_map = dict(self.result.id_map)
                self.run.publish_list = list(self.result.publish_list)
            if self.client:
                self.client.close()
            if self.config.save_report:
                self._save_report()

        return self.run

    def _load_source_data(self):
        """Read the export unless source data was given."""
        if self.source_data is None:
            if not self.config.export_file:
                raise MigrationError("No export file configured")
            self.source_data = load_export_file(self.config.export_file)

    async def _load_registry(self):
        """Load the schema catalog unless a registry was given."""
        if self.registry is not None:
            return

        if self.config.schema_file:
            self.registry = SchemaRegistry.from_json_file(self.config.schema_file)
            return

        client = self._get_client()
        if not isinstance(client, APIRecordClient):
            raise MigrationError("No schema file configured and the client cannot fetch one")
        self.registry = await client.fetch_catalog_async()

    def _get_client(self) -> BaseRecordClient:
        if self.client is None:
            self.client = self._create_client()
        return self.client

    def _create_client(self) -> BaseRecordClient:
        """Create the record client for the target."""
        if self.config.dry_run:
            logger.info("Dry run: no records will be written")
            return DryRunRecordClient()
        return APIRecordClient(
            base_url=self.config.target_base_url,
            api_token=self.config.target_api_token,
        )

    def _create_scheduler(self) -> CreationScheduler:
        return CreationScheduler(
            client=self._get_client(),
            registry=self.registry,
            locales=self.source_data.locales,
            concurrency=self.config.concurrency,
            progress=ProgressReporter(0, "Creating records", on_tick=self.on_tick),
        )

    async def _run_creation(self):
        """Run the record creation phase."""
        step = self.run.add_step("Create records")
        step.status = MigrationStatus.CREATING
        step.started_at = datetime.utcnow()

        scheduler = self._create_scheduler()
        entries = self.source_data.entries

        try:
            self.result = await scheduler.run(entries)
            step.status = MigrationStatus.COMPLETED

        except RecordCreationError as e:
            self.result = e.partial_result
            step.status = MigrationStatus.FAILED
            step.records_failed = len(e.failures)
            step.errors.extend(f.to_dict() for f in e.failures)

            if not self.config.continue_on_error:
                raise
            logger.warning(f"Continuing after {len(e.failures)} failed creations")

        except Exception as e:
            step.status = MigrationStatus.FAILED
            step.errors.append({"error": str(e)})
            raise

        finally:
            step.records_skipped = len(scheduler.skipped)
            step.records_succeeded = self.result.created_count if self.result else 0
            for content_type, count in self.registry.unresolved_content_types(scheduler.skipped).items():
                step.warnings.append(f"{count} entries of unmapped content type {content_type}")
            step.completed_at = datetime.utcnow()

    async def _run_publishing(self):
        """Run the publishing phase."""
        step = self.run.add_step("Publish records")
        step.status = MigrationStatus.PUBLISHING
        step.started_at = datetime.utcnow()

        to_publish = list(self.result.publish_list) if self.result else []
        scheduler = self._create_scheduler()

        try:
            published, failures = await scheduler.publish(to_publish)
            step.records_succeeded = len(published)
            step.records_failed = len(failures)
            step.errors.extend(f.to_dict() for f in failures)

            if failures and not self.config.continue_on_error:
                raise MigrationError(f"{len(failures)} record(s) failed to publish")

            step.status = MigrationStatus.COMPLETED
            logger.info(f"Published {len(published)}/{len(to_publish)} records")

        except Exception:
            step.status = MigrationStatus.FAILED
            raise

        finally:
            step.completed_at = datetime.utcnow()

    def preview(self, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        """
        Build attributes for entries without creating anything.

        Returns:
            One dict per resolvable entry with its item type and attributes
        """
        self._load_source_data()
        try:
            asyncio.run(self._load_registry())
        finally:
            if self.client:
                self.client.close()

        builder = RecordAttributeBuilder(self.source_data.locales)
        previews = []

        for entry in self.source_data.entries:
            item_type = self.registry.resolve(entry.content_type_id)
            if item_type is None:
                continue
            previews.append({
                "entry_id": entry.id,
                "item_type": item_type.api_key,
                "publish": entry.is_published,
                "attributes": builder.build(entry, item_type),
            })
            if limit and len(previews) >= limit:
                break

        return previews

    def _save_report(self):
        """Save the migration report and the id map for the linking pass."""
        timestamp = datetime.utcnow().strftime('%Y%m%d_%H%M%S')

        filepath = self.logs_dir / f"migration_report_{timestamp}.json"
        with open(filepath, 'w') as f:
            json.dump(self.run.to_dict(), f, indent=2, default=str)
        logger.info(f"Saved migration report to {filepath}")

        id_map_path = Path(self.config.output_dir) / "id_map.json"
        with open(id_map_path, 'w') as f:
            json.dump(self.run.id_map, f, indent=2)
