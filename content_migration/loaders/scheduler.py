"""Bounded-concurrency creation of target records."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from ..errors import CreateRecordFailure, RecordCreationError
from ..models.migration import DEFAULT_CONCURRENCY
from ..models.record import RecordAttributes, RunResult, SourceEntry
from ..models.schema import ItemTypeDefinition, LocaleSet
from ..services.progress import ProgressReporter
from ..services.record_builder import RecordAttributeBuilder
from ..services.schema_registry import SchemaRegistry
from .base import BaseRecordClient

logger = logging.getLogger(__name__)


@dataclass
class CreationJob:
    """One record to create."""
    entry: SourceEntry
    item_type: ItemTypeDefinition
    attributes: RecordAttributes


class CreationScheduler:
    """
    Creates one target record per resolvable source entry.

    At most ``concurrency`` create calls are in flight at once. Attributes
    for every entry are built before the first call, so a schema mismatch
    aborts the run before anything is written. Every job is awaited to
    completion; failures are collected and raised together afterwards,
    along with whatever was created. Nothing is retried or rolled back.
    """

    def __init__(
        self,
        client: BaseRecordClient,
        registry: SchemaRegistry,
        locales: LocaleSet,
        concurrency: int = DEFAULT_CONCURRENCY,
        progress: Optional[ProgressReporter] = None,
        builder: Optional[RecordAttributeBuilder] = None
    ):
        """
        Initialize the scheduler.

        Args:
            client: Client used to create and publish records
            registry: Registry resolving content types to item types
            locales: Locales configured for the run
            concurrency: Maximum number of calls in flight
            progress: Reporter ticked after each successful creation; its
                total is set to the number of jobs
            builder: Attribute builder, created from ``locales`` when omitted
        """
        if concurrency < 1:
            raise ValueError(f"concurrency must be at least 1, got {concurrency}")

        self.client = client
        self.registry = registry
        self.locales = locales
        self.concurrency = concurrency
        self.progress = progress or ProgressReporter(0, "Creating records")
        self.builder = builder or RecordAttributeBuilder(locales)
        self.skipped: List[SourceEntry] = []

    def plan(self, entries: Iterable[SourceEntry]) -> Tuple[List[CreationJob], List[SourceEntry]]:
        """
        Resolve entries and build their attributes.

        Returns:
            Jobs for resolvable entries, and the entries that were skipped
            because their content type has no item type
        """
        jobs: List[CreationJob] = []
        skipped: List[SourceEntry] = []

        for entry in entries:
            item_type = self.registry.resolve(entry.content_type_id)
            if item_type is None:
                logger.debug(f"Skipping entry {entry.id}: content type {entry.content_type_id} is not mapped")
                skipped.append(entry)
                continue

            attributes = self.builder.build(entry, item_type)
            jobs.append(CreationJob(entry=entry, item_type=item_type, attributes=attributes))

        return jobs, skipped

    async def run(self, entries: Iterable[SourceEntry]) -> RunResult:
        """
        Create records for all resolvable entries.

        Returns:
            The entry id -> record id map and the ids to publish

        Raises:
            ConfigurationMismatch: before any record is created
            RecordCreationError: after all jobs settled, if any create failed
        """
        jobs, self.skipped = self.plan(entries)
        if self.skipped:
            logger.info(f"Skipping {len(self.skipped)} entries with unmapped content types")

        self.progress.total = len(jobs)
        semaphore = asyncio.Semaphore(self.concurrency)

        async def create_one(job: CreationJob) -> str:
            async with semaphore:
                record_id = await self.client.create(job.attributes, job.item_type)
            self.progress.tick()
            return record_id

        logger.info(f"Creating {len(jobs)} records ({self.concurrency} at a time)")
        outcomes = await asyncio.gather(
            *(create_one(job) for job in jobs),
            return_exceptions=True,
        )

        result = RunResult()
        failures: List[CreateRecordFailure] = []

        for job, outcome in zip(jobs, outcomes):
            if isinstance(outcome, BaseException):
                failure = self._as_failure(outcome, job.entry.id)
                logger.error(f"Failed to create record for entry {job.entry.id}: {failure}")
                failures.append(failure)
            else:
                result.add(job.entry, outcome)

        if failures:
            raise RecordCreationError(failures, result)

        logger.info(f"Created {result.created_count} records, {len(result.publish_list)} to publish")
        return result

    async def publish(self, record_ids: List[str]) -> Tuple[List[str], List[CreateRecordFailure]]:
        """
        Publish records under the same concurrency cap.

        Returns:
            Published ids and the failures, once every call has settled
        """
        semaphore = asyncio.Semaphore(self.concurrency)
        progress = ProgressReporter(len(record_ids), "Publishing records", on_tick=self.progress.on_tick)

        async def publish_one(record_id: str) -> str:
            async with semaphore:
                await self.client.publish(record_id)
            progress.tick()
            return record_id

        outcomes = await asyncio.gather(
            *(publish_one(record_id) for record_id in record_ids),
            return_exceptions=True,
        )

        published: List[str] = []
        failures: List[CreateRecordFailure] = []
        for record_id, outcome in zip(record_ids, outcomes):
            if isinstance(outcome, BaseException):
                failure = self._as_failure(outcome, None)
                logger.error(f"Failed to publish record {record_id}: {failure}")
                failures.append(failure)
            else:
                published.append(record_id)

        return published, failures

    @staticmethod
    def _as_failure(error: BaseException, entry_id: Optional[str]) -> CreateRecordFailure:
        if not isinstance(error, Exception):
            raise error
        if isinstance(error, CreateRecordFailure):
            if error.entry_id is None:
                error.entry_id = entry_id
            return error
        failure = CreateRecordFailure(str(error) or type(error).__name__, entry_id=entry_id)
        failure.__cause__ = error
        return failure
