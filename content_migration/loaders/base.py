"""Record client interface for the target CMS."""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional
import itertools
import logging

from ..models.record import RecordAttributes
from ..models.schema import ItemTypeDefinition

logger = logging.getLogger(__name__)


class BaseRecordClient(ABC):
    """
    Base class for clients that write records to the target CMS.

    Clients own the transport. They raise CreateRecordFailure when the
    target rejects a call and never retry.
    """

    def __init__(self, dry_run: bool = False):
        self.dry_run = dry_run

    @abstractmethod
    async def create(self, attributes: RecordAttributes, item_type: ItemTypeDefinition) -> str:
        """
        Create a record.

        Args:
            attributes: Attribute mapping keyed by camelized field api key
            item_type: Item type the record belongs to; clients send the
                attributes under its field api keys

        Returns:
            Id of the new record
        """

    @abstractmethod
    async def publish(self, record_id: str) -> None:
        """Publish a record."""

    def close(self) -> None:
        """Release any resources held by the client."""


class DryRunRecordClient(BaseRecordClient):
    """Client that records calls and fabricates ids instead of writing."""

    def __init__(self, id_prefix: str = "dry-run-"):
        super().__init__(dry_run=True)
        self.id_prefix = id_prefix
        self._counter = itertools.count(1)
        self.created: Dict[str, RecordAttributes] = {}
        self.item_types: Dict[str, str] = {}
        self.published: List[str] = []

    async def create(self, attributes: RecordAttributes, item_type: ItemTypeDefinition) -> str:
        record_id = f"{self.id_prefix}{next(self._counter)}"
        self.created[record_id] = attributes
        self.item_types[record_id] = item_type.id
        logger.debug(f"[dry run] would create {item_type.api_key} record {record_id}")
        return record_id

    async def publish(self, record_id: str) -> None:
        self.published.append(record_id)
        logger.debug(f"[dry run] would publish {record_id}")

    def attributes_for(self, record_id: str) -> Optional[RecordAttributes]:
        return self.created.get(record_id)
