"""HTTP client for the target CMS content management API."""

import asyncio
import functools
import logging
from typing import Any, Dict, List, Optional

import requests

from ..errors import CreateRecordFailure, MigrationError, TargetAPIError
from ..models.record import RecordAttributes
from ..models.schema import FieldDefinition, ItemTypeDefinition
from ..services.api_keys import attribute_key_map, decamelize
from ..services.schema_registry import SchemaRegistry
from .base import BaseRecordClient

logger = logging.getLogger(__name__)


class APIRecordClient(BaseRecordClient):
    """
    Client for a JSON:API style content management API.

    Requests go through a blocking requests.Session run in the event
    loop's default executor, so callers can await them and bound them with
    a semaphore.
    """

    def __init__(
        self,
        base_url: str,
        api_token: Optional[str],
        environment: Optional[str] = None,
        api_version: str = "3",
        timeout: float = 30.0
    ):
        """
        Initialize the API client.

        Args:
            base_url: Base URL of the API
            api_token: Full-access API token
            environment: Sandbox environment to write to, primary when unset
            api_version: Value of the X-Api-Version header
            timeout: Per-request timeout in seconds
        """
        super().__init__(dry_run=False)
        if not api_token:
            raise MigrationError("An API token is required to write to the target")
        self.base_url = base_url.rstrip("/")
        self.api_token = api_token
        self.environment = environment
        self.api_version = api_version
        self.timeout = timeout
        self._session = self._create_session()

    def _create_session(self) -> requests.Session:
        """Create a requests session with authentication."""
        session = requests.Session()
        session.headers["Authorization"] = f"Bearer {self.api_token}"
        session.headers["Accept"] = "application/json"
        session.headers["Content-Type"] = "application/vnd.api+json"
        session.headers["X-Api-Version"] = self.api_version
        if self.environment:
            session.headers["X-Environment"] = self.environment
        return session

    def close(self) -> None:
        self._session.close()

    async def _in_executor(self, func, *args) -> Any:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, functools.partial(func, *args))

    async def create(self, attributes: RecordAttributes, item_type: ItemTypeDefinition) -> str:
        return await self._in_executor(self.create_sync, attributes, item_type)

    async def publish(self, record_id: str) -> None:
        await self._in_executor(self.publish_sync, record_id)

    async def fetch_catalog_async(self) -> SchemaRegistry:
        return await self._in_executor(self.fetch_catalog)

    def create_sync(self, attributes: RecordAttributes, item_type: ItemTypeDefinition) -> str:
        """Create a record and return its id."""
        api_keys = attribute_key_map(f.api_key for f in item_type.fields)
        payload = {
            "data": {
                "type": "item",
                "attributes": {
                    api_keys.get(k) or decamelize(k): v for k, v in attributes.items()
                },
                "relationships": {
                    "item_type": {
                        "data": {"type": "item_type", "id": str(item_type.id)},
                    },
                },
            },
        }
        try:
            data = self._request("POST", "/items", json=payload)
        except TargetAPIError as e:
            raise CreateRecordFailure(str(e), status_code=e.status_code) from e
        return str(data["data"]["id"])

    def publish_sync(self, record_id: str) -> None:
        """Publish a record."""
        try:
            self._request("PUT", f"/items/{record_id}/publish")
        except TargetAPIError as e:
            raise CreateRecordFailure(str(e), status_code=e.status_code) from e

    def fetch_catalog(self) -> SchemaRegistry:
        """Fetch every item type and its fields from the API."""
        item_types: List[ItemTypeDefinition] = []

        for item in self._request("GET", "/item-types").get("data", []):
            attrs = item.get("attributes", {})
            fields = [
                self._parse_field(f)
                for f in self._request("GET", f"/item-types/{item['id']}/fields").get("data", [])
            ]
            item_types.append(ItemTypeDefinition(
                api_key=attrs.get("api_key", ""),
                id=str(item["id"]),
                name=attrs.get("name", ""),
                fields=fields,
            ))

        logger.info(f"Fetched {len(item_types)} item types from {self.base_url}")
        return SchemaRegistry(item_types)

    @staticmethod
    def _parse_field(data: Dict[str, Any]) -> FieldDefinition:
        return FieldDefinition.from_dict(data.get("attributes", {}))

    def _request(self, method: str, path: str, **kwargs) -> Dict[str, Any]:
        url = f"{self.base_url}{path}"

        try:
            response = self._session.request(method, url, timeout=self.timeout, **kwargs)
            response.raise_for_status()
        except requests.exceptions.HTTPError as e:
            raise TargetAPIError(
                f"{method} {path} failed: {self._error_message(e.response)}",
                status_code=e.response.status_code,
            ) from e
        except requests.exceptions.RequestException as e:
            raise TargetAPIError(f"{method} {path} failed: {e}") from e

        return response.json() if response.text else {}

    @staticmethod
    def _error_message(response: requests.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return response.text or str(response.status_code)

        errors = body.get("data") if isinstance(body, dict) else None
        if isinstance(errors, list) and errors:
            codes = [
                e.get("attributes", {}).get("code", "")
                for e in errors if isinstance(e, dict)
            ]
            return ", ".join(c for c in codes if c) or str(body)
        return str(body)
