"""Migration execution models."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from enum import Enum
from datetime import datetime
import json
import os
import uuid

TOKEN_ENV_VAR = "TARGET_API_TOKEN"
DEFAULT_CONCURRENCY = 5


class MigrationStatus(str, Enum):
    """Status of a migration run or step."""
    PENDING = "pending"
    LOADING_EXPORT = "loading_export"
    LOADING_SCHEMA = "loading_schema"
    CREATING = "creating"
    PUBLISHING = "publishing"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class MigrationStep:
    """Counters and messages for one phase of a run."""
    name: str = ""
    status: MigrationStatus = MigrationStatus.PENDING
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    records_succeeded: int = 0
    records_failed: int = 0
    records_skipped: int = 0
    errors: List[Dict[str, Any]] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "name": self.name,
            "status": self.status.value,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "records_succeeded": self.records_succeeded,
            "records_failed": self.records_failed,
            "records_skipped": self.records_skipped,
            "errors": self.errors,
            "warnings": self.warnings,
        }


@dataclass
class MigrationRun:
    """A complete migration run."""
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    name: str = ""
    status: MigrationStatus = MigrationStatus.PENDING
    dry_run: bool = False

    # Timing
    created_at: datetime = field(default_factory=datetime.utcnow)
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    # Progress
    steps: List[MigrationStep] = field(default_factory=list)

    # Statistics
    total_records_failed: int = 0
    total_records_skipped: int = 0

    # Results, possibly partial when the run failed
    id_map: Dict[str, str] = field(default_factory=dict)
    publish_list: List[str] = field(default_factory=list)
    errors: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return self.status == MigrationStatus.COMPLETED

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "id": self.id,
            "name": self.name,
            "status": self.status.value,
            "dry_run": self.dry_run,
            "created_at": self.created_at.isoformat(),
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "steps": [s.to_dict() for s in self.steps],
            "records_created": len(self.id_map),
            "total_records_failed": self.total_records_failed,
            "total_records_skipped": self.total_records_skipped,
            "id_map": self.id_map,
            "publish_list": self.publish_list,
            "errors": self.errors,
        }

    @property
    def duration_seconds(self) -> Optional[float]:
        """Get duration in seconds."""
        if self.started_at and self.completed_at:
            return (self.completed_at - self.started_at).total_seconds()
        return None

    def add_step(self, name: str) -> MigrationStep:
        """Add a new step to the migration."""
        step = MigrationStep(name=name)
        self.steps.append(step)
        return step

    def update_totals(self) -> None:
        """Sum failure and skip counters over all steps."""
        self.total_records_failed = sum(s.records_failed for s in self.steps)
        self.total_records_skipped = sum(s.records_skipped for s in self.steps)


@dataclass
class MigrationConfig:
    """Configuration for a migration."""
    name: str = "content-migration"

    # Inputs
    export_file: Optional[str] = None
    schema_file: Optional[str] = None  # Fetched from the target API when unset

    # Target
    target_base_url: str = "https://site-api.datocms.com"
    target_api_token: Optional[str] = None

    # Execution options
    concurrency: int = DEFAULT_CONCURRENCY
    dry_run: bool = False
    publish: bool = True
    continue_on_error: bool = False

    # Output
    output_dir: str = "./data"
    save_report: bool = True

    def __post_init__(self):
        if self.concurrency < 1:
            raise ValueError(f"concurrency must be at least 1, got {self.concurrency}")
        if not self.target_api_token:
            self.target_api_token = os.environ.get(TOKEN_ENV_VAR)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation (the API token is omitted)."""
        return {
            "name": self.name,
            "export_file": self.export_file,
            "schema_file": self.schema_file,
            "target_base_url": self.target_base_url,
            "concurrency": self.concurrency,
            "dry_run": self.dry_run,
            "publish": self.publish,
            "continue_on_error": self.continue_on_error,
            "output_dir": self.output_dir,
            "save_report": self.save_report,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MigrationConfig":
        """Create from dictionary representation."""
        return cls(
            name=data.get("name", "content-migration"),
            export_file=data.get("export_file"),
            schema_file=data.get("schema_file"),
            target_base_url=data.get("target_base_url", "https://site-api.datocms.com"),
            target_api_token=data.get("target_api_token"),
            concurrency=data.get("concurrency", DEFAULT_CONCURRENCY),
            dry_run=data.get("dry_run", False),
            publish=data.get("publish", True),
            continue_on_error=data.get("continue_on_error", False),
            output_dir=data.get("output_dir", "./data"),
            save_report=data.get("save_report", True),
        )

    @classmethod
    def from_json_file(cls, file_path: str) -> "MigrationConfig":
        """Load configuration from a JSON file."""
        with open(file_path, 'r') as f:
            data = json.load(f)
        return cls.from_dict(data)
