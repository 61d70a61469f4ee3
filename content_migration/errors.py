"""Exceptions raised during a migration run."""

from typing import List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .models.record import RunResult


class MigrationError(Exception):
    """Base class for migration errors."""


class ConfigurationMismatch(MigrationError):
    """
    The source data does not line up with the target schema.

    Raised when a source field has no field definition on the resolved item
    type, or when a key cannot be normalized. This is a mapping bug and
    aborts the whole run.
    """

    def __init__(self, message: str, content_type: Optional[str] = None,
                 field_key: Optional[str] = None):
        super().__init__(message)
        self.content_type = content_type
        self.field_key = field_key


class TargetAPIError(MigrationError):
    """A request to the target API failed."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class CreateRecordFailure(TargetAPIError):
    """The target rejected a create (or publish) call."""

    def __init__(self, message: str, entry_id: Optional[str] = None,
                 status_code: Optional[int] = None):
        super().__init__(message, status_code)
        self.entry_id = entry_id

    def to_dict(self):
        return {
            "entry_id": self.entry_id,
            "status_code": self.status_code,
            "error": str(self),
        }


class RecordCreationError(MigrationError):
    """
    One or more create calls failed.

    Raised only after every job of the run has settled. Carries each
    failure and the records that were created anyway.
    """

    def __init__(self, failures: List[CreateRecordFailure], partial_result: "RunResult"):
        self.failures = failures
        self.partial_result = partial_result
        super().__init__(
            f"{len(failures)} record(s) failed to create; "
            f"{partial_result.created_count} created before the run was aborted"
        )

    @property
    def first_failure(self) -> CreateRecordFailure:
        return self.failures[0]
