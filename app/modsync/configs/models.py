"""Configuration file models.

Loose configuration files are tracked by name and modification time
rather than by version string.
"""

from datetime import UTC, datetime
from typing import Annotated

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class ConfigFileRecord(BaseModel):
    """A configuration file known to the server or found on disk.

    Attributes:
        file_name: File name including extension; compared case-insensitively.
        last_modified_utc: Last modification time, always timezone-aware UTC.
        is_enforced: Whether the client must always hold the server's copy.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    file_name: Annotated[
        str,
        Field(validation_alias=AliasChoices("file_name", "fileName", "FileName")),
    ]
    last_modified_utc: Annotated[
        datetime,
        Field(
            validation_alias=AliasChoices(
                "last_modified_utc", "lastModified", "LastModified", "lastModifiedUtc"
            )
        ),
    ]
    is_enforced: Annotated[
        bool,
        Field(validation_alias=AliasChoices("is_enforced", "isEnforced", "IsEnforced")),
    ] = False

    @field_validator("last_modified_utc")
    @classmethod
    def _as_utc(cls, value: datetime) -> datetime:
        """Treat naive timestamps as UTC and normalise aware ones to UTC."""
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    @property
    def key(self) -> str:
        """Case-insensitive lookup key."""
        return self.file_name.casefold()

    def same_timestamp(self, other: "ConfigFileRecord") -> bool:
        """Compare modification times at whole-second precision.

        Filesystems store mtimes with varying sub-second precision, so
        sub-second noise must not count as a change.
        """
        return int(self.last_modified_utc.timestamp()) == int(
            other.last_modified_utc.timestamp()
        )
