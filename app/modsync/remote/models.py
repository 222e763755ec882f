"""Response models for the server's auxiliary endpoints."""

from typing import Annotated

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class AdminStatus(BaseModel):
    """Result of validating the admin secret.

    Older servers answer with a bare ``true``/``false``; that form is
    mapped onto ``is_enabled`` with privileged actions disallowed.

    Attributes:
        is_enabled: Whether the secret is accepted.
        allow_privileged_action: Whether privileged endpoints may be used.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    is_enabled: Annotated[
        bool,
        Field(validation_alias=AliasChoices("is_enabled", "isEnabled", "IsEnabled")),
    ] = False
    allow_privileged_action: Annotated[
        bool,
        Field(
            validation_alias=AliasChoices(
                "allow_privileged_action", "allowPrivilegedAction", "AllowPrivilegedAction"
            )
        ),
    ] = False

    @classmethod
    def disabled(cls) -> "AdminStatus":
        """Status used when validation fails or the server is unreachable."""
        return cls(is_enabled=False, allow_privileged_action=False)
