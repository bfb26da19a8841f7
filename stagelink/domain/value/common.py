"""Base class for value objects."""

from pydantic import BaseModel, ConfigDict


class ValueObject(BaseModel):
    """Immutable value compared field by field.

    Profiles, attempts and session records are passed between services and
    stored as JSON, so none of them may change after construction.
    """

    model_config = ConfigDict(frozen=True)
