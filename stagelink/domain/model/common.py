"""Base model for domain entities."""

from pydantic import BaseModel, ConfigDict


class DomainModel(BaseModel):
    """Base class for accounts, risk records and catalog entries.

    Entities are frozen; updates go through ``model_copy`` so a repository
    write always receives a complete new version.
    """

    model_config = ConfigDict(frozen=True)
