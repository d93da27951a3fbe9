"""Declarative deployment configuration models.

These mirror the ``[setup]`` table a template repository ships to describe
the backends and edge dictionaries its service needs.
"""

from pydantic import BaseModel, ConfigDict, Field


class BackendSpec(BaseModel):
    """A backend the service talks to."""

    model_config = ConfigDict(frozen=True)

    name: str
    address: str
    port: int | None = None
    prompt: str | None = None


class DictionaryItemSpec(BaseModel):
    """A single key in an edge dictionary."""

    model_config = ConfigDict(frozen=True)

    key: str
    input_type: str
    prompt: str | None = None
    value: str | None = None


class DictionarySpec(BaseModel):
    """An edge dictionary and the items it should be seeded with."""

    model_config = ConfigDict(frozen=True)

    name: str
    prompt: str | None = None
    items: list[DictionaryItemSpec] = Field(default_factory=list)


class DeployConfigSpec(BaseModel):
    """Everything a template needs provisioned besides the service itself."""

    model_config = ConfigDict(frozen=True)

    backends: list[BackendSpec] = Field(default_factory=list)
    dictionaries: list[DictionarySpec] = Field(default_factory=list)
