"""Fastly API data models."""

from typing import Literal

from pydantic import BaseModel


class FastlyUser(BaseModel):
    """The user owning a Fastly API token."""

    name: str
    customer_id: str


class FastlyService(BaseModel):
    """A newly created service."""

    id: str
    name: str | None = None


class FastlyDomain(BaseModel):
    name: str


class FastlyBackend(BaseModel):
    name: str
    address: str
    port: int


class FastlyDictionary(BaseModel):
    id: str
    name: str


class DictionaryItemAction(BaseModel):
    """One operation in a bulk dictionary item update."""

    op: Literal["create", "update", "upsert", "delete"] = "create"
    item_key: str
    item_value: str


class FastlyServiceVersion(BaseModel):
    number: int = 1
    active: bool = False
