from __future__ import annotations

import codecs
from pathlib import Path
from typing import Any, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from .schema import ArrayNode, SchemaNode, parse_schema
from .settings import Settings


class StoreConfig(BaseModel):
    """
    What to open:
      { "file": "./data/app.json", "schema": {...}, "default": {...} }
      { "file": "./data/users.json", "storageType": "array", "schema": {...}, "initValue": [...] }

    In array storage mode `schema` describes one item and the file holds a list of them.
    """

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    file: Path
    schema_node: Any = Field(alias="schema")
    storage_type: Literal["object", "array"] = Field(default="object", alias="storageType")
    default: Any = Field(default=None, validation_alias=AliasChoices("default", "init_value", "initValue"))

    @field_validator("schema_node", mode="before")
    @classmethod
    def _parse_schema(cls, value: Any) -> SchemaNode:
        # SchemaDefinitionError is not a ValueError, so it reaches the caller unwrapped.
        return parse_schema(value)

    @property
    def root(self) -> SchemaNode:
        if self.storage_type == "array":
            return ArrayNode(item=self.schema_node)
        return self.schema_node


class StoreOptions(BaseModel):
    """
    Per-store behaviour. Fields left as None fall back to Settings.
    """

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    encoding: str | None = None
    auto_validate: bool | None = Field(default=None, alias="autoValidate")
    coerce: bool | None = None

    @field_validator("encoding")
    @classmethod
    def _known_encoding(cls, value: str | None) -> str | None:
        if value is None:
            return None
        try:
            codecs.lookup(value)
        except LookupError as e:
            raise ValueError(f"unknown encoding: {value!r}") from e
        return value

    def resolved(self, settings: Settings) -> "StoreOptions":
        # Re-validated so values taken from settings go through the same checks.
        return type(self).model_validate(
            {
                "encoding": self.encoding or settings.default_encoding,
                "auto_validate": settings.auto_validate if self.auto_validate is None else self.auto_validate,
                "coerce": settings.coerce if self.coerce is None else self.coerce,
            }
        )
