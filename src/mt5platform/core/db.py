import json
from typing import Any, Self
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic import ValidationError as PydanticValidationError


class StoredModel(BaseModel):
    """Record kept inside a JSON list blob in the key-value store."""

    id: UUID = Field(default_factory=uuid4)

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_serialization_defaults_required=True,
    )

    def to_store(self) -> dict[str, Any]:
        """Dump with wire aliases and JSON-safe values (UUIDs and datetimes as strings)."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    @classmethod
    def load_list(cls, raw: str | None) -> list[Self]:
        """Parse a JSON list blob; a missing blob is an empty list."""
        if raw is None:
            return []
        return TypeAdapter(list[cls]).validate_json(raw)  # type: ignore[valid-type]

    @classmethod
    def partition_list(cls, raw: str | None) -> tuple[list[Self], list[Any]]:
        """Parse a JSON list blob entry by entry.

        Returns the entries that validate and, separately, the raw entries that don't,
        so one bad record does not make the whole blob unreadable.
        """
        if raw is None:
            return [], []
        valid: list[Self] = []
        rejected: list[Any] = []
        for entry in json.loads(raw):
            try:
                valid.append(cls.model_validate(entry))
            except PydanticValidationError:
                rejected.append(entry)
        return valid, rejected

    @classmethod
    def dump_list(cls, items: list[Self], passthrough: list[Any] | None = None) -> str:
        """Serialize a list blob; `passthrough` entries are written back untouched."""
        return json.dumps([item.to_store() for item in items] + (passthrough or []))
