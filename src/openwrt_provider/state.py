"""Persisted entity state."""
import dataclasses
import json
from dataclasses import dataclass, field
from typing import Any, Optional

from .schema import EntitySchema

REDACTED = "(sensitive value)"


@dataclass
class State:
    """Flat attribute map written back after a successful read.

    Sensitive attribute values are stored as-is so the host can compare them
    on later reads; ``redacted()`` masks them for logs and diffs.
    """
    attributes: dict[str, Any] = field(default_factory=dict)
    sensitive: frozenset[str] = frozenset()

    @classmethod
    def from_model(cls, model: Any, schema: EntitySchema) -> "State":
        """Build state from a model whose fields are Values."""
        attributes = {}
        for f in dataclasses.fields(model):
            value = getattr(model, f.name)
            attributes[f.name] = value.value_or(None)
        return cls(attributes=attributes, sensitive=schema.sensitive_names)

    @property
    def is_empty(self) -> bool:
        return not self.attributes

    def get(self, name: str, default: Optional[Any] = None) -> Any:
        return self.attributes.get(name, default)

    def __getitem__(self, name: str) -> Any:
        return self.attributes[name]

    def redacted(self) -> dict[str, Any]:
        return {
            k: (REDACTED if k in self.sensitive and v is not None else v)
            for k, v in self.attributes.items()
        }

    def to_dict(self) -> dict:
        return {
            "attributes": dict(self.attributes),
            "sensitive_attributes": sorted(self.sensitive),
        }

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, sort_keys=True)

    @classmethod
    def from_dict(cls, data: dict) -> "State":
        return cls(
            attributes=dict(data.get("attributes", {})),
            sensitive=frozenset(data.get("sensitive_attributes", [])),
        )

    def __repr__(self) -> str:
        return f"State({self.redacted()!r})"
