"""Decode raw caller configuration into typed models.

Validates raw input against an EntitySchema before anything talks to a
device. All attribute problems are batched into one Diagnostics report.
"""
import dataclasses
import logging
from typing import Any, Mapping, Optional

from ..diagnostics import Diagnostics
from ..values import Value
from .attributes import Attribute, EntitySchema

logger = logging.getLogger(__name__)


class ConfigDecoder:
    """Decode and validate raw config against an entity schema."""

    def decode(
        self,
        schema: EntitySchema,
        raw: Optional[Mapping[str, Any]],
        model_cls: Optional[type] = None,
    ) -> tuple[Any, Diagnostics]:
        """
        Decode a raw attribute mapping.

        Checks performed:
        - attributes not declared in the schema
        - values supplied for computed-only attributes
        - missing required attributes
        - concrete values of the wrong type

        Args:
            schema: Schema to validate against
            raw: Attribute name -> raw value (None, UNKNOWN or concrete)
            model_cls: Dataclass with one field per schema attribute. When
                omitted, a dict of Value is returned.

        Returns:
            Tuple of (model or None on error, diagnostics)
        """
        diags = Diagnostics()
        raw = raw or {}

        self._check_undeclared(schema, raw, diags)

        values: dict[str, Value] = {}
        for attr in schema:
            value = Value.from_raw(raw.get(attr.name))
            self._check_attribute(attr, value, diags)
            values[attr.name] = value

        if diags.has_error():
            return None, diags

        if model_cls is None:
            return values, diags
        return self._build_model(model_cls, values), diags

    def _check_undeclared(
        self,
        schema: EntitySchema,
        raw: Mapping[str, Any],
        diags: Diagnostics,
    ) -> None:
        for name in raw:
            if name not in schema:
                diags.add_attribute_error(
                    str(name),
                    "Unsupported argument",
                    f"An argument named '{name}' is not expected here. "
                    f"Expected one of: {', '.join(schema.names)}",
                )

    def _check_attribute(self, attr: Attribute, value: Value, diags: Diagnostics) -> None:
        if attr.computed_only and not value.is_null:
            diags.add_attribute_error(
                attr.name,
                "Value for unconfigurable attribute",
                f"Can't configure a value for '{attr.name}': its value will be "
                "decided automatically based on the result of reading the device.",
            )
            return

        if attr.required and value.is_null:
            diags.add_attribute_error(
                attr.name,
                "Missing required argument",
                f"The argument '{attr.name}' is required, but no definition was found.",
            )
            return

        if value.is_known and not attr.type.accepts(value.value):
            diags.add_attribute_error(
                attr.name,
                "Incorrect attribute value type",
                f"Inappropriate value for attribute '{attr.name}': expected "
                f"{attr.type.type_name}, got {type(value.value).__name__}.",
            )

    def _build_model(self, model_cls: type, values: dict[str, Value]) -> Any:
        field_names = {f.name for f in dataclasses.fields(model_cls)}
        if field_names != set(values):
            # Schema and model are declared side by side; a mismatch is a bug
            raise TypeError(
                f"{model_cls.__name__} fields {sorted(field_names)} do not match "
                f"schema attributes {sorted(values)}"
            )
        return model_cls(**values)
