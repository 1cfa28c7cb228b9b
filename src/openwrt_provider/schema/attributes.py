"""Schema descriptors for provider and data source attributes.

Schemas are static data: built once at class definition and never mutated.
"""
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Optional


class AttributeKind(str, Enum):
    """Semantic type of an attribute."""
    BOOL = "bool"
    STRING = "string"
    INT64 = "int64"
    LIST = "list"
    MAP = "map"


INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1


@dataclass(frozen=True)
class AttributeType:
    """Attribute type, with an element type for collections.

    Map keys are always strings.
    """
    kind: AttributeKind
    element: Optional["AttributeType"] = None

    def __post_init__(self):
        collection = self.kind in (AttributeKind.LIST, AttributeKind.MAP)
        if collection and self.element is None:
            raise ValueError(f"{self.kind.value} attribute type needs an element type")
        if not collection and self.element is not None:
            raise ValueError(f"{self.kind.value} attribute type takes no element type")

    @property
    def type_name(self) -> str:
        if self.element is not None:
            return f"{self.kind.value}({self.element.type_name})"
        return self.kind.value

    def accepts(self, value: Any) -> bool:
        """Check a concrete value against this type."""
        if self.kind == AttributeKind.BOOL:
            return isinstance(value, bool)
        if self.kind == AttributeKind.STRING:
            return isinstance(value, str)
        if self.kind == AttributeKind.INT64:
            # bool is an int subclass, reject it explicitly
            return (
                isinstance(value, int)
                and not isinstance(value, bool)
                and INT64_MIN <= value <= INT64_MAX
            )
        if self.kind == AttributeKind.LIST:
            return isinstance(value, (list, tuple)) and all(
                self.element.accepts(v) for v in value
            )
        if self.kind == AttributeKind.MAP:
            return isinstance(value, Mapping) and all(
                isinstance(k, str) and self.element.accepts(v)
                for k, v in value.items()
            )
        return False


BOOL = AttributeType(AttributeKind.BOOL)
STRING = AttributeType(AttributeKind.STRING)
INT64 = AttributeType(AttributeKind.INT64)


def list_of(element: AttributeType) -> AttributeType:
    return AttributeType(AttributeKind.LIST, element)


def map_of(element: AttributeType) -> AttributeType:
    return AttributeType(AttributeKind.MAP, element)


@dataclass(frozen=True)
class Attribute:
    """A single attribute in an entity schema.

    ``required`` excludes ``optional`` and ``computed``. ``optional`` and
    ``computed`` may be combined: the caller may supply the value, otherwise
    the read fills it in.
    """
    name: str
    type: AttributeType
    required: bool = False
    optional: bool = False
    computed: bool = False
    sensitive: bool = False
    description: str = ""

    def __post_init__(self):
        if not (self.required or self.optional or self.computed):
            raise ValueError(f"Attribute '{self.name}' must be required, optional or computed")
        if self.required and (self.optional or self.computed):
            raise ValueError(f"Attribute '{self.name}' cannot be required and optional/computed")

    @property
    def computed_only(self) -> bool:
        """True when the caller may never supply this attribute."""
        return self.computed and not self.optional


@dataclass(frozen=True, eq=False)
class EntitySchema:
    """Ordered, read-only mapping of attribute name to Attribute."""
    description: str
    attributes: Mapping[str, Attribute] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "attributes", MappingProxyType(dict(self.attributes)))

    @classmethod
    def of(cls, description: str, attributes: Iterable[Attribute]) -> "EntitySchema":
        """Build a schema from attributes, keeping their order."""
        by_name: dict[str, Attribute] = {}
        for attr in attributes:
            if attr.name in by_name:
                raise ValueError(f"Duplicate attribute: {attr.name}")
            by_name[attr.name] = attr
        return cls(description=description, attributes=by_name)

    def attribute(self, name: str) -> Optional[Attribute]:
        return self.attributes.get(name)

    @property
    def names(self) -> list[str]:
        return list(self.attributes)

    @property
    def required_names(self) -> list[str]:
        return [a.name for a in self.attributes.values() if a.required]

    @property
    def sensitive_names(self) -> frozenset[str]:
        return frozenset(a.name for a in self.attributes.values() if a.sensitive)

    def __contains__(self, name: object) -> bool:
        return name in self.attributes

    def __iter__(self):
        return iter(self.attributes.values())

    def __len__(self) -> int:
        return len(self.attributes)
