"""Topology model: typed components and directed connections.

The engine treats a topology as two flat collections. It does not traverse
the graph, check connectivity or reject cycles; the only graph-derived
quantity it needs is the fan-in (incoming connection count) of a component.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from scalesim.errors import TopologyError


class ComponentType(str, Enum):
    """Known component types. Type strings outside this set are still accepted."""

    LOAD_BALANCER = "load_balancer"
    API_GATEWAY = "api_gateway"
    MICROSERVICE = "microservice"
    DATABASE = "database"
    CACHE = "cache"
    MESSAGE_QUEUE = "message_queue"
    ML_MODEL = "ml_model"
    CDN = "cdn"

    @classmethod
    def parse(cls, raw: str) -> ComponentType | None:
        """Resolve a type string, or return None for unknown types.

        Matching is case-insensitive and treats ``-`` and ``_`` alike, so the
        editor's ``api-gateway`` and the stored ``api_gateway`` are the same.
        """
        key = raw.strip().lower().replace("-", "_").replace(" ", "_")
        try:
            return cls(key)
        except ValueError:
            return None


@dataclass(frozen=True)
class Position:
    """Canvas coordinates. Cosmetic only."""

    x: float = 0.0
    y: float = 0.0


@dataclass(frozen=True)
class Component:
    """A node of the topology.

    Attributes:
        id: Unique component id.
        type_name: The type string as supplied by the caller.
        name: Display name; defaults to the id.
        position: Canvas position, ignored by the engine.
    """

    id: str
    type_name: str
    name: str = ""
    position: Position = field(default_factory=Position)

    def __post_init__(self) -> None:
        if not self.id:
            raise TopologyError("component id must be a non-empty string")
        if not self.name:
            object.__setattr__(self, "name", self.id)

    @property
    def type(self) -> ComponentType | None:
        """The resolved type, or None when the type string is not recognized."""
        return ComponentType.parse(self.type_name)

    def is_type(self, component_type: ComponentType) -> bool:
        return self.type is component_type

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Component:
        if not isinstance(data, dict):
            raise TopologyError(f"component must be an object, got {type(data).__name__}")
        if "id" not in data or "type" not in data:
            raise TopologyError(f"component is missing 'id' or 'type': {data!r}")
        pos = data.get("position") or {}
        if not isinstance(pos, Mapping):
            raise TopologyError(f"component '{data['id']}' position must be an object")
        try:
            position = Position(x=float(pos.get("x", 0.0)), y=float(pos.get("y", 0.0)))
        except (TypeError, ValueError) as exc:
            raise TopologyError(f"component '{data['id']}' has a non-numeric position") from exc
        return cls(
            id=str(data["id"]),
            type_name=str(data["type"]),
            name=str(data.get("name") or data["id"]),
            position=position,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type_name,
            "name": self.name,
            "position": {"x": self.position.x, "y": self.position.y},
        }


@dataclass(frozen=True)
class Connection:
    """A directed edge from ``source`` to ``target`` component ids."""

    id: str
    source: str
    target: str
    type: str = "default"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Connection:
        if not isinstance(data, dict):
            raise TopologyError(f"connection must be an object, got {type(data).__name__}")
        missing = [key for key in ("source", "target") if key not in data]
        if missing:
            raise TopologyError(f"connection is missing {missing}: {data!r}")
        source = str(data["source"])
        target = str(data["target"])
        return cls(
            id=str(data.get("id") or f"{source}->{target}"),
            source=source,
            target=target,
            type=str(data.get("type") or "default"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "source": self.source, "target": self.target, "type": self.type}


@dataclass(frozen=True)
class Topology:
    """Immutable input to a run: the components and connections of a design."""

    components: tuple[Component, ...] = ()
    connections: tuple[Connection, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "components", tuple(self.components))
        object.__setattr__(self, "connections", tuple(self.connections))
        seen: set[str] = set()
        for component in self.components:
            if component.id in seen:
                raise TopologyError(f"duplicate component id '{component.id}'")
            seen.add(component.id)

    @property
    def is_empty(self) -> bool:
        return not self.components

    def component(self, component_id: str) -> Component | None:
        for component in self.components:
            if component.id == component_id:
                return component
        return None

    def incoming_count(self, component_id: str) -> int:
        """Number of connections whose target is ``component_id``."""
        return sum(1 for c in self.connections if c.target == component_id)

    def count_of_type(self, component_type: ComponentType) -> int:
        return sum(1 for c in self.components if c.is_type(component_type))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Topology:
        """Build a topology from the persisted ``{components, connections}`` shape."""
        if not isinstance(data, dict):
            raise TopologyError(f"topology must be an object, got {type(data).__name__}")
        components = data.get("components") or []
        connections = data.get("connections") or []
        if not isinstance(components, list) or not isinstance(connections, list):
            raise TopologyError("'components' and 'connections' must be lists")
        return cls(
            components=tuple(Component.from_dict(c) for c in components),
            connections=tuple(Connection.from_dict(c) for c in connections),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "components": [c.to_dict() for c in self.components],
            "connections": [c.to_dict() for c in self.connections],
        }
