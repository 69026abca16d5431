"""
Core type definitions for codeflow.

The analysis inventory is modelled with pydantic so that JSON emitted by an
external extractor can be validated directly. Wire names are camelCase
(``fullName``, ``callType``); Python attributes are snake_case.
"""

from dataclasses import dataclass, field
from enum import StrEnum
from typing import List, NamedTuple

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# Separator between a type's qualified name and one of its methods
METHOD_SEPARATOR = "::"


class Category(StrEnum):
    """Categories of architectural elements in an analysis result."""
    CONTROLLER = "controller"
    COMMAND = "command"
    ENTITY = "entity"
    DOMAIN_EVENT = "domain_event"
    INTEGRATION_EVENT = "integration_event"
    DOMAIN_EVENT_HANDLER = "domain_event_handler"
    INTEGRATION_EVENT_HANDLER = "integration_event_handler"
    INTEGRATION_EVENT_CONVERTER = "integration_event_converter"


class CallKind(StrEnum):
    """Kinds of relationships between elements (values are the wire strings)."""
    METHOD_TO_COMMAND = "MethodToCommand"
    COMMAND_TO_AGGREGATE_METHOD = "CommandToAggregateMethod"
    METHOD_TO_DOMAIN_EVENT = "MethodToDomainEvent"
    DOMAIN_EVENT_TO_HANDLER = "DomainEventToHandler"
    DOMAIN_EVENT_TO_INTEGRATION_EVENT = "DomainEventToIntegrationEvent"
    INTEGRATION_EVENT_TO_HANDLER = "IntegrationEventToHandler"
    # Derived from handler.commands, never stored as a relationship
    HANDLER_TO_COMMAND = "HandlerToCommand"


class WireModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
        extra="ignore",
    )


class ElementInfo(WireModel):
    """Common shape of every inventory element."""
    name: str
    full_name: str


class ControllerInfo(ElementInfo):
    methods: List[str] = Field(default_factory=list)


class CommandInfo(ElementInfo):
    pass


class EntityInfo(ElementInfo):
    is_aggregate_root: bool = False
    methods: List[str] = Field(default_factory=list)


class DomainEventInfo(ElementInfo):
    pass


class IntegrationEventInfo(ElementInfo):
    pass


class DomainEventHandlerInfo(ElementInfo):
    handled_event_type: str = ""
    commands: List[str] = Field(default_factory=list)


class IntegrationEventHandlerInfo(ElementInfo):
    handled_event_type: str = ""
    commands: List[str] = Field(default_factory=list)


class IntegrationEventConverterInfo(ElementInfo):
    domain_event_type: str = ""
    integration_event_type: str = ""


class Relationship(WireModel):
    """
    Directed call/trigger relationship between two types.

    ``call_type`` stays a plain string so that kinds unknown to this
    version survive loading; use ``kind`` for the typed view.
    """
    source_type: str
    source_method: str = ""
    target_type: str
    target_method: str = ""
    call_type: str

    @property
    def kind(self) -> CallKind | None:
        try:
            return CallKind(self.call_type)
        except ValueError:
            return None


@dataclass(frozen=True, order=True)
class NodeKey:
    """
    Identity of a node inside a chain.

    A key either names a whole type (``method == ""``) or one specific
    method of a type, e.g. ``Shop.OrderController::Post``.
    """
    type_name: str
    method: str = ""

    @classmethod
    def parse(cls, value: str) -> "NodeKey":
        type_name, sep, method = value.partition(METHOD_SEPARATOR)
        return cls(type_name, method if sep else "")

    @property
    def simple_name(self) -> str:
        """Display name: ``TypeName.method`` or ``TypeName``."""
        class_name = self.type_name.split(".")[-1]
        if self.method:
            return f"{class_name}.{self.method}"
        return class_name

    def __str__(self) -> str:
        if self.method:
            return f"{self.type_name}{METHOD_SEPARATOR}{self.method}"
        return self.type_name


class ChainEdge(NamedTuple):
    source: NodeKey
    target: NodeKey
    label: str


@dataclass
class Chain:
    """One root-anchored, self-contained execution path."""
    name: str
    root: NodeKey
    nodes: List[NodeKey] = field(default_factory=list)
    edges: List[ChainEdge] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "root": str(self.root),
            "nodes": [str(n) for n in self.nodes],
            "edges": [
                {"source": str(e.source), "target": str(e.target), "label": e.label}
                for e in self.edges
            ],
        }
