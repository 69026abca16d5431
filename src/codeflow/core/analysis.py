"""
Analysis Result model and lookup index.

An ``AnalysisResult`` is the immutable snapshot produced by an external
extractor: eight categorized element collections plus a flat list of
relationships. ``AnalysisIndex`` is built once per snapshot and replaces
repeated linear scans with dictionary lookups:

- qualified name -> Category (first match in collection order wins)
- handlers grouped by handled event, converters grouped by domain event
- relationships grouped by source type
"""

import json
import logging
from collections import defaultdict
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple

from pydantic import Field, PrivateAttr, ValidationError

from .result import Err, Ok, Result
from .types import (
    Category,
    CallKind,
    CommandInfo,
    ControllerInfo,
    DomainEventHandlerInfo,
    DomainEventInfo,
    ElementInfo,
    EntityInfo,
    IntegrationEventConverterInfo,
    IntegrationEventHandlerInfo,
    IntegrationEventInfo,
    Relationship,
    WireModel,
)

logger = logging.getLogger(__name__)

# Collection attribute per category, in lookup precedence order
CATEGORY_COLLECTIONS: Tuple[Tuple[Category, str], ...] = (
    (Category.CONTROLLER, "controllers"),
    (Category.COMMAND, "commands"),
    (Category.ENTITY, "entities"),
    (Category.DOMAIN_EVENT, "domain_events"),
    (Category.INTEGRATION_EVENT, "integration_events"),
    (Category.DOMAIN_EVENT_HANDLER, "domain_event_handlers"),
    (Category.INTEGRATION_EVENT_HANDLER, "integration_event_handlers"),
    (Category.INTEGRATION_EVENT_CONVERTER, "integration_event_converters"),
)


class AnalysisResult(WireModel):
    """Read-only snapshot of a codebase's architectural elements."""
    controllers: List[ControllerInfo] = Field(default_factory=list)
    commands: List[CommandInfo] = Field(default_factory=list)
    entities: List[EntityInfo] = Field(default_factory=list)
    domain_events: List[DomainEventInfo] = Field(default_factory=list)
    integration_events: List[IntegrationEventInfo] = Field(default_factory=list)
    domain_event_handlers: List[DomainEventHandlerInfo] = Field(default_factory=list)
    integration_event_handlers: List[IntegrationEventHandlerInfo] = Field(default_factory=list)
    integration_event_converters: List[IntegrationEventConverterInfo] = Field(default_factory=list)
    relationships: List[Relationship] = Field(default_factory=list)

    _index: Any = PrivateAttr(default=None)

    @property
    def index(self) -> "AnalysisIndex":
        """Lookup tables for this snapshot, built on first access."""
        if self._index is None:
            self._index = AnalysisIndex(self)
        return self._index

    def iter_elements(self) -> Iterator[Tuple[Category, ElementInfo]]:
        """Yield every element with its category, in collection order."""
        for category, attr in CATEGORY_COLLECTIONS:
            for element in getattr(self, attr):
                yield category, element

    @property
    def is_empty(self) -> bool:
        return not self.relationships and next(self.iter_elements(), None) is None

    @classmethod
    def merge(cls, *results: "AnalysisResult") -> "AnalysisResult":
        """
        Combine several snapshots into one.

        Elements are de-duplicated by ``full_name`` (first occurrence wins)
        and relationships by their full tuple, preserving input order.
        """
        merged: Dict[str, list] = {attr: [] for _, attr in CATEGORY_COLLECTIONS}
        seen_names: Dict[str, set] = {attr: set() for _, attr in CATEGORY_COLLECTIONS}
        relationships: List[Relationship] = []
        seen_relationships: set = set()

        for result in results:
            for _, attr in CATEGORY_COLLECTIONS:
                for element in getattr(result, attr):
                    if element.full_name in seen_names[attr]:
                        continue
                    seen_names[attr].add(element.full_name)
                    merged[attr].append(element)
            for rel in result.relationships:
                key = (rel.source_type, rel.source_method, rel.target_type,
                       rel.target_method, rel.call_type)
                if key in seen_relationships:
                    continue
                seen_relationships.add(key)
                relationships.append(rel)

        return cls(relationships=relationships, **merged)


@dataclass(frozen=True)
class UnresolvedReference:
    """A qualified name referenced somewhere that no collection defines."""
    referenced_by: str
    field: str
    name: str


class AnalysisIndex:
    """
    O(1) lookups over an ``AnalysisResult``.

    Built once per snapshot and never mutated afterwards, so it can be
    shared by concurrent render calls.
    """

    def __init__(self, analysis: AnalysisResult):
        self._categories: Dict[str, Category] = {}
        self._entities: Dict[str, EntityInfo] = {}
        self._domain_handlers: Dict[str, DomainEventHandlerInfo] = {}
        self._integration_handlers: Dict[str, IntegrationEventHandlerInfo] = {}
        self._handlers_by_event: Dict[str, List[DomainEventHandlerInfo]] = defaultdict(list)
        self._integration_handlers_by_event: Dict[str, List[IntegrationEventHandlerInfo]] = defaultdict(list)
        self._converters_by_event: Dict[str, List[IntegrationEventConverterInfo]] = defaultdict(list)
        self._outgoing: Dict[str, List[Relationship]] = defaultdict(list)

        for category, element in analysis.iter_elements():
            if element.full_name in self._categories:
                existing = self._categories[element.full_name]
                if existing != category:
                    logger.debug(
                        "%s is listed as both %s and %s; keeping %s",
                        element.full_name, existing, category, existing,
                    )
                continue
            self._categories[element.full_name] = category

        for entity in analysis.entities:
            self._entities.setdefault(entity.full_name, entity)
        for handler in analysis.domain_event_handlers:
            self._domain_handlers.setdefault(handler.full_name, handler)
            self._handlers_by_event[handler.handled_event_type].append(handler)
        for handler in analysis.integration_event_handlers:
            self._integration_handlers.setdefault(handler.full_name, handler)
            self._integration_handlers_by_event[handler.handled_event_type].append(handler)
        for converter in analysis.integration_event_converters:
            self._converters_by_event[converter.domain_event_type].append(converter)
        for rel in analysis.relationships:
            self._outgoing[rel.source_type].append(rel)

        self._analysis = analysis

    def category_of(self, qualified_name: str) -> Optional[Category]:
        return self._categories.get(qualified_name)

    def is_known(self, qualified_name: str) -> bool:
        return qualified_name in self._categories

    def entity(self, qualified_name: str) -> Optional[EntityInfo]:
        return self._entities.get(qualified_name)

    def is_aggregate_root(self, qualified_name: str) -> bool:
        entity = self.entity(qualified_name)
        return bool(entity and entity.is_aggregate_root)

    def handler_commands(self, qualified_name: str) -> Optional[List[str]]:
        """Commands sent by the named handler, or None if it is not a handler."""
        handler = self._domain_handlers.get(qualified_name)
        if handler is None:
            handler = self._integration_handlers.get(qualified_name)
        return list(handler.commands) if handler is not None else None

    def domain_handlers_for(self, event_type: str) -> List[DomainEventHandlerInfo]:
        return self._handlers_by_event.get(event_type, [])

    def integration_handlers_for(self, event_type: str) -> List[IntegrationEventHandlerInfo]:
        return self._integration_handlers_by_event.get(event_type, [])

    def converters_for(self, domain_event_type: str) -> List[IntegrationEventConverterInfo]:
        return self._converters_by_event.get(domain_event_type, [])

    def outgoing(self, source_type: str, kind: CallKind | None = None) -> List[Relationship]:
        """Relationships leaving ``source_type``, optionally filtered by kind."""
        relations = self._outgoing.get(source_type, [])
        if kind is None:
            return relations
        return [r for r in relations if r.call_type == kind]

    def unresolved_references(self) -> List[UnresolvedReference]:
        """Every reference that does not resolve to a known element."""
        missing: List[UnresolvedReference] = []
        analysis = self._analysis

        for rel in analysis.relationships:
            label = f"{rel.call_type}:{rel.source_type}->{rel.target_type}"
            if not self.is_known(rel.source_type):
                missing.append(UnresolvedReference(label, "source_type", rel.source_type))
            if not self.is_known(rel.target_type):
                missing.append(UnresolvedReference(label, "target_type", rel.target_type))

        handlers = [*analysis.domain_event_handlers, *analysis.integration_event_handlers]
        for handler in handlers:
            if handler.handled_event_type and not self.is_known(handler.handled_event_type):
                missing.append(UnresolvedReference(
                    handler.full_name, "handled_event_type", handler.handled_event_type))
            for command in handler.commands:
                if not self.is_known(command):
                    missing.append(UnresolvedReference(handler.full_name, "commands", command))

        for converter in analysis.integration_event_converters:
            for field_name in ("domain_event_type", "integration_event_type"):
                value = getattr(converter, field_name)
                if value and not self.is_known(value):
                    missing.append(UnresolvedReference(converter.full_name, field_name, value))

        return missing


# --- Loading ---

@dataclass(frozen=True)
class LoadError:
    """Structured error for analysis loading."""
    message: str
    path: str | None = None


def _lower_first(key: str) -> str:
    return key[:1].lower() + key[1:]


def _normalize_keys(value: Any) -> Any:
    """Convert PascalCase keys (``FullName``) to camelCase (``fullName``) recursively."""
    if isinstance(value, dict):
        return {
            _lower_first(k) if isinstance(k, str) else k: _normalize_keys(v)
            for k, v in value.items()
        }
    if isinstance(value, list):
        return [_normalize_keys(v) for v in value]
    return value


def parse_analysis_result(data: Dict[str, Any]) -> Result[AnalysisResult, LoadError]:
    """Validate a decoded JSON document into an ``AnalysisResult``."""
    if not isinstance(data, dict):
        return Err(LoadError(f"Expected a JSON object, got {type(data).__name__}"))
    try:
        return Ok(AnalysisResult.model_validate(_normalize_keys(data)))
    except ValidationError as e:
        return Err(LoadError(f"Invalid analysis result: {e.error_count()} validation error(s)\n{e}"))


def load_analysis_result(path: str | Path) -> Result[AnalysisResult, LoadError]:
    """Read and validate an analysis result JSON file."""
    file_path = Path(path)
    if not file_path.exists():
        return Err(LoadError(f"Analysis file not found: {file_path}", str(file_path)))

    try:
        data = json.loads(file_path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as e:
        return Err(LoadError(f"Could not read {file_path}: {e}", str(file_path)))
    except json.JSONDecodeError as e:
        return Err(LoadError(f"Invalid JSON in {file_path}: {e}", str(file_path)))

    result = parse_analysis_result(data)
    if isinstance(result, Err):
        return Err(LoadError(result.error.message, str(file_path)))

    analysis = result.value
    logger.debug(
        "Loaded %s: %d elements, %d relationships",
        file_path, sum(1 for _ in analysis.iter_elements()), len(analysis.relationships),
    )
    return result
