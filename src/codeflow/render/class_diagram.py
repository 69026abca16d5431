"""Mermaid class diagram of controllers, commands and entities."""

from typing import Dict, List

from ..config import MAX_CLASS_METHODS
from ..core.analysis import AnalysisResult
from ..core.types import CallKind
from .escaping import escape_text, sanitize_class_name, simple_name

# Dependency arrows; every other kind is drawn as an association
DEPENDENCY_KINDS = frozenset({
    CallKind.METHOD_TO_COMMAND,
    CallKind.DOMAIN_EVENT_TO_HANDLER,
    CallKind.INTEGRATION_EVENT_TO_HANDLER,
})


def class_relationship(call_type: str) -> str:
    return "..>" if call_type in DEPENDENCY_KINDS else "-->"


def _class_block(name: str, stereotype: str, methods: List[str], max_methods: int) -> List[str]:
    lines = [f"    class {sanitize_class_name(name)} {{", f"        <<{stereotype}>>"]
    for method in methods[:max_methods]:
        lines.append(f"        +{escape_text(method)}()")
    if len(methods) > max_methods:
        lines.append("        +...")
    lines.extend(["    }", ""])
    return lines


def render_class_diagram(analysis: AnalysisResult, max_methods: int = MAX_CLASS_METHODS) -> str:
    lines = ["classDiagram", ""]

    for controller in analysis.controllers:
        lines.extend(_class_block(controller.name, "Controller", controller.methods, max_methods))
    for command in analysis.commands:
        lines.extend(_class_block(command.name, "Command", [], max_methods))
    for entity in analysis.entities:
        stereotype = "AggregateRoot" if entity.is_aggregate_root else "Entity"
        lines.extend(_class_block(entity.name, stereotype, entity.methods, max_methods))

    index = analysis.index
    seen: Dict[str, None] = {}
    for rel in analysis.relationships:
        if not (index.is_known(rel.source_type) and index.is_known(rel.target_type)):
            continue
        source = sanitize_class_name(simple_name(rel.source_type))
        target = sanitize_class_name(simple_name(rel.target_type))
        if not source or not target:
            continue
        seen.setdefault(f"    {source} {class_relationship(rel.call_type)} {target}")
    lines.extend(seen)

    return "\n".join(lines) + "\n"
