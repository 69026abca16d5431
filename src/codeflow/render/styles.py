"""
Shape, arrow, label and style policy shared by every flowchart renderer.

``FlowchartWriter`` is a small line buffer that knows the Mermaid statement
forms used across diagrams; renderers only decide *what* to emit.
"""

from typing import Dict, List, Optional, Sequence

from ..core.types import CallKind, Category, Relationship
from .escaping import escape_text

CLASS_DEFS: Dict[str, str] = {
    "controller": "fill:#e1f5fe,stroke:#01579b,stroke-width:2px",
    "command": "fill:#f3e5f5,stroke:#4a148c,stroke-width:2px",
    "entity": "fill:#e8f5e8,stroke:#1b5e20,stroke-width:2px",
    "domainEvent": "fill:#fff3e0,stroke:#e65100,stroke-width:2px",
    "integrationEvent": "fill:#fce4ec,stroke:#880e4f,stroke-width:2px",
    "handler": "fill:#f1f8e9,stroke:#33691e,stroke-width:2px",
    "converter": "fill:#e3f2fd,stroke:#0277bd,stroke-width:2px",
}

STYLE_CLASSES: Dict[Category, str] = {
    Category.CONTROLLER: "controller",
    Category.COMMAND: "command",
    Category.ENTITY: "entity",
    Category.DOMAIN_EVENT: "domainEvent",
    Category.INTEGRATION_EVENT: "integrationEvent",
    Category.DOMAIN_EVENT_HANDLER: "handler",
    Category.INTEGRATION_EVENT_HANDLER: "handler",
    Category.INTEGRATION_EVENT_CONVERTER: "converter",
}

ARROWS: Dict[str, str] = {
    CallKind.METHOD_TO_COMMAND: "-->",
    CallKind.COMMAND_TO_AGGREGATE_METHOD: "==>",
    CallKind.METHOD_TO_DOMAIN_EVENT: "-->",
    CallKind.DOMAIN_EVENT_TO_HANDLER: "-.->",
    CallKind.DOMAIN_EVENT_TO_INTEGRATION_EVENT: "===>",
    CallKind.INTEGRATION_EVENT_TO_HANDLER: "-.->",
    CallKind.HANDLER_TO_COMMAND: "-.->",
}
DEFAULT_ARROW = "-->"

EVENT_ARROWS: Dict[str, str] = {
    CallKind.DOMAIN_EVENT_TO_HANDLER: "-.->",
    CallKind.DOMAIN_EVENT_TO_INTEGRATION_EVENT: "===>",
    CallKind.INTEGRATION_EVENT_TO_HANDLER: "-.->",
}

EVENT_LABELS: Dict[str, str] = {
    CallKind.DOMAIN_EVENT_TO_HANDLER: "triggers",
    CallKind.DOMAIN_EVENT_TO_INTEGRATION_EVENT: "converts",
    CallKind.INTEGRATION_EVENT_TO_HANDLER: "handles",
}

COMMAND_LABELS: Dict[str, str] = {
    CallKind.METHOD_TO_COMMAND: "send",
    CallKind.COMMAND_TO_AGGREGATE_METHOD: "execute",
}


def style_class_for(category: Optional[Category]) -> Optional[str]:
    if category is None:
        return None
    return STYLE_CLASSES[category]


def node_shape(category: Optional[Category], label: str, aggregate_root: bool = False) -> str:
    """Shape delimiters wrapped around an escaped ``label``."""
    text = escape_text(label)
    if category == Category.ENTITY:
        return "{{" + text + "}}" if aggregate_root else f"[{text}]"
    if category == Category.DOMAIN_EVENT:
        return f'("{text}")'
    if category == Category.INTEGRATION_EVENT_CONVERTER:
        return f'[/"{text}"/]'
    return f'["{text}"]'


def arrow_for(call_type: str) -> str:
    return ARROWS.get(call_type, DEFAULT_ARROW)


def label_for(call_type: str, source_method: str = "", target_method: str = "") -> str:
    """Architecture edge label; empty for unrecognized kinds."""
    if call_type == CallKind.METHOD_TO_COMMAND:
        return f"{source_method} Send" if source_method else "sends"
    if call_type == CallKind.COMMAND_TO_AGGREGATE_METHOD:
        return f"executes {target_method}" if target_method else "executes"
    return {
        CallKind.METHOD_TO_DOMAIN_EVENT: "publishes",
        CallKind.DOMAIN_EVENT_TO_HANDLER: "handles",
        CallKind.DOMAIN_EVENT_TO_INTEGRATION_EVENT: "converts to",
        CallKind.INTEGRATION_EVENT_TO_HANDLER: "subscribes",
        CallKind.HANDLER_TO_COMMAND: "sends",
    }.get(call_type, "")


def relationship_label(rel: Relationship) -> str:
    return label_for(rel.call_type, rel.source_method, rel.target_method)


class FlowchartWriter:
    """Accumulates Mermaid lines and the style class of every emitted node."""

    def __init__(self, header: str):
        self.lines: List[str] = [header, ""]
        self.node_styles: Dict[str, str] = {}

    def blank(self) -> None:
        self.lines.append("")

    def comment(self, text: str, indent: str = "    ") -> None:
        self.lines.append(f"{indent}%% {text}")

    def raw(self, text: str) -> None:
        self.lines.append(text)

    def node(
        self,
        node_id: str,
        category: Optional[Category],
        label: str,
        aggregate_root: bool = False,
        indent: str = "    ",
    ) -> None:
        self.lines.append(f"{indent}{node_id}{node_shape(category, label, aggregate_root)}")
        style = style_class_for(category)
        if style is not None:
            self.node_styles.setdefault(node_id, style)

    def edge(self, source_id: str, arrow: str, target_id: str, label: str = "") -> None:
        if label:
            self.lines.append(f"    {source_id} {arrow}|{escape_text(label)}| {target_id}")
        else:
            self.lines.append(f"    {source_id} {arrow} {target_id}")

    def style_block(
        self,
        heading: str = "Styles",
        classes: Sequence[str] = tuple(CLASS_DEFS),
        assignment_heading: Optional[str] = None,
    ) -> None:
        """
        ``classDef`` lines followed by ``class`` lines for the emitted nodes.

        Ids are grouped per style class in first-seen order, so the class
        lines always match exactly what the diagram declared.
        """
        self.comment(heading)
        for name in classes:
            self.lines.append(f"    classDef {name} {CLASS_DEFS[name]};")

        groups: Dict[str, List[str]] = {}
        for node_id, style in self.node_styles.items():
            if style in classes:
                groups.setdefault(style, []).append(node_id)
        if not groups:
            return

        self.blank()
        if assignment_heading:
            self.comment(assignment_heading)
        for style, ids in groups.items():
            self.lines.append(f"    class {','.join(ids)} {style};")

    def render(self) -> str:
        return "\n".join(self.lines) + "\n"
