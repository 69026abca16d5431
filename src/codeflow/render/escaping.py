"""Text escaping for Mermaid labels and identifiers."""

_LABEL_REPLACEMENTS = (
    ('"', "&quot;"),
    ("<", "&lt;"),
    (">", "&gt;"),
    ("\n", " "),
    ("\r", ""),
)

_CLASS_NAME_TRANSLATION = str.maketrans({c: "_" for c in ".<>[]"})


def escape_text(text: str) -> str:
    """Make ``text`` safe inside a quoted node label or edge label."""
    if not text:
        return ""
    for raw, safe in _LABEL_REPLACEMENTS:
        text = text.replace(raw, safe)
    return text


def sanitize_class_name(name: str) -> str:
    """Turn a type name into a bare classDiagram identifier."""
    return name.translate(_CLASS_NAME_TRANSLATION)


def simple_name(qualified_name: str) -> str:
    """``Shop.Orders.OrderController`` -> ``OrderController``."""
    return qualified_name.split(".")[-1]
