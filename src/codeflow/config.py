"""
Configuration for codeflow.

Module-level constants are the built-in defaults. A project may override a
few of them through ``.codeflow/config.yaml`` (written by ``codeflow init``).
"""

import logging
from pathlib import Path
from typing import List

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)

CONFIG_DIR = ".codeflow"
CONFIG_FILE = "config.yaml"

MAX_CLASS_METHODS = 5
DEFAULT_TITLE = "Code Flow Architecture"
DEFAULT_HTML_OUTPUT = "codeflow.html"

# Diagram kinds selectable from the CLI and in the config file
DIAGRAM_KINDS = ("architecture", "command", "event", "class", "multi-chain")


class RenderConfig(BaseModel):
    """Project-level rendering options."""
    model_config = ConfigDict(extra="ignore")

    title: str = DEFAULT_TITLE
    max_class_methods: int = Field(default=MAX_CLASS_METHODS, ge=0)
    diagrams: List[str] = Field(default_factory=lambda: list(DIAGRAM_KINDS))

    @field_validator("diagrams")
    @classmethod
    def _known_diagrams(cls, value: List[str]) -> List[str]:
        unknown = [d for d in value if d not in DIAGRAM_KINDS]
        if unknown:
            raise ValueError(f"unknown diagram kind(s): {', '.join(unknown)}")
        return value


DEFAULT_CONFIG = {
    "version": "1.0",
    "title": DEFAULT_TITLE,
    "max_class_methods": MAX_CLASS_METHODS,
    "diagrams": list(DIAGRAM_KINDS),
}


def config_path(root: Path) -> Path:
    return root / CONFIG_DIR / CONFIG_FILE


def load_config(root: Path | None = None) -> RenderConfig:
    """
    Load ``.codeflow/config.yaml`` under ``root`` (cwd by default).

    A missing file yields the defaults. A malformed file is logged and
    ignored so rendering still works.
    """
    path = config_path(root or Path.cwd())
    if not path.exists():
        return RenderConfig()

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.warning("Ignoring unreadable config %s: %s", path, e)
        return RenderConfig()

    if not isinstance(data, dict):
        logger.warning("Ignoring config %s: expected a mapping", path)
        return RenderConfig()

    try:
        return RenderConfig.model_validate(data)
    except ValidationError as e:
        logger.warning("Ignoring invalid config %s: %s", path, e)
        return RenderConfig()
