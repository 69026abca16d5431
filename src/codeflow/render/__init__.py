"""Mermaid renderers."""
