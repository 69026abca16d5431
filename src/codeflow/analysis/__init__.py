"""
Analysis modules for codeflow.

- chains: Root discovery and chain extraction
"""

from .chains import ChainExtractor, TraversalContext, extract_chains

__all__ = ["ChainExtractor", "TraversalContext", "extract_chains"]
