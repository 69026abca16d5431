"""
codeflow Core Module.

Core Types & Graph:
    - Category, CallKind, Relationship, NodeKey, Chain: value types
    - AnalysisResult, AnalysisIndex: the input snapshot and its lookups
    - FlowGraph: rustworkx projection used for statistics
    - Ok, Err, Result: loader return values
"""

from .analysis import (
    AnalysisIndex,
    AnalysisResult,
    LoadError,
    UnresolvedReference,
    load_analysis_result,
    parse_analysis_result,
)
from .graph import FlowEdge, FlowGraph, FlowNode
from .result import Err, Ok, Result
from .types import CallKind, Category, Chain, ChainEdge, NodeKey, Relationship

__all__ = [
    # Types
    "Category",
    "CallKind",
    "Relationship",
    "NodeKey",
    "Chain",
    "ChainEdge",
    # Analysis
    "AnalysisResult",
    "AnalysisIndex",
    "UnresolvedReference",
    "LoadError",
    "load_analysis_result",
    "parse_analysis_result",
    # Graph
    "FlowGraph",
    "FlowNode",
    "FlowEdge",
    # Result
    "Ok",
    "Err",
    "Result",
]
