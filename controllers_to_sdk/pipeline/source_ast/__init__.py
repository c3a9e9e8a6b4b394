"""
Source AST service.

The analyzer queries the API's source code through the SourceAstService
interface; PythonSourceAst implements it for Python APIs.
"""

from __future__ import annotations

from .nodes import ClassNode, DeclarationNode, DecoratorArg, DecoratorNode, MethodNode, ParamNode, SourceAstService
from .python_source import PythonSourceAst

__all__ = [
    "ClassNode",
    "DeclarationNode",
    "DecoratorArg",
    "DecoratorNode",
    "MethodNode",
    "ParamNode",
    "PythonSourceAst",
    "SourceAstService",
]
