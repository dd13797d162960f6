"""
GasGuard — Rust source parser using tree-sitter.
"""

from __future__ import annotations

import threading

import tree_sitter_rust as tsrust
from tree_sitter import Language, Parser, Tree

from gasguard.exceptions import GrammarParseError


RUST_LANGUAGE = Language(tsrust.language())


class RustParser:
    """Thin wrapper around tree-sitter for Rust (Soroban) source code."""

    def __init__(self) -> None:
        # tree-sitter parsers are not thread-safe; directory scans may use a pool
        self._local = threading.local()

    @property
    def _parser(self) -> Parser:
        parser = getattr(self._local, "parser", None)
        if parser is None:
            parser = self._local.parser = Parser(RUST_LANGUAGE)
        return parser

    def parse(self, code: str) -> tuple[Tree, bytes]:
        """Parse Rust source and return (tree, source_bytes).

        Raises GrammarParseError if the code cannot be parsed.
        """
        source_bytes = code.encode("utf-8")
        tree = self._parser.parse(source_bytes)
        if tree.root_node.has_error:
            raise GrammarParseError(_describe_error(tree))
        return tree, source_bytes


def _describe_error(tree: Tree) -> str:
    """Point at the first ERROR / MISSING node for the error message."""
    stack = [tree.root_node]
    while stack:
        node = stack.pop()
        if node.type == "ERROR" or node.is_missing:
            row, col = node.start_point
            return f"Failed to parse Rust source: syntax error at line {row + 1}, column {col + 1}"
        stack.extend(reversed(node.children))
    return "Failed to parse Rust source code"
