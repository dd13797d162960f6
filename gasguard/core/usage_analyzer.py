"""
Usage Analyzer — identifier-level usage tracking over a tree-sitter Rust tree.

Walks every function body of an `impl` block and records each identifier
that executable code references: plain identifiers, path tails, member
accesses, call targets and arguments, and names bound by (destructuring)
patterns. Keyword and builtin-type tokens are excluded so a primitive type
name never counts as a reference to a same-named field.

Node kinds without a handler contribute nothing.
"""

from __future__ import annotations

from tree_sitter import Node


RUST_KEYWORDS = frozenset({
    "self", "Self", "super", "crate", "mod", "use", "pub", "const", "static",
    "let", "fn", "struct", "enum", "impl", "trait", "where", "for", "while",
    "loop", "if", "else", "match", "break", "continue", "return", "async",
    "await", "move", "ref", "mut", "unsafe", "extern", "type", "union", "macro",
    "Some", "None", "Ok", "Err", "Result", "Option", "Vec", "String", "str",
    "bool", "u8", "u16", "u32", "u64", "u128", "i8", "i16", "i32", "i64", "i128",
    "f32", "f64", "usize", "isize",
})

# Expression kinds whose named children are all walked as expressions
_PASSTHROUGH = frozenset({
    "expression_statement",
    "arguments",
    "unary_expression",
    "reference_expression",
    "try_expression",
    "parenthesized_expression",
    "type_cast_expression",
    "await_expression",
    "tuple_expression",
    "array_expression",
    "index_expression",
    "range_expression",
    "else_clause",
    "let_chain",
    "unsafe_block",
    "async_block",
    "generic_function",
    "return_expression",
})

_PATTERN_CONTAINERS = frozenset({
    "tuple_pattern",
    "slice_pattern",
    "or_pattern",
    "reference_pattern",
    "mut_pattern",
    "ref_pattern",
    "captured_pattern",
})


def _node_text(node: Node, source: bytes) -> str:
    """Extract source text for a node."""
    return source[node.start_byte:node.end_byte].decode("utf-8", errors="replace")


class _UsageVisitor:
    """Recursive walker collecting referenced identifiers."""

    def __init__(self, source: bytes) -> None:
        self.source = source
        self.used: set[str] = set()

    def _add(self, node: Node | None) -> None:
        if node is None:
            return
        name = _node_text(node, self.source)
        if name and name not in RUST_KEYWORDS:
            self.used.add(name)

    def visit(self, node: Node | None) -> None:
        if node is None:
            return
        handler = getattr(self, f"visit_{node.type}", None)
        if handler is not None:
            handler(node)
        elif node.type in _PASSTHROUGH:
            for child in node.named_children:
                self.visit(child)

    def _visit_fields(self, node: Node, *names: str) -> None:
        for name in names:
            self.visit(node.child_by_field_name(name))

    # ── Expressions ──

    def visit_identifier(self, node: Node) -> None:
        self._add(node)

    def visit_scoped_identifier(self, node: Node) -> None:
        name = node.child_by_field_name("name")
        if name is not None and name.type == "identifier":
            self._add(name)

    def visit_field_expression(self, node: Node) -> None:
        self.visit(node.child_by_field_name("value"))
        member = node.child_by_field_name("field")
        if member is not None and member.type == "field_identifier":
            self._add(member)

    def visit_call_expression(self, node: Node) -> None:
        self._visit_fields(node, "function", "arguments")

    def visit_binary_expression(self, node: Node) -> None:
        self._visit_fields(node, "left", "right")

    def visit_assignment_expression(self, node: Node) -> None:
        self._visit_fields(node, "left", "right")

    visit_compound_assignment_expr = visit_assignment_expression

    def visit_block(self, node: Node) -> None:
        for child in node.named_children:
            self.visit(child)

    def visit_let_declaration(self, node: Node) -> None:
        self.visit_pattern(node.child_by_field_name("pattern"))
        self._visit_fields(node, "value", "alternative")

    def visit_let_condition(self, node: Node) -> None:
        self.visit_pattern(node.child_by_field_name("pattern"))
        self.visit(node.child_by_field_name("value"))

    def visit_if_expression(self, node: Node) -> None:
        self._visit_fields(node, "condition", "consequence", "alternative")

    def visit_match_expression(self, node: Node) -> None:
        self.visit(node.child_by_field_name("value"))
        body = node.child_by_field_name("body")
        if body is None:
            return
        for arm in body.named_children:
            if arm.type == "match_arm":
                self.visit(arm.child_by_field_name("value"))

    def visit_while_expression(self, node: Node) -> None:
        self._visit_fields(node, "condition", "body")

    def visit_loop_expression(self, node: Node) -> None:
        self.visit(node.child_by_field_name("body"))

    def visit_for_expression(self, node: Node) -> None:
        self.visit_pattern(node.child_by_field_name("pattern"))
        self._visit_fields(node, "value", "body")

    def visit_closure_expression(self, node: Node) -> None:
        self.visit(node.child_by_field_name("body"))

    def visit_struct_expression(self, node: Node) -> None:
        body = node.child_by_field_name("body")
        if body is None:
            return
        for child in body.named_children:
            if child.type == "field_initializer":
                self.visit(child.child_by_field_name("value"))
            elif child.type == "shorthand_field_initializer":
                for ident in child.named_children:
                    self._add(ident)
            elif child.type == "base_field_initializer":
                for expr in child.named_children:
                    self.visit(expr)

    def visit_macro_invocation(self, node: Node) -> None:
        # Macro arguments are an unparsed token tree; record identifier tokens
        for child in node.named_children:
            if child.type == "token_tree":
                self._visit_token_tree(child)

    def _visit_token_tree(self, node: Node) -> None:
        children = node.children
        for i, child in enumerate(children):
            if child.type == "token_tree":
                self._visit_token_tree(child)
            elif child.type == "identifier":
                self._add(child)
            elif (
                child.type == "self"
                and i + 2 < len(children)
                and _node_text(children[i + 1], self.source) == "."
                and children[i + 2].type == "identifier"
            ):
                self.used.add(f"self.{_node_text(children[i + 2], self.source)}")

    # ── Patterns ──

    def visit_pattern(self, node: Node | None) -> None:
        """Record every name a binding pattern introduces."""
        if node is None:
            return
        if node.type == "identifier":
            self._add(node)
        elif node.type in _PATTERN_CONTAINERS:
            for child in node.named_children:
                self.visit_pattern(child)
        elif node.type == "tuple_struct_pattern":
            type_node = node.child_by_field_name("type")
            skip = type_node.id if type_node is not None else None
            for child in node.named_children:
                if child.id != skip:
                    self.visit_pattern(child)
        elif node.type == "struct_pattern":
            for child in node.named_children:
                if child.type != "field_pattern":
                    continue
                pattern = child.child_by_field_name("pattern")
                if pattern is not None:
                    self.visit_pattern(pattern)
                else:
                    self._add(child.child_by_field_name("name"))


def collect_usage(impl_node: Node, source: bytes) -> frozenset[str]:
    """Return the UsageSet of every function body inside an `impl_item` node."""
    visitor = _UsageVisitor(source)
    body = impl_node.child_by_field_name("body")
    if body is None:
        return frozenset()
    for item in body.named_children:
        if item.type == "function_item":
            visitor.visit(item.child_by_field_name("body"))
    return frozenset(visitor.used)


def is_field_used(field_name: str, usage: frozenset[str] | set[str]) -> bool:
    """A field counts as used if it is referenced directly or as `self.F` / `self?.F`."""
    if field_name in usage:
        return True
    qualified = (f"self.{field_name}", f"self?.{field_name}")
    return any(pattern in used for used in usage for pattern in qualified)
