"""
Grammar Rule Engine — tree-sitter based analysis of `.rs` contracts.

Pipeline:
  1. Parse the source with RustParser (GrammarParseError on syntax errors).
  2. Collect contract structs: `struct_item`s preceded by a contract
     attribute (`#[contracttype]`, `#[contract]`, `#[contractimpl]`,
     `#[stellar_contract]`, optionally path-qualified).
  3. Collect `impl_item`s and group them by target type name.
  4. For every contract struct with at least one impl, union the UsageSet
     of all its impls and apply the registered rules to a per-struct
     ContractIR.
"""

from __future__ import annotations

import logging
import re
import time
from collections import defaultdict

from tree_sitter import Node

from gasguard.core.parser import RustParser
from gasguard.core.rule_engine import CheckRule, Rule, RuleEngine
from gasguard.core.rules import unused_field_usage
from gasguard.core.soroban_builder import is_constructor_name
from gasguard.core.usage_analyzer import collect_usage
from gasguard.models.contract_models import (
    ContractField,
    ContractIR,
    DeclaredType,
    FieldVisibility,
    Function,
    ImplementationBlock,
)
from gasguard.models.rule_models import Violation

logger = logging.getLogger("gasguard.grammar")

CONTRACT_ATTRIBUTES = {"contracttype", "contract", "contractimpl", "stellar_contract"}

GRAMMAR_RULE_MODULES = (unused_field_usage,)

_ATTRIBUTE_PATH_RE = re.compile(r"^\s*(?:\w+\s*::\s*)*(\w+)")
_WORD_RE = re.compile(r"\w+")

# Nodes that may sit between an attribute and the item it decorates
_TRIVIA = {"line_comment", "block_comment", "inner_attribute_item"}


def _node_text(node: Node, source: bytes) -> str:
    """Extract source text for a node."""
    return source[node.start_byte:node.end_byte].decode("utf-8", errors="replace")


def impl_target_name(type_text: str) -> str | None:
    """`Token` for `Token`, `Token<T>`, `crate::Token<'a>`."""
    words = _WORD_RE.findall(type_text.split("<", 1)[0])
    return words[-1] if words else None


def _attribute_name(attr_item: Node, source: bytes) -> str | None:
    for child in attr_item.named_children:
        if child.type == "attribute":
            m = _ATTRIBUTE_PATH_RE.match(_node_text(child, source))
            return m.group(1) if m else None
    return None


class GrammarRuleEngine(RuleEngine):
    """Grammar-accurate engine; the default for `.rs` contracts."""

    name = "grammar"

    def __init__(self, *args, **kwargs) -> None:
        self.parser = RustParser()
        super().__init__(*args, **kwargs)

    def default_rules(self) -> list[Rule]:
        return [CheckRule.from_module(module) for module in GRAMMAR_RULE_MODULES]

    def analyze_source(self, source: str, source_path: str = "<unknown>") -> list[Violation]:
        """Parse `source` and apply the enabled rules to each contract struct.

        Raises GrammarParseError if the source does not parse cleanly.
        """
        start = time.monotonic()
        tree, source_bytes = self.parser.parse(source)

        structs: list[Node] = []
        impls: dict[str, list[Node]] = defaultdict(list)
        for item, attributes in self._items(tree.root_node, source_bytes):
            if item.type == "struct_item" and CONTRACT_ATTRIBUTES.intersection(attributes):
                structs.append(item)
            elif item.type == "impl_item":
                type_node = item.child_by_field_name("type")
                target = impl_target_name(_node_text(type_node, source_bytes)) if type_node else None
                if target:
                    impls[target].append(item)

        violations: list[Violation] = []
        for struct in structs:
            contract = self._contract_ir(struct, impls, source, source_bytes, source_path)
            struct_impls = impls.get(contract.name, [])
            if not struct_impls:
                logger.debug(f"{source_path}: no impl block for '{contract.name}', skipping")
                continue
            usage: frozenset[str] = frozenset().union(
                *(collect_usage(impl, source_bytes) for impl in struct_impls)
            )
            violations.extend(self.analyze(contract, usage))

        elapsed_ms = (time.monotonic() - start) * 1000
        logger.debug(
            f"{source_path}: grammar engine checked {len(structs)} contract structs, "
            f"{len(violations)} violations in {elapsed_ms:.1f}ms"
        )
        return violations

    # ── Tree walking ──

    def _items(self, container: Node, source: bytes) -> list[tuple[Node, list[str]]]:
        """Items of a source file or inline module with their preceding attribute names."""
        items: list[tuple[Node, list[str]]] = []
        pending: list[str] = []
        for child in container.named_children:
            if child.type == "attribute_item":
                name = _attribute_name(child, source)
                if name:
                    pending.append(name)
                continue
            if child.type in _TRIVIA:
                continue
            items.append((child, pending))
            pending = []
            if child.type == "mod_item":
                body = child.child_by_field_name("body")
                if body is not None:
                    items.extend(self._items(body, source))
        return items

    def _contract_ir(
        self,
        struct: Node,
        impls: dict[str, list[Node]],
        source: str,
        source_bytes: bytes,
        source_path: str,
    ) -> ContractIR:
        name = _node_text(struct.child_by_field_name("name"), source_bytes)
        fields: list[ContractField] = []

        body = struct.child_by_field_name("body")
        if body is not None and body.type == "field_declaration_list":
            for decl in body.named_children:
                if decl.type != "field_declaration":
                    continue
                field_name = decl.child_by_field_name("name")
                field_type = decl.child_by_field_name("type")
                if field_name is None or field_type is None:
                    continue
                is_pub = any(c.type == "visibility_modifier" for c in decl.named_children)
                row, col = field_name.start_point
                fields.append(
                    ContractField(
                        name=_node_text(field_name, source_bytes),
                        type_name=" ".join(_node_text(field_type, source_bytes).split()),
                        visibility=FieldVisibility.PUBLIC if is_pub else FieldVisibility.PRIVATE,
                        line_number=row + 1,
                        column_number=col + 1,
                    )
                )

        return ContractIR(
            name=name,
            declared_types=(
                DeclaredType(
                    name=name,
                    fields=tuple(fields),
                    line_number=struct.start_point[0] + 1,
                ),
            ),
            implementations=tuple(
                self._implementation(impl, name, source_bytes) for impl in impls.get(name, [])
            ),
            source_text=source,
            source_path=source_path,
            language="soroban",
        )

    @staticmethod
    def _implementation(impl: Node, target: str, source: bytes) -> ImplementationBlock:
        functions: list[Function] = []
        body = impl.child_by_field_name("body")
        for item in body.named_children if body is not None else ():
            if item.type != "function_item":
                continue
            fn_name = item.child_by_field_name("name")
            fn_body = item.child_by_field_name("body")
            name = _node_text(fn_name, source)
            row, col = fn_name.start_point
            functions.append(
                Function(
                    name=name,
                    is_constructor=is_constructor_name(name),
                    line_number=row + 1,
                    column_number=col + 1,
                    raw_body=_node_text(fn_body, source) if fn_body is not None else "",
                )
            )
        return ImplementationBlock(
            target_type_name=target,
            functions=tuple(functions),
            line_number=impl.start_point[0] + 1,
        )
