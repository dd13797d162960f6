"""
Vyper IR Builder — recovers a ContractIR from Vyper source text.

Vyper is indentation and decorator based. The builder makes one forward
pass over the lines; the pending decorators and the kind of the enclosing
top-level block live in an explicit `_ScanState` record that each step
returns, so the scan stays reentrant.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, replace
from pathlib import PurePath

from gasguard.core.structural import (
    extract_balanced,
    line_offsets,
    match_line_pattern,
    split_top_level,
)
from gasguard.core.soroban_builder import is_constructor_name
from gasguard.exceptions import StructuralParseError
from gasguard.models.contract_models import (
    ContractField,
    ContractIR,
    DeclaredType,
    FieldVisibility,
    Function,
    ImplementationBlock,
    Parameter,
    SelfCall,
)

logger = logging.getLogger("gasguard.vyper")

_DECORATOR_RE = re.compile(r"^@(\w+)")
_DEF_RE = re.compile(r"^def\s+(\w+)\s*\(")
_SELF_CALL_RE = re.compile(r"self\.(\w+)\s*\(")
_STATE_VAR_RE = re.compile(r"^(\w+)\s*:\s*(.+)$")
_STRUCT_RE = re.compile(r"^struct\s+(\w+)\s*:")
_OTHER_BLOCK_RE = re.compile(r"^(?:event|interface|flag|enum)\s+\w+\s*:")
_RETURN_RE = re.compile(r"^\s*->\s*(.+?)\s*:\s*$")
_WRAPPER_RE = re.compile(r"^(public|constant|immutable|transient)\s*\((.*)\)$")

_NON_STORAGE_WRAPPERS = {"constant", "immutable"}
_NON_FIELD_NAMES = {"implements", "uses", "initializes", "exports"}
_TRIPLE_QUOTES = ('"""', "'''")


@dataclass(frozen=True)
class _ScanState:
    """Scan state carried from one line to the next."""

    decorators: tuple[str, ...] = ()
    decorator_line: int | None = None
    block: str | None = None  # "function", "struct" or "other"
    block_name: str = ""
    docstring: str | None = None  # open triple-quote delimiter

    def with_decorator(self, name: str, line_number: int) -> _ScanState:
        return replace(
            self,
            decorators=self.decorators + (name,),
            decorator_line=self.decorator_line or line_number,
            block=None,
        )

    def entering(self, block: str, name: str = "") -> _ScanState:
        return _ScanState(block=block, block_name=name)


def _strip_comment(line: str) -> str:
    return line.split("#", 1)[0].rstrip()


def vyper_constructor_name(name: str) -> bool:
    return name == "__init__" or is_constructor_name(name)


class VyperIRBuilder:
    """Builds a ContractIR from Vyper source without a grammar parser."""

    language = "vyper"

    def build(self, source: str, source_path: str = "<unknown>") -> ContractIR:
        contract_name = PurePath(source_path).stem or "contract"
        lines = source.split("\n")
        offsets = line_offsets(source)

        state_fields: dict[str, ContractField] = {}
        # One entry per struct block; repeated names stay separate
        structs: list[tuple[str, int, dict[str, ContractField]]] = []
        functions: list[Function] = []
        self_calls: list[SelfCall] = []

        state = _ScanState()
        for idx, raw in enumerate(lines):
            line_number = idx + 1

            text = raw.strip()
            if state.docstring:
                if state.docstring in text:
                    state = replace(state, docstring=None)
                continue
            if text[:3] in _TRIPLE_QUOTES:
                if text.count(text[:3]) < 2:
                    state = replace(state, docstring=text[:3])
                continue

            code = _strip_comment(raw)

            for m in _SELF_CALL_RE.finditer(code):
                self_calls.append(SelfCall(function_name=m.group(1), line_number=line_number))

            stripped = code.strip()
            if not stripped:
                continue

            if raw[:1] in (" ", "\t"):
                if state.block == "struct":
                    field = self._parse_field(stripped, line_number, raw)
                    if field is not None:
                        structs[-1][2][field.name] = field
                continue

            state, function = self._step(state, stripped, idx, lines, offsets, source, source_path)
            if function is not None:
                functions.append(function)
            elif state.block == "struct":
                structs.append((state.block_name, line_number, {}))
            elif state.block is None and not state.decorators:
                field = self._parse_field(stripped, line_number, raw)
                if field is not None:
                    state_fields[field.name] = field

        if state.decorators:
            logger.debug(f"{source_path}: dropping decorators at EOF: {state.decorators}")

        declared_types = [
            DeclaredType(name=contract_name, fields=tuple(state_fields.values()), line_number=1)
        ]
        declared_types.extend(
            DeclaredType(name=name, fields=tuple(fields.values()), line_number=struct_line)
            for name, struct_line, fields in structs
        )

        return ContractIR(
            name=contract_name,
            declared_types=tuple(declared_types),
            implementations=(
                ImplementationBlock(
                    target_type_name=contract_name,
                    functions=tuple(functions),
                    line_number=functions[0].line_number if functions else 0,
                ),
            ),
            self_calls=tuple(self_calls),
            source_text=source,
            source_path=source_path,
            language=self.language,
        )

    def _step(
        self,
        state: _ScanState,
        stripped: str,
        idx: int,
        lines: list[str],
        offsets: list[int],
        source: str,
        source_path: str,
    ) -> tuple[_ScanState, Function | None]:
        """Advance the scan over one top-level (unindented) line."""
        line_number = idx + 1

        decorator = match_line_pattern(stripped, _DECORATOR_RE)
        if decorator:
            return state.with_decorator(decorator.group(1), line_number), None

        definition = match_line_pattern(stripped, _DEF_RE)
        if definition:
            try:
                function = self._parse_function(
                    definition.group(1), state, idx, lines, offsets, source
                )
            except StructuralParseError as e:
                logger.warning(f"{source_path}:{line_number}: skipping function: {e}")
                function = None
            return state.entering("function", definition.group(1)), function

        struct = match_line_pattern(stripped, _STRUCT_RE)
        if struct:
            return state.entering("struct", struct.group(1)), None

        if _OTHER_BLOCK_RE.match(stripped):
            return state.entering("other"), None

        # Anything else at top level closes the previous block and orphans
        # pending decorators
        if state.decorators:
            logger.debug(
                f"{source_path}:{line_number}: dropping decorators {state.decorators} "
                f"not followed by a def"
            )
        return _ScanState(), None

    def _parse_function(
        self,
        name: str,
        state: _ScanState,
        idx: int,
        lines: list[str],
        offsets: list[int],
        source: str,
    ) -> Function:
        params_span = extract_balanced(source, "(", ")", offsets[idx])
        if params_span is None:
            raise StructuralParseError(f"unbalanced parameter list for '{name}'")

        sig_end = idx + source.count("\n", offsets[idx], params_span.end)
        tail = _strip_comment(source[params_span.end + 1:].split("\n", 1)[0])
        rm = _RETURN_RE.match(tail)
        return_type = rm.group(1) if rm else None

        body_end = sig_end + 1
        while body_end < len(lines) and (
            not lines[body_end].strip() or lines[body_end][:1] in (" ", "\t")
        ):
            body_end += 1
        body_lines = lines[sig_end + 1:body_end]
        while body_lines and not body_lines[-1].strip():
            body_lines.pop()

        return Function(
            name=name,
            parameters=tuple(self._parse_parameters(params_span.slice(source))),
            return_type=return_type,
            is_constructor=vyper_constructor_name(name),
            line_number=state.decorator_line or idx + 1,
            column_number=1,
            raw_body="\n".join(body_lines),
            decorators=state.decorators,
        )

    @staticmethod
    def _parse_parameters(params: str) -> list[Parameter]:
        parameters: list[Parameter] = []
        for fragment in split_top_level(params, ","):
            name, sep, type_name = fragment.partition(":")
            if not sep:
                continue
            type_name = type_name.split("=", 1)[0].strip()
            parameters.append(Parameter(name=name.strip(), type_name=type_name))
        return parameters

    @staticmethod
    def _parse_field(stripped: str, line_number: int, raw: str) -> ContractField | None:
        m = _STATE_VAR_RE.match(stripped)
        if not m or m.group(1) in _NON_FIELD_NAMES:
            return None
        name, type_name = m.group(1), m.group(2).split("=", 1)[0].strip()

        visibility = FieldVisibility.PRIVATE
        wrapper = _WRAPPER_RE.match(type_name)
        if wrapper:
            if wrapper.group(1) in _NON_STORAGE_WRAPPERS:
                return None
            if wrapper.group(1) == "public":
                visibility = FieldVisibility.PUBLIC
            type_name = wrapper.group(2).strip()

        return ContractField(
            name=name,
            type_name=type_name,
            visibility=visibility,
            line_number=line_number,
            column_number=raw.find(name) + 1,
        )
