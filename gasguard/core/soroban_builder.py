"""
Soroban IR Builder — recovers a ContractIR from Soroban (Rust) source text.

No grammar parser is used on this path. Structure is recovered with a
single forward pass over lines looking for `#[contracttype]` /
`#[contractimpl]` markers, plus the balanced-delimiter primitives in
`gasguard.core.structural` for bodies and parameter lists.

A malformed type or function is logged and skipped; the rest of the file is
still recovered. Only a missing contract name fails the whole file.
"""

from __future__ import annotations

import logging
import re

from gasguard.core.structural import (
    Span,
    column_at,
    extract_balanced,
    line_number_at,
    line_offsets,
    match_line_pattern,
    split_top_level,
)
from gasguard.exceptions import FieldParseError, StructuralParseError
from gasguard.models.contract_models import (
    ContractField,
    ContractIR,
    DeclaredType,
    FieldVisibility,
    Function,
    ImplementationBlock,
    Parameter,
)

logger = logging.getLogger("gasguard.soroban")

_CONTRACTTYPE_RE = re.compile(r"^#\s*\[\s*contracttype\s*\]")
_CONTRACTIMPL_RE = re.compile(r"^#\s*\[\s*contractimpl\s*\]")
_CONTRACT_RE = re.compile(r"^#\s*\[\s*contract\s*\]")
_CONTRACT_NAMED_RE = re.compile(r"#\s*\[\s*contract\s*\(\s*(\w+)\s*\)\s*\]")
_ATTRIBUTE_LINE_RE = re.compile(r"^#!?\s*\[")
_STRUCT_RE = re.compile(r"^(?:pub(?:\s*\([^)]*\))?\s+)?struct\s+(\w+)")
_IMPL_RE = re.compile(r"^impl(?:\s*<[^{]*?>)?\s+(?:[\w:<>,\s']+?\s+for\s+)?(\w+)")
_FN_RE = re.compile(
    r"\b(?P<pub>pub(?:\s*\([^)]*\))?\s+)?"
    r"(?:(?:const|async|unsafe|extern\s+\"\w+\")\s+)*"
    r"fn\s+(?P<name>\w+)"
)
_RETURN_RE = re.compile(r"->\s*([^{\n]+)")
_PUB_PREFIX_RE = re.compile(r"^pub(?:\s*\([^)]*\))?\s+")
_LEADING_ATTRS_RE = re.compile(r"^(?:#\s*\[[^\]]*\]\s*)+")
_SINGLE_COLON_RE = re.compile(r"(?<!:):(?!:)")
_COMMENT_RE = re.compile(r"//[^\n]*|/\*.*?\*/", re.DOTALL)

_RECEIVERS = {"self", "&self", "&mut self", "mut self"}


def is_constructor_name(name: str) -> bool:
    return name == "new" or name.endswith("_init")


def _mask_comments(text: str) -> str:
    """Blank out comments, keeping every offset and newline in place."""
    return _COMMENT_RE.sub(lambda m: re.sub(r"[^\n]", " ", m.group()), text)


def _rejoin_generics(segments: list[str]) -> list[str]:
    """Re-merge segments that were split inside `<...>` type arguments."""
    merged: list[str] = []
    pending = ""
    for segment in segments:
        pending = f"{pending}, {segment}" if pending else segment
        depth = pending.count("<") - (pending.count(">") - pending.count("->"))
        if depth <= 0:
            merged.append(pending)
            pending = ""
    if pending:
        merged.append(pending)
    return merged


def _signature_end(text: str, start: int, end: int) -> int:
    """Index of the first `{` or `;` outside () and [] in text[start:end], else -1.

    Array types such as `[u8; 32]` carry a `;` that does not end the signature.
    """
    depth = 0
    for i in range(start, end):
        ch = text[i]
        if ch in "([":
            depth += 1
        elif ch in ")]":
            depth -= 1
        elif ch in "{;" and depth <= 0:
            return i
    return -1


def _split_name_type(fragment: str) -> tuple[str, str] | None:
    parts = _SINGLE_COLON_RE.split(fragment)
    if len(parts) != 2:
        return None
    return parts[0].strip(), parts[1].strip()


class SorobanIRBuilder:
    """Builds a ContractIR from Soroban source without a grammar parser."""

    language = "soroban"

    def build(self, source: str, source_path: str = "<unknown>") -> ContractIR:
        masked = _mask_comments(source)
        lines = masked.split("\n")
        offsets = line_offsets(masked)

        declared_types: list[DeclaredType] = []
        implementations: list[ImplementationBlock] = []

        for idx, line in enumerate(lines):
            stripped = line.strip()
            if _CONTRACTTYPE_RE.match(stripped):
                decl = self._next_declaration(lines, idx + 1)
                if decl is None or not _STRUCT_RE.match(lines[decl].strip()):
                    # Marker on an enum, or nothing before EOF
                    continue
                try:
                    declared_types.append(
                        self._parse_type(source, masked, lines, offsets, decl)
                    )
                except StructuralParseError as e:
                    logger.warning(f"{source_path}:{decl + 1}: skipping type: {e}")
            elif _CONTRACTIMPL_RE.match(stripped):
                decl = self._next_declaration(lines, idx + 1)
                if decl is None or not lines[decl].strip().startswith("impl"):
                    continue
                try:
                    implementations.append(
                        self._parse_impl(source, masked, lines, offsets, decl, source_path)
                    )
                except StructuralParseError as e:
                    logger.warning(f"{source_path}:{decl + 1}: skipping impl block: {e}")

        name = self._contract_name(lines, masked, declared_types)

        logger.debug(
            f"{source_path}: recovered {len(declared_types)} types, "
            f"{len(implementations)} impl blocks"
        )
        return ContractIR(
            name=name,
            declared_types=tuple(declared_types),
            implementations=tuple(implementations),
            source_text=source,
            source_path=source_path,
            language=self.language,
        )

    # ── Markers ──

    @staticmethod
    def _next_declaration(lines: list[str], start: int) -> int | None:
        """Index of the first line after an attribute that is not blank or another attribute."""
        for i in range(start, len(lines)):
            stripped = lines[i].strip()
            if not stripped or _ATTRIBUTE_LINE_RE.match(stripped):
                continue
            return i
        return None

    def _contract_name(
        self, lines: list[str], masked: str, declared_types: list[DeclaredType]
    ) -> str:
        for idx, line in enumerate(lines):
            if _CONTRACT_RE.match(line.strip()):
                decl = self._next_declaration(lines, idx + 1)
                if decl is not None:
                    m = _STRUCT_RE.match(lines[decl].strip())
                    if m:
                        return m.group(1)

        m = match_line_pattern(masked, _CONTRACT_NAMED_RE)
        if m:
            return m.group(1)

        if declared_types:
            return declared_types[0].name

        raise StructuralParseError(
            "Could not determine contract name from #[contract] or #[contracttype] attributes"
        )

    # ── Types ──

    def _parse_type(
        self,
        source: str,
        masked: str,
        lines: list[str],
        offsets: list[int],
        line_idx: int,
    ) -> DeclaredType:
        header = lines[line_idx].strip()
        name = _STRUCT_RE.match(header).group(1)
        decl_start = offsets[line_idx]
        after_name = masked.find(name, decl_start + masked[decl_start:].find("struct")) + len(name)

        # Unit (`struct X;`) and tuple (`struct X(u32);`) structs have no named fields
        terminators = [
            pos for pos in (masked.find(ch, after_name) for ch in "{;(") if pos != -1
        ]
        if not terminators or masked[min(terminators)] != "{":
            return DeclaredType(name=name, line_number=line_idx + 1)

        span = extract_balanced(masked, "{", "}", decl_start)
        if span is None:
            raise StructuralParseError(f"unbalanced body for struct '{name}'")

        fields = {}
        for field in self._parse_fields(source, masked, span):
            # Duplicate names: last declaration wins, first position kept
            fields[field.name] = field
        return DeclaredType(name=name, fields=tuple(fields.values()), line_number=line_idx + 1)

    def _parse_fields(self, source: str, masked: str, span: Span) -> list[ContractField]:
        body = span.slice(masked)
        fields: list[ContractField] = []
        cursor = 0
        for fragment in _rejoin_generics(split_top_level(body, ",")):
            frag_pos = body.find(fragment.split(",")[0], cursor)
            if frag_pos == -1:
                frag_pos = cursor
            cursor = frag_pos + 1

            text = _LEADING_ATTRS_RE.sub("", fragment).strip()
            visibility = FieldVisibility.PRIVATE
            if _PUB_PREFIX_RE.match(text):
                visibility = FieldVisibility.PUBLIC
                text = _PUB_PREFIX_RE.sub("", text, count=1)

            pair = _split_name_type(text)
            if pair is None or not pair[0] or not pair[1]:
                raise FieldParseError(f"Invalid field format: {fragment}")
            name, type_name = pair

            abs_start = span.start + frag_pos
            m = re.search(rf"\b{re.escape(name)}\b", masked[abs_start:span.end])
            name_index = abs_start + (m.start() if m else 0)
            fields.append(
                ContractField(
                    name=name,
                    type_name=" ".join(type_name.split()),
                    visibility=visibility,
                    line_number=line_number_at(source, name_index),
                    column_number=column_at(source, name_index),
                )
            )
        return fields

    # ── Implementations ──

    def _parse_impl(
        self,
        source: str,
        masked: str,
        lines: list[str],
        offsets: list[int],
        line_idx: int,
        source_path: str,
    ) -> ImplementationBlock:
        m = _IMPL_RE.match(lines[line_idx].strip())
        if not m:
            raise StructuralParseError(
                f"Could not parse impl target from: {lines[line_idx].strip()}"
            )
        target = m.group(1)

        span = extract_balanced(masked, "{", "}", offsets[line_idx])
        if span is None:
            raise StructuralParseError(f"unbalanced impl block for '{target}'")

        return ImplementationBlock(
            target_type_name=target,
            functions=tuple(self._parse_functions(source, masked, span, source_path)),
            line_number=line_idx + 1,
        )

    def _parse_functions(
        self, source: str, masked: str, impl_span: Span, source_path: str
    ) -> list[Function]:
        functions: list[Function] = []
        cursor = impl_span.start

        while True:
            m = _FN_RE.search(masked, cursor, impl_span.end)
            if m is None:
                break
            name = m.group("name")
            try:
                function, cursor = self._parse_function(source, masked, impl_span, m)
            except StructuralParseError as e:
                logger.warning(
                    f"{source_path}:{line_number_at(source, m.start())}: "
                    f"skipping function '{name}': {e}"
                )
                cursor = m.end()
                continue
            if function is not None:
                functions.append(function)

        return functions

    def _parse_function(
        self, source: str, masked: str, impl_span: Span, m: re.Match[str]
    ) -> tuple[Function | None, int]:
        """Parse one `fn` at match `m`; returns the function (None if not pub) and the next cursor."""
        name = m.group("name")

        params_span = extract_balanced(masked, "(", ")", m.end())
        if params_span is None or params_span.end > impl_span.end:
            raise StructuralParseError("unbalanced parameter list")

        brace = _signature_end(masked, params_span.end + 1, impl_span.end)
        if brace == -1 or masked[brace] == ";":
            # Declaration without a body
            return None, (brace + 1 if brace != -1 else params_span.end + 1)

        body_span = extract_balanced(masked, "{", "}", brace)
        if body_span is None or body_span.end > impl_span.end:
            raise StructuralParseError("unbalanced function body")

        next_cursor = body_span.end + 1
        if not m.group("pub"):
            return None, next_cursor

        signature_tail = masked[params_span.end + 1:brace]
        return_type = None
        rm = _RETURN_RE.search(signature_tail)
        if rm:
            clean = re.split(r"\bwhere\b", rm.group(1))[0].strip()
            return_type = " ".join(clean.split()) or None

        name_index = m.start("name")
        function = Function(
            name=name,
            parameters=tuple(self._parse_parameters(params_span.slice(masked))),
            return_type=return_type,
            is_constructor=is_constructor_name(name),
            line_number=line_number_at(source, name_index),
            column_number=column_at(source, name_index),
            raw_body=body_span.slice(source),
        )
        return function, next_cursor

    @staticmethod
    def _parse_parameters(params: str) -> list[Parameter]:
        parameters: list[Parameter] = []
        for fragment in _rejoin_generics(split_top_level(params, ",")):
            if " ".join(fragment.split()) in _RECEIVERS:
                continue
            pair = _split_name_type(fragment)
            if pair is None:
                continue
            name, type_name = pair
            name = re.sub(r"^mut\s+", "", name)
            parameters.append(Parameter(name=name, type_name=" ".join(type_name.split())))
        return parameters
