"""
Contract IR Models — Language-agnostic representation of a recovered contract.

These models are the output of the IR builders (Soroban and Vyper) and the
input to the heuristic rule engines. They are frozen: built once per file
and never mutated afterwards.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class FieldVisibility(str, Enum):
    PUBLIC = "public"
    PRIVATE = "private"


class ContractField(BaseModel):
    """A persisted field of a declared contract type."""

    model_config = ConfigDict(frozen=True)

    name: str
    type_name: str
    visibility: FieldVisibility = FieldVisibility.PRIVATE
    line_number: int = Field(default=0, description="1-based source line")
    column_number: int = Field(default=0, description="1-based source column")


class DeclaredType(BaseModel):
    """A contract's persisted-state record."""

    model_config = ConfigDict(frozen=True)

    name: str
    fields: tuple[ContractField, ...] = ()
    line_number: int = 0

    def field_names(self) -> list[str]:
        return [f.name for f in self.fields]


class Parameter(BaseModel):
    """A function parameter."""

    model_config = ConfigDict(frozen=True)

    name: str
    type_name: str


class Function(BaseModel):
    """A function recovered from an implementation block."""

    model_config = ConfigDict(frozen=True)

    name: str
    parameters: tuple[Parameter, ...] = ()
    return_type: str | None = None
    is_constructor: bool = Field(
        default=False, description="Naming heuristic, not a semantic fact"
    )
    line_number: int = 0
    column_number: int = 0
    raw_body: str = Field(default="", description="Raw source of the function body")
    decorators: tuple[str, ...] = Field(
        default=(), description="Decorator names (secondary format only)"
    )

    def has_decorator(self, decorator: str) -> bool:
        return decorator in self.decorators


class ImplementationBlock(BaseModel):
    """A named group of functions operating on a declared type."""

    model_config = ConfigDict(frozen=True)

    target_type_name: str
    functions: tuple[Function, ...] = ()
    line_number: int = 0


class SelfCall(BaseModel):
    """A qualified `self.name(...)` call site."""

    model_config = ConfigDict(frozen=True)

    function_name: str
    line_number: int


class ContractIR(BaseModel):
    """Complete recovered representation of one contract file."""

    model_config = ConfigDict(frozen=True)

    name: str
    declared_types: tuple[DeclaredType, ...] = ()
    implementations: tuple[ImplementationBlock, ...] = ()
    self_calls: tuple[SelfCall, ...] = ()
    source_text: str = ""
    source_path: str = ""
    language: str = Field(default="soroban", description="'soroban' or 'vyper'")

    def all_fields(self) -> list[ContractField]:
        return [f for t in self.declared_types for f in t.fields]

    def all_functions(self) -> list[Function]:
        return [fn for impl in self.implementations for fn in impl.functions]

    def self_called_names(self) -> set[str]:
        return {call.function_name for call in self.self_calls}
