"""Exception hierarchy for GasGuard scans."""


class GasGuardError(Exception):
    """Base exception for scan errors"""


class ScanIOError(GasGuardError):
    """A contract file could not be read"""


class GrammarParseError(GasGuardError):
    """The grammar parser rejected primary-format source"""


class StructuralParseError(GasGuardError):
    """Source text does not have the shape the structural recovery expects"""


class FieldParseError(StructuralParseError):
    """A field fragment is not a single `name: type` pair"""


class UnknownRuleError(GasGuardError, KeyError):
    """A rule id is not registered with the engine"""

    def __str__(self) -> str:
        return Exception.__str__(self)
