"""
Contract Scanner — format dispatch, single-file and directory scans.

The file extension selects the engine(s):
  .rs  → GrammarRuleEngine, SorobanRuleEngine, or both (settings.rust_engine)
  .vy  → VyperRuleEngine
  else → empty ScanResult

A single-file scan propagates every GasGuardError to the caller. A directory
scan isolates failures per file: the failing file becomes a ScanResult with
`error` set and the walk continues.
"""

from __future__ import annotations

import logging
import os
from concurrent.futures import ThreadPoolExecutor
from enum import Enum
from pathlib import Path
from typing import Literal

from gasguard.config import settings
from gasguard.core.grammar_engine import GrammarRuleEngine
from gasguard.core.rule_engine import RuleEngine
from gasguard.core.soroban_engine import SorobanRuleEngine
from gasguard.core.vyper_engine import VyperRuleEngine
from gasguard.exceptions import GasGuardError, ScanIOError
from gasguard.models.rule_models import RuleInfo, Violation
from gasguard.models.scan_models import Report, ScanResult

logger = logging.getLogger("gasguard.scanner")

RustEngineChoice = Literal["grammar", "heuristic", "all"]


class Language(str, Enum):
    RUST = "rust"
    VYPER = "vyper"

    @classmethod
    def from_extension(cls, extension: str) -> Language | None:
        return _EXTENSIONS.get(extension.lower().lstrip("."))

    @classmethod
    def from_path(cls, path: str | os.PathLike) -> Language | None:
        return cls.from_extension(Path(path).suffix)


_EXTENSIONS = {"rs": Language.RUST, "vy": Language.VYPER}


def _log_walk_error(error: OSError) -> None:
    logger.warning(f"Skipping unreadable entry {error.filename}: {error.strerror}")


def walk_contracts(root: str | os.PathLike) -> list[Path]:
    """All files under `root` with a recognised extension, in sorted path order."""
    found: list[Path] = []
    for dirpath, dirnames, filenames in os.walk(root, onerror=_log_walk_error):
        dirnames.sort()
        for filename in filenames:
            if Language.from_extension(Path(filename).suffix) is not None:
                found.append(Path(dirpath) / filename)
    return sorted(found)


class ContractScanner:
    """
    Scans contract sources with the engine matching each file's format.

    Engines are built once and reused; they hold no per-scan state.
    """

    def __init__(
        self,
        rust_engine: RustEngineChoice | None = None,
        disabled_rules: list[str] | None = None,
        max_file_size_bytes: int | None = None,
    ) -> None:
        self.rust_engine: RustEngineChoice = rust_engine or settings.rust_engine
        self.max_file_size_bytes = max_file_size_bytes or settings.max_file_size_bytes
        self.grammar_engine = GrammarRuleEngine(disabled_rules=disabled_rules)
        self.heuristic_engine = SorobanRuleEngine(disabled_rules=disabled_rules)
        self.vyper_engine = VyperRuleEngine(disabled_rules=disabled_rules)

    def engines_for(
        self, language: Language | None, rust_engine: RustEngineChoice | None = None
    ) -> list[GrammarRuleEngine | SorobanRuleEngine | VyperRuleEngine]:
        if language is Language.VYPER:
            return [self.vyper_engine]
        if language is not Language.RUST:
            return []
        choice = rust_engine or self.rust_engine
        if choice == "heuristic":
            return [self.heuristic_engine]
        if choice == "all":
            return [self.grammar_engine, self.heuristic_engine]
        return [self.grammar_engine]

    def all_engines(self) -> list[RuleEngine]:
        return [self.grammar_engine, self.heuristic_engine, self.vyper_engine]

    def rule_info(self) -> list[RuleInfo]:
        return [info for engine in self.all_engines() for info in engine.rule_info()]

    # ── Single source ──

    def scan_content(
        self,
        content: str,
        source: str,
        language: Language | None = Language.RUST,
        rust_engine: RustEngineChoice | None = None,
    ) -> ScanResult:
        """Scan in-memory source. Raises GasGuardError subclasses on failure."""
        engines = self.engines_for(language, rust_engine)
        if not engines:
            logger.debug(f"{source}: unsupported format, nothing to scan")
            return ScanResult(source=source)

        violations: list[Violation] = []
        for engine in engines:
            violations.extend(engine.analyze_source(content, source))
        return ScanResult(source=source, violations=violations)

    def scan_file(
        self, path: str | os.PathLike, rust_engine: RustEngineChoice | None = None
    ) -> ScanResult:
        """Read and scan one file; its extension selects the engine."""
        path = Path(path)
        language = Language.from_path(path)
        if language is None:
            logger.debug(f"{path}: unsupported extension '{path.suffix}', nothing to scan")
            return ScanResult(source=str(path))

        content = self._read(path)
        result = self.scan_content(content, str(path), language, rust_engine)
        logger.info(f"Scanned {path}: {len(result.violations)} violations")
        return result

    def _read(self, path: Path) -> str:
        try:
            size = path.stat().st_size
            if size > self.max_file_size_bytes:
                raise ScanIOError(
                    f"Failed to read file {path}: {size} bytes exceeds limit of "
                    f"{self.max_file_size_bytes}"
                )
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise ScanIOError(f"Failed to read file {path}: {e}") from e

    # ── Directories ──

    def scan_directory(
        self,
        root: str | os.PathLike,
        workers: int | None = None,
        rust_engine: RustEngineChoice | None = None,
    ) -> Report:
        """Scan every recognised file under `root`, in sorted path order.

        Raises ScanIOError if `root` is not a directory. Per-file failures are
        recorded on their ScanResult instead of aborting the walk.
        """
        root = Path(root)
        if not root.is_dir():
            raise ScanIOError(f"Not a directory: {root}")

        paths = walk_contracts(root)
        workers = workers or settings.scan_workers
        logger.info(f"Scanning {len(paths)} contract files under {root} ({workers} workers)")

        def scan_one(path: Path) -> ScanResult:
            try:
                return self.scan_file(path, rust_engine)
            except GasGuardError as e:
                logger.warning(f"Scan failed for {path}: {e}")
                return ScanResult(source=str(path), error=str(e))

        if workers > 1 and len(paths) > 1:
            with ThreadPoolExecutor(max_workers=workers) as executor:
                # map() yields in submission order
                results = list(executor.map(scan_one, paths))
        else:
            results = [scan_one(path) for path in paths]

        report = Report(results=results)
        logger.info(
            f"Directory scan complete: {len(results)} files, "
            f"{report.total_violations} violations, {len(report.failed_files)} failed"
        )
        return report
