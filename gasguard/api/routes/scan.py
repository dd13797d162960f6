"""
GasGuard — scan endpoints.

  POST /scan        → {path, content} → one ScanResult plus storage savings
  POST /scan-batch  → {files: [...]}  → Report over every submitted file
  GET  /rules       → metadata of every registered rule, per engine
"""

from __future__ import annotations

import asyncio
import logging

from fastapi import APIRouter, HTTPException

from gasguard.config import settings
from gasguard.core.report import merge, storage_savings, summarize
from gasguard.core.scanner import ContractScanner, Language
from gasguard.exceptions import GasGuardError
from gasguard.models.rule_models import RuleInfo
from gasguard.models.scan_models import (
    BatchScanRequest,
    FileInput,
    Report,
    ScanRequest,
    ScanResponse,
    ScanResult,
)

logger = logging.getLogger("gasguard.api")
router = APIRouter()

# Shared singleton — engines hold no per-scan state
_scanner = ContractScanner()


def _check_size(file: FileInput) -> None:
    if len(file.content.encode("utf-8")) > settings.max_file_size_bytes:
        raise HTTPException(
            status_code=400,
            detail=(
                f"{file.path} exceeds maximum size of {settings.max_file_size_bytes} bytes"
            ),
        )


@router.post("/scan", response_model=ScanResponse)
async def scan_contract(req: ScanRequest):
    """Scan one contract; its path extension selects the format."""
    _check_size(req)
    try:
        result = await asyncio.to_thread(
            _scanner.scan_content,
            req.content,
            req.path,
            Language.from_path(req.path),
            req.engine,
        )
    except GasGuardError as e:
        logger.warning(f"Scan of {req.path} failed: {e}")
        raise HTTPException(status_code=422, detail=str(e))

    return ScanResponse(
        result=result,
        storage_savings=storage_savings(result.violations),
        summary=summarize(result.violations),
    )


@router.post("/scan-batch", response_model=Report)
async def scan_batch(req: BatchScanRequest):
    """Scan several contracts; a failing file is reported, not fatal."""
    for file in req.files:
        _check_size(file)

    def run() -> Report:
        report = Report()
        for file in req.files:
            try:
                result = _scanner.scan_content(
                    file.content, file.path, Language.from_path(file.path), req.engine
                )
            except GasGuardError as e:
                logger.warning(f"Scan of {file.path} failed: {e}")
                result = ScanResult(source=file.path, error=str(e))
            report = merge(report, result)
        return report

    report = await asyncio.to_thread(run)
    logger.info(
        f"Batch scan: {len(req.files)} files, {report.total_violations} violations"
    )
    return report


@router.get("/rules", response_model=list[RuleInfo])
async def list_rules():
    """Registered rules of every engine, in registration order."""
    return _scanner.rule_info()
