"""
GasGuard FastAPI Application — HTTP surface of the contract analyzer.

  POST /scan        → scan one Soroban (.rs) or Vyper (.vy) contract
  POST /scan-batch  → scan several contracts into one report
  GET  /rules       → registered rules
  GET  /health      → {"status": "ok"}
"""

from __future__ import annotations

import logging

from dotenv import load_dotenv
load_dotenv()

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from gasguard.api.routes.scan import router as scan_router
from gasguard.config import settings
from gasguard.exceptions import GasGuardError

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("gasguard")

app = FastAPI(
    title="GasGuard",
    description="Static analyzer for Soroban and Vyper smart-contract storage and gas costs",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(scan_router)


@app.exception_handler(GasGuardError)
async def gasguard_exception_handler(request: Request, exc: GasGuardError):
    logger.error(f"{request.url.path}: {type(exc).__name__}: {exc}")
    return JSONResponse(status_code=422, content={"detail": str(exc)})


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "ok", "version": "1.0.0"}
