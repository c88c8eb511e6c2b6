"""API routes exposing the TikTok download handler."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any, Dict

from fastapi import APIRouter, Body, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from tiktokdl import __version__
from tiktokdl.config import AppConfig
from tiktokdl.errors import EXAMPLE_URL
from tiktokdl.services.downloader import handle

logger = logging.getLogger(__name__)

router = APIRouter()

API_NAME = "TikTok Downloader API"


class DownloadRequest(BaseModel):
    url: Any = None


class EndpointInfo(BaseModel):
    method: str
    url: str
    description: str | None = None
    body: Dict[str, str] | None = None
    example: Dict[str, str] | None = None


class StatusResponse(BaseModel):
    success: bool = True
    status: str = "online"
    message: str = API_NAME
    version: str = __version__
    environment: str
    timestamp: str
    endpoints: Dict[str, EndpointInfo] = Field(default_factory=dict)


class ApiInfoResponse(BaseModel):
    success: bool = True
    name: str = API_NAME
    description: str = "API for downloading TikTok videos without watermark"
    endpoints: Dict[str, EndpointInfo] = Field(default_factory=dict)


def _endpoints(*, with_examples: bool = False) -> Dict[str, EndpointInfo]:
    download = EndpointInfo(
        method="POST",
        url="/api/download",
        body={"url": "TikTok URL to download"},
        example={"url": EXAMPLE_URL} if with_examples else None,
    )
    status = EndpointInfo(
        method="GET",
        url="/api/status",
        description="Check server status" if with_examples else None,
    )
    return {"download": download, "status": status}


def _app_config(request: Request) -> AppConfig:
    config = getattr(request.app.state, "config", None)
    return config if config is not None else AppConfig()


@router.post("/download")
async def download(
    request: Request,
    payload: DownloadRequest | None = Body(default=None),
) -> JSONResponse:
    """Fetch download links for the TikTok URL in the request body."""

    reference = payload.url if payload is not None else None
    config = _app_config(request)
    logger.info("Download requested for %r", reference)

    outcome = await run_in_threadpool(handle, reference, config=config.scraper)
    return JSONResponse(status_code=outcome.status_code, content=outcome.body)


@router.get("/status", response_model=StatusResponse, response_model_exclude_none=True)
async def status(request: Request) -> StatusResponse:
    """Report that the server is up."""

    config = _app_config(request)
    return StatusResponse(
        environment=config.server.environment,
        timestamp=datetime.now(UTC).isoformat(),
        endpoints=_endpoints(),
    )


@router.get("", response_model=ApiInfoResponse, response_model_exclude_none=True)
async def api_info() -> ApiInfoResponse:
    """Describe the available endpoints."""

    return ApiInfoResponse(endpoints=_endpoints(with_examples=True))
