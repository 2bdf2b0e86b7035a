"""courtlistener_mcp.main

FastAPI entrypoint exposing the CourtListener tools over HTTP.

Endpoints:
  - GET  /api/v1/health
  - GET  /api/v1/tools
  - POST /api/v1/tools/{tool_name}

The tool layer and the guarded client are the same ones the MCP stdio server
uses; one client (and one rate limiter) lives on ``app.state``.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, Optional
from uuid import uuid4

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from courtlistener_mcp.config.settings import settings
from courtlistener_mcp.core.fetcher import CourtListenerClient
from courtlistener_mcp.core.guard import sanitize_string
from courtlistener_mcp.mcp.tools import TOOLS, ToolArgumentError, UnknownToolError, run_tool
from courtlistener_mcp.utils.logger import get_logger

logger = get_logger(__name__)


class ToolInfo(BaseModel):
    name: str
    description: str
    input_schema: dict[str, Any]


class ToolListResponse(BaseModel):
    tools: list[ToolInfo]
    total_count: int


class ToolCallResponse(BaseModel):
    tool: str
    text: str


class ErrorResponse(BaseModel):
    error: str
    message: str
    details: Optional[dict[str, Any]] = None
    timestamp: str
    request_id: str


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.client = CourtListenerClient.from_settings(settings)
    logger.info("CourtListener client initialized")
    yield


app = FastAPI(
    title="CourtListener MCP Service",
    version=settings.service_version,
    lifespan=lifespan,
)


def get_client(request: Request) -> CourtListenerClient:
    return request.app.state.client


@app.middleware("http")
async def add_request_id(request: Request, call_next):
    request_id = request.headers.get("X-Request-ID") or uuid4().hex
    request.state.request_id = request_id

    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response


def _error_response(
    request: Request,
    *,
    status_code: int,
    error: str,
    message: str,
    details: Optional[dict[str, Any]] = None,
) -> JSONResponse:
    payload = ErrorResponse(
        error=error,
        message=message,
        details=details,
        timestamp=datetime.now(timezone.utc).isoformat(),
        request_id=getattr(request.state, "request_id", ""),
    ).model_dump()
    return JSONResponse(status_code=status_code, content=payload)


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    # Allow raising HTTPException(detail={...}) with our standard schema.
    if isinstance(exc.detail, dict) and "error" in exc.detail and "message" in exc.detail:
        return _error_response(
            request,
            status_code=exc.status_code,
            error=str(exc.detail.get("error")),
            message=str(exc.detail.get("message")),
            details=exc.detail.get("details"),
        )

    return _error_response(
        request,
        status_code=exc.status_code,
        error="HTTPException",
        message=str(exc.detail),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    # Field locations only; rejected input values are not echoed back.
    fields = sorted({".".join(str(part) for part in err["loc"]) for err in exc.errors()})
    return _error_response(
        request,
        status_code=400,
        error="ValidationError",
        message="Request validation failed",
        details={"fields": fields},
    )


@app.get("/api/v1/health")
async def health():
    return {
        "status": "healthy",
        "service": settings.service_name,
        "version": settings.service_version,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "checks": {
            "api_token": "configured" if bool(settings.courtlistener_api_token) else "not_configured",
            "tools": len(TOOLS),
        },
    }


@app.get("/api/v1/tools", response_model=ToolListResponse)
async def list_tools():
    tools = [
        ToolInfo(name=spec.name, description=spec.description, input_schema=spec.input_schema())
        for spec in TOOLS.values()
    ]
    return ToolListResponse(tools=tools, total_count=len(tools))


@app.post("/api/v1/tools/{tool_name}", response_model=ToolCallResponse)
async def call_tool(
    tool_name: str,
    arguments: Optional[dict[str, Any]] = None,
    client: CourtListenerClient = Depends(get_client),
):
    try:
        text = await run_tool(
            tool_name,
            arguments,
            client,
            site_url=settings.courtlistener_site_url,
            preview_length=settings.max_text_preview_length,
        )
    except UnknownToolError:
        raise HTTPException(
            status_code=404,
            detail={
                "error": "NotFound",
                "message": "Unknown tool",
                "details": {"tool": sanitize_string(tool_name, max_length=100)},
            },
        )
    except ToolArgumentError as e:
        raise HTTPException(
            status_code=400,
            detail={
                "error": "ValidationError",
                "message": "Invalid tool arguments",
                "details": {"fields": e.fields},
            },
        )

    return ToolCallResponse(tool=tool_name, text=text)


def run() -> None:
    import uvicorn

    uvicorn.run(
        "courtlistener_mcp.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
    )


if __name__ == "__main__":
    run()
