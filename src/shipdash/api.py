"""
Shipdash HTTP API.

FastAPI application the dashboard talks to. Reads are forwarded to ShipStation;
tag batches and webhooks run through the tools in :mod:`shipdash.tools`.
"""
# Load .env file if present (for local development)
from dotenv import load_dotenv
load_dotenv()

import logging
import os
from contextlib import asynccontextmanager
from typing import Any, Optional

from fastapi import Body, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from .client import ShipStation
from .errors import UpstreamError, ValidationError
from .tools.tag_batch import apply_tag_batch
from .tools.webhooks import handle_webhook

logger = logging.getLogger(__name__)

CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:5173").split(",")
    if origin.strip()
]

# The dashboard sends add/remove; the batch tool speaks attach/detach.
ACTION_ALIASES = {"add": "attach", "remove": "detach"}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Creates the ShipStation client on startup unless one was installed already
    (tests put a fake on ``app.state.client``).
    """
    if getattr(app.state, "client", None) is None:
        app.state.client = ShipStation(raise_on_error=True)
    yield


app = FastAPI(
    title="Shipdash API",
    description="Dashboard backend for listing and tagging ShipStation orders",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Request/Response Models

class CreateTagRequest(BaseModel):
    """Request model for creating a tag."""
    name: Optional[str] = None
    color: Optional[str] = None


class HealthResponse(BaseModel):
    status: str


def _client(request: Request) -> ShipStation:
    return request.app.state.client


def _upstream_failure(exc: Exception) -> JSONResponse:
    message = getattr(exc, "message", None) or str(exc) or "ShipStation API Connection Failed"
    return JSONResponse(status_code=502, content={"message": message})


# API Endpoints

@app.get("/health", response_model=HealthResponse)
async def health():
    """Liveness check for the dashboard."""
    return HealthResponse(status="healthy")


@app.get("/api/shipments")
def list_shipments(
    request: Request,
    page: int = 1,
    page_size: int = 20,
    shipment_status: Optional[str] = None,
    tag: Optional[str] = None,
    sort_by: Optional[str] = None,
):
    """
    List one page of shipments.

    Returns:
        Upstream page (``shipments``, ``total``, ``page``, ``pages``); 400 on bad
        filters, 502 when ShipStation fails.
    """
    try:
        data = _client(request).shipments.list(
            page=page,
            page_size=page_size,
            shipment_status=shipment_status,
            tag=tag,
            sort_by=sort_by,
            validation="strict",
        )
    except ValueError as exc:
        return JSONResponse(status_code=400, content={"message": str(exc)})
    except UpstreamError as exc:
        return _upstream_failure(exc)
    if data is None:
        return _upstream_failure(UpstreamError("ShipStation API Connection Failed"))
    return data


@app.get("/api/products")
def list_products(
    request: Request,
    page: int = 1,
    page_size: int = 100,
    active: Optional[str] = None,
    sku: Optional[str] = None,
    name: Optional[str] = None,
):
    """List one page of products; 502 when ShipStation fails."""
    try:
        data = _client(request).products.list(
            page=page,
            page_size=page_size,
            active=active,
            sku=sku,
            name=name,
            validation="strict",
        )
    except ValueError as exc:
        return JSONResponse(status_code=400, content={"message": str(exc)})
    except UpstreamError as exc:
        return _upstream_failure(exc)
    if data is None:
        return _upstream_failure(UpstreamError("ShipStation API Connection Failed"))
    return data


@app.get("/api/tags")
def list_tags(request: Request):
    """List every tag on the account."""
    try:
        tags = _client(request).tags.list()
    except UpstreamError as exc:
        return _upstream_failure(exc)
    if tags is None:
        return _upstream_failure(UpstreamError("ShipStation API Connection Failed"))
    return tags


@app.post("/api/tags", status_code=201)
def create_tag(request: Request, req: CreateTagRequest):
    """
    Create a tag.

    Returns:
        The created tag with 201; 400 when the name is blank or the color invalid.
    """
    if not req.name or not req.name.strip():
        return JSONResponse(status_code=400, content={"message": "Tag name is required"})
    try:
        return _client(request).tags.create(req.name, req.color)
    except ValidationError as exc:
        return JSONResponse(status_code=400, content={"message": str(exc)})
    except UpstreamError as exc:
        return _upstream_failure(exc)


@app.post("/api/shipments/tags")
def update_order_tags(request: Request, payload: Any = Body(default=None)):
    """
    Attach or detach one tag across a batch of orders.

    Body: ``{"orderIds": [...], "tagName": "VIP", "action": "attach" | "detach"}``.
    ``shipmentIds``, ``tag_name`` and the actions ``add``/``remove`` are accepted too.

    Returns:
        200 with the batch report when every order succeeded, 502 with the same
        report shape (including successes) when any order failed, 400 for a
        malformed request.
    """
    body = payload if isinstance(payload, dict) else {}
    action = body.get("action")
    batch = {
        "orderIds": body.get("orderIds") or body.get("shipmentIds"),
        "tagName": body.get("tagName") or body.get("tag_name"),
        "action": ACTION_ALIASES.get(action, action) if isinstance(action, str) else action,
    }
    try:
        report = apply_tag_batch(_client(request), batch)
    except ValidationError as exc:
        return JSONResponse(status_code=400, content={"message": str(exc)})

    if report["overallStatus"] == "failed":
        return JSONResponse(status_code=502, content=dict(report))
    return report


@app.post("/api/webhooks/shipstation")
def shipstation_webhook(request: Request, payload: Any = Body(default=None)):
    """
    Receive ShipStation webhooks.

    Always answers 200, otherwise ShipStation disables the webhook.
    """
    return handle_webhook(_client(request), payload if isinstance(payload, dict) else {})
