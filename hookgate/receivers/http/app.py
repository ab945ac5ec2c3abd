"""FastAPI gateway for the WebHook receiver pipeline."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from hookgate.receivers.receiver import WebHookReceiver
from hookgate.receivers.types import DispatchResult, ReceiverRequest, RejectionKind, ValidationError

RECEIVER_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE"]


@dataclass(slots=True)
class HttpGatewayConfig:
    """Configuration for the receiver HTTP gateway."""

    trust_forwarded_proto: bool = False


def create_receiver_app(
    *,
    receivers: Mapping[str, WebHookReceiver],
    config: HttpGatewayConfig | None = None,
) -> FastAPI:
    """Create FastAPI app bound to the given receivers, keyed by receiver name."""

    cfg = config or HttpGatewayConfig()
    registered = {name.lower(): receiver for name, receiver in receivers.items()}
    app = FastAPI(title="hookgate WebHook receivers")

    @app.middleware("http")
    async def _request_id_middleware(request: Request, call_next: Any) -> Response:
        request_id = request.headers.get("x-request-id", str(uuid4()))
        request.state.request_id = request_id
        response = await call_next(request)
        response.headers["x-request-id"] = request_id
        return response

    async def _receive(receiver_name: str, route_id: str, request: Request) -> Response:
        request_id = str(getattr(request.state, "request_id", uuid4()))
        receiver = registered.get(receiver_name.lower())
        if receiver is None:
            return _error_response(unknown_receiver_error(), request_id=request_id)
        result = await receiver.receive(route_id, to_receiver_request(request, trust_forwarded_proto=cfg.trust_forwarded_proto))
        return render_result(result, request_id=request_id)

    @app.api_route("/api/webhooks/incoming/{receiver_name}", methods=RECEIVER_METHODS)
    async def receive_default(receiver_name: str, request: Request) -> Response:
        return await _receive(receiver_name, "", request)

    @app.api_route("/api/webhooks/incoming/{receiver_name}/{route_id}", methods=RECEIVER_METHODS)
    async def receive_webhook(receiver_name: str, route_id: str, request: Request) -> Response:
        return await _receive(receiver_name, route_id, request)

    @app.get("/health")
    async def health() -> JSONResponse:
        return JSONResponse(status_code=200, content={"status": "ok", "receivers": sorted(registered)})

    return app


def unknown_receiver_error() -> ValidationError:
    return ValidationError(
        kind=RejectionKind.UNKNOWN_RECEIVER,
        code="RECEIVER_NOT_FOUND",
        message="No WebHook receiver is registered for this route.",
        status_code=404,
    )


def to_receiver_request(request: Request, *, trust_forwarded_proto: bool = False) -> ReceiverRequest:
    """Normalize a Starlette request; the body is only read when the pipeline asks for it."""

    scheme = request.url.scheme
    forwarded = False
    if trust_forwarded_proto:
        # only the rightmost hop was written by our own proxy
        hops = [hop.strip() for hop in request.headers.get("x-forwarded-proto", "").split(",")]
        if hops[-1]:
            scheme = hops[-1]
            forwarded = True
    query: dict[str, list[str]] = {}
    for key, value in request.query_params.multi_items():
        query.setdefault(key, []).append(value)
    return ReceiverRequest(
        method=request.method,
        scheme=scheme,
        query=query,
        headers=dict(request.headers),
        client_host=request.client.host if request.client else None,
        forwarded=forwarded,
        body_reader=request.body,
    )


def render_result(result: DispatchResult, *, request_id: str) -> Response:
    if result.error is not None:
        return _error_response(result.error, request_id=request_id)
    if result.body is None:
        return Response(status_code=result.status_code, headers=result.headers)
    if isinstance(result.body, (str, bytes)):
        return PlainTextResponse(content=result.body, status_code=result.status_code, headers=result.headers)
    return JSONResponse(content=result.body, status_code=result.status_code, headers=result.headers)


def _error_response(error: ValidationError, *, request_id: str) -> JSONResponse:
    return JSONResponse(
        status_code=error.status_code,
        headers=error.headers,
        content={
            "error": {
                "code": error.code,
                "message": error.message,
                "request_id": request_id,
                "timestamp": datetime.now(timezone.utc).isoformat(),
            }
        },
    )
