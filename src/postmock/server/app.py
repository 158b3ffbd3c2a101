"""Starlette application serving one mock route per normalized endpoint."""

import asyncio
import contextlib
import json
import logging
import re
from collections.abc import AsyncIterator, Callable
from datetime import date, datetime, timezone
from pathlib import Path

from pydantic import BaseModel, Field, field_validator
from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route

from postmock.generator.random_source import RandomSource, iso_timestamp
from postmock.generator.response import RequestContext, synthesize
from postmock.parser.base import ApiSpecification, Endpoint, FormatError
from postmock.server.delay import apply_delay, validate_delay_range
from postmock.server.watcher import FileWatcher

logger = logging.getLogger(__name__)

SERVICE_NAME = "postmock"
HEALTH_PATH = "/_health"
ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]

_PARAM_RE = re.compile(r"\{\{([^{}/]+)\}\}|:([A-Za-z_][\w-]*)|\{([^{}/]+)\}")


class MockJSONResponse(JSONResponse):
    """JSONResponse that also renders the dates YAML loads from unquoted timestamps."""

    def render(self, content) -> bytes:
        return json.dumps(
            content,
            ensure_ascii=False,
            allow_nan=False,
            separators=(",", ":"),
            default=_json_default,
        ).encode("utf-8")


def _json_default(value):
    if isinstance(value, datetime):
        return iso_timestamp(value) if value.tzinfo else value.isoformat()
    if isinstance(value, date):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


class ServerOptions(BaseModel):
    """Runtime settings for the mock server."""

    host: str = "127.0.0.1"
    port: int = Field(default=4000, ge=1, le=65535)
    delay: str = "0"
    dynamic: bool = False
    cors: bool = True
    hot_reload: bool = False

    @field_validator("delay")
    @classmethod
    def check_delay(cls, v: str) -> str:
        v = v.strip() or "0"
        return validate_delay_range(v)


def to_route_path(path: str) -> str:
    """Rewrite ``:id`` / ``{{id}}`` / ``{pet-id}`` variables into Starlette ``{id}`` params."""
    seen: dict[str, int] = {}

    def repl(match: re.Match) -> str:
        raw = next(g for g in match.groups() if g is not None)
        name = re.sub(r"\W", "_", raw.strip())
        if not re.match(r"[A-Za-z_]", name):
            name = "_" + name
        count = seen.get(name, 0)
        seen[name] = count + 1
        if count:
            name = f"{name}_{count}"
        return "{" + name + "}"

    return _PARAM_RE.sub(repl, path)


def _make_handler(endpoint: Endpoint, options: ServerOptions, source: RandomSource | None):
    async def handler(request: Request) -> JSONResponse:
        try:
            if options.delay != "0":
                await apply_delay(options.delay, source)

            body = synthesize(
                endpoint.examples,
                endpoint.response_schema,
                options.dynamic,
                RequestContext(method=request.method, path=request.url.path),
                source,
            )
            response = MockJSONResponse(body, headers={"X-Mock-Server": SERVICE_NAME})
        except Exception as e:
            logger.exception("Error handling %s", endpoint.label)
            return JSONResponse(
                {"error": "Internal mock server error", "message": str(e)},
                status_code=500,
            )

        logger.info("%s %s -> 200 OK", endpoint.method, endpoint.path)
        return response

    return handler


def build_routes(spec: ApiSpecification, options: ServerOptions, source: RandomSource | None = None) -> list[Route]:
    """One route per endpoint in discovery order, then health, then the 404 catch-all."""
    routes = [
        Route(
            to_route_path(ep.path),
            _make_handler(ep, options, source),
            methods=[ep.method],
            name=f"{ep.method} {ep.path}",
        )
        for ep in spec.endpoints
    ]
    available = [ep.label for ep in spec.endpoints]

    async def health(request: Request) -> JSONResponse:
        return JSONResponse({
            "status": "ok",
            "service": SERVICE_NAME,
            "endpoints": len(spec.endpoints),
            "timestamp": iso_timestamp(datetime.now(timezone.utc)),
        })

    async def not_found(request: Request) -> JSONResponse:
        url = request.url.path
        if request.url.query:
            url += "?" + request.url.query
        return JSONResponse({
            "error": "Not Found",
            "message": f"No mock endpoint defined for {request.method} {url}",
            "availableEndpoints": available,
        }, status_code=404)

    routes.append(Route(HEALTH_PATH, health, methods=["GET"]))
    routes.append(Route("/{path:path}", not_found, methods=ALL_METHODS))
    return routes


def create_app(
    spec: ApiSpecification,
    options: ServerOptions | None = None,
    source: RandomSource | None = None,
    input_path: Path | str | None = None,
    on_change: Callable[[], None] | None = None,
) -> Starlette:
    """Build the mock server for ``spec``.

    With ``options.hot_reload`` set, ``input_path`` is polled while the app
    is running and ``on_change`` is called when it is modified.
    """
    options = options or ServerOptions()
    source = source or RandomSource()
    if not spec.endpoints:
        raise FormatError("No valid endpoints found in the input file")

    middleware = []
    if options.cors:
        middleware.append(
            Middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])
        )

    watcher = None
    if options.hot_reload and input_path is not None and on_change is not None:
        watcher = FileWatcher(input_path, on_change)

    @contextlib.asynccontextmanager
    async def lifespan(app: Starlette) -> AsyncIterator[None]:
        task = asyncio.create_task(watcher.run()) if watcher else None
        try:
            yield
        finally:
            if task:
                task.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await task

    app = Starlette(
        routes=build_routes(spec, options, source),
        middleware=middleware,
        lifespan=lifespan,
    )
    app.state.source = source
    return app
