import logging
from contextlib import asynccontextmanager
from datetime import datetime
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse, Response
from fastapi.templating import Jinja2Templates

from .cache import LookupCache
from .forwarding import ForwardedChainInspector
from .handler import PresentationRecord, RequestHandler
from .settings import Settings
from .whois import HttpWhoisProvider, LookupService, OwnershipInfo, WhoisResolver

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).resolve().parent / "templates"
TEMPLATE_NAME = "index.html"

METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def _remote_addr(request: Request) -> str:
    if request.client is None:
        return ""
    host, port = request.client.host, request.client.port
    if ":" in host:
        return f"[{host}]:{port}"
    return f"{host}:{port}"


def _access_log(request: Request, record: PresentationRecord, status_code: int) -> None:
    query = f"?{request.url.query}" if request.url.query else ""
    request_line = (
        f"{request.method} {request.url.path}{query} "
        f"HTTP/{request.scope.get('http_version', '1.1')}"
    )
    logger.info(
        '%s - %s [%s] "%s" %d - "%s" "%s"',
        record.client_ip,
        request.headers.get("remote-user") or "-",
        datetime.now().astimezone().strftime("%d/%b/%Y:%H:%M:%S %z"),
        request_line,
        status_code,
        request.headers.get("referer") or "-",
        request.headers.get("user-agent") or "-",
    )


def create_app(
    settings: Optional[Settings] = None,
    resolver: Optional[LookupService] = None,
    templates: Optional[Jinja2Templates] = None,
) -> FastAPI:
    """
    Build the ASGI application.

    Without a ``resolver`` the app creates its own cache and HTTP whois
    provider and manages them through the lifespan: the cache sweep
    starts on startup, and both are closed on shutdown.
    """
    settings = settings or Settings()
    templates = templates or Jinja2Templates(directory=str(TEMPLATE_DIR))

    cache: Optional[LookupCache[OwnershipInfo]] = None
    provider: Optional[HttpWhoisProvider] = None
    if resolver is None:
        cache = LookupCache(settings.cache_ttl, settings.cache_purge_interval)
        provider = HttpWhoisProvider(settings.whois_base_url, settings.whois_timeout)
        resolver = WhoisResolver(provider, cache)

    handler = RequestHandler(
        resolver,
        include=settings.include_headers,
        exclude=settings.exclude_headers,
        inspector=ForwardedChainInspector(
            proxy_count=settings.proxy_count,
            proxy_list=settings.proxy_list,
        ),
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if cache is not None:
            cache.start()
        try:
            yield
        finally:
            if cache is not None:
                cache.close()
            if provider is not None:
                provider.close()

    app = FastAPI(
        title="whatsmyip",
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.settings = settings
    app.state.handler = handler

    @app.api_route("/{path:path}", methods=METHODS, include_in_schema=False)
    def show_request(request: Request, path: str) -> Response:
        record = handler.handle(_remote_addr(request), request.headers)
        try:
            response: Response = templates.TemplateResponse(
                request, TEMPLATE_NAME, {"record": record}
            )
        except Exception:
            logger.exception("Error executing template")
            response = PlainTextResponse("Internal server error", status_code=500)

        _access_log(request, record, response.status_code)
        return response

    return app


__all__ = ["create_app"]
