import logging
from typing import List, Optional

import typer
import uvicorn

from .app import create_app
from .log import configure_logging
from .settings import Settings
from .whois import DEFAULT_WHOIS_URL

app = typer.Typer(
    help="WhatsMyIP - a simple service to display client IP and HTTP headers.",
    add_completion=False,
)

log = logging.getLogger(__name__)


@app.command()
def serve(
    host: str = typer.Option("0.0.0.0", envvar="WHATSMYIP_HOST", help="IP address to listen on"),
    port: int = typer.Option(
        8080, min=1, max=65535, envvar="WHATSMYIP_PORT", help="Port to listen on"
    ),
    include: str = typer.Option(
        "", envvar="WHATSMYIP_INCLUDE", help="Comma separated header names to include"
    ),
    exclude: str = typer.Option(
        "", envvar="WHATSMYIP_EXCLUDE", help="Comma separated header names to exclude"
    ),
    whois_url: str = typer.Option(
        DEFAULT_WHOIS_URL, envvar="WHATSMYIP_WHOIS_URL", help="Base URL of the whois provider"
    ),
    proxy_count: Optional[int] = typer.Option(
        None, min=0, envvar="WHATSMYIP_PROXY_COUNT", help="Number of proxies in front of the service"
    ),
    proxy: Optional[List[str]] = typer.Option(
        None, envvar="WHATSMYIP_PROXY", help="Trusted proxy address prefix (repeatable)"
    ),
    log_level: str = typer.Option("INFO", envvar="WHATSMYIP_LOG_LEVEL", help="Logging level"),
) -> None:
    """Serve the client IP page."""
    settings = Settings(
        host=host,
        port=port,
        include_headers=include,
        exclude_headers=exclude,
        whois_base_url=whois_url,
        proxy_count=proxy_count,
        proxy_list=proxy or [],
        log_level=log_level,
    )
    configure_logging(settings.log_level)

    log.info("Starting server on http://%s:%d", settings.host, settings.port)
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        access_log=False,
    )


if __name__ == "__main__":
    app()
