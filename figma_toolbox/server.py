"""
Main file MCP Server Figma Toolbox.
"""
import json
import logging

import uvicorn
from starlette.applications import Starlette

from .mcp_instance import mcp
from .config import config
from .metrics import get_metrics

from . import tools  # noqa: F401  регистрирует инструменты в mcp

logger = logging.getLogger(__name__)

VERSION = "1.0.0"
STREAMABLE_HTTP_PATH = "/mcp"
SSE_PATH = "/sse"


# Health check endpoint
@mcp.resource("health://check")
async def health_check() -> str:
    """Health check endpoint"""
    return json.dumps({
        "status": "healthy",
        "service": "figma-toolbox-server",
        "version": VERSION
    })


@mcp.resource("metrics://prometheus")
async def metrics_endpoint() -> str:
    """Returns metrics Prometheus."""
    return get_metrics().decode('utf-8')


def create_app() -> Starlette:
    """
    Собирает ASGI-приложение с двумя транспортами над одним набором инструментов:
    streamable HTTP на /mcp и SSE на /sse. Остальные пути отдают 404.
    """
    streamable_app = mcp.http_app(path=STREAMABLE_HTTP_PATH)
    sse_app = mcp.http_app(path=SSE_PATH, transport="sse")

    return Starlette(
        routes=[*streamable_app.routes, *sse_app.routes],
        lifespan=streamable_app.lifespan,
    )


def main():
    """Start MCP server."""
    logging.basicConfig(
        level=getattr(logging, config.server.log_level, logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    logger.info(f"Starting Figma Toolbox Server v{VERSION}")
    logger.info(f"Host: {config.server.host}, Port: {config.server.port}")
    uvicorn.run(
        create_app(),
        host=config.server.host,
        port=config.server.port,
        log_level=config.server.log_level.lower()
    )

if __name__ == "__main__":
    main()
