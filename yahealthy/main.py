"""YAHEALTHY Engine Server - Entry point.

Runs the MCP server with HTTP transport for Cloud Run deployment.
Uses Starlette with the MCP HTTP app for maximum compatibility.
"""

import logging

import uvicorn
from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route, Mount

from .shell.config import ServiceConfig
from .shell.mcp_server import mcp, get_config, get_store


logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


# ==================== Route Handlers ====================


async def health_check(request: Request) -> JSONResponse:
    """Health check endpoint for Cloud Run."""
    return JSONResponse({"status": "healthy", "service": "yahealthy-engine"})


async def readiness_check(request: Request) -> JSONResponse:
    """Report whether the storage backend answers."""
    store = get_store()
    if not store.ping():
        logger.warning("Readiness check failed: %s backend unavailable", store.backend)
        return JSONResponse(
            {"status": "unavailable", "storage": store.backend},
            status_code=503,
        )
    return JSONResponse({"status": "ready", "storage": store.backend})


# ==================== Create ASGI App ====================


def create_app(config: ServiceConfig | None = None) -> Starlette:
    """Create the Starlette application with MCP at root.

    The MCP streamable_http_app() handles /mcp/ internally when mounted at root.
    We use its lifespan context to ensure proper initialization.
    """
    config = config or get_config()

    # Get the MCP ASGI app
    mcp_app = mcp.streamable_http_app()

    # Define routes - custom routes first, then MCP app at root
    routes = [
        Route("/health", health_check, methods=["GET"]),
        Route("/ready", readiness_check, methods=["GET"]),
        # Mount MCP app at root - it handles /mcp/ path internally
        Mount("/", app=mcp_app),
    ]

    return Starlette(
        routes=routes,
        middleware=[
            Middleware(
                CORSMiddleware,
                allow_origins=config.allowed_origins,
                allow_methods=["GET", "POST", "OPTIONS"],
                allow_headers=["*"],
            ),
        ],
        lifespan=mcp_app.router.lifespan_context,
    )


# Create app at module level for Cloud Run
app = create_app()


def main() -> None:
    """Run the server."""
    config = get_config()

    logger.info("Starting YAHEALTHY engine on %s:%d", config.host, config.port)

    uvicorn.run(app, host=config.host, port=config.port)


if __name__ == "__main__":
    main()
