from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from agency_hub.config import get_settings
from agency_hub.dependencies.services import get_convex_client_cached

from agency_hub.health import router as health_router
from agency_hub.mcp_server import mcp
from agency_hub.mock_data_view import router as mock_data_router
from agency_hub.tools.clients import router as clients_router
from agency_hub.tools.contact_lists import router as contact_lists_router
from agency_hub.tools.inbox import router as inbox_router
from agency_hub.tools.intake import router as intake_router


def configure_logging() -> None:
    """Ensure application logs use the INFO level by default."""
    root_logger = logging.getLogger()
    if not root_logger.handlers:
        logging.basicConfig(
            level=logging.INFO,
            format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        )
    else:
        root_logger.setLevel(logging.INFO)

# Configure logging as soon as the module is loaded
configure_logging()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manages application startup and shutdown events.
    """
    settings = get_settings()

    settings_snapshot = settings.model_dump(exclude={"convex_deploy_key"})
    logger.info("Application settings on startup: %s", settings_snapshot)

    client = get_convex_client_cached()
    logger.info("Application startup complete (mock data: %s).", client.use_mock_data)

    try:
        async with mcp.session_manager.run():
            yield
    finally:
        logger.info("Closing Convex client connection.")
        await client.close()
        logger.info("Application shutdown complete.")


# --- Application Setup ---

settings = get_settings()
app = FastAPI(
    title=settings.app_name,
    lifespan=lifespan,
    redirect_slashes=False
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- Include Routers and Mounts ---

app.include_router(inbox_router, prefix="/tools/inbox")
app.include_router(clients_router, prefix="/tools/clients")
app.include_router(contact_lists_router, prefix="/tools/contact-lists")
app.include_router(intake_router, prefix="/tools/intake")
app.include_router(health_router)
app.include_router(mock_data_router)

# Mount the MCP Streamable HTTP server at /mcp
app.mount("/mcp", mcp.streamable_http_app())
