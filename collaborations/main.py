import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from collaborations.config import Settings, get_settings
from collaborations.routers import collaborations, ping
from collaborations.services.collaboration.actions import CollaborationActions
from collaborations.services.opensearch.client import CollaborationIndex
from collaborations.services.opensearch.factory import make_collaboration_index
from collaborations.services.security.user_access import UserAccessManager


# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    collaboration_index: Optional[CollaborationIndex] = None,
) -> FastAPI:
    """Build the application; the index manager is created once and shared by every request."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting collaborations API...")

        app_settings = settings or get_settings()
        logging.getLogger().setLevel(app_settings.log_level)
        app.state.settings = app_settings

        index = collaboration_index or make_collaboration_index(app_settings)
        app.state.collaboration_index = index
        app.state.collaboration_actions = CollaborationActions(
            index=index,
            access_manager=UserAccessManager(default_tenant=app_settings.security.default_tenant),
        )

        # The index itself is created lazily on the first write
        if index.health_check():
            logger.info("OpenSearch connected successfully")
        else:
            logger.warning("OpenSearch connection failed")

        logger.info("API ready")
        yield
        logger.info("API shutdown complete")

    app = FastAPI(
        title="Observability Collaborations API",
        description="Threaded comments attached to notebook pages, paragraphs and visualizations",
        version=(settings.app_version if settings else "0.1.0"),
        lifespan=lifespan,
    )

    # Include routers
    app.include_router(ping.router)
    app.include_router(collaborations.router)
    return app


app = create_app()


def main() -> None:
    import uvicorn

    uvicorn.run("collaborations.main:app", port=8000, host="0.0.0.0")


if __name__ == "__main__":
    main()
