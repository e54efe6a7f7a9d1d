import logging
from typing import Optional

from opensearchpy import OpenSearch

from collaborations.config import Settings, get_settings

from .client import CollaborationIndex

logger = logging.getLogger(__name__)


def make_opensearch_client(settings: Optional[Settings] = None) -> OpenSearch:
    """Create the low-level OpenSearch client."""
    if settings is None:
        settings = get_settings()
    opensearch = settings.opensearch
    http_auth = (opensearch.username, opensearch.password) if opensearch.username else None

    logger.info(f"OpenSearch client initialized with host: {opensearch.host}")
    return OpenSearch(
        hosts=[opensearch.host],
        http_auth=http_auth,
        http_compress=True,
        use_ssl=opensearch.use_ssl,
        verify_certs=opensearch.verify_certs,
        ssl_assert_hostname=False,
        ssl_show_warn=False,
        timeout=opensearch.operation_timeout_seconds,
    )


def make_collaboration_index(
    settings: Optional[Settings] = None, client: Optional[OpenSearch] = None
) -> CollaborationIndex:
    """Create the index manager. Build one per process and share it."""
    if settings is None:
        settings = get_settings()
    if client is None:
        client = make_opensearch_client(settings)
    return CollaborationIndex(client=client, settings=settings)
