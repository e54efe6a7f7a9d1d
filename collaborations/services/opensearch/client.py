import logging
from contextlib import contextmanager
from enum import Enum
from typing import Iterator, Optional

from opensearchpy import OpenSearch
from opensearchpy.exceptions import ConflictError, ConnectionTimeout, NotFoundError, RequestError

from collaborations.config import Settings, get_settings
from collaborations.exceptions import IndexProvisioningError, OperationTimeout
from collaborations.models.collaboration_object_doc import CollaborationObjectDoc

from .index_config import COLLABORATIONS_INDEX, COLLABORATIONS_MAPPING, build_create_index_body

logger = logging.getLogger(__name__)

RESOURCE_ALREADY_EXISTS = "resource_already_exists_exception"
INDEX_NOT_FOUND = "index_not_found_exception"


class IndexState(str, Enum):
    UNKNOWN = "unknown"
    EXISTS_CURRENT = "exists_current"


def _is_already_exists(exc: RequestError) -> bool:
    return exc.error == RESOURCE_ALREADY_EXISTS or RESOURCE_ALREADY_EXISTS in str(exc.info)


class CollaborationIndex:
    """
    Owns the collaborations system index.

    The index is created lazily on the first write. Once created, or once its mapping
    has been pushed, the mapping is considered current for the rest of the process
    lifetime and is never checked again.
    """

    def __init__(self, client: OpenSearch, settings: Optional[Settings] = None, index_name: Optional[str] = None):
        """Initialize with an OpenSearch client shared by all requests."""
        self.client = client
        self.settings = settings or get_settings()
        self.index_name = index_name or self.settings.opensearch.index_name or COLLABORATIONS_INDEX
        self.timeout = self.settings.opensearch.operation_timeout_seconds
        self.mappings_updated = False
        logger.info(f"Collaboration index manager initialized for index: {self.index_name}")

    @contextmanager
    def _store_call(self, operation: str) -> Iterator[None]:
        try:
            yield
        except ConnectionTimeout as exc:
            raise OperationTimeout(
                f"{operation} on {self.index_name} timed out after "
                f"{self.settings.opensearch.operation_timeout_ms} ms"
            ) from exc

    @property
    def state(self) -> IndexState:
        """Derived from the one-shot mappings flag, the only state shared across request threads."""
        return IndexState.EXISTS_CURRENT if self.mappings_updated else IndexState.UNKNOWN

    # ============================================================
    # INDEX MANAGEMENT
    # ============================================================

    def index_exists(self, index: Optional[str] = None) -> bool:
        with self._store_call("exists"):
            return bool(self.client.indices.exists(index=index or self.index_name, request_timeout=self.timeout))

    def ensure_index(self) -> None:
        """Create the index, or push the mapping once per process, before a write."""
        if not self.index_exists():
            self._create_index()
        elif not self.mappings_updated:
            self._update_mappings()

    def _create_index(self) -> None:
        try:
            with self._store_call("create index"):
                response = self.client.indices.create(
                    index=self.index_name,
                    body=build_create_index_body(),
                    request_timeout=self.timeout,
                )
        except RequestError as exc:
            if not _is_already_exists(exc):
                raise
            logger.info(f"Index {self.index_name} was created concurrently")
        else:
            if not response.get("acknowledged"):
                raise IndexProvisioningError(f"Index {self.index_name} creation not acknowledged")
            logger.info(f"Index {self.index_name} creation acknowledged")
        self.mappings_updated = True

    def _update_mappings(self) -> None:
        try:
            with self._store_call("put mapping"):
                response = self.client.indices.put_mapping(
                    index=self.index_name,
                    body=COLLABORATIONS_MAPPING,
                    request_timeout=self.timeout,
                )
        except NotFoundError as exc:
            logger.error(f"Index {self.index_name} not found while updating mapping: {exc}")
            return

        if not response.get("acknowledged"):
            raise IndexProvisioningError(f"Index {self.index_name} update mapping not acknowledged")
        logger.info(f"Index {self.index_name} update mapping acknowledged")
        self.mappings_updated = True

    # ============================================================
    # DOCUMENTS
    # ============================================================

    def create_collaboration_object(self, doc: CollaborationObjectDoc, id: Optional[str] = None) -> Optional[str]:
        """
        Create a collaboration document. Never overwrites an existing document.

        Args:
            doc: Document to store
            id: Explicit document id, store-assigned when omitted

        Returns:
            The document id if it was created, otherwise None
        """
        self.ensure_index()
        body = doc.to_dict()
        try:
            with self._store_call("index"):
                response = self.client.index(
                    index=self.index_name,
                    body=body,
                    id=id,
                    op_type="create",
                    request_timeout=self.timeout,
                )
        except ConflictError as exc:
            logger.warning(f"create_collaboration_object - document {id} already exists: {exc}")
            return None

        if response.get("result") != "created":
            logger.warning(f"create_collaboration_object - response:{response}")
            return None
        return response.get("_id")

    def get_collaboration_object(self, id: str) -> Optional[CollaborationObjectDoc]:
        """Fetch a single document by id, None if the index or document is missing."""
        try:
            with self._store_call("get"):
                response = self.client.get(index=self.index_name, id=id, request_timeout=self.timeout)
        except NotFoundError:
            logger.info(f"Collaboration object {id} not found")
            return None

        if not response.get("found"):
            return None
        return CollaborationObjectDoc.parse(response["_source"], use_id=response["_id"])

    # ============================================================
    # HEALTH
    # ============================================================

    def health_check(self) -> bool:
        """Check if OpenSearch is healthy and accessible."""
        try:
            health = self.client.cluster.health(request_timeout=self.timeout)
            return health["status"] in ["green", "yellow"]
        except Exception as e:
            logger.error(f"Health check failed: {e}")
            return False
