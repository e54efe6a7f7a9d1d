"""Shared fixtures: an in-memory OpenSearch stand-in and a wired application."""

import copy
import threading
import uuid
from typing import Any, Dict, List, Optional, Tuple

import pytest
from fastapi.testclient import TestClient
from opensearchpy.exceptions import ConflictError, NotFoundError, RequestError

from collaborations.config import OpenSearchSettings, SecuritySettings, Settings
from collaborations.main import create_app
from collaborations.services.collaboration.actions import CollaborationActions
from collaborations.services.opensearch.client import CollaborationIndex
from collaborations.services.security.user_access import UserAccessManager

USER_HEADER = "X-Security-User-Info"
ADMIN_USER_INFO = "admin|admin_be|all_access,own_index"


class FakeIndices:
    def __init__(self, store: "FakeOpenSearch"):
        self._store = store
        self.exists_barrier: Optional[threading.Barrier] = None

    def exists(self, index: str, **kwargs: Any) -> bool:
        self._store.calls.append(("exists", index, kwargs))
        exists = index in self._store.index_table
        if self.exists_barrier is not None:
            self.exists_barrier.wait(timeout=5)
        return exists

    def create(self, index: str, body: Optional[Dict[str, Any]] = None, **kwargs: Any) -> Dict[str, Any]:
        self._store.calls.append(("create", index, kwargs))
        with self._store.lock:
            if index in self._store.index_table:
                raise RequestError(
                    400,
                    "resource_already_exists_exception",
                    {"error": {"type": "resource_already_exists_exception"}},
                )
            self._store.index_table[index] = {"body": copy.deepcopy(body), "docs": {}}
            self._store.created_indices.append(index)
        return {"acknowledged": True, "shards_acknowledged": True, "index": index}

    def put_mapping(self, index: str, body: Optional[Dict[str, Any]] = None, **kwargs: Any) -> Dict[str, Any]:
        self._store.calls.append(("put_mapping", index, kwargs))
        if index not in self._store.index_table:
            raise NotFoundError(404, "index_not_found_exception", {"error": {"type": "index_not_found_exception"}})
        self._store.index_table[index]["mapping"] = copy.deepcopy(body)
        return {"acknowledged": True}


class FakeCluster:
    def __init__(self, status: str = "green"):
        self.status = status

    def health(self, **kwargs: Any) -> Dict[str, Any]:
        return {"status": self.status}


class FakeOpenSearch:
    """Just enough of the opensearch-py client for the collaborations index."""

    def __init__(self):
        self.lock = threading.Lock()
        self.index_table: Dict[str, Dict[str, Any]] = {}
        self.calls: List[Tuple[str, str, Dict[str, Any]]] = []
        self.created_indices: List[str] = []
        self.indices = FakeIndices(self)
        self.cluster = FakeCluster()

    def index(
        self,
        index: str,
        body: Dict[str, Any],
        id: Optional[str] = None,
        op_type: Optional[str] = None,
        **kwargs: Any,
    ) -> Dict[str, Any]:
        self.calls.append(("index", index, kwargs))
        with self.lock:
            # OpenSearch auto-creates a missing index on write
            docs = self.index_table.setdefault(index, {"body": None, "docs": {}})["docs"]
            doc_id = id or uuid.uuid4().hex
            if op_type == "create" and doc_id in docs:
                raise ConflictError(
                    409,
                    "version_conflict_engine_exception",
                    {"error": {"type": "version_conflict_engine_exception"}},
                )
            docs[doc_id] = copy.deepcopy(body)
        return {"_index": index, "_id": doc_id, "_version": 1, "result": "created"}

    def get(self, index: str, id: str, **kwargs: Any) -> Dict[str, Any]:
        self.calls.append(("get", index, kwargs))
        if index not in self.index_table:
            raise NotFoundError(404, "index_not_found_exception", {"error": {"type": "index_not_found_exception"}})
        docs = self.index_table[index]["docs"]
        if id not in docs:
            raise NotFoundError(404, "not_found", {"_index": index, "_id": id, "found": False})
        return {"_index": index, "_id": id, "found": True, "_source": copy.deepcopy(docs[id])}

    def docs(self, index: str) -> Dict[str, Dict[str, Any]]:
        return self.index_table.get(index, {}).get("docs", {})

    def call_names(self) -> List[str]:
        return [name for name, _, _ in self.calls]


@pytest.fixture
def settings() -> Settings:
    return Settings(
        opensearch=OpenSearchSettings(operation_timeout_ms=5000),
        security=SecuritySettings(),
    )


@pytest.fixture
def fake_client() -> FakeOpenSearch:
    return FakeOpenSearch()


@pytest.fixture
def collaboration_index(fake_client: FakeOpenSearch, settings: Settings) -> CollaborationIndex:
    return CollaborationIndex(client=fake_client, settings=settings)


@pytest.fixture
def actions(collaboration_index: CollaborationIndex) -> CollaborationActions:
    return CollaborationActions(index=collaboration_index, access_manager=UserAccessManager())


@pytest.fixture
def client(settings: Settings, collaboration_index: CollaborationIndex):
    app = create_app(settings=settings, collaboration_index=collaboration_index)
    with TestClient(app) as test_client:
        yield test_client
