"""HTTP-level tests for collaboration routes."""

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient
from opensearchpy.exceptions import ConnectionTimeout, RequestError

from collaborations.main import create_app
from collaborations.models.user import User
from collaborations.services.opensearch.client import CollaborationIndex

from conftest import ADMIN_USER_INFO, USER_HEADER

URL = "/_plugins/_observability/collaborations"
BODY = {"collaboration": {"pageId": "p1", "paragraphId": "par1", "lineId": "l1", "tags": "prod", "resolved": False}}
AUTH = {USER_HEADER: ADMIN_USER_INFO}


def app_with_client(settings, client) -> TestClient:
    return TestClient(create_app(settings=settings, collaboration_index=CollaborationIndex(client, settings)))


class TestCreateRoute:
    def test_create_returns_collaboration_object_id(self, client) -> None:
        response = client.post(URL, json=BODY, headers=AUTH)

        assert response.status_code == 200
        assert response.json()["collaborationObjectId"]

    def test_created_document_reads_back(self, client) -> None:
        response = client.post(URL, json=BODY, headers=AUTH)
        doc_id = response.json()["collaborationObjectId"]

        actions = client.app.state.collaboration_actions
        doc = actions.get(doc_id, User.parse(ADMIN_USER_INFO))

        assert doc.object_data.resolved is False
        assert doc.tenant == ""
        assert doc.created_time == doc.updated_time

    def test_explicit_id(self, client) -> None:
        response = client.post(URL, json={"collaborationId": "thread-1", **BODY}, headers=AUTH)

        assert response.json() == {"collaborationObjectId": "thread-1"}

    def test_duplicate_explicit_id_is_server_error(self, client) -> None:
        client.post(URL, json={"collaborationId": "thread-1", **BODY}, headers=AUTH)

        response = client.post(URL, json={"collaborationId": "thread-1", **BODY}, headers=AUTH)

        assert response.status_code == 500
        assert response.json() == {"detail": "CollaborationObject Creation failed"}

    def test_unknown_field_ignored(self, client) -> None:
        response = client.post(URL, json={"color": "blue", **BODY}, headers=AUTH)

        assert response.status_code == 200

    def test_missing_identity_is_unauthorized(self, client, fake_client) -> None:
        response = client.post(URL, json=BODY)

        assert response.status_code == 401
        assert "create" not in fake_client.call_names()
        assert "index" not in fake_client.call_names()

    def test_malformed_identity_is_unauthorized(self, client) -> None:
        response = client.post(URL, json=BODY, headers={USER_HEADER: "|admin_be|all_access"})

        assert response.status_code == 401

    def test_missing_payload_is_bad_request(self, client) -> None:
        response = client.post(URL, json={"collaborationId": "x"}, headers=AUTH)

        assert response.status_code == 400
        assert response.json() == {"detail": "type field absent"}

    def test_bad_body_checked_before_identity(self, client) -> None:
        response = client.post(URL, json={"collaborationId": "x"})

        assert response.status_code == 400

    @pytest.mark.parametrize("content", [b"{not json", b"", b"[1, 2]", b'"text"'])
    def test_invalid_body_is_bad_request(self, client, content) -> None:
        response = client.post(URL, content=content, headers={**AUTH, "Content-Type": "application/json"})

        assert response.status_code == 400

    def test_store_timeout_is_server_error(self, settings) -> None:
        store = MagicMock()
        store.cluster.health.return_value = {"status": "green"}
        store.indices.exists.side_effect = ConnectionTimeout("TIMEOUT", "Read timed out", TimeoutError())

        with app_with_client(settings, store) as test_client:
            response = test_client.post(URL, json=BODY, headers=AUTH)

        assert response.status_code == 500
        assert "timed out" in response.json()["detail"]

    def test_store_failure_is_server_error(self, settings) -> None:
        store = MagicMock()
        store.cluster.health.return_value = {"status": "green"}
        store.indices.exists.return_value = False
        store.indices.create.side_effect = RequestError(400, "mapper_parsing_exception", {})

        with app_with_client(settings, store) as test_client:
            response = test_client.post(URL, json=BODY, headers=AUTH)

        assert response.status_code == 500


class TestNotAllowedRoutes:
    @pytest.mark.parametrize(
        "method, path",
        [
            ("GET", URL),
            ("PUT", URL),
            ("DELETE", URL),
            ("GET", f"{URL}/thread-1"),
            ("PUT", f"{URL}/thread-1"),
            ("DELETE", f"{URL}/thread-1"),
            ("POST", f"{URL}/thread-1/comment"),
            ("GET", f"{URL}/thread-1/comment"),
            ("GET", f"{URL}/thread-1/comment/c-1"),
            ("PUT", f"{URL}/thread-1/comment/c-1"),
            ("DELETE", f"{URL}/thread-1/comment/c-1"),
        ],
    )
    def test_method_not_allowed(self, client, fake_client, method, path) -> None:
        response = client.request(method, path, headers=AUTH)

        assert response.status_code == 405
        assert fake_client.calls == []

    def test_message_names_method(self, client) -> None:
        response = client.get(URL, headers=AUTH)

        assert response.json() == {"detail": "GET is not allowed"}


class TestPing:
    def test_healthy(self, client) -> None:
        assert client.get("/ping").json() == {"status": "ok", "opensearch": "healthy"}

    def test_unhealthy(self, client, fake_client) -> None:
        fake_client.cluster.status = "red"

        assert client.get("/ping").json() == {"status": "ok", "opensearch": "unhealthy"}
