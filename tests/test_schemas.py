"""Tests for create request/response models."""

import pytest
from pydantic import ValidationError

from collaborations.exceptions import MissingField, ParseError
from collaborations.models.collaboration import Collaboration
from collaborations.models.object_type import CollaborationObjectType
from collaborations.schemas.collaboration import (
    CreateCollaborationObjectRequest,
    CreateCollaborationObjectResponse,
)
from collaborations.utils.stream import StreamInput, StreamOutput

BODY = {"collaboration": {"pageId": "p1", "paragraphId": "par1", "lineId": "l1", "tags": "prod", "resolved": False}}


class TestCreateCollaborationObjectRequest:
    def test_parse_without_id(self) -> None:
        request = CreateCollaborationObjectRequest.parse(BODY)

        assert request.collaboration_id is None
        assert request.type is CollaborationObjectType.COLLABORATION
        assert request.object_data == Collaboration(
            page_id="p1", paragraph_id="par1", line_id="l1", tags="prod", resolved=False
        )

    def test_parse_with_id(self) -> None:
        request = CreateCollaborationObjectRequest.parse({"collaborationId": "my-id", **BODY})

        assert request.collaboration_id == "my-id"

    def test_use_id_when_body_has_none(self) -> None:
        assert CreateCollaborationObjectRequest.parse(BODY, use_id="path-id").collaboration_id == "path-id"

    def test_missing_payload(self) -> None:
        with pytest.raises(MissingField) as exc_info:
            CreateCollaborationObjectRequest.parse({"collaborationId": "my-id"})
        assert exc_info.value.field_name == "type"

    def test_payload_required_at_construction(self) -> None:
        with pytest.raises(ValidationError):
            CreateCollaborationObjectRequest(type=CollaborationObjectType.COLLABORATION, object_data=None)

    def test_unknown_field_ignored(self) -> None:
        request = CreateCollaborationObjectRequest.parse({"comment": "hello", **BODY})

        assert request == CreateCollaborationObjectRequest.parse(BODY)

    @pytest.mark.parametrize("body", [[BODY], "collaboration", None, 3])
    def test_non_object_body(self, body) -> None:
        with pytest.raises(ParseError):
            CreateCollaborationObjectRequest.parse(body)

    def test_to_dict_is_symmetric_with_parse(self) -> None:
        request = CreateCollaborationObjectRequest.parse({"collaborationId": "my-id", **BODY})

        assert request.to_dict() == {
            "collaborationId": "my-id",
            "collaboration": {
                "type": "TEXT",
                "pageId": "p1",
                "paragraphId": "par1",
                "lineId": "l1",
                "tags": "prod",
                "resolved": False,
            },
        }
        assert CreateCollaborationObjectRequest.parse(request.to_dict()) == request

    def test_to_dict_omits_absent_id(self) -> None:
        assert "collaborationId" not in CreateCollaborationObjectRequest.parse(BODY).to_dict()

    @pytest.mark.parametrize("collaboration_id", [None, "my-id"])
    def test_binary_round_trip(self, collaboration_id) -> None:
        request = CreateCollaborationObjectRequest.parse(BODY, use_id=collaboration_id)
        output = StreamOutput()
        request.write_to(output)

        stream = StreamInput(output.getvalue())
        assert CreateCollaborationObjectRequest.read_from(stream) == request
        assert stream.at_end()


class TestCreateCollaborationObjectResponse:
    def test_to_dict(self) -> None:
        response = CreateCollaborationObjectResponse(collaboration_object_id="abc")

        assert response.to_dict() == {"collaborationObjectId": "abc"}

    def test_binary_round_trip(self) -> None:
        response = CreateCollaborationObjectResponse(collaboration_object_id="abc")
        output = StreamOutput()
        response.write_to(output)

        assert CreateCollaborationObjectResponse.read_from(StreamInput(output.getvalue())) == response
