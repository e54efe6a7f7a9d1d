"""
Collaboration payload: a comment thread anchored to a page, paragraph and line.

Stored under the ``collaboration`` key of a collaboration document::

    collaboration:
      type: TEXT | VIZ
      pageId: notebook id
      paragraphId: notebook paragraph id
      lineId: unique identifier for a line
      tags: "prod"
      resolved: true | false (defaults to false)
"""
import logging
from enum import Enum
from typing import Any, Dict, Mapping, Optional

from collaborations.exceptions import ParseError
from collaborations.models.base import BaseObjectData
from collaborations.models.fields import (
    LINE_ID_FIELD,
    PAGE_ID_FIELD,
    PARAGRAPH_ID_FIELD,
    RESOLVED_FIELD,
    TAGS_FIELD,
    TYPE_FIELD,
)
from collaborations.utils.stream import StreamInput, StreamOutput

logger = logging.getLogger(__name__)


class CollaborationDataType(str, Enum):
    TEXT = "TEXT"
    VIZ = "VIZ"


def _text(field_name: str, value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, (dict, list)):
        raise ParseError(f"{field_name} must be a scalar value")
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _boolean(field_name: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.lower() in ("true", "false"):
        return value.lower() == "true"
    raise ParseError(f"{field_name} must be a boolean")


class Collaboration(BaseObjectData):
    type: CollaborationDataType = CollaborationDataType.TEXT
    page_id: Optional[str] = None
    paragraph_id: Optional[str] = None
    line_id: Optional[str] = None
    # Single tag string; a tag list is not supported yet
    tags: Optional[str] = None
    resolved: bool = False

    @classmethod
    def parse(cls, data: Any) -> "Collaboration":
        if not isinstance(data, Mapping):
            raise ParseError("collaboration must be an object")

        fields: Dict[str, Any] = {}
        for field_name, value in data.items():
            if field_name == TYPE_FIELD:
                # Only text collaborations exist so far
                fields["type"] = CollaborationDataType.TEXT
            elif field_name == PAGE_ID_FIELD:
                fields["page_id"] = _text(field_name, value)
            elif field_name == PARAGRAPH_ID_FIELD:
                fields["paragraph_id"] = _text(field_name, value)
            elif field_name == LINE_ID_FIELD:
                fields["line_id"] = _text(field_name, value)
            elif field_name == TAGS_FIELD:
                fields["tags"] = _text(field_name, value)
            elif field_name == RESOLVED_FIELD:
                fields["resolved"] = _boolean(field_name, value)
            else:
                logger.info(f"Collaboration skipping unknown field {field_name}")

        collaboration = cls(**fields)
        logger.debug(f"Parsed collaboration: {collaboration!r}")
        return collaboration

    @classmethod
    def read_from(cls, stream: StreamInput) -> "Collaboration":
        return cls(
            type=stream.read_enum(CollaborationDataType),
            page_id=stream.read_optional_string(),
            paragraph_id=stream.read_optional_string(),
            line_id=stream.read_optional_string(),
            tags=stream.read_optional_string(),
            resolved=stream.read_boolean(),
        )

    def write_to(self, output: StreamOutput) -> None:
        output.write_enum(self.type)
        output.write_optional_string(self.page_id)
        output.write_optional_string(self.paragraph_id)
        output.write_optional_string(self.line_id)
        output.write_optional_string(self.tags)
        output.write_boolean(self.resolved)

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {TYPE_FIELD: self.type.value}
        if self.page_id is not None:
            result[PAGE_ID_FIELD] = self.page_id
        if self.paragraph_id is not None:
            result[PARAGRAPH_ID_FIELD] = self.paragraph_id
        if self.line_id is not None:
            result[LINE_ID_FIELD] = self.line_id
        if self.tags is not None:
            result[TAGS_FIELD] = self.tags
        result[RESOLVED_FIELD] = self.resolved
        return result
