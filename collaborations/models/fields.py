# Envelope
COLLABORATION_ID_FIELD = "collaborationId"
UPDATED_TIME_FIELD = "lastUpdatedTimeMs"
CREATED_TIME_FIELD = "createdTimeMs"
TENANT_FIELD = "tenant"
ACCESS_LIST_FIELD = "access"

# Responses / path parameters
COLLABORATION_OBJECT_ID_FIELD = "collaborationObjectId"
COMMENT_ID_FIELD = "commentId"

# Collaboration payload
TYPE_FIELD = "type"
PAGE_ID_FIELD = "pageId"
PARAGRAPH_ID_FIELD = "paragraphId"
LINE_ID_FIELD = "lineId"
TAGS_FIELD = "tags"
RESOLVED_FIELD = "resolved"
