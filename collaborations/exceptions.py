class CollaborationException(Exception):
    """Base exception for collaboration service errors."""


class AuthenticationRequired(CollaborationException):
    """Exception raised when the caller identity is absent or malformed."""


class ParseError(CollaborationException):
    """Exception raised when a request or stored document cannot be parsed."""


class MissingField(ParseError):
    """Exception raised when a mandatory field is absent."""

    def __init__(self, field_name: str):
        self.field_name = field_name
        super().__init__(f"{field_name} field absent")


class OpenSearchException(CollaborationException):
    """Base exception for OpenSearch-related errors."""


class IndexProvisioningError(OpenSearchException):
    """Exception raised when index creation or a mapping update is not acknowledged."""


class StoreWriteFailed(OpenSearchException):
    """Exception raised when the store does not report a created document."""


class OperationTimeout(OpenSearchException):
    """Exception raised when a store call exceeds the operation timeout."""
