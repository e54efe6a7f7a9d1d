from .client import CollaborationIndex, IndexState
from .factory import make_collaboration_index, make_opensearch_client

__all__ = ["CollaborationIndex", "IndexState", "make_collaboration_index", "make_opensearch_client"]
