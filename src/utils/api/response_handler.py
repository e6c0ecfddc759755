# src/utils/api/response_handler.py
# Created: 2025-01-29 20:59:38
# Author: Genterr

from typing import Optional, Type, TypeVar
import logging
import re
import yarl

from src.core.exceptions import HttpFailureError, ProtocolError
from .serializer import Encoding, Serializer
from .transport import ResponseEnvelope

T = TypeVar('T')
logger = logging.getLogger(__name__)

def extract_resource_id(location: Optional[str], collection: str) -> Optional[str]:
    """
    Pull the id of a created resource out of a Location header

    The path must end in /<collection>/<id>; query and fragment are ignored.

    Args:
        location: Raw Location header value (absolute or relative URL)
        collection: Resource collection name, e.g. "calls"

    Returns:
        The id segment, or None when the header is absent or does not match
    """
    if not location or not collection:
        return None
    try:
        path = yarl.URL(location.strip()).path
    except ValueError:
        return None
    match = re.search(rf"/{re.escape(collection.strip('/'))}/([^/]+)$", path)
    return match.group(1) if match else None

class ResponseInterpreter:
    """
    Turns response envelopes into typed results.

    This class provides:
    - Status checking
    - Content-negotiated decoding
    - Location header inspection for created resources
    """

    def __init__(self, serializer: Serializer):
        self.serializer = serializer

    def ensure_success(self, envelope: ResponseEnvelope) -> None:
        """Raise HttpFailureError for any non-2xx status"""
        if not envelope.ok:
            raise HttpFailureError(envelope.status, envelope.body)

    def decode(
        self,
        envelope: ResponseEnvelope,
        result_type: Type[T],
        encoding: Encoding = Encoding.JSON
    ) -> Optional[T]:
        """
        Decode a successful response body

        Returns None when the body is empty or its content type does not
        match the expected encoding.
        """
        self.ensure_success(envelope)
        if not encoding.matches(envelope.content_type):
            if envelope.body:
                logger.debug(
                    "Ignoring %d byte body with content type %r (expected %s)",
                    len(envelope.body), envelope.content_type, encoding.mime_type
                )
            return None
        return self.serializer.decode(envelope.body, result_type, encoding)

    def location(self, envelope: ResponseEnvelope) -> Optional[str]:
        """Raw Location header of a successful response"""
        self.ensure_success(envelope)
        return envelope.headers.get("Location")

    def resource_id(self, envelope: ResponseEnvelope, collection: str) -> str:
        """Id of the resource created by this response"""
        resource_id = extract_resource_id(self.location(envelope), collection)
        if resource_id is None:
            raise ProtocolError(
                "missing id in response",
                details={"collection": collection, "location": envelope.headers.get("Location")}
            )
        return resource_id
