# src/utils/api/request_builder.py
# Created: 2026-10-19 09:18:27
# Author: Genterr

from typing import Any, Iterable, List, Mapping, Optional, Tuple, Union
from dataclasses import dataclass, field
from urllib.parse import quote

from src.core.exceptions import InvalidArgumentError
from src.core.utils import validate_string
from .serializer import Encoding
from .transport import RequestMethod

QueryParams = Union[Mapping[str, Any], Iterable[Tuple[str, Any]]]

@dataclass
class RequestDescriptor:
    """Everything needed to issue one API call"""
    method: RequestMethod
    resource_path: str
    resource_id: Optional[str] = None
    query: List[Tuple[str, str]] = field(default_factory=list)
    body: Any = None
    encoding: Encoding = Encoding.JSON

def encode_query(params: Optional[QueryParams]) -> str:
    """
    Build a query string from ordered parameters

    Values are percent-encoded with the RFC 3986 unreserved set left
    as-is; keys keep the caller's order. Returns "" for no parameters.
    """
    if not params:
        return ""
    items = params.items() if isinstance(params, Mapping) else params
    return '&'.join(f"{key}={quote(str(value), safe='')}" for key, value in items)

class RequestBuilder:
    """Composes account-relative request paths"""

    def __init__(self, account_path: str):
        account_path = validate_string(account_path, "account_path")
        self.account_path = '/' + account_path.strip('/')

    def resource_path(self, resource_path: str, resource_id: Optional[str] = None) -> str:
        """Return <account_path>/<resource_path>[/<resource_id>]"""
        if resource_path is None or not resource_path.strip('/'):
            raise InvalidArgumentError("resource_path is required")
        path = f"{self.account_path}/{resource_path.strip('/')}"
        if resource_id is not None:
            if not resource_id:
                raise InvalidArgumentError("resource_id must not be empty")
            if '/' in resource_id or resource_id in ('.', '..'):
                raise InvalidArgumentError(f"resource_id must be a single path segment: {resource_id!r}")
            # ?, # and % stay inside the segment
            path = f"{path}/{quote(resource_id, safe='')}"
        return path

    def build_path(self, descriptor: RequestDescriptor) -> str:
        """Compose the final path and query string for a descriptor"""
        path = self.resource_path(descriptor.resource_path, descriptor.resource_id)
        query = encode_query(descriptor.query)
        return f"{path}?{query}" if query else path
