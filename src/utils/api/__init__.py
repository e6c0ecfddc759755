# src/utils/api/__init__.py
# Created: 2025-01-29 20:59:38
# Author: Genterr

"""
Request/response pipeline shared by every API resource.
"""

from .cancellation import CancellationToken

from .serializer import (
    Encoding,
    Serializer,
    SerializerSettings
)

from .transport import (
    Connection,
    RequestMethod,
    ResponseEnvelope,
    Transport,
    TransportConfig
)

from .request_builder import (
    RequestBuilder,
    RequestDescriptor,
    encode_query
)

from .response_handler import (
    ResponseInterpreter,
    extract_resource_id
)

__all__ = [
    'CancellationToken',
    'Encoding',
    'Serializer',
    'SerializerSettings',
    'Connection',
    'RequestMethod',
    'ResponseEnvelope',
    'Transport',
    'TransportConfig',
    'RequestBuilder',
    'RequestDescriptor',
    'encode_query',
    'ResponseInterpreter',
    'extract_resource_id'
]
