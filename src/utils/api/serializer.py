# src/utils/api/serializer.py
# Created: 2026-10-19 09:31:18
# Author: Genterr

from typing import Any, Dict, List, Mapping, Optional, Tuple, Type, TypeVar, get_origin
from dataclasses import dataclass, fields, is_dataclass
from datetime import datetime
from enum import Enum
import json

from src.core.exceptions import DecodeError
from src.core.utils import format_datetime, to_camel_case
from .type_info import field_types, init_fields, is_dataclass_type, list_item_type, unwrap_optional
from .xml_codec import XmlCodec, scalar_to_text

T = TypeVar('T')

class Encoding(Enum):
    """Body encodings understood by the API"""
    JSON = "application/json"
    XML = "application/xml"

    @property
    def mime_type(self) -> str:
        return self.value

    @property
    def content_type(self) -> str:
        return f"{self.value}; charset=utf-8"

    def matches(self, content_type: Optional[str]) -> bool:
        """Check a response Content-Type against this encoding, ignoring parameters"""
        if not content_type:
            return False
        media_type = content_type.split(';', 1)[0].strip().lower()
        return media_type in _MEDIA_TYPES[self]

_MEDIA_TYPES = {
    Encoding.JSON: frozenset({"application/json"}),
    Encoding.XML: frozenset({"application/xml", "text/xml"}),
}

@dataclass(frozen=True)
class SerializerSettings:
    """Per-client serialization options"""
    omit_none: bool = True
    allow_integer_enums: bool = False
    xml_declaration: bool = True

def json_name(f) -> str:
    """Wire name of a dataclass field in JSON mode"""
    return f.metadata.get("json") or to_camel_case(f.name)

class Serializer:
    """
    Converts dataclass DTOs to and from request/response bodies.

    JSON property names are camelCase and enums travel as their string
    values. XML mapping is declared per DTO (see xml_codec).
    """

    def __init__(self, settings: Optional[SerializerSettings] = None):
        self.settings = settings or SerializerSettings()
        self._xml = XmlCodec(xml_declaration=self.settings.xml_declaration)

    def encode(self, value: Any, encoding: Encoding) -> bytes:
        """Encode a payload; None encodes to an empty body"""
        if value is None:
            return b""
        if encoding is Encoding.XML:
            return self._xml.encode(value)
        return json.dumps(self.to_wire(value), separators=(',', ':')).encode("utf-8")

    def decode(self, data: Any, target_type: Type[T], encoding: Encoding) -> Optional[T]:
        """Decode a body; an empty body decodes to None"""
        if data is None or not data.strip():
            return None
        if encoding is Encoding.XML:
            # raw bytes so the parser honours the declared document encoding
            return self._xml.decode(data, target_type)
        if isinstance(data, (bytes, bytearray)):
            try:
                data = bytes(data).decode("utf-8")
            except UnicodeDecodeError as e:
                raise DecodeError(f"Response body is not valid UTF-8: {str(e)}")
        try:
            parsed = json.loads(data)
        except ValueError as e:
            raise DecodeError(f"Malformed JSON: {str(e)}")
        return self.from_wire(parsed, target_type)

    def to_query(self, query: Any) -> List[Tuple[str, str]]:
        """Flatten a query DTO or mapping into ordered (name, text) pairs"""
        if query is None:
            return []
        if is_dataclass(query) and not isinstance(query, type):
            items = [(json_name(f), getattr(query, f.name)) for f in fields(query)]
        elif isinstance(query, Mapping):
            items = list(query.items())
        else:
            items = list(query)
        return [(str(key), scalar_to_text(value)) for key, value in items if value is not None]

    def to_wire(self, value: Any) -> Any:
        """Convert a value to JSON-compatible primitives"""
        if value is None or isinstance(value, (str, int, float, bool)):
            return value
        if isinstance(value, Enum):
            return value.value
        if isinstance(value, datetime):
            return format_datetime(value)
        if is_dataclass(value) and not isinstance(value, type):
            result: Dict[str, Any] = {}
            for f in fields(value):
                item = getattr(value, f.name)
                if item is None and self.settings.omit_none:
                    continue
                result[json_name(f)] = self.to_wire(item)
            return result
        if isinstance(value, Mapping):
            return {str(k): self.to_wire(v) for k, v in value.items()}
        if isinstance(value, (list, tuple, set, frozenset)):
            return [self.to_wire(item) for item in value]
        raise TypeError(f"Cannot serialize value of type {type(value).__name__}")

    def from_wire(self, value: Any, tp: Any, path: str = "$") -> Any:
        """Convert JSON primitives into an instance of tp"""
        tp, optional = unwrap_optional(tp)
        if value is None:
            if optional or tp is Any:
                return None
            raise DecodeError(f"{path}: null is not allowed")
        if tp is Any:
            return value

        item_type = list_item_type(tp)
        if item_type is not None:
            if not isinstance(value, list):
                raise DecodeError(f"{path}: expected array, got {type(value).__name__}")
            return [self.from_wire(item, item_type, f"{path}[{i}]") for i, item in enumerate(value)]

        if is_dataclass_type(tp):
            if not isinstance(value, dict):
                raise DecodeError(f"{path}: expected object, got {type(value).__name__}")
            return self._dataclass_from_wire(value, tp, path)

        if isinstance(tp, type) and issubclass(tp, Enum):
            return self.enum_from_wire(value, tp, path)

        return self._scalar_from_wire(value, tp, path)

    def enum_from_wire(self, value: Any, tp: Type[Enum], path: str) -> Enum:
        if isinstance(value, int) and not isinstance(value, bool) and self.settings.allow_integer_enums:
            members = list(tp)
            if 0 <= value < len(members):
                return members[value]
        if not isinstance(value, str):
            raise DecodeError(f"{path}: {tp.__name__} must be encoded as a string, got {value!r}")
        try:
            return tp(value)
        except ValueError:
            raise DecodeError(f"{path}: {value!r} is not a valid {tp.__name__}")

    def _dataclass_from_wire(self, value: Dict[str, Any], tp: type, path: str) -> Any:
        hints = field_types(tp)
        kwargs: Dict[str, Any] = {}
        for f in init_fields(tp):
            name = json_name(f)
            if name in value:
                kwargs[f.name] = self.from_wire(value[name], hints[f.name], f"{path}.{name}")
        try:
            return tp(**kwargs)
        except TypeError as e:
            raise DecodeError(f"{path}: cannot build {tp.__name__}: {str(e)}")

    def _scalar_from_wire(self, value: Any, tp: Any, path: str) -> Any:
        if tp is bool:
            if not isinstance(value, bool):
                raise DecodeError(f"{path}: expected boolean, got {value!r}")
            return value
        if tp is int:
            if isinstance(value, bool) or not isinstance(value, int):
                raise DecodeError(f"{path}: expected integer, got {value!r}")
            return value
        if tp is float:
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise DecodeError(f"{path}: expected number, got {value!r}")
            return float(value)
        if tp is str:
            if not isinstance(value, str):
                raise DecodeError(f"{path}: expected string, got {value!r}")
            return value
        if tp is datetime:
            if not isinstance(value, str):
                raise DecodeError(f"{path}: expected timestamp string, got {value!r}")
            try:
                return datetime.fromisoformat(value)
            except ValueError:
                raise DecodeError(f"{path}: invalid timestamp {value!r}")
        if tp is dict or get_origin(tp) is dict:
            if not isinstance(value, dict):
                raise DecodeError(f"{path}: expected object, got {type(value).__name__}")
            return value
        return value
