# src/utils/api/xml_codec.py
# Created: 2026-10-19 10:02:51
# Author: Genterr

"""
Declarative XML mapping for dataclass DTOs.

Each field declares its shape through dataclass metadata:

    xml="attribute"   rendered as an attribute (default name: camelCase)
    xml="element"     rendered as a child element (default; name: PascalCase)
    xml="text"        rendered as the element's text content
    name="..."        explicit attribute/element name
    inline=True       list items are written directly under the parent
                      instead of inside a wrapper element named after the field

The root element of a DTO is named by its ``__xml_name__`` class attribute,
falling back to the class name.
"""

from typing import Any, Dict, Iterator, List, Optional, Type, TypeVar, Union, get_args, get_origin
import types
from dataclasses import fields, is_dataclass
from datetime import datetime
from enum import Enum
from xml.etree import ElementTree
from xml.etree.ElementTree import Element, SubElement

from src.core.exceptions import DecodeError
from src.core.utils import format_datetime, to_camel_case, to_pascal_case
from .type_info import field_types, init_fields, is_dataclass_type, list_item_type, unwrap_optional

T = TypeVar('T')

def scalar_to_text(value: Any) -> str:
    """Text form of a scalar for query strings and XML"""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, datetime):
        return format_datetime(value)
    return str(value)

def element_name(cls: type) -> str:
    return getattr(cls, "__xml_name__", None) or cls.__name__

def xml_kind(f) -> str:
    return f.metadata.get("xml", "element")

def xml_name(f) -> str:
    explicit = f.metadata.get("name")
    if explicit:
        return explicit
    if xml_kind(f) == "attribute":
        return to_camel_case(f.name)
    return to_pascal_case(f.name)

def _local(tag: str) -> str:
    return tag.rsplit('}', 1)[-1]

def _children(elem: Element, name: str) -> Iterator[Element]:
    return (child for child in elem if _local(child.tag) == name)

def _item_classes(item_type: Any) -> Dict[str, type]:
    """Element name -> class for a dataclass item type or a Union of them"""
    candidates = get_args(item_type) if get_origin(item_type) in (Union, types.UnionType) else (item_type,)
    return {element_name(c): c for c in candidates if is_dataclass_type(c)}

class XmlCodec:
    """Encodes and decodes dataclass DTOs as XML documents"""

    def __init__(self, xml_declaration: bool = True):
        self.xml_declaration = xml_declaration

    def encode(self, value: Any) -> bytes:
        if not is_dataclass(value) or isinstance(value, type):
            raise TypeError(f"Cannot encode {type(value).__name__} as XML")
        return ElementTree.tostring(
            self.to_element(value),
            encoding="utf-8",
            xml_declaration=self.xml_declaration
        )

    def to_element(self, value: Any, tag: Optional[str] = None) -> Element:
        elem = Element(tag or element_name(type(value)))
        for f in fields(value):
            item = getattr(value, f.name)
            if item is None:
                continue
            kind = xml_kind(f)
            if kind == "attribute":
                elem.set(xml_name(f), scalar_to_text(item))
            elif kind == "text":
                elem.text = scalar_to_text(item)
            elif isinstance(item, (list, tuple)):
                parent = elem if f.metadata.get("inline") else SubElement(elem, xml_name(f))
                for entry in item:
                    parent.append(self._item_element(entry, f))
            elif is_dataclass(item):
                elem.append(self.to_element(item, xml_name(f)))
            else:
                SubElement(elem, xml_name(f)).text = scalar_to_text(item)
        return elem

    def _item_element(self, entry: Any, f) -> Element:
        if is_dataclass(entry):
            return self.to_element(entry)
        child = Element(f.metadata.get("item", "Item"))
        child.text = scalar_to_text(entry)
        return child

    def decode(self, document: Union[str, bytes], target_type: Type[T]) -> Optional[T]:
        try:
            root = ElementTree.fromstring(document)
        except ElementTree.ParseError as e:
            raise DecodeError(f"Malformed XML: {str(e)}")

        target_type, _ = unwrap_optional(target_type)
        item_type = list_item_type(target_type)
        if item_type is not None:
            return self._decode_items(list(root), item_type, None, _local(root.tag))

        if is_dataclass_type(target_type):
            expected = element_name(target_type)
            if _local(root.tag) != expected:
                raise DecodeError(f"Expected <{expected}> document, got <{_local(root.tag)}>")
            return self.from_element(root, target_type, expected)

        return self.parse_text(root.text or "", target_type, _local(root.tag))

    def from_element(self, elem: Element, tp: type, path: str) -> Any:
        hints = field_types(tp)
        kwargs: Dict[str, Any] = {}
        for f in init_fields(tp):
            ftype, _ = unwrap_optional(hints[f.name])
            kind = xml_kind(f)
            name = xml_name(f)
            where = f"{path}/{name}"

            if kind == "attribute":
                raw = elem.get(name)
                if raw is not None:
                    kwargs[f.name] = self.parse_text(raw, ftype, f"{path}/@{name}")
                continue
            if kind == "text":
                if elem.text is not None:
                    kwargs[f.name] = self.parse_text(elem.text, ftype, path)
                continue

            item_type = list_item_type(ftype)
            if item_type is not None:
                if f.metadata.get("inline"):
                    kwargs[f.name] = self._decode_items(list(elem), item_type, f, path)
                else:
                    wrapper = next(_children(elem, name), None)
                    if wrapper is not None:
                        kwargs[f.name] = self._decode_items(list(wrapper), item_type, f, where)
                continue

            child = next(_children(elem, name), None)
            if child is None:
                continue
            if is_dataclass_type(ftype):
                kwargs[f.name] = self.from_element(child, ftype, where)
            else:
                kwargs[f.name] = self.parse_text(child.text or "", ftype, where)

        try:
            return tp(**kwargs)
        except TypeError as e:
            raise DecodeError(f"{path}: cannot build {tp.__name__}: {str(e)}")

    def _decode_items(self, elements: List[Element], item_type: Any, f, path: str) -> List[Any]:
        classes = _item_classes(item_type)
        if classes:
            return [
                self.from_element(child, classes[_local(child.tag)], f"{path}/{_local(child.tag)}")
                for child in elements
                if _local(child.tag) in classes
            ]
        item_name = f.metadata.get("item", "Item") if f is not None else None
        return [
            self.parse_text(child.text or "", item_type, path)
            for child in elements
            if item_name is None or _local(child.tag) == item_name
        ]

    def parse_text(self, raw: str, tp: Any, path: str) -> Any:
        """Convert attribute or element text to tp"""
        tp, _ = unwrap_optional(tp)
        if tp is Any or tp is str:
            return raw
        value = raw.strip()
        if isinstance(tp, type) and issubclass(tp, Enum):
            try:
                return tp(value)
            except ValueError:
                raise DecodeError(f"{path}: {value!r} is not a valid {tp.__name__}")
        if tp is bool:
            if value in ("true", "1"):
                return True
            if value in ("false", "0"):
                return False
            raise DecodeError(f"{path}: expected boolean, got {value!r}")
        try:
            if tp is int:
                return int(value)
            if tp is float:
                return float(value)
            if tp is datetime:
                return datetime.fromisoformat(value)
        except ValueError:
            raise DecodeError(f"{path}: cannot parse {value!r} as {tp.__name__}")
        return value
