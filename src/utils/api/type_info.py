# src/utils/api/type_info.py
# Created: 2026-10-19 09:40:02
# Author: Genterr

"""
Introspection helpers shared by the JSON and XML codecs.
"""

from typing import Any, Dict, List, Optional, Tuple, Union, get_args, get_origin, get_type_hints
import dataclasses
import types

_hints_cache: Dict[type, Dict[str, Any]] = {}

def unwrap_optional(tp: Any) -> Tuple[Any, bool]:
    """Return (inner type, is_optional) for Optional[X] / X | None"""
    if get_origin(tp) in (Union, types.UnionType):
        args = [arg for arg in get_args(tp) if arg is not type(None)]
        if len(args) == 1:
            return args[0], True
    return tp, False

def list_item_type(tp: Any) -> Optional[Any]:
    """Return the item type of List[X], or None when tp is not a list type"""
    if tp is list:
        return Any
    if get_origin(tp) in (list, List):
        args = get_args(tp)
        return args[0] if args else Any
    return None

def is_dataclass_type(tp: Any) -> bool:
    return isinstance(tp, type) and dataclasses.is_dataclass(tp)

def field_types(cls: type) -> Dict[str, Any]:
    """Resolved annotations of a dataclass, cached per class"""
    hints = _hints_cache.get(cls)
    if hints is None:
        hints = get_type_hints(cls)
        _hints_cache[cls] = hints
    return hints

def init_fields(cls: type) -> List[dataclasses.Field]:
    return [f for f in dataclasses.fields(cls) if f.init]
