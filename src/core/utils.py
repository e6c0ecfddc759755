from datetime import datetime
from typing import Any, Dict, Optional
import re
from .exceptions import InvalidArgumentError

_WORD_BOUNDARY = re.compile(r'_+')

def validate_string(value: Optional[str], name: str = "value") -> str:
    """Validate that a required string argument is present and not blank."""
    if value is None or not isinstance(value, str) or not value.strip():
        raise InvalidArgumentError(f"{name} is required")
    return value

def to_camel_case(name: str) -> str:
    """Convert a snake_case attribute name to camelCase."""
    head, *rest = _WORD_BOUNDARY.split(name.strip('_'))
    return head + ''.join(part[:1].upper() + part[1:] for part in rest)

def to_pascal_case(name: str) -> str:
    """Convert a snake_case attribute name to PascalCase."""
    camel = to_camel_case(name)
    return camel[:1].upper() + camel[1:]

def format_datetime(dt: datetime) -> str:
    """Format a datetime the way the API expects it (ISO-8601)."""
    return dt.isoformat()

def merge_dicts(dict1: Dict[str, Any], dict2: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge two dictionaries."""
    result = dict1.copy()
    for key, value in dict2.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = merge_dicts(result[key], value)
        else:
            result[key] = value
    return result
