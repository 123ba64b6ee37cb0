"""snake_case -> camelCase key transform applied to every response body."""
import re
from typing import Any

_UNDERSCORE_LETTER = re.compile(r"_([a-z])")


def to_camel_case(key: str) -> str:
    return _UNDERSCORE_LETTER.sub(lambda m: m.group(1).upper(), key)


def camelize_keys(obj: Any) -> Any:
    """Recursively rename dict keys; lists are walked, scalars returned as-is."""
    if isinstance(obj, list):
        return [camelize_keys(item) for item in obj]
    if isinstance(obj, dict):
        return {to_camel_case(str(k)): camelize_keys(v) for k, v in obj.items()}
    return obj
