# Copyright (c) IBM Corporation.
# Licensed under the MIT license.

"""Typed field readers shared by the model ``from_dict`` decoders."""

from __future__ import annotations

import datetime as _dt
import re
from typing import Any, Callable, Dict, List, Mapping, Optional, TypeVar

from ..core._error_codes import DECODE_INVALID_FIELD, DECODE_MISSING_FIELD
from ..core.errors import DecodeError

M = TypeVar("M")

_FRACTION_RE = re.compile(r"\.(\d+)")


def _missing(model: str, key: str) -> DecodeError:
    return DecodeError(
        f"{model}: required property '{key}' is missing",
        subcode=DECODE_MISSING_FIELD,
        details={"model": model, "field": key},
    )


def _invalid(model: str, key: str, expected: str, value: Any) -> DecodeError:
    return DecodeError(
        f"{model}: property '{key}' must be {expected}, got {type(value).__name__}",
        subcode=DECODE_INVALID_FIELD,
        details={"model": model, "field": key, "expected": expected},
    )


def ensure_object(data: Any, model: str) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise DecodeError(
            f"{model}: expected a JSON object, got {type(data).__name__}",
            subcode=DECODE_INVALID_FIELD,
            details={"model": model},
        )
    return data


def _get(data: Mapping[str, Any], key: str, model: str, required: bool) -> Any:
    value = data.get(key)
    if value is None and required:
        raise _missing(model, key)
    return value


def read_str(data: Mapping[str, Any], key: str, model: str, required: bool = False) -> Optional[str]:
    value = _get(data, key, model, required)
    if value is not None and not isinstance(value, str):
        raise _invalid(model, key, "a string", value)
    return value


def read_bool(data: Mapping[str, Any], key: str, model: str, required: bool = False) -> Optional[bool]:
    value = _get(data, key, model, required)
    if value is not None and not isinstance(value, bool):
        raise _invalid(model, key, "a boolean", value)
    return value


def read_int(data: Mapping[str, Any], key: str, model: str, required: bool = False) -> Optional[int]:
    value = _get(data, key, model, required)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise _invalid(model, key, "a number", value)
    if isinstance(value, float):
        if not value.is_integer():
            raise _invalid(model, key, "an integral number", value)
        return int(value)
    return value


def parse_datetime(value: str) -> _dt.datetime:
    """Parse an RFC 3339 timestamp (``Z`` suffix and any fraction length accepted)."""
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    # fromisoformat before 3.11 only takes 3 or 6 fractional digits
    text = _FRACTION_RE.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), text, count=1)
    return _dt.datetime.fromisoformat(text)


def format_datetime(value: _dt.datetime) -> str:
    text = value.isoformat(timespec="milliseconds")
    return text[:-6] + "Z" if text.endswith("+00:00") else text


def read_datetime(data: Mapping[str, Any], key: str, model: str, required: bool = False) -> Optional[_dt.datetime]:
    value = _get(data, key, model, required)
    if value is None:
        return None
    if not isinstance(value, str):
        raise _invalid(model, key, "an RFC 3339 timestamp string", value)
    try:
        return parse_datetime(value)
    except ValueError:
        raise _invalid(model, key, "an RFC 3339 timestamp string", value) from None


def read_str_list(data: Mapping[str, Any], key: str, model: str, required: bool = False) -> Optional[List[str]]:
    value = _get(data, key, model, required)
    if value is None:
        return None
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise _invalid(model, key, "a list of strings", value)
    return list(value)


def read_model_list(
    data: Mapping[str, Any],
    key: str,
    model: str,
    decoder: Callable[[Dict[str, Any]], M],
    required: bool = False,
) -> Optional[List[M]]:
    value = _get(data, key, model, required)
    if value is None:
        return None
    if not isinstance(value, list):
        raise _invalid(model, key, "a list", value)
    return [decoder(item) for item in value]


def drop_none(values: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in values.items() if v is not None}
