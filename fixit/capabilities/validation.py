# FILE: fixit/capabilities/validation.py
"""
Parameter checks for capability invocations.

Parameters come from the intent resolver, so ids often arrive as strings
("12"). Integer and number fields accept numeric strings; the handlers
convert them with int() before calling the platform.

Schema keywords understood: type, required, properties, items, enum,
minLength/maxLength, minimum/maximum. Anything else is ignored.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional

Checker = Callable[[Dict[str, Any], Any, str], List[str]]


def _numeric(value: Any, integer: bool) -> Optional[float]:
    """The numeric value of an int/float or a numeric string, else None. Bools never count."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return float(value)
    if isinstance(value, float):
        return None if integer and not value.is_integer() else value
    if isinstance(value, str):
        text = value.strip()
        try:
            return float(int(text)) if integer else float(text)
        except ValueError:
            return None
    return None


def _check_object(schema: Dict[str, Any], data: Any, path: str) -> List[str]:
    if not isinstance(data, dict):
        return [f"{path}expected object, got {type(data).__name__}"]
    problems = [f"{path}missing required field: {key}" for key in schema.get("required") or [] if key not in data]
    properties = schema.get("properties") or {}
    for key, value in data.items():
        if key in properties:
            problems += validate_params(properties[key], value, path=f"{path}{key}.")
    return problems


def _check_array(schema: Dict[str, Any], data: Any, path: str) -> List[str]:
    if not isinstance(data, list):
        return [f"{path}expected array, got {type(data).__name__}"]
    items = schema.get("items")
    if not items:
        return []
    problems: List[str] = []
    for index, item in enumerate(data):
        problems += validate_params(items, item, path=f"{path}{index}.")
    return problems


def _check_string(schema: Dict[str, Any], data: Any, path: str) -> List[str]:
    if not isinstance(data, str):
        return [f"{path}expected string, got {type(data).__name__}"]
    problems = []
    if "minLength" in schema and len(data) < int(schema["minLength"]):
        problems.append(f"{path}string shorter than minLength {schema['minLength']}")
    if "maxLength" in schema and len(data) > int(schema["maxLength"]):
        problems.append(f"{path}string longer than maxLength {schema['maxLength']}")
    return problems


def _numeric_checker(kind: str) -> Checker:
    def check(schema: Dict[str, Any], data: Any, path: str) -> List[str]:
        value = _numeric(data, integer=(kind == "integer"))
        if value is None:
            return [f"{path}expected {kind}, got {type(data).__name__}"]
        problems = []
        if "minimum" in schema and value < float(schema["minimum"]):
            problems.append(f"{path}{kind} less than minimum {schema['minimum']}")
        if "maximum" in schema and value > float(schema["maximum"]):
            problems.append(f"{path}{kind} greater than maximum {schema['maximum']}")
        return problems

    return check


def _check_boolean(schema: Dict[str, Any], data: Any, path: str) -> List[str]:
    return [] if isinstance(data, bool) else [f"{path}expected boolean, got {type(data).__name__}"]


_CHECKERS: Dict[str, Checker] = {
    "object": _check_object,
    "array": _check_array,
    "string": _check_string,
    "integer": _numeric_checker("integer"),
    "number": _numeric_checker("number"),
    "boolean": _check_boolean,
}


def validate_params(schema: Optional[Dict[str, Any]], data: Any, path: str = "") -> List[str]:
    """Violations of `schema` by `data`, as readable strings. Empty when valid."""
    if not schema:
        return []
    if "enum" in schema and data not in schema["enum"]:
        return [f"{path}value {data!r} not one of {schema['enum']}"]
    checker = _CHECKERS.get(schema.get("type"))
    return checker(schema, data, path) if checker else []
