"""JSON Schema validation utilities."""

from typing import Any

from jsonschema import Draft7Validator


def validate_schema(data: Any, schema: dict[str, Any]) -> tuple[bool, list[str]]:
    """
    Validate data against a JSON Schema.

    Args:
        data: The data to validate
        schema: JSON Schema to validate against

    Returns:
        Tuple of (is_valid, list of error messages)
    """
    if not schema:
        return True, []

    validator = Draft7Validator(schema)
    errors = sorted(validator.iter_errors(data), key=lambda e: list(e.path))

    if not errors:
        return True, []

    error_messages = [
        f"{'.'.join(str(p) for p in e.path)}: {e.message}" if e.path else e.message
        for e in errors
    ]

    return False, error_messages


def object_schema(**properties: tuple[str, str]) -> dict[str, Any]:
    """
    Build an object schema where every property is required.

    Args:
        **properties: name -> (json type, description)

    Returns:
        JSON Schema dictionary
    """
    return {
        "type": "object",
        "properties": {
            name: {"type": json_type, "description": description}
            for name, (json_type, description) in properties.items()
        },
        "required": list(properties),
    }
