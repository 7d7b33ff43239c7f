"""Human-readable messages for pydantic error types."""
from pydantic_core import ErrorDetails

MESSAGES = {
    "missing": "Required",
    "string_type": "Expected string",
    "int_type": "Expected integer",
    "model_type": "Expected object",
    "model_attributes_type": "Expected object",
    "dict_type": "Expected object",
    "list_type": "Expected array",
    "tuple_type": "Expected array",
    "string_too_short": "Too short: must contain at least {min_length} character(s)",
    "string_too_long": "Too long: must contain at most {max_length} character(s)",
    "greater_than_equal": "Too small: must be at least {ge}",
    "less_than_equal": "Too big: must be at most {le}",
    "too_short": "Too short: must contain at least {min_length} element(s)",
}

# (field, error type) overrides
FIELD_MESSAGES = {
    ("items", "too_short"): "Select at least one book: at least one item required",
}


def format_message(error: ErrorDetails) -> str:
    """Pick the message for one pydantic error, falling back to pydantic's own text."""
    field = next((part for part in reversed(error["loc"]) if isinstance(part, str)), None)
    override = FIELD_MESSAGES.get((field, error["type"]))
    if override:
        return override

    template = MESSAGES.get(error["type"])
    if template is None:
        return error["msg"]
    try:
        return template.format(**error.get("ctx", {}))
    except KeyError:
        return error["msg"]
