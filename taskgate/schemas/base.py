from typing import Any, Mapping, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as SchemaError

from ..errors import ValidationError

SchemaT = TypeVar("SchemaT", bound=BaseModel)


class Envelope(BaseModel):
    """Common response wrapper: every body carries ``success``."""
    success: bool = True


def _describe(error: Mapping[str, Any]) -> str:
    if error.get("type") == "value_error" and "error" in error.get("ctx", {}):
        return str(error["ctx"]["error"])
    field = ".".join(str(part) for part in error.get("loc", ())) or "body"
    return f"Invalid value for '{field}'"


def parse_payload(schema: Type[SchemaT], data: Mapping[str, Any]) -> SchemaT:
    """Validate a request body, reporting the first problem as a ValidationError."""
    try:
        return schema.model_validate(data)
    except SchemaError as exc:
        raise ValidationError(_describe(exc.errors()[0])) from exc
