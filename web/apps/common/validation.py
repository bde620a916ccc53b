"""Run pydantic DTO validation at the API boundary."""

from typing import Any, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from .errors import ValidationError

Dto = TypeVar("Dto", bound=BaseModel)


def parse(dto_cls: type[Dto], data: Any) -> Dto:
    """Validate ``data`` against ``dto_cls``.

    Args:
        dto_cls: Pydantic model describing the expected payload.
        data: Raw request data (parsed JSON body or query parameters).

    Returns:
        The validated DTO instance.

    Raises:
        ValidationError: With an ``errors`` list of ``{field, message}``
            entries when the payload does not match the schema.
    """
    try:
        return dto_cls.model_validate(data)
    except PydanticValidationError as e:
        errors = [
            {"field": ".".join(str(p) for p in err["loc"]) or "body", "message": err["msg"]}
            for err in e.errors()
        ]
        raise ValidationError("Request validation failed", errors=errors) from e
