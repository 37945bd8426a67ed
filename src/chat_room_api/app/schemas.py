"""
Request body schemas.

Every POST body goes through `validate_body`, so the handlers share one validation path
and one error shape.
"""

from typing import Any, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field, StrictStr
from pydantic import ValidationError as PydanticValidationError

from chat_room_api.app.errors import ValidationError

SchemaT = TypeVar("SchemaT", bound=BaseModel)


class ParticipantBody(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: StrictStr = Field(min_length=1)


class MessageBody(BaseModel):
    model_config = ConfigDict(extra="forbid")

    to: StrictStr = Field(min_length=1)
    text: StrictStr = Field(min_length=1)
    type: Literal["message", "private_message"] = "message"


def validate_body(schema: type[SchemaT], body: Any) -> SchemaT:
    """
    Validate a parsed JSON body against a schema.

    Args:
        schema (type[BaseModel]): The pydantic model describing the body.
        body (Any): The parsed JSON body.

    Returns:
        BaseModel: The validated body.

    Raises:
        ValidationError: If the body is not a JSON object or does not match the schema.
    """
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object")

    try:
        return schema.model_validate(body)
    except PydanticValidationError as e:
        issues = [
            f"{'.'.join(str(part) for part in error['loc']) or 'body'}: {error['msg']}"
            for error in e.errors()
        ]
        raise ValidationError("; ".join(issues)) from e
