"""Shared schema configuration and response envelopes."""

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from neoboard.core.validation import MAX_ROW_ID

RowId = Annotated[int, Field(ge=1, le=MAX_ROW_ID)]


class ApiModel(BaseModel):
    """Base for every request and response body.

    Fields are declared in snake_case and exchanged as camelCase on the wire;
    either spelling is accepted on input. Views can be built straight from
    ORM rows.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class MessageResponse(ApiModel):
    """Acknowledgement for operations that return no resource."""

    success: bool = True
    message: str
