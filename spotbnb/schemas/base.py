from __future__ import annotations

import sys
from typing import Annotated, Any, ClassVar

from pydantic import BaseModel, BeforeValidator, ConfigDict, StrictStr, StringConstraints
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """Snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PayloadModel(ApiModel):
    """Request body checked field by field in declaration order.

    ``error_messages`` maps each field to the message reported when it is the
    first one to fail.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    error_messages: ClassVar[dict[str, str]] = {}


def _within_float_range(value: Any) -> Any:
    # JSON integers are unbounded; past float range they cannot be stored.
    if isinstance(value, int) and not isinstance(value, bool) and abs(value) > sys.float_info.max:
        raise ValueError("number out of range")
    return value


RequiredText = Annotated[StrictStr, StringConstraints(strip_whitespace=True, min_length=1)]
FiniteNumber = Annotated[float, BeforeValidator(_within_float_range)]


class MessageResponse(ApiModel):
    message: str
    status_code: int
