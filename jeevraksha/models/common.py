import json
import math
from enum import Enum
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, Field


class Role(str, Enum):
    CITIZEN = "citizen"
    VOLUNTEER = "volunteer"
    NGO = "ngo"
    ADMIN = "admin"


def _decode_json_list(value: Any) -> Any:
    if value is None or value == "":
        return []
    if isinstance(value, str):
        try:
            return json.loads(value)
        except ValueError:
            return [value]
    return value


def _decode_json_object(value: Any) -> Any:
    if value is None or value == "":
        return None
    if isinstance(value, str):
        try:
            return json.loads(value)
        except ValueError:
            return None
    return value


def _split_csv(value: Any) -> Any:
    # Form posts send "a, b, c"; JSON clients send a list
    if value is None:
        return []
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    return value


def _blank_is_false(value: Any) -> Any:
    if value is None or value == "":
        return False
    return value


# Stored as JSON text, exposed as a list
JsonList = Annotated[list[str], BeforeValidator(_decode_json_list)]
JsonObject = Annotated[dict[str, Any] | None, BeforeValidator(_decode_json_object)]
CsvList = Annotated[list[str], BeforeValidator(_split_csv)]
# Accepts true/false, "yes"/"no", 1/0 and blank form fields
FormBool = Annotated[bool, BeforeValidator(_blank_is_false)]

Latitude = Annotated[float, Field(ge=-90, le=90)]
Longitude = Annotated[float, Field(ge=-180, le=180)]


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int


def paginate(page: int, limit: int, total: int) -> Pagination:
    return Pagination(page=page, limit=limit, total=total, pages=math.ceil(total / limit) if limit else 0)
