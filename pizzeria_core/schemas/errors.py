"""
Pizzeria error schemas
"""

import enum
from typing import List

import pydantic


@enum.unique
class ApiErrorCode(str, enum.Enum):
    RESOURCE_NOT_FOUND = "ResourceNotFound"
    RESOURCE_ALREADY_EXISTS = "ResourceAlreadyExists"
    INVALID_CONDITIONAL_HEADER = "InvalidConditionalHeader"
    INVALID_JSON_BODY = "InvalidJsonBody"
    INVALID_ROUTE_VALUE = "InvalidRouteValue"
    ETAG_MISMATCH = "ETagMismatch"


class APIError(pydantic.BaseModel):
    """
    APIError: shared model for all expected types of API failures

    Whenever a request is rejected by the API, the answer will be some kind
    of this model. The only exception is `500` (Internal Server Error),
    since those failures are not part of the API contract. The field `code`
    contains a machine-readable error code from a closed set of values
    that can be used for client-side error handling. The field `message`
    contains a short human-readable informational message about the problem.
    The field `details` contains nested errors, e.g. one per invalid
    property of a rejected request body, and may be empty.
    """

    code: ApiErrorCode
    message: pydantic.constr(min_length=1)
    details: List["APIError"] = []
