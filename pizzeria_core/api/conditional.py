"""
Resolver for the conditional headers of create-or-replace requests

Clients have to state their intent explicitly: ``If-None-Match: *`` creates
a new resource (which must not exist yet), while ``If-Match: <ETag>``
replaces the existing revision identified by that ETag. Anything else
is rejected before the request is dispatched to the store.
"""

import dataclasses
from typing import Sequence, Union

from fastapi import Request

from .base import InvalidConditionalHeader
from .etag import ETag


@dataclasses.dataclass(frozen=True)
class Create:
    """
    Create a resource that must not exist yet
    """


@dataclasses.dataclass(frozen=True)
class Update:
    """
    Replace the resource revision that has the expected ETag
    """

    e_tag: ETag


ConditionalHeaderAction = Union[Create, Update]


def resolve(if_match: Sequence[str], if_none_match: Sequence[str]) -> ConditionalHeaderAction:
    """
    Determine the requested write operation from all values of the conditional headers

    :param if_match: values of all ``If-Match`` header fields of the request
    :param if_none_match: values of all ``If-None-Match`` header fields of the request
    :return: the write operation selected by the header fields
    :raises InvalidConditionalHeader: when the headers don't select exactly one operation
    """

    if if_match and if_none_match:
        raise InvalidConditionalHeader("Cannot specify both If-Match and If-None-Match headers.")

    if len(if_match) == 1:
        try:
            return Update(ETag.from_header(if_match[0]))
        except ValueError as exc:
            raise InvalidConditionalHeader("If-Match header must not be empty.") from exc
    if len(if_match) > 1:
        raise InvalidConditionalHeader("Can only specify one If-Match header.")

    if len(if_none_match) == 1 and if_none_match[0].strip() == "*":
        return Create()
    if len(if_none_match) > 1:
        raise InvalidConditionalHeader("Can only specify one If-None-Match header.")
    if if_none_match:
        raise InvalidConditionalHeader("If-None-Match header must be '*'.")

    raise InvalidConditionalHeader("One of If-Match or If-None-Match must be specified.", status_code=428)


def resolve_request(request: Request) -> ConditionalHeaderAction:
    return resolve(request.headers.getlist("If-Match"), request.headers.getlist("If-None-Match"))
