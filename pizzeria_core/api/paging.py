"""
Paging library for list requests of the core REST API
"""

from typing import Any, Dict, List, Optional, Sequence

from fastapi import Request
from fastapi.datastructures import URL

from .base import InvalidRouteValue
from .codec import E_TAG_PROPERTY, ResourceCodec
from .. import schemas
from ..persistence.store import ListResult
from ..schemas.config import PagingConfig


def _parse_integer(
        request: Request,
        name: str,
        minimum: int,
        errors: List[schemas.APIError]
) -> Optional[int]:
    value = request.query_params.get(name)
    if value is None:
        return None
    try:
        number = int(value)
    except ValueError:
        number = None
    if number is None or number < minimum:
        errors.append(schemas.APIError(
            code=schemas.ApiErrorCode.INVALID_ROUTE_VALUE,
            message=f"Query parameter '{name}' must be an integer of at least {minimum}, not {value!r}."
        ))
        return None
    return number


def parse_paging_parameters(request: Request, config: PagingConfig) -> schemas.PagingParameters:
    """
    Parse the paging query parameters of a list request

    The supported query parameters are ``skip``, ``top``, ``maxPageSize``,
    ``select`` (comma-separated property names) and ``continuationToken``.
    The page size defaults to the configured default page size and is
    silently limited to the configured maximal page size.

    :param request: incoming list request
    :param config: paging configuration of the server
    :return: parsed paging parameters
    :raises InvalidRouteValue: listing every invalid query parameter
    """

    errors = []
    skip = _parse_integer(request, "skip", 0, errors)
    top = _parse_integer(request, "top", 0, errors)
    max_page_size = _parse_integer(request, "maxPageSize", 1, errors)
    if errors:
        raise InvalidRouteValue("Invalid paging parameters.", errors)

    select = None
    raw_select = request.query_params.get("select")
    if raw_select is not None:
        select = [name.strip() for name in raw_select.split(",") if name.strip()] or None

    return schemas.PagingParameters(
        skip=skip or 0,
        top=top,
        max_page_size=min(max_page_size or config.default_page_size, config.max_page_size),
        select=select,
        continuation_token=request.query_params.get("continuationToken") or None
    )


def project(document: Dict[str, Any], select: Optional[Sequence[str]]) -> Dict[str, Any]:
    """
    Remove all top-level properties that were not selected (case-insensitive), except the ETag
    """

    if select is None:
        return document
    selected = {name.lower() for name in select}
    return {
        key: value
        for key, value in document.items()
        if key == E_TAG_PROPERTY or key.lower() in selected
    }


def assemble_page(
        url: URL,
        codec: ResourceCodec,
        result: ListResult,
        select: Optional[Sequence[str]] = None
) -> Dict[str, Any]:
    """
    Build the response document of a list request from one page returned by a store

    Every item is serialized completely (including its ETag) before the
    projection of ``select`` is applied. The link to the next page is the
    URI of the current request with the continuation token as query parameter.

    :param url: public URL of the list request currently handled
    :param codec: codec of the listed resource kind
    :param result: page of resources and the optional continuation token
    :param select: optional list of selected top-level property names
    :return: document with the property ``value`` and the optional ``nextLink``
    """

    page = {
        "value": [
            project(codec.serialize_revision(resource, e_tag), select)
            for resource, e_tag in result.items
        ]
    }
    if result.continuation_token is not None:
        page["nextLink"] = str(url.include_query_params(continuationToken=result.continuation_token))
    return page
