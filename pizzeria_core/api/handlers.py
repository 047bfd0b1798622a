"""
Generic request handlers for resources with ETag-based concurrency control

These functions implement the complete request handling of path operations
for any kind of resource, given its codec and its store. Store operations
are awaited directly, so cancelling the handling task (e.g. due to a client
disconnect) abandons the store call without any retry. Expected failures are
raised as ``APIException`` subclasses; anything else propagates as-is.
"""

import uuid
import logging
from typing import List, Optional

try:
    import ujson as json
except ImportError:
    import json

from fastapi import Response
from fastapi.responses import JSONResponse

from . import conditional, etag, paging
from .base import APIException, Conflict, InvalidJsonBody, InvalidRouteValue, NotFound, PreconditionFailed
from .codec import INVALID_ID_MESSAGE, ResourceCodec, ResourceValidationError, parse_id
from .dependency import LocalRequestData
from .. import schemas
from ..persistence.store import CreateError, InvalidContinuationToken, ReplaceError, ResourceStore


logger = logging.getLogger(__name__)

_FAILURE_RANKING = [
    schemas.ApiErrorCode.INVALID_CONDITIONAL_HEADER,
    schemas.ApiErrorCode.INVALID_ROUTE_VALUE,
    schemas.ApiErrorCode.INVALID_JSON_BODY
]


def get_resource_id(resource_id: str) -> uuid.UUID:
    """
    Parse the identifier of a resource taken from the last path segment

    :raises InvalidRouteValue: when the value is no valid UUID
    """

    parsed = parse_id(resource_id)
    if parsed is None:
        raise InvalidRouteValue(INVALID_ID_MESSAGE)
    return parsed


def combine_failures(failures: List[APIException]) -> APIException:
    """
    Merge the failures of independent request parsing stages into one exception

    The failure with the highest rank (conditional header, then route value,
    then request body) determines status code, error code and message,
    while all other failures are appended to its details.
    """

    failures = sorted(failures, key=lambda f: _FAILURE_RANKING.index(f.code) if f.code in _FAILURE_RANKING else -1)
    primary, others = failures[0], failures[1:]
    if not others:
        return primary
    return APIException(
        primary.status_code,
        primary.code,
        primary.message,
        details=primary.details + [other.schema for other in others],
        headers=primary.headers
    )


async def read_resource(
        local: LocalRequestData,
        codec: ResourceCodec,
        resource_id: str,
        ignore_id_errors: bool = False
):
    """
    Read the JSON body of the request and deserialize it into a resource

    :param local: contextual local data
    :param codec: codec of the requested resource kind
    :param resource_id: raw identifier from the path of the request
    :param ignore_id_errors: skip problems with the identifier (when already reported otherwise)
    :return: the valid resource or None if only the ignored identifier was invalid
    :raises InvalidJsonBody: when the body is empty, no JSON or no valid resource
    """

    body = await local.request.body()
    if not body.strip():
        raise InvalidJsonBody("Request body must not be empty.")
    try:
        document = json.loads(body)
    except ValueError as exc:
        raise InvalidJsonBody("Request body is no valid JSON.") from exc

    try:
        return codec.try_deserialize(resource_id, document)
    except ResourceValidationError as exc:
        errors = [
            error for error in exc.errors
            if not (ignore_id_errors and error.field == codec.id_field)
        ]
        if not errors:
            return None
        raise InvalidJsonBody(details=[
            schemas.APIError(code=schemas.ApiErrorCode.INVALID_JSON_BODY, message=error.message)
            for error in errors
        ]) from exc


def make_revision_response(
        codec: ResourceCodec,
        resource,
        e_tag: etag.ETag,
        status_code: int = 200,
        location: Optional[str] = None
) -> Response:
    response = JSONResponse(codec.serialize_revision(resource, e_tag), status_code=status_code)
    etag.add_header(response, e_tag)
    if location is not None:
        response.headers["Location"] = location
    return response


async def create_or_replace(
        resource_id: str,
        codec: ResourceCodec,
        store: ResourceStore,
        local: LocalRequestData
) -> Response:
    """
    Create a new resource or replace an existing one, selected by the conditional headers

    The identifier, the conditional headers and the body are validated
    independently and all their failures are reported together. Then the
    request is dispatched to the store: ``If-None-Match: *`` creates the
    resource (`201`, `409` if it exists already), ``If-Match`` replaces the
    revision with the given ETag (`200`, `404` if it doesn't exist, `412`
    if the ETag doesn't match the current revision).

    :param resource_id: raw identifier from the path of the request
    :param codec: codec of the requested resource kind
    :param store: store of the requested resource kind
    :param local: contextual local data
    :return: response with the serialized new revision and its ETag
    :raises APIException: when the request is invalid or the store rejected the write
    """

    failures = []
    parsed_id = parse_id(resource_id)
    if parsed_id is None:
        failures.append(InvalidRouteValue(INVALID_ID_MESSAGE))

    action = None
    try:
        action = conditional.resolve_request(local.request)
    except APIException as exc:
        failures.append(exc)

    resource = None
    try:
        resource = await read_resource(local, codec, resource_id, ignore_id_errors=parsed_id is None)
    except APIException as exc:
        failures.append(exc)

    if failures:
        failure = combine_failures(failures)
        logger.debug(f"Rejected write of {codec.describe(resource_id)}: {failure}")
        raise failure

    if isinstance(action, conditional.Create):
        logger.debug(f"Creating {codec.describe(parsed_id)}...")
        result = await store.create(resource)
        if result is CreateError.RESOURCE_ALREADY_EXISTS:
            raise Conflict(codec.describe(parsed_id))
        if not isinstance(result, etag.ETag):
            raise TypeError(f"Unexpected result {result!r} of creating {codec.describe(parsed_id)}")
        logger.info(f"Created {codec.describe(parsed_id)} with ETag {result}")
        location = str(local.url.replace(query=""))
        return make_revision_response(codec, resource, result, 201, location)

    logger.debug(f"Replacing {codec.describe(parsed_id)} with expected ETag {action.e_tag}...")
    result = await store.replace(action.e_tag, resource)
    if result is ReplaceError.RESOURCE_NOT_FOUND:
        raise NotFound(codec.describe(parsed_id))
    if result is ReplaceError.ETAG_MISMATCH:
        raise PreconditionFailed(codec.describe(parsed_id))
    if not isinstance(result, etag.ETag):
        raise TypeError(f"Unexpected result {result!r} of replacing {codec.describe(parsed_id)}")
    logger.info(f"Replaced {codec.describe(parsed_id)}, new ETag {result}")
    return make_revision_response(codec, resource, result, 200)


async def get_one(resource_id: str, codec: ResourceCodec, store: ResourceStore) -> Response:
    """
    Return the current revision of a resource with its ETag

    :raises InvalidRouteValue: when the identifier is no valid UUID
    :raises NotFound: when the store doesn't know the resource
    """

    parsed_id = get_resource_id(resource_id)
    found = await store.find(parsed_id)
    if found is None:
        raise NotFound(codec.describe(parsed_id))
    resource, e_tag = found
    return make_revision_response(codec, resource, e_tag)


async def delete_one(resource_id: str, codec: ResourceCodec, store: ResourceStore) -> Response:
    """
    Delete a resource, succeeding regardless of whether it existed before

    :raises InvalidRouteValue: when the identifier is no valid UUID
    """

    parsed_id = get_resource_id(resource_id)
    await store.delete(parsed_id)
    logger.info(f"Deleted {codec.describe(parsed_id)} (if it existed)")
    return Response(status_code=204)


async def list_all(codec: ResourceCodec, store: ResourceStore, local: LocalRequestData) -> Response:
    """
    Return one page of resources, optionally projected to the selected properties

    :raises InvalidRouteValue: when a paging parameter or the continuation token is invalid
    """

    parameters = paging.parse_paging_parameters(local.request, local.config.paging)
    try:
        result = await store.list(parameters)
    except InvalidContinuationToken as exc:
        raise InvalidRouteValue("Invalid continuation token.") from exc
    return JSONResponse(paging.assemble_page(local.url, codec, result, parameters.select))
