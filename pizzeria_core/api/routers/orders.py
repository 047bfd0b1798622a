"""
Pizzeria router module for /orders requests
"""

from fastapi import Depends

from ._router import router
from ..codec import ResourceCodec
from ..dependency import ORDER_STORE, LocalRequestData, StoreDependency
from .. import handlers, versioning
from ...persistence.store import ResourceStore
from ... import schemas


codec = ResourceCodec(schemas.Order, "Order")
get_store = StoreDependency(ORDER_STORE)


@router.put(
    "/orders/{order_id}",
    tags=["Orders"],
    status_code=200,
    responses={
        201: {"description": "Created the new order"},
        404: {"model": schemas.APIError},
        409: {"model": schemas.APIError},
        412: {"model": schemas.APIError},
        428: {"model": schemas.APIError}
    }
)
@versioning.versions(minimal=1)
async def create_or_replace_order(
        order_id: str,
        store: ResourceStore = Depends(get_store),
        local: LocalRequestData = Depends(LocalRequestData)
):
    """
    Create a new order or replace an existing order

    Exactly one of the conditional headers is required: `If-None-Match: *`
    creates a new order, `If-Match: <ETag>` replaces the order if the ETag
    still identifies its current revision. The ID in the path is authoritative,
    an `id` property in the body is optional but must match it. The response
    contains the stored order with its new `eTag` (also in the `ETag` header).

    * `400`: if the ID, the conditional headers or the body are invalid
      (all problems are reported in the `details` of the error)
    * `404`: if the order to be replaced doesn't exist
    * `409`: if the order to be created already exists
    * `412`: if the ETag doesn't match the current revision of the order
    * `428`: if no conditional header was given
    """

    return await handlers.create_or_replace(order_id, codec, store, local)


@router.get(
    "/orders/{order_id}",
    tags=["Orders"],
    responses={404: {"model": schemas.APIError}}
)
@versioning.versions(minimal=1)
async def get_order(order_id: str, store: ResourceStore = Depends(get_store)):
    """
    Return the current revision of the order with its `eTag`

    * `400`: if the ID is no valid GUID
    * `404`: if the order doesn't exist
    """

    return await handlers.get_one(order_id, codec, store)


@router.delete("/orders/{order_id}", tags=["Orders"], status_code=204)
@versioning.versions(minimal=1)
async def delete_order(order_id: str, store: ResourceStore = Depends(get_store)):
    """
    Delete the order, which succeeds whether the order existed or not

    * `400`: if the ID is no valid GUID
    """

    return await handlers.delete_one(order_id, codec, store)


@router.get("/orders", tags=["Orders"])
@versioning.versions(minimal=1)
async def list_orders(
        store: ResourceStore = Depends(get_store),
        local: LocalRequestData = Depends(LocalRequestData)
):
    """
    Return one page of orders, ordered by their IDs

    The optional query parameters `skip`, `top` and `maxPageSize` control
    the paging, `select` is a comma-separated list of properties to keep
    for every order. If more orders are available, the property `nextLink`
    contains the URL of the next page (including a `continuationToken`).

    * `400`: if a paging parameter or the continuation token is invalid
    """

    return await handlers.list_all(codec, store, local)
