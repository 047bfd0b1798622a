"""
In-memory implementation of the store capability

This store keeps everything in a dictionary in the memory of the running
process, which means that all resources are lost on restart. It's used
as the default store of the service and as store in the unit tests.
"""

import base64
import asyncio
import logging
import uuid
from typing import Dict, Iterable, Optional, Tuple, Union

try:
    import ujson as json
except ImportError:
    import json

from .store import CreateError, InvalidContinuationToken, ListResult, ReplaceError, ResourceStore, ResourceType
from ..api.etag import ETag
from ..schemas import PagingParameters


logger = logging.getLogger(__name__)


def encode_continuation_token(offset: int, remaining: Optional[int]) -> str:
    content = json.dumps({"offset": offset, "remaining": remaining})
    return base64.urlsafe_b64encode(content.encode("UTF-8")).decode("ASCII")


def decode_continuation_token(token: str) -> Tuple[int, Optional[int]]:
    """
    Decode the offset and number of remaining items from a continuation token

    :raises InvalidContinuationToken: when the token is malformed
    """

    try:
        content = json.loads(base64.urlsafe_b64decode(token.encode("ASCII")).decode("UTF-8"))
    except ValueError as exc:
        raise InvalidContinuationToken(f"Undecodable continuation token {token!r}") from exc

    if not isinstance(content, dict):
        raise InvalidContinuationToken(f"Continuation token {token!r} has no valid content")
    offset = content.get("offset")
    remaining = content.get("remaining")
    if not isinstance(offset, int) or isinstance(offset, bool) or offset < 0:
        raise InvalidContinuationToken(f"Continuation token {token!r} has no valid offset")
    if remaining is not None and (not isinstance(remaining, int) or isinstance(remaining, bool) or remaining < 0):
        raise InvalidContinuationToken(f"Continuation token {token!r} has no valid item limit")
    return offset, remaining


class MemoryStore(ResourceStore[ResourceType]):
    """
    Store keeping resources and their ETags in memory, guarded by a single lock

    Every operation acquires the lock and then works on the dictionary without
    any further suspension point, so writes for the same identifier are
    serialized and a cancelled operation never modifies anything.
    """

    def __init__(self, initial: Iterable[Tuple[ResourceType, ETag]] = ()):
        self._entries: Dict[uuid.UUID, Tuple[ResourceType, ETag]] = {
            resource.id: (resource, e_tag) for resource, e_tag in initial
        }
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._entries)

    async def create(self, resource: ResourceType) -> Union[ETag, CreateError]:
        async with self._lock:
            if resource.id in self._entries:
                return CreateError.RESOURCE_ALREADY_EXISTS
            e_tag = ETag.generate()
            self._entries[resource.id] = (resource, e_tag)
        logger.debug(f"Created {type(resource).__name__} {resource.id} with ETag {e_tag}")
        return e_tag

    async def replace(self, e_tag: ETag, resource: ResourceType) -> Union[ETag, ReplaceError]:
        async with self._lock:
            current = self._entries.get(resource.id)
            if current is None:
                return ReplaceError.RESOURCE_NOT_FOUND
            if current[1] != e_tag:
                return ReplaceError.ETAG_MISMATCH
            new_e_tag = ETag.generate()
            self._entries[resource.id] = (resource, new_e_tag)
        logger.debug(f"Replaced {type(resource).__name__} {resource.id}: ETag {e_tag} -> {new_e_tag}")
        return new_e_tag

    async def find(self, resource_id: uuid.UUID) -> Optional[Tuple[ResourceType, ETag]]:
        async with self._lock:
            return self._entries.get(resource_id)

    async def delete(self, resource_id: uuid.UUID) -> None:
        async with self._lock:
            self._entries.pop(resource_id, None)

    async def list(self, paging: PagingParameters) -> ListResult[ResourceType]:
        if paging.continuation_token is not None:
            offset, remaining = decode_continuation_token(paging.continuation_token)
        else:
            offset, remaining = paging.skip, paging.top

        async with self._lock:
            entries = sorted(self._entries.values(), key=lambda entry: str(entry[0].id))

        size = paging.max_page_size if remaining is None else min(paging.max_page_size, remaining)
        page = entries[offset:offset + size]
        next_offset = offset + len(page)
        if remaining is not None:
            remaining -= len(page)

        token = None
        if page and next_offset < len(entries) and (remaining is None or remaining > 0):
            token = encode_continuation_token(next_offset, remaining)
        return ListResult(items=page, continuation_token=token)
