"""
Abstract store capability for API resources

A store owns the authoritative mapping of resource identifiers to the current
resource revisions and their ETags. Any implementation must serialize
conflicting writes for the same identifier, so that at most one write
succeeds per ETag. Expected failures of writes are returned as enum members
instead of being raised; any raised exception is an unexpected failure.
"""

import abc
import enum
import uuid
import dataclasses
from typing import Generic, Iterable, Optional, Tuple, TypeVar, Union

from ..api.etag import ETag
from ..schemas import PagingParameters


ResourceType = TypeVar("ResourceType")


@enum.unique
class CreateError(enum.Enum):
    RESOURCE_ALREADY_EXISTS = enum.auto()


@enum.unique
class ReplaceError(enum.Enum):
    RESOURCE_NOT_FOUND = enum.auto()
    ETAG_MISMATCH = enum.auto()


class InvalidContinuationToken(ValueError):
    """
    Exception raised by list operations when the continuation token can't be used
    """


@dataclasses.dataclass(frozen=True)
class ListResult(Generic[ResourceType]):
    items: Iterable[Tuple[ResourceType, ETag]]
    continuation_token: Optional[str] = None


class ResourceStore(abc.ABC, Generic[ResourceType]):
    """
    Store capability for one kind of resource, keyed by the resource's ``id``

    All operations are coroutines which are treated as atomic by the caller.
    Cancelling an operation must not leave a partial modification behind.
    """

    @abc.abstractmethod
    async def create(self, resource: ResourceType) -> Union[ETag, CreateError]:
        """
        Store a new resource and return the ETag of its first revision

        :param resource: resource which identifier must not be in use yet
        :return: new ETag or ``CreateError.RESOURCE_ALREADY_EXISTS``
        """

    @abc.abstractmethod
    async def replace(self, e_tag: ETag, resource: ResourceType) -> Union[ETag, ReplaceError]:
        """
        Replace the current revision of a resource if its ETag matches the expected one

        :param e_tag: ETag of the revision that the client expects to overwrite
        :param resource: complete new revision of the resource
        :return: new ETag or the reason why the resource has not been replaced
        """

    @abc.abstractmethod
    async def find(self, resource_id: uuid.UUID) -> Optional[Tuple[ResourceType, ETag]]:
        """
        Return the current revision of a resource and its ETag, if it exists
        """

    @abc.abstractmethod
    async def delete(self, resource_id: uuid.UUID) -> None:
        """
        Delete a resource, which is a no-op for unknown identifiers
        """

    @abc.abstractmethod
    async def list(self, paging: PagingParameters) -> ListResult[ResourceType]:
        """
        Return one page of resources and an optional token to continue listing

        :param paging: parsed paging parameters of the list request (the field
            ``select`` is ignored, since stores always return complete resources)
        :return: page of resources with their ETags and the continuation token
        :raises InvalidContinuationToken: when the given token can't be decoded
        """
