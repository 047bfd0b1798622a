"""
ETag helper library for the core REST API
"""

import uuid
import logging
import dataclasses

from fastapi import Response


logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class ETag:
    """
    Opaque, non-empty token identifying one specific revision of a resource

    Stores generate a fresh random token for every successful write,
    so equal tokens for the same resource mean equal revisions.
    """

    value: str

    def __post_init__(self):
        if not isinstance(self.value, str) or not self.value.strip():
            raise ValueError(f"ETag must be a non-empty string, not {self.value!r}")

    def __str__(self) -> str:
        return self.value

    @classmethod
    def generate(cls) -> "ETag":
        return cls(str(uuid.uuid4()))

    @classmethod
    def from_header(cls, value: str) -> "ETag":
        """
        Create an ETag from a single header value, with or without surrounding quotes

        :param value: raw value of a conditional header field like ``If-Match``
        :return: ETag without the quotes
        :raises ValueError: when nothing remains of the value after stripping
        """

        tag = value.strip()
        if len(tag) >= 2 and tag.startswith('"') and tag.endswith('"'):
            tag = tag[1:-1]
        return cls(tag)

    def to_header(self) -> str:
        return f'"{self.value}"'


def add_header(response: Response, e_tag: ETag) -> None:
    """
    Add the ETag header field to the response (quoted as required by RFC 9110)

    :param response: Response object of the handled request
    :param e_tag: ETag of the resource revision returned in the response
    """

    if "ETag" in response.headers:
        logger.warning(f"Overwriting ETag header {response.headers['ETag']!r} with {e_tag.to_header()!r}")
    response.headers["ETag"] = e_tag.to_header()
