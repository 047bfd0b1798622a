"""
Pizzeria extra schemas

This module contains the schemas for API versions and list requests.
"""

from typing import List, Optional

import pydantic


class Versions(pydantic.BaseModel):
    class Version(pydantic.BaseModel):
        version: pydantic.PositiveInt
        prefix: pydantic.constr(min_length=2)

    latest: pydantic.PositiveInt
    versions: List[Version]


class PagingParameters(pydantic.BaseModel):
    """
    Parsed query parameters of a list request

    The field `skip` is the number of leading items to omit, `top` limits
    the total number of items over all pages (no limit if unset) and
    `max_page_size` limits the number of items per page. The optional
    `select` field is the list of top-level properties that should be
    kept for every item. The opaque `continuation_token` resumes a previous
    list request and takes precedence over `skip` and `top`.
    """

    model_config = pydantic.ConfigDict(frozen=True)

    skip: pydantic.NonNegativeInt = 0
    top: Optional[pydantic.NonNegativeInt] = None
    max_page_size: pydantic.PositiveInt
    select: Optional[List[str]] = None
    continuation_token: Optional[pydantic.constr(min_length=1)] = None
