"""
Pizzeria router module for generic functionalities
"""

from ._router import router
from .. import versioning


@router.get("/health", tags=["Generic"])
@versioning.versions(1)
async def verify_running_backend():
    """
    Return 200 OK with an empty object as body to only verify that the service works
    """

    return {}
