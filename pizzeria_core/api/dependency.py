"""
Pizzeria API dependency library
"""

import logging

import fastapi.datastructures
from fastapi import Request

from ..persistence.store import ResourceStore
from ..settings import Settings


logger = logging.getLogger(__name__)

ORDER_STORE = "orders"


class LocalRequestData:
    """
    Collection of core dependencies used by all path operations

    This class stores references to various important objects that will
    almost certainly be used by request handlers (path operations).
    The settings are taken from the state of the application which
    handles the request, where ``create_app`` has stored them.
    """

    def __init__(self, request: Request):
        self.request = request
        self.config: Settings = request.app.state.settings

    @property
    def url(self) -> fastapi.datastructures.URL:
        """
        Return the URL of the current request as it should be presented to clients

        If ``server.public_base_url`` is configured, its scheme, its host
        and its path (as prefix) replace the ones the server has received.
        """

        url = self.request.url
        base = self.config.server.public_base_url
        if base is None:
            return url
        base_url = fastapi.datastructures.URL(str(base))
        return url.replace(
            scheme=base_url.scheme,
            netloc=base_url.netloc,
            path=base_url.path.rstrip("/") + url.path
        )


class StoreDependency:
    """
    Dependency resolving the store of one resource kind from the application state

    Stores are injected by ``create_app`` and never held as module globals.
    """

    def __init__(self, name: str):
        self.name = name

    def __call__(self, request: Request) -> ResourceStore:
        stores = getattr(request.app.state, "stores", {})
        if self.name not in stores:
            logger.error(f"No store {self.name!r} configured for application {request.app!r}")
            raise RuntimeError(f"Store {self.name!r} is not available")
        return stores[self.name]
