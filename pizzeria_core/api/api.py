"""
Combined Pizzeria core REST API definitions

This API may provide multiple versions of certain endpoints.
Take a look into the different API definitions to see which
functionality they provide.
"""

import logging.config
import contextlib
from typing import Any, Callable, Dict, Optional, Type, Union

import fastapi
import fastapi.responses
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import base, versioning
from .dependency import ORDER_STORE
from .routers import router
from .. import schemas, __version__
from ..persistence import MemoryStore, ResourceStore
from ..settings import Settings


DEFAULT_EXCEPTION_HANDLERS = {
    StarletteHTTPException: base.APIException.handle,
    RequestValidationError: base.handle_request_validation_error,
    Exception: base.handle_generic_exception
}


API_V1_DOC = """Pizzeria core REST API definition version 1

The API manages pizza orders as resources with optimistic concurrency
control. Every stored revision of an order has an entity tag (ETag), which
is returned in the `eTag` property of the order as well as in the `ETag`
response header. Writing an order (`PUT /orders/{id}`) requires exactly
one conditional header: `If-None-Match: *` to create a new order or
`If-Match: <ETag>` to replace the revision identified by that ETag.

All error responses, except `500` (Internal Server Error), use the schema
of the `APIError`. Its `code` identifies the kind of failure, its `message`
is human-readable and its `details` contain nested errors, e.g. one for each
invalid property of a request body. In general, the following `4xx` error
responses are used in the API code:

1. `400` (Bad Request): the identifier, a query parameter, the conditional
   headers or the request body are invalid. All problems of a request are
   reported together in the `details` of the error.
2. `404` (Not Found): the order to be read or replaced doesn't exist.
3. `409` (Conflict): the order to be created already exists.
4. `412` (Precondition Failed): the given ETag doesn't identify the current
   revision of the order. Get the order again and retry with its current ETag.
5. `428` (Precondition Required): no conditional header was given for a write.

Take a look at the individual methods and endpoints for more information.
"""


def _make_app(
        title: str,
        version: str,
        description: str,
        exception_handlers: Optional[Dict[Any, Callable]] = None,
        root_redirect: bool = True,
        responses: Optional[Dict[Union[int, str], Dict[str, Any]]] = None,
        api_class: Optional[Type[fastapi.FastAPI]] = None,
        **kwargs
) -> fastapi.FastAPI:
    if api_class is None:
        api_class = fastapi.FastAPI
    app = api_class(
        title=title,
        version=version,
        description=description,
        responses=responses or {400: {"model": schemas.APIError}},
        **kwargs
    )

    handlers = exception_handlers or DEFAULT_EXCEPTION_HANDLERS
    for exc in handlers:
        app.add_exception_handler(exc, handlers[exc])

    if root_redirect:
        @app.get("/", include_in_schema=False)
        async def redirect_root():
            return fastapi.responses.RedirectResponse("./docs")

    return app


def create_app(
        settings: Optional[Settings] = None,
        store: Optional[ResourceStore] = None,
        configure_logging: bool = True
) -> fastapi.FastAPI:
    """
    Create a new ``FastAPI`` instance using the specified settings, store and switches

    This function is conveniently used to allow overwriting the settings
    before launching the application as well as to allow multiple ``FastAPI``
    instances in one program, which in turn makes unit testing much easier.
    The settings and the order store are attached to the state of every
    (sub-)application, where the request dependencies will look them up.

    :param settings: optional Settings instance (would be created if not present)
    :param store: optional store of orders (a new empty ``MemoryStore`` if not present)
    :param configure_logging: switch whether to configure logging
    :return: new ``FastAPI`` instance
    """

    if settings is None:
        settings = Settings()
    if store is None:
        store = MemoryStore()

    if configure_logging:
        logging.config.dictConfig(settings.logging.model_dump())
    logger = logging.getLogger(__name__)
    logger.debug("Starting application...")

    @contextlib.asynccontextmanager
    async def lifespan(_: fastapi.FastAPI):
        logger.info("Starting API...")
        yield
        logger.info("Shutting down...")

    app = _make_app(
        title="Pizzeria core REST API",
        version=__version__,
        description=__doc__,
        apis={
            1: _make_app(
                title="Pizzeria core REST API v1",
                version=__version__,
                description=API_V1_DOC,
                api_class=base.APIWithoutValidationError
            )
        },
        logger=logger,
        lifespan=lifespan,
        api_class=versioning.VersionedFastAPI
    )

    assert isinstance(app, versioning.VersionedFastAPI), "'VersionedFastAPI' instance required"
    app.add_router(router)
    app.finish()

    for application in [app, *app.apis.values()]:
        application.state.settings = settings
        application.state.stores = {ORDER_STORE: store}
    return app


class APIWrapper:
    """
    Wrapper class around the FastAPI main object, accessible via the ``app`` property

    There should be only one global instance of this object, which should only
    export its functionality to hold the ``app`` property. This wrapper can be
    used to allow easy command-line usage via ``uvicorn`` calls. Example:

    .. code-block::

        uvicorn pizzeria_core.api.api:api.app
    """

    def __init__(self):
        self._app: Optional[fastapi.FastAPI] = None

    @property
    def app(self) -> fastapi.FastAPI:
        """
        Return the ``app`` instance (or create it with default settings if it doesn't exist)
        """

        if self._app is None:
            self._app = create_app()
        return self._app


api = APIWrapper()
