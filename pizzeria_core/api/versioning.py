"""
Pizzeria API library to provide multiple versions of the API endpoints
"""

import logging
import dataclasses
from typing import Callable, Dict, FrozenSet, Optional

import fastapi
import fastapi.routing

from .. import schemas


VERSION_ANNOTATION_NAME = "_api_versions"


@dataclasses.dataclass(frozen=True)
class VersionAnnotation:
    """
    API versions that should serve a path operation

    Either an explicit set of versions, a range between a minimal
    and a maximal version, or both of them (then both must hold).
    """

    explicit: FrozenSet[int] = frozenset()
    minimal: Optional[int] = None
    maximal: Optional[int] = None

    def __post_init__(self):
        if not all(isinstance(v, int) for v in self.explicit):
            raise TypeError(f"Not all annotations are integers: {set(self.explicit)!r}")
        for limit in (self.minimal, self.maximal):
            if limit is not None and not isinstance(limit, int):
                raise TypeError(f"Expected int, got {type(limit)!r}")
        if self.minimal is not None and any(v < self.minimal for v in self.explicit):
            raise ValueError("Can't accept annotations smaller than the minimal version")
        if self.maximal is not None and any(v > self.maximal for v in self.explicit):
            raise ValueError("Can't accept annotations bigger than the maximal version")

    def includes(self, version: int, absolute_minimum: int, absolute_maximum: int) -> bool:
        minimal = absolute_minimum if self.minimal is None else self.minimal
        maximal = absolute_maximum if self.maximal is None else self.maximal
        if not minimal <= version <= maximal:
            return False
        return not self.explicit or version in self.explicit


def versions(
        *annotations: int,
        minimal: Optional[int] = None,
        maximal: Optional[int] = None
) -> Callable[[Callable], Callable]:
    """
    Decorate a path operation function with the version(s) of the API that should support it

    :param annotations: any number of explicit API versions that should include the decorated
        path operation (which can't be below or above the minimal and maximal values respectively)
    :param minimal: minimal version of APIs that should include the decorated path operation
    :param maximal: maximal version of APIs that should include the decorated path operation
    :return: decorator to use on a path operation function
    """

    annotation = VersionAnnotation(frozenset(annotations), minimal, maximal)

    def decorator(func: Callable) -> Callable:
        assert not hasattr(func, VERSION_ANNOTATION_NAME), "'versions' can't be used twice"
        setattr(func, VERSION_ANNOTATION_NAME, annotation)
        return func

    return decorator


class VersionedFastAPI(fastapi.FastAPI):
    """
    Specialized FastAPI adding support for multiple versioned sub-APIs

    The ``apis`` parameter maps every enabled API version to its own
    ``FastAPI`` instance, which gets mounted below ``/v{version}``.
    Use ``add_router`` instead of ``include_router`` to add the routes
    of a router to all sub-APIs whose version is covered by the
    ``versions`` annotation of the route's endpoint. Call ``finish``
    once after adding all routers.

    .. code-block::

        app = VersionedFastAPI(
            title="API",
            apis={1: FastAPI(title="API v1", version="1.0")}
        )
        app.add_router(...)
        app.finish()
    """

    def __init__(
            self,
            apis: Dict[int, fastapi.FastAPI],
            *args,
            version_format: str = "/v{}",
            logger: Optional[logging.Logger] = None,
            absolute_minimal_version: int = 0,
            absolute_maximal_version: Optional[int] = None,
            **kwargs
    ):
        assert version_format.count("{}") == 1, "Version format string must contain '{}' once"
        super().__init__(*args, **kwargs)
        self._apis = apis
        self._version_format = version_format
        self._logger = logger or logging.getLogger(__name__)
        self._abs_min = absolute_minimal_version
        self._abs_max = absolute_maximal_version or max(apis.keys())
        self._finished = False

    @property
    def apis(self) -> Dict[int, fastapi.FastAPI]:
        return dict(self._apis)

    def finish(self, versions_endpoint: bool = True):
        """
        Mount all sub-APIs once, after all routers have been added

        :param versions_endpoint: switch to enable the special ``/versions`` endpoint
        """

        if self._finished:
            return

        for api_version, sub_api in self._apis.items():
            self.mount(self._version_format.format(api_version), sub_api)

        if versions_endpoint:
            @self.get("/versions", response_model=schemas.Versions, tags=["Miscellaneous"])
            async def get_version_info():
                """
                Return the list of available API versions and their path prefixes
                """

                return schemas.Versions(
                    latest=max(self._apis.keys()),
                    versions=[
                        schemas.Versions.Version(version=v, prefix=self._version_format.format(v))
                        for v in sorted(self._apis.keys())
                    ]
                )

        self._finished = True

    def add_router(self, router: fastapi.APIRouter, **kwargs):
        """
        Add the routes of the router to the set of sub-APIs which fulfill their requirements

        :param router: APIRouter carrying all routes that should be filtered and added
        :param kwargs: optional keyword arguments for the ``include_router`` method of the
            ``FastAPI`` instances which were supplied via the constructor's ``apis`` argument
        :raises TypeError: when there are problems with the annotated values of the endpoints
        """

        if self._finished:
            raise RuntimeError("Can't add new routers after the API has been finally built")

        for route in router.routes:
            endpoint = getattr(route, "endpoint", None)
            if endpoint is not None and not hasattr(endpoint, VERSION_ANNOTATION_NAME):
                self._logger.warning(
                    f"Route {route!r} has no supported annotated version! It will "
                    f"therefore only be supported on API version {self._abs_max} by default."
                )

        kwargs.pop("prefix", None)
        for api_version, sub_api in self._apis.items():
            filtered_routes = []
            for route in router.routes:
                if not isinstance(route, fastapi.routing.APIRoute):
                    self._logger.error(f"Route {route!r} (type {type(route)!r}) is no 'APIRoute' instance! Skipping.")
                    continue
                annotation = getattr(route.endpoint, VERSION_ANNOTATION_NAME, VersionAnnotation(minimal=self._abs_max))
                if not isinstance(annotation, VersionAnnotation):
                    raise TypeError(f"Version annotation {annotation!r} of {route!r} is invalid!")
                if annotation.includes(api_version, self._abs_min, self._abs_max):
                    filtered_routes.append(route)

            sub_api.include_router(
                fastapi.APIRouter(
                    default_response_class=router.default_response_class,
                    routes=filtered_routes
                ),
                **kwargs
            )
