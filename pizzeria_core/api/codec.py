"""
Generic codec between resource schemas and JSON documents

The codec converts any resource schema (a pydantic model with an ``id``
field) to and from a JSON object. Deserialization never stops at the first
problem: pydantic validates every property independently, so all problems
of a document are reported together as a list of ``FieldError`` tuples.
"""

import uuid
from typing import Any, Dict, Generic, List, NamedTuple, Optional, Sequence, Type, Union

import pydantic

from .etag import ETag
from ..persistence.store import ResourceType


E_TAG_PROPERTY = "eTag"
INVALID_ID_MESSAGE = "ID must be a valid GUID."


class FieldError(NamedTuple):
    field: str
    message: str


class ResourceValidationError(ValueError):
    """
    Exception raised when a JSON document is no valid resource, carrying all found problems
    """

    def __init__(self, errors: Sequence[FieldError]):
        super().__init__("; ".join(f"{e.field or '<document>'}: {e.message}" for e in errors))
        self.errors: List[FieldError] = list(errors)


def format_location(location: Sequence[Union[str, int]]) -> str:
    """
    Format a pydantic error location like ``("pizzas", 0, "size")`` as ``pizzas[0].size``
    """

    path = ""
    for part in location:
        if isinstance(part, int):
            path += f"[{part}]"
        else:
            path += f".{part}" if path else str(part)
    return path


def parse_id(value: str) -> Optional[uuid.UUID]:
    try:
        return uuid.UUID(value)
    except (ValueError, TypeError, AttributeError):
        return None


class ResourceCodec(Generic[ResourceType]):
    """
    Codec for one kind of resource, defined by its pydantic schema

    :param model: pydantic schema class of the resource (e.g. ``schemas.Order``)
    :param name: human-readable name of the resource kind (default: class name)
    :param id_field: name of the identifier field of the schema
    """

    def __init__(self, model: Type[pydantic.BaseModel], name: Optional[str] = None, id_field: str = "id"):
        self.model = model
        self.name = name or model.__name__
        self.id_field = id_field

    def describe(self, resource_id: Any) -> str:
        return f"{self.name} with ID '{resource_id}'"

    def serialize(self, resource: ResourceType) -> Dict[str, Any]:
        return resource.model_dump(mode="json", by_alias=True)

    def serialize_revision(self, resource: ResourceType, e_tag: ETag) -> Dict[str, Any]:
        """
        Serialize the resource and add the ETag of the revision as property ``eTag``
        """

        document = self.serialize(resource)
        document[E_TAG_PROPERTY] = str(e_tag)
        return document

    def try_deserialize(self, resource_id: str, document: Any) -> ResourceType:
        """
        Validate a JSON document and create the resource identified by the given ID

        The ID is taken from the ``resource_id`` argument. If the document carries
        an ID as well, both have to match. The result of the serialization of a
        valid resource can be deserialized to an equal resource again.

        :param resource_id: string representation of the identifier of the resource
        :param document: parsed JSON document (should be a JSON object)
        :return: valid resource instance
        :raises ResourceValidationError: with one entry for every problem found in the document
        """

        if not isinstance(document, dict):
            raise ResourceValidationError([FieldError("", "Request body must be a JSON object.")])

        errors = []
        data = dict(document)
        route_id = parse_id(resource_id)
        if self.id_field in data and route_id is not None:
            if parse_id(str(data[self.id_field])) != route_id:
                errors.append(FieldError(
                    self.id_field,
                    f"Property '{self.id_field}' must match the ID of the route ('{resource_id}')."
                ))
        data[self.id_field] = resource_id

        try:
            resource = self.model.model_validate(data)
        except pydantic.ValidationError as exc:
            errors.extend(self._convert_error(error) for error in exc.errors())
            raise ResourceValidationError(errors) from exc
        if errors:
            raise ResourceValidationError(errors)
        return resource

    def _convert_error(self, error: Dict[str, Any]) -> FieldError:
        path = format_location(error.get("loc", ()))
        kind = error.get("type")
        context = error.get("ctx") or {}

        if path == self.id_field:
            return FieldError(path, INVALID_ID_MESSAGE)
        if kind == "missing":
            return FieldError(path, f"Property '{path}' is required.")
        if kind == "enum":
            return FieldError(
                path,
                f"{error.get('input')!r} is not a valid value for property '{path}', "
                f"expected {context.get('expected', 'a known value')}."
            )
        if kind == "too_short":
            return FieldError(path, f"Property '{path}' must contain at least {context.get('min_length', 1)} item(s).")
        return FieldError(path, f"Property '{path}' is invalid: {error.get('msg')}.")
