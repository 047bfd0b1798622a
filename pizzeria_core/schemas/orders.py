"""
Pizzeria schemas for orders

All resource schemas share the serializer configuration of ``ResourceModel``:
property names are camelCase on the wire, enum members are (de)serialized by
their exact, case-sensitive value and instances are immutable.
"""

import re
import enum
import uuid
import datetime
from typing import Any, List

import pydantic
from pydantic.alias_generators import to_camel


ISO_DATE_TIME_PATTERN = re.compile(
    r"\d{4}-\d{2}-\d{2}[Tt ]\d{2}:\d{2}(:\d{2}(\.\d+)?)?([Zz]|[+-]\d{2}:?\d{2})?"
)


class ResourceModel(pydantic.BaseModel):
    model_config = pydantic.ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True
    )


@enum.unique
class PizzaSize(str, enum.Enum):
    SMALL = "Small"
    MEDIUM = "Medium"
    LARGE = "Large"


@enum.unique
class ToppingKind(str, enum.Enum):
    PEPPERONI = "Pepperoni"
    CHEESE = "Cheese"
    PINEAPPLE = "Pineapple"


@enum.unique
class ToppingAmount(str, enum.Enum):
    LIGHT = "Light"
    MEDIUM = "Medium"
    EXTRA = "Extra"


class Topping(ResourceModel):
    kind: ToppingKind = pydantic.Field(alias="topping")
    amount: ToppingAmount


class Pizza(ResourceModel):
    size: PizzaSize
    toppings: List[Topping]


class Order(ResourceModel):
    """
    Order of at least one pizza which will be picked up at some point in time
    """

    id: uuid.UUID
    pizzas: List[Pizza] = pydantic.Field(min_length=1)
    pickup_time: datetime.datetime

    @pydantic.field_validator("pickup_time", mode="before")
    @classmethod
    def require_timestamp_string(cls, value: Any) -> Any:
        if isinstance(value, datetime.datetime):
            return value
        if not isinstance(value, str) or not ISO_DATE_TIME_PATTERN.fullmatch(value):
            raise ValueError("must be an ISO 8601 date time string")
        return value
