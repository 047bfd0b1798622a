"""
Helper functions to make writing unit tests for the Pizzeria core easier
"""

import os
import uuid
import random
import secrets
import datetime
import unittest
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Type, Union

import httpx
import pydantic
from fastapi.testclient import TestClient

from pizzeria_core import schemas as _schemas, settings as _settings
from pizzeria_core.api.api import create_app
from pizzeria_core.persistence import MemoryStore


def random_topping(rng: random.Random = random) -> Dict[str, str]:
    return {
        "topping": rng.choice(list(_schemas.ToppingKind)).value,
        "amount": rng.choice(list(_schemas.ToppingAmount)).value
    }


def random_pizza(rng: random.Random = random) -> Dict[str, Any]:
    return {
        "size": rng.choice(list(_schemas.PizzaSize)).value,
        "toppings": [random_topping(rng) for _ in range(rng.randint(0, 3))]
    }


def random_pickup_time(rng: random.Random = random) -> str:
    start = datetime.datetime(2030, 1, 1, 11, 0, tzinfo=datetime.timezone.utc)
    return (start + datetime.timedelta(minutes=rng.randint(0, 60 * 24 * 365))).isoformat()


def random_order_document(
        order_id: Optional[Union[str, uuid.UUID]] = None,
        with_id: bool = True,
        rng: random.Random = random
) -> Dict[str, Any]:
    """
    Return a random, valid JSON document of an order (optionally without the ``id`` property)
    """

    document = {
        "pizzas": [random_pizza(rng) for _ in range(rng.randint(1, 4))],
        "pickupTime": random_pickup_time(rng)
    }
    if with_id:
        document["id"] = str(order_id or uuid.uuid4())
    return document


def random_order(order_id: Optional[uuid.UUID] = None, rng: random.Random = random) -> _schemas.Order:
    return _schemas.Order.model_validate(random_order_document(order_id, rng=rng))


class BaseTest(unittest.TestCase):
    """
    A base class for unit tests which introduces simple setup and teardown of unit tests

    The config file search path is redirected to a unique, initially
    non-existing file, which gets removed again during teardown.
    If a subclass needs special setup or teardown functionality, it **MUST**
    call the superclasses setup and teardown methods.
    """

    config_file: Optional[str] = None
    _previous_config_paths: Optional[List[str]] = None

    def setUp(self) -> None:
        self.config_file = f"config_{os.getpid()}_{secrets.token_hex(8)}.json"
        self._previous_config_paths = _settings.CONFIG_PATHS
        _settings.CONFIG_PATHS = [self.config_file]

    def tearDown(self) -> None:
        _settings.CONFIG_PATHS = self._previous_config_paths
        if self.config_file and os.path.exists(self.config_file):
            os.remove(self.config_file)


class BaseAPITests(BaseTest):
    api_version_format: str = "/v{}"
    latest_api_version: int = 1

    store: MemoryStore
    client: TestClient
    settings: _settings.Settings

    def setUp(self) -> None:
        super().setUp()
        self.store = MemoryStore()
        self.settings = self.get_settings()
        self.client = TestClient(
            create_app(settings=self.settings, store=self.store, configure_logging=False),
            raise_server_exceptions=False
        )

    def tearDown(self) -> None:
        self.client.close()
        super().tearDown()

    def get_settings(self) -> _settings.Settings:
        return _settings.Settings()

    def assertQuery(
            self,
            endpoint: Union[Tuple[str, str], Tuple[str, str, int]],
            status_code: Union[int, Iterable[int]] = 200,
            json: Optional[Union[dict, list]] = None,
            headers: Optional[Union[Mapping[str, str], List[Tuple[str, str]]]] = None,
            r_none: bool = False,
            r_is_json: bool = True,
            r_headers: Optional[Union[Mapping, Iterable]] = None,
            r_schema: Optional[Type[pydantic.BaseModel]] = None,
            no_version: bool = False,
            **kwargs
    ) -> httpx.Response:
        """
        Do a query to the specified endpoint and return the response

        Besides also carrying the optional JSON data, headers and other keyword arguments,
        this function asserts that the response has the specified status code. Furthermore,
        the optional asserted response headers and asserted response schema can be used,
        where the headers are either an iterable to only assert certain keys or a mapping
        to also assert values.

        :param endpoint: tuple of the method, the path of the endpoint and the
            optional API version (uses the latest version if omitted by default)
        :param status_code: asserted status code(s) of the final server's response
        :param json: optional JSON document sent as request body
        :param headers: optional headers (a list of tuples allows repeated header fields)
        :param r_none: switch to expect no (=empty) result and skip all other response content checks
        :param r_is_json: switch to check that the response contains JSON data
        :param r_headers: optional set of headers which are asserted in the response
        :param r_schema: optional class of a response schema to be asserted
        :param no_version: don't add the latest version to the two-element endpoint definition
        :param kwargs: dict of any further keyword arguments, passed to ``TestClient.request``
        :return: response to the requested resource
        """

        if len(endpoint) == 3:
            method, path, api_version = endpoint
        else:
            method, path = endpoint
            api_version = self.latest_api_version

        if not path.startswith("/"):
            path = "/" + path
        if not no_version:
            path = self.api_version_format.format(api_version) + path

        response = self.client.request(method.upper(), path, json=json, headers=headers, **kwargs)

        if isinstance(status_code, int):
            self.assertEqual(status_code, response.status_code, response.text)
        else:
            self.assertIn(response.status_code, status_code, response.text)

        if r_headers is not None:
            for k in (r_headers.keys() if isinstance(r_headers, Mapping) else r_headers):
                self.assertIsNotNone(response.headers.get(k), response.headers)
                if isinstance(r_headers, Mapping):
                    self.assertEqual(r_headers[k], response.headers.get(k), response.headers)

        if r_none:
            self.assertEqual("", response.text)
        elif r_is_json:
            try:
                content = response.json()
            except ValueError:
                self.fail(("No JSON content detected", response.headers, response.text))
            if r_schema is not None:
                self.assertTrue(r_schema.model_validate(content), content)

        return response

    def assertError(
            self,
            response: httpx.Response,
            code: _schemas.ApiErrorCode,
            message: Optional[str] = None
    ) -> _schemas.APIError:
        error = _schemas.APIError.model_validate(response.json())
        self.assertEqual(code, error.code, response.text)
        if message is not None:
            self.assertIn(message, error.message)
        return error

    def create_order(self, document: Optional[Dict[str, Any]] = None) -> Tuple[str, Dict[str, Any]]:
        """
        Create a new (random) order and return its ID and the response document
        """

        document = document or random_order_document()
        order_id = document.get("id") or str(uuid.uuid4())
        response = self.assertQuery(
            ("PUT", f"/orders/{order_id}"),
            201,
            json=document,
            headers={"If-None-Match": "*"},
            r_headers=["ETag", "Location"]
        )
        return order_id, response.json()

    def assertSameOrder(self, expected: Dict[str, Any], actual: Dict[str, Any]):
        self.assertEqual(
            _schemas.Order.model_validate(expected),
            _schemas.Order.model_validate(actual),
            (expected, actual)
        )
