"""
Pizzeria core settings provider
"""

import os
import logging
from typing import Any, Dict, List, Optional, Tuple, Type

try:
    import ujson as json
except ImportError:
    import json

import pydantic_settings
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from .schemas import config


CONFIG_PATHS: List[str] = ["config.json", os.path.join("..", "config.json")]
"""
list of search paths for the config file, can be overwritten by the env variable ``CONFIG_PATH``
"""

if os.environ.get("CONFIG_PATH"):
    CONFIG_PATHS = [os.environ.get("CONFIG_PATH")]


logger = logging.getLogger(__name__)


def find_config_file() -> Optional[str]:
    for path in CONFIG_PATHS:
        if os.path.exists(path):
            return path
    return None


def read_settings_from_file() -> Dict[str, Any]:
    """
    Read the content of the first existing config file (or an empty dict if there's none)
    """

    path = find_config_file()
    if path is None:
        logger.debug(f"No config file found in {CONFIG_PATHS!r}, using defaults")
        return {}
    with open(path, "r", encoding="UTF-8") as file:
        content = json.load(file)
    if not isinstance(content, dict):
        raise ValueError(f"Config file {path!r} must contain a JSON object")
    return content


class JsonConfigFileSource(PydanticBaseSettingsSource):
    """
    Settings source reading the JSON config file found via ``CONFIG_PATHS``
    """

    def get_field_value(self, field, field_name: str) -> Tuple[Any, str, bool]:
        return read_settings_from_file().get(field_name), field_name, False

    def __call__(self) -> Dict[str, Any]:
        return read_settings_from_file()


class Settings(BaseSettings):
    """
    Pizzeria core settings

    Do not change the settings at runtime, since this might lead to unspecified
    behavior. Always restart the server after changing the config file. Values
    given explicitly take precedence over environment variables (where nested
    values use ``__`` as delimiter, e.g. ``SERVER__PORT``), which take precedence
    over the config file, which overwrites the built-in defaults.
    """

    model_config = pydantic_settings.SettingsConfigDict(env_nested_delimiter="__", extra="ignore")

    server: config.ServerConfig = config.ServerConfig()
    paging: config.PagingConfig = config.PagingConfig()
    logging: config.LoggingConfig = config.LoggingConfig()

    @classmethod
    def settings_customise_sources(
            cls,
            settings_cls: Type[BaseSettings],
            init_settings: PydanticBaseSettingsSource,
            env_settings: PydanticBaseSettingsSource,
            dotenv_settings: PydanticBaseSettingsSource,
            file_secret_settings: PydanticBaseSettingsSource
    ) -> Tuple[PydanticBaseSettingsSource, ...]:
        return init_settings, env_settings, JsonConfigFileSource(settings_cls)


def store_configuration(conf: Optional[config.CoreConfig] = None, path: Optional[str] = None) -> str:
    """
    Write the configuration (or the default configuration) as JSON config file

    :param conf: optional configuration that should be stored (default: built-in defaults)
    :param path: optional path of the file (default: the first entry of ``CONFIG_PATHS``)
    :return: absolute path of the written file
    """

    p = os.path.abspath(path or CONFIG_PATHS[0])
    conf = conf or config.CoreConfig()
    with open(p, "w", encoding="UTF-8") as f:
        f.write(json.dumps(conf.model_dump(mode="json"), indent=4))
    logger.info(f"A new config file has been created as {p!r}.")
    return p
