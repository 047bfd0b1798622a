#!/usr/bin/env python3

import os
import sys
import logging
import argparse

import uvicorn

from pizzeria_core import settings as _settings
from pizzeria_core.api.api import create_app


def get_parser(program: str) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog=program)

    commands = parser.add_subparsers(
        description="Available sub-commands: init, run",
        dest="command",
        required=True,
        metavar="<command>",
        help="the sub-command to be executed"
    )

    parser_init = commands.add_parser(
        "init",
        description="Initialize the project by creating a config file with the default settings"
    )
    parser_run = commands.add_parser(
        "run",
        description="Run 'uvicorn' ASGI server to serve the Pizzeria core REST API"
    )

    parser_init.add_argument(
        "--force",
        action="store_true",
        help="Allow overwriting an existing config file"
    )
    parser_init.add_argument(
        "--path",
        type=str,
        metavar="p",
        default=_settings.CONFIG_PATHS[0],
        help=f"Path to the newly created config file (defaults to {_settings.CONFIG_PATHS[0]!r})"
    )

    parser_run.add_argument(
        "--host",
        type=str,
        metavar="host",
        help="Bind TCP socket to this host (overwrite config)"
    )
    parser_run.add_argument(
        "--port",
        type=int,
        metavar="port",
        help="Bind TCP socket to this port (overwrite config)"
    )
    parser_run.add_argument(
        "--config",
        type=str,
        metavar="config",
        default=None,
        help="Overwrite the config file (searched in the default locations otherwise)"
    )
    parser_run.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging (do not use in production)"
    )
    parser_run.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload"
    )
    parser_run.add_argument(
        "--no-access-log",
        action="store_true",
        help="Disable access logs"
    )
    parser_run.add_argument(
        "--root-path",
        type=str,
        default="",
        metavar="p",
        help="Sub-mount the application below the given path"
    )

    return parser


def init_project(args: argparse.Namespace) -> int:
    if os.path.exists(args.path) and not args.force:
        print(f"File {args.path!r} already exists. Use '--force' to overwrite it. Aborting!", file=sys.stderr)
        return 1
    path = _settings.store_configuration(path=args.path)
    print(f"Successfully created the new config file {path!r}.")
    return 0


def run_server(args: argparse.Namespace) -> int:
    if args.debug:
        print("Do not start the server this way during production!", file=sys.stderr)

    if args.config:
        if not os.path.exists(args.config):
            print(f"Config file {args.config!r} not found!", file=sys.stderr)
            return 1
        _settings.CONFIG_PATHS.insert(0, args.config)
    try:
        settings = _settings.Settings()
    except ValueError:
        print("Ensure that the configuration file is valid. Please correct any errors.", file=sys.stderr)
        raise

    if args.debug:
        settings.logging.root["level"] = "DEBUG"
        for handler in settings.logging.handlers:
            settings.logging.handlers[handler]["level"] = "DEBUG"

    host = settings.server.host if args.host is None else args.host
    port = settings.server.port if args.port is None else args.port

    app = create_app(settings=settings)

    logging.getLogger("pizzeria_core").info(f"Server running at host {host} port {port}")
    uvicorn.run(
        "pizzeria_core.api.api:api.app" if args.reload else app,
        port=port,
        host=host,
        reload=args.reload,
        log_level="debug" if args.debug else "info",
        log_config=settings.logging.model_dump(),
        access_log=not args.no_access_log,
        proxy_headers=True,
        root_path=args.root_path
    )
    return 0


if __name__ == '__main__':
    program_name = sys.argv[0] if not sys.argv[0].endswith("__main__.py") else "pizzeria_core"
    namespace = get_parser(program_name).parse_args(sys.argv[1:])

    command_functions = {
        "init": init_project,
        "run": run_server
    }
    sys.exit(command_functions[namespace.command](namespace))
