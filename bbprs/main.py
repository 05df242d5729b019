"""bbprs entry point.

Lists the open pull requests of the configured repository and prints them
as JSON or YAML. Usage: bbprs [list] --config config.yaml.
"""

import argparse
import json
import logging
import sys
from pathlib import Path

import yaml
from pydantic import ValidationError

from bbprs.adapters import ConfigError, DiscoveryError
from bbprs.config import LoggingConfig, build_service, load_config
from bbprs.context import OperationContext
from bbprs.logging import BbprsLogging

EXIT_OK = 0
EXIT_DISCOVERY_ERROR = 1
EXIT_CONFIG_ERROR = 2
EXIT_INTERRUPTED = 130


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI with optional subcommand (list)."""
    argv = argv if argv is not None else sys.argv[1:]
    rest = list(argv)
    if rest and rest[0] == "list":
        rest = rest[1:]

    parser = argparse.ArgumentParser(
        prog="bbprs",
        description="List open pull requests of a Bitbucket Cloud repository",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=Path("config.yaml"),
        help="Path to YAML config file",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Overall deadline in seconds for the listing",
    )
    parser.add_argument(
        "--format",
        choices=("json", "yaml"),
        default="json",
        help="Output format",
    )
    parser.add_argument(
        "--check",
        action="store_true",
        help="Only load and validate config, then exit",
    )
    args = parser.parse_args(rest)
    if args.timeout is not None and args.timeout <= 0:
        parser.error("--timeout must be positive")
    return args


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    log = logging.getLogger("bbprs.main")

    try:
        config = load_config(args.config)
        BbprsLogging(config.logging).setup()
        service = build_service(config)
    except (ConfigError, ValidationError, yaml.YAMLError) as e:
        BbprsLogging(LoggingConfig()).setup()
        log.error("Invalid configuration: %s", e)
        return EXIT_CONFIG_ERROR

    if args.check:
        print("Config OK:", f"{config.bitbucket.owner}/{config.bitbucket.repo_slug}", config.bitbucket.auth)
        return EXIT_OK

    ctx = OperationContext(timeout=args.timeout)
    try:
        pull_requests = service.list(ctx)
    except KeyboardInterrupt:
        return EXIT_INTERRUPTED
    except DiscoveryError as e:
        log.error("Failed to list pull requests: %s", e)
        return EXIT_DISCOVERY_ERROR

    records = [pr.model_dump() for pr in pull_requests]
    if args.format == "yaml":
        sys.stdout.write(yaml.safe_dump(records, sort_keys=False))
    else:
        print(json.dumps(records, indent=2))
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
