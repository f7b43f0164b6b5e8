"""CLI entrypoint with scrape/test/schema/config commands."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Optional

from .config import Config, config_as_dict, get_user_value, load_config, set_user_value
from .document import parse_html
from .extractor import extract_structured
from .fetcher import FetchError, fetch_html
from .formatter import format_structured_output, format_with_llm, summarize_with_llm
from .llm import LLMClient, LLMError
from .models import CanonicalSchema
from .output import render_formatted, render_structured, write_output
from .schema_loader import SchemaError, list_schemas, load_schema, view_schema
from .validation import validate_schema_file

logger = logging.getLogger(__name__)


def make_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="webform", description="Scrape web pages into structured data")
    parser.add_argument("--config", default="webform.yaml", help="Path to config yaml")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    scrape_p = sub.add_parser("scrape", help="Scrape the specified URL")
    scrape_p.add_argument("url", help="The URL to scrape")
    scrape_p.add_argument("-s", "--schema", help="The schema to use for data extraction")
    scrape_p.add_argument("-o", "--output", choices=["json", "text"], default=None, help="Output format")
    scrape_p.add_argument("-f", "--save", type=Path, help="File path to save the output")
    scrape_p.add_argument("--llm-output", action="store_true", help="Send extracted data to the LLM for a summary")
    scrape_p.add_argument("--structured", action="store_true", help="Use structured output with schema validation")
    scrape_p.add_argument("--no-metadata", action="store_true", help="Omit _metadata from structured output")

    test_p = sub.add_parser("test", help="Test extraction without using the LLM")
    test_p.add_argument("url", help="The URL to scrape")
    test_p.add_argument("-s", "--schema", default="article", help="The schema to use for data extraction")
    test_p.add_argument("-o", "--output", choices=["json", "text"], default=None, help="Output format")
    test_p.add_argument("-f", "--save", type=Path, help="File path to save the output")

    schema_p = sub.add_parser("schema", help="Manage schemas")
    schema_sub = schema_p.add_subparsers(dest="schema_command", required=True)
    schema_sub.add_parser("list", help="List available schemas")
    view_p = schema_sub.add_parser("view", help="View a specific schema")
    view_p.add_argument("schema_name")
    validate_p = schema_sub.add_parser("validate", help="Validate a schema against the structural contract")
    validate_p.add_argument("schema_name")

    config_p = sub.add_parser("config", help="Manage configuration")
    config_sub = config_p.add_subparsers(dest="config_command", required=True)
    set_p = config_sub.add_parser("set", help="Set a configuration value, e.g. llm.api_key")
    set_p.add_argument("key")
    set_p.add_argument("value")
    get_p = config_sub.add_parser("get", help="Show one configuration value")
    get_p.add_argument("key")
    config_sub.add_parser("show", help="Show the effective configuration")
    return parser


def _fetch(config: Config, url: str) -> str:
    return asyncio.run(
        fetch_html(
            url,
            retries=config.fetch.retries,
            backoff_base=config.fetch.backoff_base,
            timeout=config.fetch.timeout,
            user_agent=config.fetch.user_agent,
        )
    )


def _load(config: Config, name: Optional[str]) -> CanonicalSchema:
    if not name:
        return CanonicalSchema()
    return load_schema(name, config.schemas.schemas_dir)


def _run_scrape(config: Config, args: argparse.Namespace) -> None:
    fmt = args.output or config.output.format
    html = _fetch(config, args.url)
    if args.structured and not args.schema:
        raise SchemaError("Schema is required for structured output", "")
    schema = _load(config, args.schema)
    issues: list[str] = []
    extracted = extract_structured(parse_html(html), schema, source=args.url, issues=issues)
    for issue in issues:
        logger.debug("Coercion: %s", issue)
    client = LLMClient.from_settings(config.llm)

    if args.llm_output:
        write_output(render_formatted(summarize_with_llm(extracted, client), fmt), args.save)
    elif args.structured:
        formatted = format_structured_output(extracted, schema, client, source=args.url)
        include_metadata = config.output.include_metadata and not args.no_metadata
        write_output(
            render_structured(formatted, fmt, include_metadata=include_metadata, indentation=config.output.indentation),
            args.save,
        )
    else:
        reply = format_with_llm(extracted, schema.selectors or None, client)
        write_output(render_formatted(reply, fmt, indentation=config.output.indentation), args.save)


def _run_test(config: Config, args: argparse.Namespace) -> None:
    fmt = args.output or config.output.format
    logger.info("Testing extraction from %s with schema %s", args.url, args.schema)
    html = _fetch(config, args.url)
    schema = _load(config, args.schema)
    logger.info("Using selectors: %s", schema.selectors)
    issues: list[str] = []
    extracted = extract_structured(parse_html(html), schema, source=args.url, issues=issues)
    for issue in issues:
        logger.warning("Coercion: %s", issue)
    write_output(render_structured(extracted, fmt, indentation=config.output.indentation), args.save)
    logger.info("Extraction completed successfully")


def _run_schema(config: Config, args: argparse.Namespace) -> int:
    schemas_dir = config.schemas.schemas_dir
    if args.schema_command == "list":
        print("Available schemas:", ", ".join(list_schemas(schemas_dir)) or "(none)")
    elif args.schema_command == "view":
        print(view_schema(args.schema_name, schemas_dir))
    elif args.schema_command == "validate":
        report = validate_schema_file(args.schema_name, schemas_dir)
        if report.valid:
            print(f"Schema '{args.schema_name}' is valid")
            return 0
        print(f"Schema '{args.schema_name}' is invalid:")
        for error in report.errors or []:
            print(f"  - {error}")
        return 1
    return 0


def _run_config(config: Config, args: argparse.Namespace) -> None:
    if args.config_command == "set":
        path = set_user_value(args.key, args.value)
        print(f"Configuration set: {args.key} = {args.value} ({path})")
    elif args.config_command == "get":
        print(get_user_value(args.key, config))
    elif args.config_command == "show":
        print(json.dumps(config_as_dict(config), indent=2))


def main(argv: Optional[list[str]] = None) -> int:
    parser = make_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO, format="%(levelname)s %(message)s")
    config = load_config(args.config)
    try:
        if args.command == "scrape":
            _run_scrape(config, args)
        elif args.command == "test":
            _run_test(config, args)
        elif args.command == "schema":
            return _run_schema(config, args)
        elif args.command == "config":
            _run_config(config, args)
    except (SchemaError, FetchError, LLMError, KeyError) as exc:
        logger.error("%s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
