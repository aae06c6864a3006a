#!/usr/bin/env python3
"""
Condition evaluation helper

Usage:
  python scripts/evaluate_condition.py evaluate --condition-id <id> [--store <path>] [--entities <json>]
  python scripts/evaluate_condition.py evaluate --condition-id <id> --api-base-url <url> [--entities-file <path>]
  python scripts/evaluate_condition.py show --condition-id <id> [--store <path>]

Examples:
  python scripts/evaluate_condition.py evaluate --condition-id front_page_title \
      --entities '{"node": {"entity_type": "node", "values": {"title": "Hello"}}}'
  python scripts/evaluate_condition.py evaluate --condition-id front_page_title \
      --api-base-url http://localhost:8000 --entities-file node.json
"""
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

# プロジェクトルートをPYTHONPATHに追加
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import requests

from application.conditions.registry import ConditionPluginRegistry
from application.services.condition_deps import ConditionDeps
from application.services.condition_service import ConditionService
from application.services.token_replacer import TokenReplacer
from domain.exceptions import ConditionError
from infrastructure.conditions.file_condition_store import FileConditionStore
from infrastructure.entity.entity_factory import build_request
from infrastructure.entity.in_memory_entity_type_registry import InMemoryEntityTypeRegistry
from infrastructure.loading.base_loader import LoadError
from infrastructure.logging.console_logger import ConsoleLogger
from infrastructure.logging.log_setup import setup_console_logging
from infrastructure.modules.static_module_handler import StaticModuleHandler
from infrastructure.request.request_stack import RequestStack
from infrastructure.settings.env_settings import load_settings

DEFAULT_API_TIMEOUT_SEC = 30


def _parse_json_payload(raw: str, label: str) -> dict:
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON for {label}: {exc}") from exc
    if not isinstance(parsed, dict):
        raise ValueError(f"{label} must be a JSON object")
    return parsed


def _load_entities(args: argparse.Namespace) -> dict:
    if args.entities is not None and args.entities_file is not None:
        raise ValueError("Multiple entities sources provided")
    if args.entities is not None:
        return _parse_json_payload(args.entities, "entities")
    if args.entities_file is not None:
        try:
            content = Path(args.entities_file).read_text(encoding="utf-8")
        except OSError as exc:
            raise ValueError(f"Unable to read entities file: {exc}") from exc
        return _parse_json_payload(content, "entities")
    return {}


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Token condition helper")
    subparsers = parser.add_subparsers(dest="command")

    eval_parser = subparsers.add_parser("evaluate", help="Evaluate a condition locally or via API")
    eval_parser.add_argument("--condition-id", type=str, required=True)
    eval_parser.add_argument("--store", type=str)
    eval_parser.add_argument("--entities", type=str)
    eval_parser.add_argument("--entities-file", type=str)
    eval_parser.add_argument("--api-base-url", type=str)

    show_parser = subparsers.add_parser("show", help="Show a stored condition")
    show_parser.add_argument("--condition-id", type=str, required=True)
    show_parser.add_argument("--store", type=str)

    return parser


def _local_service(args: argparse.Namespace) -> tuple[ConditionService, ConditionDeps]:
    settings = load_settings()
    store_path = Path(args.store) if args.store else settings.store_path
    entity_types = (
        InMemoryEntityTypeRegistry.from_file(settings.entity_types_path)
        if settings.entity_types_path
        else InMemoryEntityTypeRegistry.default()
    )
    deps = ConditionDeps(
        token_service=TokenReplacer(global_providers={"site": {"name": settings.site_name}}),
        entity_type_registry=entity_types,
        request_stack=RequestStack(),
        module_handler=StaticModuleHandler(enabled=settings.modules),
        logger=ConsoleLogger(level=settings.log_level),
    )
    service = ConditionService(FileConditionStore(store_path), ConditionPluginRegistry.default())
    return service, deps


def _evaluate_local(args: argparse.Namespace) -> int:
    service, deps = _local_service(args)
    request_stack = RequestStack()
    request_stack.push(build_request(entities=_load_entities(args)))

    outcome = service.evaluate(args.condition_id, deps.with_request_stack(request_stack))
    print(f"Condition: {outcome.condition_id}")
    print(f"Summary: {outcome.summary}")
    print(f"Result: {outcome.result}")
    return 0 if outcome.result else 1


def _evaluate_api(args: argparse.Namespace) -> int:
    url = f"{args.api_base_url.rstrip('/')}/conditions/{args.condition_id}/evaluate"
    response = requests.post(
        url,
        json={"entities": _load_entities(args)},
        timeout=DEFAULT_API_TIMEOUT_SEC,
    )
    print(f"Status: {response.status_code}")
    data = response.json()
    print(json.dumps(data, indent=2, ensure_ascii=False))
    if response.status_code >= 400:
        return 2
    return 0 if data.get("result") else 1


def _show_local(args: argparse.Namespace) -> int:
    service, deps = _local_service(args)
    record = service.get(args.condition_id)
    plugin = service.create_plugin(record, deps)
    print(json.dumps(
        {
            "id": record.id,
            "plugin": record.plugin_id,
            "label": record.label,
            "configuration": plugin.get_configuration(),
            "summary": plugin.summary(),
        },
        indent=2,
        ensure_ascii=False,
    ))
    return 0


def main() -> None:
    setup_console_logging(level="INFO")
    parser = _build_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(2)

    try:
        if args.command == "evaluate":
            exit_code = _evaluate_api(args) if args.api_base_url else _evaluate_local(args)
        elif args.command == "show":
            exit_code = _show_local(args)
        else:
            raise ValueError(f"Unknown command: {args.command}")
    except (ValueError, ConditionError, LoadError) as exc:
        print(f"ERROR: {exc}")
        sys.exit(2)
    except requests.RequestException as exc:
        print(f"ERROR: API request failed: {exc}")
        sys.exit(2)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
