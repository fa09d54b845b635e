"""Command line entry point.

Replays feed snapshots against the stored rules and manages the rule store.
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path

from pydantic import ValidationError

from subfilter.classifier import classify
from subfilter.config.settings import settings
from subfilter.exceptions import SubFilterError
from subfilter.models.rule import Rule
from subfilter.reconciler import reconcile_all
from subfilter.storage.base import RuleStore
from subfilter.storage.factory import create_rule_store
from subfilter.storage.legacy import dump_rules, load_rules
from subfilter.utils.logger import configure_logging, get_logger
from subfilter.views.base import NodeKind
from subfilter.views.memory import FeedSnapshot


def _read_json(path: Path):
    return json.loads(path.read_text(encoding="utf-8"))


async def _stored_rules(store: RuleStore) -> list[Rule]:
    return load_rules(await store.get(settings.rules_key, []), settings.rules_key)


async def cmd_classify(store: RuleStore, args: argparse.Namespace) -> int:
    """Print category and visibility of every item in a snapshot."""
    snapshot = FeedSnapshot.model_validate(_read_json(args.snapshot))
    if args.rules:
        rules = load_rules(_read_json(args.rules), str(args.rules))
    else:
        rules = await _stored_rules(store)

    document = snapshot.to_document()
    sections = document.sections()
    results = reconcile_all(sections, rules)

    for index, (section, result) in enumerate(zip(sections, results)):
        label = snapshot.sections[index].label or f"section {index}"
        state = "collapsed" if result.collapsed else f"{result.hidden} hidden"
        print(f"== {label} ({state})")
        for node in section.children():
            if node.node_kind != NodeKind.ITEM:
                continue
            visible = "hidden " if node.hidden or section.hidden else "visible"
            print(f"  {visible}  {classify(node).value:<18}  {node.source_name}: {node.title}")

    return 0


async def cmd_rules_show(store: RuleStore, args: argparse.Namespace) -> int:
    rules = await _stored_rules(store)
    print(json.dumps(dump_rules(rules), indent=2))
    return 0


async def cmd_rules_import(store: RuleStore, args: argparse.Namespace) -> int:
    rules = load_rules(_read_json(args.file), str(args.file))
    await store.set(settings.rules_key, dump_rules(rules))
    print(f"Imported {len(rules)} rule(s)")
    return 0


async def cmd_rules_reset(store: RuleStore, args: argparse.Namespace) -> int:
    await store.set(settings.rules_key, [])
    print("Stored rules cleared")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="subfilter",
        description="Filter a subscription feed by per-channel rules",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    classify_cmd = commands.add_parser("classify", help="Apply rules to a feed snapshot")
    classify_cmd.add_argument("snapshot", type=Path, help="Feed snapshot JSON file")
    classify_cmd.add_argument(
        "--rules",
        type=Path,
        default=None,
        help="Rules JSON file (default: stored rules)",
    )
    classify_cmd.set_defaults(handler=cmd_classify)

    rules_cmd = commands.add_parser("rules", help="Manage stored rules")
    rules_actions = rules_cmd.add_subparsers(dest="action", required=True)
    rules_actions.add_parser("show", help="Print stored rules").set_defaults(
        handler=cmd_rules_show
    )
    import_cmd = rules_actions.add_parser("import", help="Validate and store rules")
    import_cmd.add_argument("file", type=Path, help="Rules JSON file (legacy shape accepted)")
    import_cmd.set_defaults(handler=cmd_rules_import)
    rules_actions.add_parser("reset", help="Clear stored rules").set_defaults(
        handler=cmd_rules_reset
    )

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    configure_logging(
        log_level=settings.log_level,
        json_format=settings.log_json,
    )
    logger = get_logger("cli")

    store = create_rule_store(settings)
    try:
        return asyncio.run(args.handler(store, args))
    except (SubFilterError, ValidationError, OSError, json.JSONDecodeError) as e:
        logger.error("Command failed", command=args.command, error=str(e))
        return 1


if __name__ == "__main__":
    sys.exit(main())
