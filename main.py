from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from loguru import logger

from santa_draw.core.config import Settings, load_settings
from santa_draw.core.logging import setup_logging
from santa_draw.db import get_session, init_engine
from santa_draw.db import repo
from santa_draw.services import group_flow, reveal
from santa_draw.services.feasibility import validate
from santa_draw.services.group_flow import DrawError, Group, GroupError
from santa_draw.services.report import format_report

EXIT_INVALID = 1
EXIT_DRAW_FAILED = 2


def _check_entry(index: int, entry) -> None:
    if not isinstance(entry, dict):
        raise GroupError(f"Entry {index} must be an object with a name.")
    if not isinstance(entry.get("name"), str):
        raise GroupError(f"Entry {index} must have a text name.")
    phone = entry.get("phone")
    if phone is not None and not isinstance(phone, str):
        raise GroupError(f"Entry {index} ({entry['name']}) has a phone that is not text.")
    blacklist = entry.get("blacklist")
    if blacklist is not None and (
        not isinstance(blacklist, list) or not all(isinstance(name, str) for name in blacklist)
    ):
        raise GroupError(f"Entry {index} ({entry['name']}) must list excluded names as text.")


def load_group_file(path: Path) -> Group:
    try:
        entries = json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise GroupError(f"Cannot read {path}: {exc.strerror or exc}") from exc
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise GroupError(f"{path} is not valid JSON: {exc}") from exc
    if not isinstance(entries, list):
        raise GroupError(f"{path} must contain a list of participants.")
    for index, entry in enumerate(entries, start=1):
        _check_entry(index, entry)

    group = group_flow.create_group()
    for entry in entries:
        group_flow.add_participant(group, entry["name"], entry.get("phone"))

    ids_by_name = {participant.name.lower(): participant.id for participant in group.participants}
    for participant, entry in zip(list(group.participants), entries):
        excluded_names = entry.get("blacklist") or []
        unknown = [name for name in excluded_names if name.lower() not in ids_by_name]
        if unknown:
            raise GroupError(
                f"{participant.name} excludes unknown participants: {', '.join(unknown)}"
            )
        group_flow.set_blacklist(
            group,
            participant.id,
            [ids_by_name[name.lower()] for name in excluded_names],
        )
    return group


def print_links(group: Group, settings: Settings) -> None:
    links = reveal.reveal_links(group, settings.reveal_base_url)
    print()
    for participant in group.participants:
        link = links.get(participant.id)
        if not link:
            continue
        print(f"{participant.name}: {link}")
        if participant.phone:
            message = reveal.reveal_message(participant.name, link)
            print(f"  WhatsApp: {reveal.whatsapp_link(participant.phone, message)}")


def cmd_validate(args: argparse.Namespace, settings: Settings) -> int:
    group = load_group_file(args.file)
    result = validate(group.participants, probe_attempts=settings.probe_attempts, seed=args.seed)
    if result.is_valid:
        print("The group can be drawn as a single gift circle.")
        return 0
    print(result.reason)
    if result.can_relax:
        print("A draw with separate gift circles may still work.")
    return EXIT_INVALID


def cmd_draw(args: argparse.Namespace, settings: Settings) -> int:
    group = load_group_file(args.file)
    try:
        group_flow.run_draw(group, settings=settings, allow_relaxed=not args.strict, seed=args.seed)
    except DrawError as exc:
        print(str(exc), file=sys.stderr)
        return EXIT_DRAW_FAILED

    print(format_report(group))
    if args.links:
        print_links(group, settings)

    if not args.no_save:
        init_engine(settings.database_url, create_tables=True)
        with get_session() as session:
            repo.save_group(session, group)
        logger.bind(group_id=group.group_id).info("Group saved")
        print(f"\nSaved as {group.group_id}")
    return 0


def cmd_show(args: argparse.Namespace, settings: Settings) -> int:
    init_engine(settings.database_url, create_tables=True)
    with get_session() as session:
        group = repo.load_group(session, args.token)
    if group is None:
        print(f"No saved group {args.token}", file=sys.stderr)
        return EXIT_INVALID
    print(format_report(group))
    if args.links:
        print_links(group, settings)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="santa-draw",
        description="Secret Santa draw with exclusions",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    validate_cmd = commands.add_parser("validate", help="check whether a group can be drawn")
    validate_cmd.add_argument("file", type=Path)
    validate_cmd.add_argument("--seed", type=int, default=None)
    validate_cmd.set_defaults(handler=cmd_validate)

    draw_cmd = commands.add_parser("draw", help="draw a group and print the results")
    draw_cmd.add_argument("file", type=Path)
    draw_cmd.add_argument("--seed", type=int, default=None)
    draw_cmd.add_argument("--strict", action="store_true", help="only accept a single gift circle")
    draw_cmd.add_argument("--links", action="store_true", help="print personal reveal links")
    draw_cmd.add_argument("--no-save", action="store_true", help="do not store the result")
    draw_cmd.set_defaults(handler=cmd_draw)

    show_cmd = commands.add_parser("show", help="print a saved draw")
    show_cmd.add_argument("token")
    show_cmd.add_argument("--links", action="store_true")
    show_cmd.set_defaults(handler=cmd_show)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    settings = load_settings()
    setup_logging(settings.log_level, settings.log_path)
    args = build_parser().parse_args(argv)
    try:
        return args.handler(args, settings)
    except GroupError as exc:
        print(str(exc), file=sys.stderr)
        return EXIT_INVALID


if __name__ == "__main__":
    sys.exit(main())
