"""CLI entry point for the expiry tracker."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from datetime import datetime
from typing import NoReturn

from dotenv import load_dotenv

from .config import load_config
from .models import EntryError, InvalidExpiryCode
from .parser import ACCEPTED_FORMATS, parse_expiry_code
from .render import render_all
from .status import classify
from .store import StoreError, open_store
from .tracker import FoodTracker, build_rows, format_date, summarize

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="expiry-graph",
        description="Track food expiry dates and see them on a timeline",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        default=None,
        help="Path to a TOML config file",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable debug logging"
    )

    sub = parser.add_subparsers(dest="command")

    # add
    add_parser = sub.add_parser("add", help="Add a food and its expiry code")
    add_parser.add_argument("name", help="Food name")
    add_parser.add_argument(
        "code", help=f"Expiry code ({', '.join(ACCEPTED_FORMATS)})"
    )

    # list
    list_parser = sub.add_parser("list", help="Show the expiry graph and table")
    list_parser.add_argument("--json", action="store_true", help="Output as JSON")

    # remove
    remove_parser = sub.add_parser("remove", help="Remove a food by ID")
    remove_parser.add_argument("id", help="Entry ID or a unique prefix of it")

    # clear
    sub.add_parser("clear", help="Remove all foods")

    # check
    check_parser = sub.add_parser("check", help="Parse an expiry code without saving")
    check_parser.add_argument("code", help="Expiry code")
    check_parser.add_argument(
        "--now", type=str, default=None, help="Classify against this ISO timestamp"
    )

    # scan
    scan_parser = sub.add_parser("scan", help="Suggest food names from an image")
    scan_parser.add_argument(
        "--image", type=str, nargs="+", help="Use existing image files"
    )
    scan_parser.add_argument(
        "--camera", action="store_true", help="Capture a frame from the camera"
    )
    scan_parser.add_argument("--json", action="store_true", help="Output as JSON")
    scan_parser.add_argument(
        "--add", type=int, default=None, metavar="N",
        help="Add suggestion number N (requires --code)",
    )
    scan_parser.add_argument(
        "--code", type=str, default=None, help="Expiry code for the added suggestion"
    )

    # export
    export_parser = sub.add_parser("export", help="Write a PDF report")
    export_parser.add_argument("file", help="Output PDF path")

    # cameras
    sub.add_parser("cameras", help="List available cameras")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    load_dotenv()
    config = load_config(args.config)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else config.logging.level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    match args.command:
        case "check":
            _cmd_check(args)
        case "cameras":
            _cmd_cameras()
        case _:
            try:
                _run_tracker_command(config, args)
            except StoreError as e:
                logger.exception("Storage failure")
                _fail(f"Storage error: {e}")


def _run_tracker_command(config, args) -> None:
    tracker = _open_tracker(config)
    try:
        match args.command:
            case "add":
                _cmd_add(tracker, args)
            case "list":
                _cmd_list(tracker, config, args)
            case "remove":
                _cmd_remove(tracker, args)
            case "clear":
                _cmd_clear(tracker)
            case "scan":
                asyncio.run(_cmd_scan(tracker, config, args))
            case "export":
                _cmd_export(tracker, args)
    finally:
        tracker.close()


def _open_tracker(config) -> FoodTracker:
    primary, fallback = open_store(config)
    width = config.display.graph_width

    def render(entries) -> None:
        rows = build_rows(entries)
        print(render_all(rows, summarize(rows), width))

    tracker = FoodTracker(primary, fallback, on_change=render)
    tracker.load()
    return tracker


def _fail(message: str) -> NoReturn:
    print(message, file=sys.stderr)
    sys.exit(1)


def _cmd_add(tracker: FoodTracker, args) -> None:
    try:
        entry = tracker.add(args.name, args.code)
    except EntryError as e:
        _fail(str(e))
    print(f'\nAdded "{entry.food_name}" to your expiry graph.')


def _cmd_list(tracker: FoodTracker, config, args) -> None:
    rows = tracker.rows()
    if args.json:
        print(json.dumps([r.to_dict() for r in rows], ensure_ascii=False, indent=2))
        return
    print(render_all(rows, summarize(rows), config.display.graph_width))


def _cmd_remove(tracker: FoodTracker, args) -> None:
    entry = tracker.find(args.id)
    if entry is None:
        _fail(f"No single entry matches ID {args.id!r}.")
    tracker.remove(entry.id)
    print(f'\nRemoved "{entry.food_name}".')


def _cmd_clear(tracker: FoodTracker) -> None:
    if not tracker.clear():
        print("Nothing to clear.")
        return
    print("\nCleared all foods from the tracker.")


def _cmd_check(args) -> None:
    expiry = parse_expiry_code(args.code)
    if expiry is None:
        _fail(str(InvalidExpiryCode(args.code.strip())))
    if args.now:
        try:
            now = datetime.fromisoformat(args.now)
        except ValueError:
            _fail(f"Invalid --now timestamp: {args.now!r}")
        if now.tzinfo is not None:
            now = now.astimezone().replace(tzinfo=None)
    else:
        now = datetime.now()
    status = classify(expiry, now)
    print(f"{format_date(expiry)} (valid through {expiry.isoformat(timespec='milliseconds')})")
    print(f"{status.short}: {status.text}")


def _cmd_cameras() -> None:
    from .camera import list_cameras

    cameras = list_cameras()
    if not cameras:
        print("No cameras found.")
        return
    print(f"Available cameras: {len(cameras)}")
    for idx in cameras:
        print(f"  camera {idx}")


async def _cmd_scan(tracker: FoodTracker, config, args) -> None:
    from .vision import ScanError, create_backend, filter_suggestions

    if args.add is not None and not args.code:
        _fail("--add requires --code.")

    if args.image:
        image_paths = args.image
    elif args.camera:
        from .camera import Camera

        try:
            camera = Camera(config.camera.save_dir, config.camera.warmup_frames)
            photo = camera.take_photo(config.camera.index)
        except (ImportError, RuntimeError) as e:
            _fail(f"Camera error: {e}")
        image_paths = [photo.image_path]
        print(f"Captured {photo.image_path}")
    else:
        _fail("Give --image PATH or --camera.")

    try:
        backend = create_backend(config)
        suggestions = await backend.suggest_foods(image_paths)
    except (ValueError, ImportError, ScanError, OSError) as e:
        logger.exception("Scan failed")
        _fail(f"Scan failed: {e}")

    suggestions = filter_suggestions(suggestions, config.vision.min_confidence)

    if args.json:
        data = [
            {"name": s.name, "confidence": s.confidence, "percent": s.percent}
            for s in suggestions
        ]
        print(json.dumps(data, ensure_ascii=False, indent=2))
    elif not suggestions:
        print("No foods detected.")
    else:
        print(f"Suggestions ({len(suggestions)}):")
        for i, s in enumerate(suggestions, 1):
            print(f"  {i:>2}. {s.name:<20} {s.percent:>3}%")

    if args.add is None:
        return
    if not 1 <= args.add <= len(suggestions):
        _fail(f"No suggestion number {args.add}.")

    try:
        entry = tracker.accept_suggestion(suggestions[args.add - 1], args.code)
    except EntryError as e:
        _fail(str(e))
    print(f'\nAdded "{entry.food_name}" to your expiry graph.')


def _cmd_export(tracker: FoodTracker, args) -> None:
    from .pdf import generate_pdf

    rows = tracker.rows()
    try:
        path = generate_pdf(rows, summarize(rows), args.file)
    except (ImportError, OSError) as e:
        _fail(f"PDF export failed: {e}")
    print(f"PDF saved: {path}")
