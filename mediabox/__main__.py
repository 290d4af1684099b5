"""Module: __main__.py

Author: Michael Economou
Date: 2026-10-19

Command line entry point.

    python -m mediabox identity PATH [PATH ...]
    python -m mediabox hash PATH
    python -m mediabox thumbnail ROOT HASH --width 160 --height 160 [--modifier caret]
"""

from __future__ import annotations

import argparse
import json
import sys
import threading
from pathlib import Path

from mediabox.config import APP_NAME, APP_VERSION
from mediabox.core.errors import MediaboxError


def _cmd_identity(args: argparse.Namespace) -> int:
    from mediabox.core.identity import read_identity

    status = 0
    for path in args.paths:
        try:
            identity = read_identity(path)
        except MediaboxError as e:
            print(f"{path}: {e.code}: {e}", file=sys.stderr)
            status = 1
            continue
        print(json.dumps({"path": path, **identity.to_dict()}, sort_keys=True))
    return status


def _cmd_hash(args: argparse.Namespace) -> int:
    from mediabox.services.hash_service import HashService

    try:
        digest = HashService(args.algorithm).compute_hash(Path(args.path))
    except MediaboxError as e:
        print(f"{args.path}: {e.code}: {e}", file=sys.stderr)
        return 1
    print(f"{digest}  {args.path}")
    return 0


def _cmd_thumbnail(args: argparse.Namespace) -> int:
    from mediabox.boot import create_content_index, create_thumbnailer

    index = create_content_index()
    index.index_tree(args.root)
    thumbnailer = create_thumbnailer(repository=index)

    query = {"width": args.width, "height": args.height}
    if args.modifier:
        query["modifier"] = args.modifier
    if args.auto_orient:
        query["autoOrient"] = True
    if args.instant:
        query["instant"] = True

    done = threading.Event()
    outcome: dict[str, object] = {}

    def on_ready(error, path):
        outcome["error"] = error
        outcome["path"] = path
        done.set()

    try:
        thumbnailer.request(args.content_hash, query, on_ready)
        done.wait()
    finally:
        thumbnailer.shutdown()

    error = outcome.get("error")
    if error is not None:
        code = getattr(error, "code", type(error).__name__)
        print(f"{args.content_hash}: {code}: {error}", file=sys.stderr)
        return 1
    print(outcome["path"])
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog=APP_NAME, description="Content identity and thumbnails")
    parser.add_argument("--version", action="version", version=f"{APP_NAME} {APP_VERSION}")
    parser.add_argument("--verbose", action="store_true", help="Log to the console at DEBUG level")
    subparsers = parser.add_subparsers(dest="command", required=True)

    identity = subparsers.add_parser("identity", help="Print the identity record of paths")
    identity.add_argument("paths", nargs="+")
    identity.set_defaults(func=_cmd_identity)

    hash_cmd = subparsers.add_parser("hash", help="Print the content hash of a file")
    hash_cmd.add_argument("path")
    hash_cmd.add_argument("--algorithm", default="sha256", choices=["sha256", "sha1", "md5"])
    hash_cmd.set_defaults(func=_cmd_hash)

    thumb = subparsers.add_parser("thumbnail", help="Index ROOT and render a thumbnail")
    thumb.add_argument("root", help="Directory tree holding the content")
    thumb.add_argument("content_hash", metavar="HASH")
    thumb.add_argument("--width", type=int, required=True)
    thumb.add_argument("--height", type=int, required=True)
    thumb.add_argument("--modifier", choices=["fit", "caret"])
    thumb.add_argument("--auto-orient", action="store_true")
    thumb.add_argument("--instant", action="store_true")
    thumb.set_defaults(func=_cmd_thumbnail)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point.

    Returns:
        Exit code (0 for success).

    """
    args = build_parser().parse_args(argv)

    from mediabox.boot import init_logging

    if args.verbose:
        from mediabox.config.settings import get_settings

        get_settings().logging.set("console_level", "DEBUG")
    init_logging()

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
