#!/usr/bin/env python3
"""
Media Tag Editor

Shows a media file's container and stream metadata and rewrites its
title, artist, album, year, genre and comment tags using ffprobe/ffmpeg.
"""

import argparse
import json
from pathlib import Path

from .config import ToolConfig, configure_logging
from .models.tags import EDITABLE_FIELDS
from .session import EditorSession

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2

FIELD_LABELS = {
    "title": "Title",
    "artist": "Artist",
    "album": "Album",
    "year": "Year",
    "genre": "Genre",
    "comment": "Comment",
}


def print_session(session: EditorSession) -> None:
    """Print file info, editable tags and a stream summary."""
    descriptor = session.descriptor
    fmt = descriptor.format

    print(f"File: {descriptor.path}")
    print(f"  Format:   {fmt.format_name or 'Unknown'}")
    print(f"  Duration: {fmt.duration_display}")
    print(f"  Bit rate: {fmt.bit_rate_display}")
    print("\nMetadata:")
    for name in EDITABLE_FIELDS:
        value = getattr(session.tags, name)
        print(f"  {FIELD_LABELS[name] + ':':<9} {value or '(not set)'}")

    if descriptor.streams:
        print("\nStreams:")
        for position, stream in enumerate(descriptor.streams):
            index = stream.get("index", position)
            codec_type = stream.get("codec_type", "unknown")
            codec_name = stream.get("codec_name", "unknown")
            print(f"  #{index}: {codec_type} ({codec_name})")


def cmd_show(session: EditorSession, args: argparse.Namespace) -> int:
    if session.load() is None:
        print(f"Error: could not read metadata or file not supported ({session.error})")
        return EXIT_FAILURE

    if args.json:
        print(json.dumps(session.descriptor.to_dict(), indent=2, ensure_ascii=False))
    else:
        print_session(session)
    return EXIT_OK


def cmd_edit(session: EditorSession, args: argparse.Namespace) -> int:
    if session.load() is None:
        print(f"Error: could not read metadata or file not supported ({session.error})")
        return EXIT_FAILURE

    for name in EDITABLE_FIELDS:
        value = getattr(args, name)
        if value is not None:
            session.update(name, value)
    for name in args.clear:
        session.update(name, "")

    if not session.save():
        print(f"Error saving metadata: {session.error}")
        return EXIT_FAILURE

    print("Metadata saved.")
    if session.reload() is None:
        print(f"Warning: saved, but the file could not be re-read ({session.error})")
        return EXIT_FAILURE

    print()
    print_session(session)
    return EXIT_OK


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="View and edit media file tags with ffprobe/ffmpeg"
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Verbose output",
    )
    parser.add_argument(
        "--env-file",
        type=Path,
        default=None,
        help="Load configuration from this .env file",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    show = subparsers.add_parser("show", help="Show a file's metadata")
    show.add_argument("file", type=Path)
    show.add_argument(
        "--json",
        action="store_true",
        help="Print the full probe result as JSON",
    )

    edit = subparsers.add_parser("edit", help="Change a file's tags in place")
    edit.add_argument("file", type=Path)
    for name in EDITABLE_FIELDS:
        edit.add_argument(f"--{name}", default=None, help=f"New {name} value")
    edit.add_argument(
        "--clear",
        action="append",
        choices=EDITABLE_FIELDS,
        default=[],
        metavar="FIELD",
        help="Clear a field (repeatable)",
    )

    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    configure_logging(verbose=args.verbose)

    try:
        config = ToolConfig.from_environment(args.env_file)
        config.validate()
    except ValueError as e:
        print(f"Error: {e}")
        return EXIT_USAGE

    session = EditorSession(args.file, config)
    if args.command == "show":
        return cmd_show(session, args)
    return cmd_edit(session, args)


if __name__ == "__main__":
    raise SystemExit(main())
