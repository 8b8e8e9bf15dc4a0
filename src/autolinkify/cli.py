"""CLI interface for autolinkify.

Usage:
    # Link text (stdin: HTML or plain text, stdout: linked HTML)
    echo 'Mail joe@example.com' | python -m autolinkify.cli link

    # List matches (stdin: text, stdout: JSON array)
    echo 'Call (123) 456-7890' | python -m autolinkify.cli parse

    # Options can come from a YAML file and be overridden by flags
    python -m autolinkify.cli --config links.yaml --mention twitter link < in.html
"""

from __future__ import annotations
import argparse
import json
import logging
import sys

from .config import load_from_yaml
from .linker import Linker, LinkerConfig
from .tag_builder import anchor_href, css_class_suffixes
from .types import ConfigurationError


def _build_linker(args: argparse.Namespace) -> Linker:
    config = load_from_yaml(args.config) if args.config else LinkerConfig()
    if args.no_urls:
        config.urls = False
    if args.no_email:
        config.email = False
    if args.no_phone:
        config.phone = False
    if args.mention:
        config.mention = args.mention
    if args.hashtag:
        config.hashtag = args.hashtag
    if args.class_name:
        config.class_name = args.class_name
    if args.no_new_window:
        config.new_window = False
    if args.truncate is not None:
        config.truncate = args.truncate
    return Linker(config)


def cmd_link(args: argparse.Namespace) -> None:
    """Link entities in the text on stdin."""
    linker = _build_linker(args)
    sys.stdout.write(linker.link(sys.stdin.read()))


def cmd_parse(args: argparse.Namespace) -> None:
    """Dump the resolved matches for the text on stdin as JSON."""
    linker = _build_linker(args)
    matches = linker.parse(sys.stdin.read())
    output = [
        {
            "type": m.type.value,
            "text": m.matched_text,
            "offset": m.offset,
            "href": anchor_href(m),
            "classes": css_class_suffixes(m),
        }
        for m in matches
    ]
    json.dump(output, sys.stdout, ensure_ascii=False)
    sys.stdout.write("\n")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="autolinkify",
        description="Turn URLs, emails, phone numbers, mentions and hashtags into links",
    )
    parser.add_argument("--config", help="YAML config file")
    parser.add_argument("--no-urls", action="store_true", help="Don't link URLs")
    parser.add_argument("--no-email", action="store_true", help="Don't link email addresses")
    parser.add_argument("--no-phone", action="store_true", help="Don't link phone numbers")
    parser.add_argument("--mention", help="Link @mentions for this service (e.g. twitter)")
    parser.add_argument("--hashtag", help="Link #hashtags for this service (e.g. instagram)")
    parser.add_argument("--class-name", default="", help="CSS class for generated anchors")
    parser.add_argument("--no-new-window", action="store_true", help="Omit target=_blank")
    parser.add_argument("--truncate", type=int, help="Truncate anchor text to N characters")
    parser.add_argument("--log-level", default="WARNING", help="Logging level")

    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("link", help="Link text (stdin)")
    sub.add_parser("parse", help="List matches as JSON (stdin)")

    args = parser.parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), stream=sys.stderr)

    cmds = {
        "link": cmd_link,
        "parse": cmd_parse,
    }
    try:
        cmds[args.command](args)
    except ConfigurationError as e:
        sys.stderr.write(f"autolinkify: {e}\n")
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
