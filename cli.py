#!/usr/bin/env python3
# -*- coding: utf-8 -*-
import argparse
import json
import sys
from typing import List, Optional

from config.settings import Settings, load_settings
from core.contact_store import ContactStore
from core.logging_config import setup_logging


def run_serve(args: argparse.Namespace, settings: Settings) -> None:
    """Start the HTTP server."""
    import uvicorn

    settings = settings.with_overrides(host=args.host, port=args.port)
    setup_logging(settings.log_level, settings.log_format)
    ContactStore(settings.contacts_file).ensure_sync()

    print(f"✓ Server listening on http://localhost:{settings.port}")
    print(f"  Public root: {settings.public_dir}")
    print(f"  Contacts:    {settings.contacts_file}")

    if args.reload:
        # reload needs an import string; settings are re-read from the environment
        uvicorn.run(
            "api.service:create_app",
            factory=True,
            host=settings.host,
            port=settings.port,
            reload=True,
            log_config=None,
        )
    else:
        from api.service import create_app

        uvicorn.run(
            create_app(settings),
            host=settings.host,
            port=settings.port,
            log_config=None,
        )


def format_contact(contact: dict) -> str:
    return (
        f"[{contact.get('submittedAt', '?')}] {contact.get('name', '?')} "
        f"<{contact.get('email', '?')}> ({contact.get('id', '?')})\n"
        f"    {contact.get('message', '')}"
    )


def run_contacts(args: argparse.Namespace, settings: Settings) -> int:
    """List or count stored contact submissions."""
    store = ContactStore(settings.contacts_file)
    try:
        contacts = store.read_all_sync()
    except OSError as e:
        print(f"❌ Unable to read {store.path}: {e}", file=sys.stderr)
        return 1

    if args.contacts_command == "count":
        print(len(contacts))
        return 0

    if args.limit is not None:
        contacts = contacts[-args.limit:] if args.limit > 0 else []

    if args.format == "json":
        print(json.dumps(contacts, indent=2, ensure_ascii=False))
    else:
        if not contacts:
            print("No contact submissions yet.")
        for contact in contacts:
            print(format_contact(contact))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="portfolio-site",
        description="Portfolio site server and contact submission tools",
    )
    sub = parser.add_subparsers(dest="command")

    sp = sub.add_parser("serve", help="Serve the site and contact API")
    sp.add_argument("--host", help="Interface to bind (default: HOST or 0.0.0.0)")
    sp.add_argument("--port", type=int, help="Port to listen on (default: PORT or 5000)")
    sp.add_argument("--reload", action="store_true", help="Reload on code changes")

    cp = sub.add_parser("contacts", help="Inspect stored contact submissions")
    contacts_sub = cp.add_subparsers(dest="contacts_command")

    list_parser = contacts_sub.add_parser("list", help="Print submissions, oldest first")
    list_parser.add_argument("--format", "-f", choices=["json", "text"], default="text")
    list_parser.add_argument("--limit", "-n", type=int, help="Only show the most recent N")

    contacts_sub.add_parser("count", help="Print the number of submissions")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "serve":
        run_serve(args, load_settings())
        return 0
    if args.command == "contacts" and args.contacts_command in ("list", "count"):
        return run_contacts(args, load_settings())

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
