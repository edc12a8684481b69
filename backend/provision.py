"""Account provisioning for the check-in backend.

Usage:
    python -m backend.provision create-account --name Ana --email ana@example.com --password secret
    python -m backend.provision link --profile <id> --partner <id> [--both]

Reads DATABASE_URL and BACKEND_SESSION_SECRET like the API does.
"""
from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from backend.db_init import init_db
from backend.deps import build_services
from backend.errors import CheckInError
from backend.settings import get_settings

logger = logging.getLogger(__name__)


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="python -m backend.provision")
    commands = parser.add_subparsers(dest="command", required=True)

    create = commands.add_parser("create-account", help="Create a profile with an email/password login")
    create.add_argument("--name", required=True)
    create.add_argument("--email", required=True)
    create.add_argument("--password", required=True)

    link = commands.add_parser("link", help="Point a profile at its partner")
    link.add_argument("--profile", required=True)
    link.add_argument("--partner", required=True)
    link.add_argument("--both", action="store_true", help="Also point the partner back")
    return parser


async def run(argv: list[str] | None = None) -> int:
    args = _parser().parse_args(argv)
    services = build_services(get_settings())
    await init_db(services.db)
    try:
        if args.command == "create-account":
            profile = await services.auth.create_account(args.name, args.email, args.password)
            print(f"Created profile {profile.id} ({profile.name})")
        else:
            profile = await services.auth.link_partner(args.profile, args.partner, both=args.both)
            print(f"Linked {profile.id} -> {profile.partner_id}")
    except (ValueError, CheckInError) as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1
    finally:
        await services.db.dispose()
    return 0


def main() -> None:
    logging.basicConfig(level=logging.WARNING, format="%(asctime)s %(levelname)s %(name)s - %(message)s")
    sys.exit(asyncio.run(run()))


if __name__ == "__main__":
    main()
