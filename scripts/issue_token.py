#!/usr/bin/env python3
"""Admin script to register users and issue access tokens.

Usage:
    uv run python scripts/issue_token.py <email> [--name NAME] [--role admin|user]
    uv run python scripts/issue_token.py --list-admins
"""

import asyncio
import logging
import sys

from src.core import db_client
from src.core.db_client import sanitize_param
from src.domain.user import UserRole
from src.interface.auth import issue_access_token
from src.services import identity_service


logging.basicConfig(level=logging.INFO, format="%(message)s")
logger = logging.getLogger(__name__)


async def list_admins() -> None:
    """List all admin users."""
    admins = await db_client.list_records(collection="users", filter_query=f'role = "{UserRole.ADMIN}"')

    for user in admins:
        logger.info(f"{user['id']} - {user['name']} <{user['email']}>")


async def issue_token(email: str, name: str | None = None, role: str = UserRole.USER) -> None:
    """Find or create the user with this email, apply the role and print a token.

    Args:
        email: Email of the user
        name: Display name used when the user has to be created
        role: Role to assign (admin or user)
    """
    user = await db_client.get_first_record(
        collection="users",
        filter_query=f'email = "{sanitize_param(email.strip().lower())}"',
    )

    if user is None:
        user = await identity_service.create_user(name=name or email.split("@")[0], email=email, role=role)
    elif user["role"] != role:
        user = await db_client.update_record(collection="users", record_id=user["id"], data={"role": role})

    logger.info(issue_access_token(user["id"]))


def print_usage() -> None:
    """Print usage information."""
    logger.info(__doc__)


async def main() -> None:
    """Main entry point."""
    args = sys.argv[1:]

    if not args or "--help" in args or "-h" in args:
        print_usage()
        return

    await db_client.init_db()

    try:
        if "--list-admins" in args:
            await list_admins()
            return

        email = args[0]
        name = None
        role = UserRole.USER

        if "--name" in args:
            name_index = args.index("--name")
            if name_index + 1 >= len(args):
                logger.error("--name needs a value")
                print_usage()
                sys.exit(1)
            name = args[name_index + 1]

        if "--role" in args:
            role_index = args.index("--role")
            if role_index + 1 >= len(args) or args[role_index + 1] not in list(UserRole):
                logger.error("--role must be one of: %s", ", ".join(UserRole))
                print_usage()
                sys.exit(1)
            role = UserRole(args[role_index + 1])

        await issue_token(email, name, role)
    finally:
        await db_client.close_connection()


if __name__ == "__main__":
    asyncio.run(main())
