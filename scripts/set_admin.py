#!/usr/bin/env python3
"""Grant or revoke the admin role for an existing user.

Registration never creates admins; run this against the configured
DATABASE_URL to promote an account.

Usage:
    python scripts/set_admin.py jane
    python scripts/set_admin.py jane@example.com --revoke
"""

import argparse
import asyncio
import sys

from sqlalchemy import update


async def _set_admin(login: str, is_admin: bool) -> int:
    from alumnae.core import async_session_maker
    from alumnae.models.user import User
    from alumnae.services.auth import AuthService

    async with async_session_maker() as db:
        user = await AuthService(db).get_user_by_login(login)
        if user is None:
            print(f"ERROR: No user matches '{login}'")
            return 1

        await db.execute(update(User).where(User.id == user.id).values(is_admin=is_admin))
        await db.commit()
        print(f"{user.username}: is_admin={is_admin}")
        return 0


def main():
    parser = argparse.ArgumentParser(description="Grant or revoke the admin role")
    parser.add_argument("login", help="Username or email of the account")
    parser.add_argument(
        "--revoke", action="store_true", help="Remove the admin role instead of granting it"
    )
    args = parser.parse_args()

    sys.exit(asyncio.run(_set_admin(args.login, not args.revoke)))


if __name__ == "__main__":
    main()
