#!/usr/bin/env python3
"""
Grant (or revoke) the super_admin role for the VinDoc admin console.

Reads from .env:
    ADMIN_DATABASE_URL   — admin database (required)
    ADMIN_USER_ID        — identity-provider user id (optional if passed as argument)

Usage:
    cd vindoc-backend
    python -m scripts.grant_super_admin <user-id>
    python -m scripts.grant_super_admin <user-id> --revoke
"""
from __future__ import annotations

import asyncio
import os
import sys
import uuid
from pathlib import Path

# Add backend root to path so imports resolve
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "services" / "admin"))
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "shared"))

from dotenv import load_dotenv

load_dotenv(Path(__file__).resolve().parent.parent / ".env")

from app.roles.service import grant_role, revoke_role
from shared.constants import Role
from shared.database.postgres import dispose_session_factory, get_async_session_factory


async def main(argv: list[str]) -> None:
    revoke = "--revoke" in argv
    args = [a for a in argv if a != "--revoke"]
    raw_id = args[0] if args else os.getenv("ADMIN_USER_ID")
    if not raw_id:
        print("Error: pass a user id or set ADMIN_USER_ID in .env")
        sys.exit(1)
    try:
        user_id = uuid.UUID(raw_id)
    except ValueError:
        print(f"Error: {raw_id!r} is not a valid UUID")
        sys.exit(1)

    session_factory = get_async_session_factory(os.environ["ADMIN_DATABASE_URL"])
    async with session_factory() as session:
        if revoke:
            changed = await revoke_role(session, user_id, Role.SUPER_ADMIN)
        else:
            changed = await grant_role(session, user_id, Role.SUPER_ADMIN)
        await session.commit()

    action = "revoked from" if revoke else "granted to"
    if changed:
        print(f"super_admin {action} {user_id}")
    else:
        print(f"Nothing to do: super_admin already {'absent for' if revoke else 'held by'} {user_id}")

    await dispose_session_factory(session_factory)


if __name__ == "__main__":
    asyncio.run(main(sys.argv[1:]))
