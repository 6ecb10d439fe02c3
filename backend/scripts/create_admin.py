"""
Create (or reactivate) a dashboard administrator and print an access token.

The token is what the dashboard client sends as ADMIN_API_TOKEN.

Usage:
    python scripts/create_admin.py admin@example.com --name "Site Admin" --role owner
"""
import argparse
import asyncio
import os
import sys
from datetime import timedelta

from sqlalchemy import select

# Add parent directory to path to import showcase modules
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from showcase.auth.jwt import create_access_token
from showcase.database import async_session_maker
from showcase.models.user import Admin


async def create_admin(email: str, name: str, role: str, hours: int) -> str:
    async with async_session_maker() as db:
        result = await db.execute(select(Admin).where(Admin.email == email))
        admin = result.scalar_one_or_none()
        if admin is None:
            admin = Admin(email=email, name=name, role=role)
            db.add(admin)
            print(f"Creating admin {email} ({role})")
        else:
            admin.is_active = True
            admin.role = role
            print(f"Admin {email} already exists, reactivated")
        await db.commit()
        await db.refresh(admin)

    return create_access_token(str(admin.id), admin.role, expires_delta=timedelta(hours=hours))


def main():
    parser = argparse.ArgumentParser(description="Create a dashboard administrator")
    parser.add_argument("email")
    parser.add_argument("--name", default=None)
    parser.add_argument("--role", choices=["owner", "editor"], default="editor")
    parser.add_argument("--hours", type=int, default=24 * 30, help="token lifetime")
    args = parser.parse_args()

    token = asyncio.run(create_admin(args.email, args.name, args.role, args.hours))
    print(f"\nADMIN_API_TOKEN={token}")


if __name__ == "__main__":
    main()
