"""
Create a user account with a bcrypt-hashed password.

Usage:
    python scripts/create_user.py admin@example.org "Jane Admin" --role admin
    python scripts/create_user.py grantee@example.org "Juan Cruz" --batch 2024

The password is read from --password, or prompted for. With --generate-password
a random one is created and printed once.
"""

import argparse
import getpass
import sys
from pathlib import Path
from typing import Optional

sys.path.insert(0, str(Path(__file__).parent.parent))

import structlog  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession  # noqa: E402

from core.security import generate_secure_token, hash_password  # noqa: E402
from models.user import UserRole  # noqa: E402
from repositories.user_repository import UserRepository  # noqa: E402
from scripts._common import run_with_db  # noqa: E402

logger = structlog.get_logger(__name__)


class UserExistsError(Exception):
    """An account with that email already exists."""


async def create_user(
    db: AsyncSession,
    email: str,
    name: str,
    password: str,
    role: str = UserRole.USER.value,
    batch: str = "",
    image: Optional[str] = None,
) -> str:
    """Create the user and return its id. Refuses duplicate emails."""
    repo = UserRepository(db)

    if await repo.email_exists(email):
        raise UserExistsError(f"User with email {email} already exists")

    user = await repo.create(
        email=email,
        password_hash=hash_password(password),
        name=name,
        role=role,
        batch=batch,
        image=image,
    )
    await db.commit()

    logger.info("user_created", user_id=str(user.id), role=role)
    return str(user.id)


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Create a user account")
    parser.add_argument("email")
    parser.add_argument("name")
    parser.add_argument(
        "--role",
        choices=[r.value for r in UserRole],
        default=UserRole.USER.value,
    )
    parser.add_argument("--batch", default="")
    parser.add_argument("--image", default=None)
    parser.add_argument("--password", default=None, help="Prompted for when omitted")
    parser.add_argument(
        "--generate-password",
        action="store_true",
        help="Generate a random password and print it",
    )
    return parser.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> int:
    args = parse_args(argv)

    if args.generate_password:
        password = generate_secure_token(12)
    else:
        password = args.password or getpass.getpass("Password: ")
    if not password:
        print("A password is required", file=sys.stderr)
        return 1

    try:
        user_id = run_with_db(
            lambda db: create_user(
                db,
                email=args.email,
                name=args.name,
                password=password,
                role=args.role,
                batch=args.batch,
                image=args.image,
            )
        )
    except UserExistsError as e:
        print(str(e), file=sys.stderr)
        return 1

    print(f"Created user {user_id} ({args.email}, role={args.role})")
    if args.generate_password:
        print(f"Password: {password}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
