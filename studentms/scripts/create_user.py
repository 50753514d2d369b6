"""
Create a user (e.g. the first Admin; self-registration only creates Faculty). Run from project root:
  python -m studentms.scripts.create_user USERNAME EMAIL PASSWORD [role]
Example:
  python -m studentms.scripts.create_user admin admin@example.com 'your-secure-password' Admin
"""
import argparse
import logging
import sys

from studentms.core.database import SessionLocal
from studentms.core.errors import AppError
from studentms.models import Role
from studentms.services.accounts import register_user

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a Student Management System user.")
    parser.add_argument("username", help="Username (3-30 letters, digits or underscores)")
    parser.add_argument("email", help="Email address")
    parser.add_argument("password", help="Password (at least 8 characters, at most 72 bytes)")
    parser.add_argument(
        "role",
        nargs="?",
        default=Role.ADMIN.value,
        choices=[r.value for r in Role],
    )
    args = parser.parse_args(argv)

    with SessionLocal() as db:
        try:
            register_user(
                db, args.username, args.email, args.password, args.role, self_service=False
            )
        except AppError as e:
            print(f"{e.code}: {e.message}", file=sys.stderr)
            return 1
    logger.info("Created user '%s' with role '%s'", args.username, args.role)
    return 0


if __name__ == "__main__":
    sys.exit(main())
