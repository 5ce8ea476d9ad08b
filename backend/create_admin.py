# create_admin.py
# Usage: python create_admin.py <email> <password> [full name]
# Creates the first staff user, or resets the password of an existing one.
# Uses DATABASE_URL from the environment or .env, like the API itself.

import argparse

from jobportal.db.session import init_db, session_scope
from jobportal.models.user import StaffRole
from jobportal.services.auth import AuthService


def main() -> None:
    parser = argparse.ArgumentParser(description="Create or reset a staff user.")
    parser.add_argument("email")
    parser.add_argument("password")
    parser.add_argument("full_name", nargs="?", default="Administrator")
    parser.add_argument(
        "--role",
        choices=[role.value for role in StaffRole],
        default=StaffRole.OWNER.value,
    )
    args = parser.parse_args()

    if len(args.password) < 8:
        raise SystemExit("Password must be at least 8 characters.")

    init_db()
    with session_scope() as session:
        user = AuthService(session).create_staff_user(args.email, args.full_name, args.password, args.role)
        print(f"Staff user ready: {user.email} ({user.role})")


if __name__ == "__main__":
    main()
