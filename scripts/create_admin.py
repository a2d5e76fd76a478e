#!/usr/bin/env python3
"""
Bootstrap an admin account.

Self-registration only creates unverified students, so the first admin has
to be inserted directly.
Usage: python scripts/create_admin.py "Full Name" admin@college.edu <password> [roll_no]
"""
import sys
sys.path.insert(0, '.')

from app.core.auth import hash_password
from app.services.mongo_service import UserService


def main():
    if len(sys.argv) < 4:
        print(__doc__)
        sys.exit(1)

    name, email, password = sys.argv[1:4]
    roll_no = sys.argv[4] if len(sys.argv) > 4 else "ADMIN"

    users = UserService()
    if users.get_by_email(email):
        print(f"❌ {email} is already registered")
        sys.exit(1)

    user_id = users.insert(
        name=name,
        email=email,
        password_hash=hash_password(password),
        roll_no=roll_no,
        role="admin",
        is_verified=True,
    )
    print(f"✅ Created admin {name} ({user_id})")


if __name__ == "__main__":
    main()
