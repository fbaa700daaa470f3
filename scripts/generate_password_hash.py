#!/usr/bin/env python3
"""
Admin password hash utility.

  python scripts/generate_password_hash.py           - Generate ADMIN_PASSWORD_HASH
  python scripts/generate_password_hash.py --check   - Test a password against the configured hash
"""
import getpass
import sys

from mediahub.config import settings
from mediahub.utils.auth import hash_password, verify_password


def generate() -> int:
    print("This will generate a bcrypt hash for the admin password.")
    print("Copy the output to your .env file as ADMIN_PASSWORD_HASH")
    print()

    password = getpass.getpass("Enter admin password: ")
    if not password:
        print("Error: Password cannot be empty")
        return 1

    if password != getpass.getpass("Confirm password: "):
        print("Error: Passwords do not match")
        return 1

    print(f"\nADMIN_PASSWORD_HASH={hash_password(password)}\n")
    print("Keep this hash secret and never commit it to version control!")
    return 0


def check() -> int:
    if not settings.ADMIN_PASSWORD_HASH:
        print("Error: ADMIN_PASSWORD_HASH is not set")
        return 1

    password = getpass.getpass("Enter password to test: ")
    if verify_password(password, settings.ADMIN_PASSWORD_HASH):
        print("Password matches ADMIN_PASSWORD_HASH")
        return 0

    print("Password does NOT match ADMIN_PASSWORD_HASH")
    return 1


def main() -> int:
    print("=" * 60)
    print("Mediahub Admin Password Utility")
    print("=" * 60)
    print()

    if len(sys.argv) > 1 and sys.argv[1] == "--check":
        return check()
    return generate()


if __name__ == "__main__":
    sys.exit(main())
