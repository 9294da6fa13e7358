# Seeds an admin account.
# Run: python -m storeadmin.create_admin admin@example.com s3cret --name "Store Admin"

import argparse
import sys

from pydantic import ValidationError

from storeadmin.api.auth import ADMINS
from storeadmin.core.security import hash_password
from storeadmin.db.mongo import DocumentStore, get_store
from storeadmin.models.schemas import AdminCreate


def create_admin(store: DocumentStore, payload: AdminCreate) -> str:
    email = payload.email.lower()
    if store.find_one(ADMINS, {"email": email}):
        raise ValueError(f"{email} is already registered.")
    return store.create(ADMINS, {
        "email": email,
        "password": hash_password(payload.password),
        "fullName": payload.full_name,
    })


def main(argv=None, store: DocumentStore = None) -> int:
    parser = argparse.ArgumentParser(description="Create a store admin account.")
    parser.add_argument("email")
    parser.add_argument("password")
    parser.add_argument("--name", default=None)
    args = parser.parse_args(argv)

    try:
        payload = AdminCreate(email=args.email, password=args.password, full_name=args.name)
        admin_id = create_admin(store or get_store(), payload)
    except (ValidationError, ValueError) as e:
        print(f"Could not create admin: {e}", file=sys.stderr)
        return 1
    print(f"Admin created: {admin_id}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
