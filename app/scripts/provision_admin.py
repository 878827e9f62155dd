# app/scripts/provision_admin.py
# Promote an existing user to admin:
#   python -m app.scripts.provision_admin --email ops@example.com

import argparse
import sys

from app.core.config import settings
from app.core.db import SessionLocal
from app.core.logger import logger
from app.repositories import RepositoryFactory
from app.services.provisioning import promote_to_admin


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Grant the admin role to a registered user.")
    parser.add_argument("--email", default=settings.ADMIN_EMAIL, help="defaults to ADMIN_EMAIL")
    args = parser.parse_args(argv)

    if not args.email:
        logger.error("No email given and ADMIN_EMAIL is not set")
        return 2

    with SessionLocal() as db:
        user = promote_to_admin(RepositoryFactory(db), args.email)

    return 0 if user is not None else 1


if __name__ == "__main__":
    sys.exit(main())
