#!/usr/bin/env python3
"""
Script: create_admin.py
Purpose: Create a dashboard admin user

Usage:
    python scripts/create_admin.py --email admin@loja.com --name "Admin" [--password ...] [--init-schema]

Options:
    --password      Password (prompted when omitted)
    --init-schema   Create missing tables before inserting the user
"""
import argparse
import getpass
import logging
import sys
from pathlib import Path

# Add backend to path
BACKEND_DIR = Path(__file__).parent.parent
sys.path.insert(0, str(BACKEND_DIR))

from dotenv import load_dotenv

load_dotenv(BACKEND_DIR / '.env')

from passlib.context import CryptContext

from app.core.database import init_schema
from app.repositories.admin_user_repository import AdminUserRepository

logging.basicConfig(level=logging.INFO, format='%(message)s')
logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def main() -> int:
    parser = argparse.ArgumentParser(description='Create a DarkStore dashboard admin')
    parser.add_argument('--email', required=True, help='Login email')
    parser.add_argument('--name', default=None, help='Display name')
    parser.add_argument('--password', default=None, help='Password (prompted when omitted)')
    parser.add_argument('--init-schema', action='store_true', help='Create missing tables first')
    args = parser.parse_args()

    password = args.password or getpass.getpass('Password: ')
    if len(password) < 8:
        logger.error("❌ Password must have at least 8 characters")
        return 1

    if args.init_schema:
        init_schema()
        logger.info("✓ Schema checked")

    repo = AdminUserRepository()
    if repo.find_by_email(args.email):
        logger.error(f"❌ User {args.email} already exists")
        return 1

    user = repo.create(args.email, pwd_context.hash(password), name=args.name)
    logger.info(f"✅ Admin created: {user.email} (id {user.id})")
    return 0


if __name__ == "__main__":
    sys.exit(main())
