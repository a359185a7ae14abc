"""Create a user in the configured DB.

Usage:
  python scripts/create_user.py --username alice --email alice@x.com --password '...' [--admin]

NOTE: This is intended for local/dev, and is the way to create admin users
besides the AUTH_BOOTSTRAP_ADMIN_* settings.
"""

import argparse
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from blog_backend.auth.crud import create_user
from blog_backend.config import load_config
from blog_backend.db import connect, init_db


def main() -> None:
    ap = argparse.ArgumentParser()
    ap.add_argument("--username", required=True)
    ap.add_argument("--email", required=True)
    ap.add_argument("--password", required=True)
    ap.add_argument("--admin", action="store_true")
    args = ap.parse_args()

    cfg = load_config()
    init_db(cfg.DB_DSN)

    with connect(cfg.DB_DSN) as conn:
        u = create_user(
            conn,
            username=args.username,
            email=args.email,
            password=args.password,
            is_admin=args.admin,
        )

    print("Created user:")
    print(u)


if __name__ == "__main__":
    main()
