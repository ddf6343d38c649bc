"""Create a user in the MongoDB users collection.

Usage:
  python scripts/create_user.py --username alice123 --password '...' --email alice@mail.com

The same field rules as `POST /users` apply.
"""

import argparse
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from myflix_api.config import load_config
from myflix_api.db import connect, init_db
from myflix_api.auth.crud import create_user
from myflix_api.errors import Conflict
from myflix_api.models import UserPayload
from myflix_api.validation import normalize_birthday, validate_user_fields


def main() -> None:
    ap = argparse.ArgumentParser()
    ap.add_argument("--username", required=True)
    ap.add_argument("--password", required=True)
    ap.add_argument("--email", required=True)
    ap.add_argument("--birthday", default=None, help="YYYY-MM-DD")
    args = ap.parse_args()

    payload = UserPayload(
        Username=args.username,
        Password=args.password,
        Email=args.email,
        Birthday=args.birthday,
    )
    errors = validate_user_fields(payload)
    if errors:
        for e in errors:
            print(f"{e['param']}: {e['msg']}")
        raise SystemExit(2)

    cfg = load_config()
    with connect(cfg) as db:
        init_db(db)
        try:
            u = create_user(
                db,
                username=args.username,
                password=args.password,
                email=args.email,
                birthday=normalize_birthday(args.birthday),
            )
        except Conflict as e:
            print(e.detail)
            raise SystemExit(1)

    print("Created user:")
    print({k: v for k, v in u.items() if k != "Password"})


if __name__ == "__main__":
    main()
