# -*- coding: utf-8 -*-
"""
make_token.py: mint a bearer token for manual API testing.

    python make_token.py                         → id 1, admin, ADMIN, 1 hour
    python make_token.py --id 7 --username ana --role USER --hours 8

The token is signed with JWT_SECRET from the environment (.env), like the API does.
"""

import argparse

from app import create_app
from models import Role
from security import create_access_token


def main():
    parser = argparse.ArgumentParser(description="Print a test bearer token")
    parser.add_argument("--id", type=int, default=1, help="user id claim")
    parser.add_argument("--username", default="admin")
    parser.add_argument("--role", choices=[r.value for r in Role], default=Role.ADMIN.value)
    parser.add_argument("--hours", type=int, default=1, help="validity")
    args = parser.parse_args()

    app = create_app()
    with app.app_context():
        token = create_access_token(args.id, args.username, args.role, hours=args.hours)
    print("Token de teste:", token)


if __name__ == "__main__":
    main()
