#!/usr/bin/env python3
"""
Issue a development bearer token for the cart service.

The token is signed with CART_JWT_SECRET (from the environment or
config/.env) so the local cart service accepts it.

Usage:
    python scripts/issue_token.py user-1
    python scripts/issue_token.py user-1 --hours 2
"""

import argparse
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Optional

import jwt
from dotenv import load_dotenv

from cart_backend.security.auth import DEFAULT_SECRET, get_jwt_secret

PROJECT_ROOT = Path(__file__).parent.parent


def issue_token(user_id: str, secret: str, hours: Optional[float] = None) -> str:
    """
    Sign a token whose subject is the user id.

    Args:
        user_id: Account the cart belongs to
        secret: HS256 signing key
        hours: Lifetime of the token; no expiry when omitted
    """
    now = datetime.now(timezone.utc)
    claims = {"sub": user_id, "iat": now}
    if hours:
        claims["exp"] = now + timedelta(hours=hours)
    return jwt.encode(claims, secret, algorithm="HS256")


def main():
    parser = argparse.ArgumentParser(description="Issue a development cart token")
    parser.add_argument("user_id", help="Account id placed in the token subject")
    parser.add_argument("--hours", type=float, default=None, help="Token lifetime")
    args = parser.parse_args()

    load_dotenv(PROJECT_ROOT / "config" / ".env")
    secret = get_jwt_secret()
    if secret == DEFAULT_SECRET:
        print("! CART_JWT_SECRET not set, signing with the development secret", file=sys.stderr)

    print(issue_token(args.user_id, secret, args.hours))


if __name__ == "__main__":
    main()
