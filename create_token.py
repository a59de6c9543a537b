"""Issue a bearer token for a username.

Usage:
    python create_token.py alice --days 365
"""
import argparse

from profile_api.app.core.security import create_access_token


def main() -> None:
    parser = argparse.ArgumentParser(description="Create an access token for the Profile API")
    parser.add_argument("username", help="Username to embed as the token subject")
    parser.add_argument("--days", type=int, default=1, help="Token lifetime in days")
    args = parser.parse_args()
    print(create_access_token({"sub": args.username}, expires_delta=args.days * 24 * 60 * 60))


if __name__ == "__main__":
    main()
