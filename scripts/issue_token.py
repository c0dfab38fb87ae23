"""Mint a bearer token for the upload endpoint."""

from __future__ import annotations

import argparse
import os
import sys
from datetime import timedelta

from src.uploader.auth.auth_service import UPLOAD_FILES, AuthService
from src.uploader.logging import configure_logging


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Issue a signed token for API callers.")
    parser.add_argument("subject", help="Name recorded in the token's 'sub' claim.")
    parser.add_argument(
        "--capability",
        action="append",
        dest="capabilities",
        help=f"Capability to grant (repeatable, default: {UPLOAD_FILES}).",
    )
    parser.add_argument("--ttl-hours", type=int, default=24, help="Token lifetime in hours.")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    configure_logging()
    args = parse_args(argv if argv is not None else sys.argv[1:])
    try:
        service = AuthService(
            signing_key=os.getenv("JWT_SIGNING_KEY", ""),
            token_ttl=timedelta(hours=args.ttl_hours),
        )
    except RuntimeError as exc:
        print(f"token issue failed: {exc}", file=sys.stderr)
        return 2

    token = service.issue_token(args.subject, args.capabilities or [UPLOAD_FILES])
    print(token, file=sys.stdout)
    return 0


if __name__ == "__main__":
    sys.exit(main())
