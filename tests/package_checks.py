from __future__ import annotations

import json
import logging
import sys

import urlrequest
from urlrequest import HttpxTransport, TransferOption, UrlRequest

logger: logging.Logger = logging.getLogger(__name__)

# Use httpbin.org for real HTTP testing
HTTPBIN_URL = "https://httpbin.org"


def check_get() -> None:
    logger.info("Checking get...")
    request = UrlRequest(f"{HTTPBIN_URL}/get", HttpxTransport()).execute()
    assert request.get_errno() == 0, request.get_error()
    assert json.loads(request.get_content())["url"] == f"{HTTPBIN_URL}/get"


def check_post() -> None:
    logger.info("Checking post...")
    request = (
        UrlRequest(f"{HTTPBIN_URL}/post", HttpxTransport())
        .add_option(TransferOption.RETURNTRANSFER, 1)
        .add_option(TransferOption.POSTFIELDS, "key=value")
        .execute()
    )
    assert request.get_errno() == 0, request.get_error()


def main() -> None:
    r"""Run all package checks to validate installation and
    functionality."""
    logger.info(f"urlrequest {urlrequest.__version__}")
    try:
        check_get()
        check_post()

        logger.info("✅ All package checks passed successfully!")
    except Exception:
        logger.exception("❌ Package check failed")
        sys.exit(1)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    main()
