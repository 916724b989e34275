"""
Add a super-admin account

    python -m funeral_platform.scripts.create_superadmin owner@example.com 's3cret-pass'
"""

import argparse
import sys

import structlog

from funeral_platform.core.config import get_settings
from funeral_platform.core.exceptions import PlatformError
from funeral_platform.core.logging import configure_logging
from funeral_platform.core.store import get_store
from funeral_platform.services.superadmins import SuperadminService

logger = structlog.get_logger(__name__)


def main(argv=None):
    parser = argparse.ArgumentParser(description="Create a super-admin account")
    parser.add_argument("email")
    parser.add_argument("password")
    args = parser.parse_args(argv)

    settings = get_settings()
    configure_logging(debug=settings.DEBUG)

    try:
        account = SuperadminService(get_store(), settings).add(args.email, args.password)
    except PlatformError as e:
        logger.error(f"Could not create super-admin: {e.message}")
        sys.exit(1)

    logger.info(f"Super-admin ready: {account.email}")


if __name__ == "__main__":
    main()
