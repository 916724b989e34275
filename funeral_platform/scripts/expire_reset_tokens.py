"""
Background job to clear lapsed admin-key reset tokens

This script should be run periodically (e.g., via cron) so abandoned reset
tokens do not linger in tenants.json past their expiry.

    python -m funeral_platform.scripts.expire_reset_tokens
"""

import sys

import structlog

from funeral_platform.core.config import get_settings
from funeral_platform.core.dependencies import (
    get_credentials, get_email_service, get_password_reset_service, get_registry,
)
from funeral_platform.core.exceptions import PlatformError
from funeral_platform.core.logging import configure_logging
from funeral_platform.core.store import get_store

logger = structlog.get_logger(__name__)


def expire_reset_tokens() -> dict:
    """Clear every reset token whose expiry has passed"""
    settings = get_settings()
    store = get_store()
    registry = get_registry(settings, store)
    resets = get_password_reset_service(
        settings,
        registry,
        get_credentials(settings, store, registry),
        get_email_service(settings),
    )

    expired = resets.expire_reset_tokens()
    if not expired:
        logger.info("No lapsed reset tokens found")
    return {"expired": expired}


def main():
    """Main entry point for cleanup job"""
    configure_logging(debug=get_settings().DEBUG)
    logger.info("Starting reset token cleanup job")

    try:
        results = expire_reset_tokens()
    except PlatformError as e:
        logger.error(f"Fatal error in cleanup job: {e.message}")
        sys.exit(1)

    logger.info(f"Reset token cleanup complete: {results}")


if __name__ == "__main__":
    main()
