"""
Sentry Integration Module.

Configures Sentry for error tracking and logging integration.
"""

import logging
from typing import Optional, Dict, Any

import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.starlette import StarletteIntegration
from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration
from sentry_sdk.integrations.logging import LoggingIntegration

from docchat.config import settings

logger = logging.getLogger(__name__)


def init_sentry(
    dsn: Optional[str] = None,
    environment: Optional[str] = None,
    sample_rate: float = 1.0,
    traces_sample_rate: float = 0.1,
) -> bool:
    """
    Initialize Sentry SDK for the FastAPI backend.

    Args:
        dsn: Sentry DSN. Falls back to settings.SENTRY_DSN.
        environment: Environment name (production, staging, development).
        sample_rate: Error event sample rate (0.0 to 1.0).
        traces_sample_rate: Performance transaction sample rate.

    Returns:
        bool: True if Sentry was initialized.
    """
    sentry_dsn = dsn or settings.SENTRY_DSN

    if not sentry_dsn:
        logger.info("Sentry DSN not configured. Error tracking disabled.")
        return False

    env = environment or settings.ENVIRONMENT

    logging_integration = LoggingIntegration(
        level=logging.WARNING,  # Capture warnings and above as breadcrumbs
        event_level=logging.ERROR,  # Send errors as Sentry events
    )

    sentry_sdk.init(
        dsn=sentry_dsn,
        environment=env,
        release="docchat-backend@1.0.0",
        sample_rate=sample_rate,
        traces_sample_rate=traces_sample_rate,
        integrations=[
            FastApiIntegration(transaction_style="endpoint"),
            StarletteIntegration(transaction_style="endpoint"),
            SqlalchemyIntegration(),
            logging_integration,
        ],
        send_default_pii=False,
        before_send=before_send_handler,
        before_send_transaction=before_send_transaction_handler,
        max_breadcrumbs=50,
    )

    logger.info(f"Sentry initialized for environment: {env}")
    return True


def before_send_handler(event: Dict[str, Any], hint: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """
    Drop noisy disconnect errors and scrub auth headers before sending.
    """
    if "exc_info" in hint:
        exc_type, _, _ = hint["exc_info"]

        ignored_exceptions = (
            "ConnectionResetError",
            "BrokenPipeError",
            "ClientDisconnected",
        )

        if exc_type.__name__ in ignored_exceptions:
            return None

    if "request" in event:
        headers = event["request"].get("headers", {})
        for header in ("authorization", "cookie"):
            if header in headers:
                headers[header] = "[Filtered]"

    return event


def before_send_transaction_handler(
    event: Dict[str, Any],
    hint: Dict[str, Any]
) -> Optional[Dict[str, Any]]:
    """Filter out health check and metrics transactions."""
    transaction_name = event.get("transaction", "")

    for endpoint in ("/health", "/metrics"):
        if endpoint in transaction_name:
            return None

    return event


def capture_exception(error: Exception, tags: Optional[Dict[str, str]] = None) -> Optional[str]:
    """
    Send an exception to Sentry with extra tags.

    A no-op returning None when Sentry is not initialized.
    """
    with sentry_sdk.new_scope() as scope:
        for key, value in (tags or {}).items():
            scope.set_tag(key, value)
        return sentry_sdk.capture_exception(error)
