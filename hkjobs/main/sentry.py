import logging

import sentry_sdk
from sentry_sdk.integrations.httpx import HttpxIntegration
from sentry_sdk.integrations.logging import LoggingIntegration

from hkjobs.main.config import Config, config as default_config
from loggers import get_logger

logger = get_logger(__name__)

_sentry_initialized = False


def _skip_reason(config: Config) -> str | None:
    if config.app.DEBUG or config.app.TESTING:
        return "debug/testing mode"
    if not config.sentry.SENTRY_ENABLED:
        return "disabled"
    if not config.sentry.SENTRY_DSN:
        return "no DSN configured"
    return None


def init_sentry(config: Config | None = None) -> None:
    """Report client errors to Sentry. Runs at most once per process."""
    global _sentry_initialized

    if _sentry_initialized:
        return

    config = config or default_config
    reason = _skip_reason(config)
    if reason is not None:
        logger.info("[Sentry] Not initialized: %s", reason)
        return

    sentry_sdk.init(
        dsn=config.sentry.SENTRY_DSN,
        environment=config.sentry.SENTRY_ENV,
        release=config.app.VERSION,
        send_default_pii=False,
        integrations=[
            # Outgoing backend calls show up as breadcrumbs.
            HttpxIntegration(),
            LoggingIntegration(level=logging.INFO, event_level=logging.ERROR),
        ],
    )
    sentry_sdk.set_tag("client", config.app.PROJECT_NAME)
    _sentry_initialized = True
    logger.info("[Sentry] Initialized for %s", config.sentry.SENTRY_ENV)
