"""Application startup validation checks.

Validates critical settings before the application starts serving.
Settings classes define data, this module validates behavior.
"""

import logging
import re

logger = logging.getLogger(__name__)

URL_PATTERN = re.compile(r"^https?://.+")


def validate_all_settings() -> None:
    """Validate all critical settings at application startup.

    The application fails fast if the environment is misconfigured,
    rather than failing on the first upload or callback.

    Raises:
        RuntimeError: If any critical setting is invalid
    """
    from core.settings import app_settings, n8n_settings, onec_settings

    problems = []

    if not URL_PATTERN.match(n8n_settings.N8N_WEBHOOK_URL.strip()):
        problems.append(
            f"  - N8N_WEBHOOK_URL={n8n_settings.N8N_WEBHOOK_URL!r} "
            "(must start with http:// or https://)"
        )

    if onec_settings.ONEC_BASE_URL and not URL_PATTERN.match(
        onec_settings.ONEC_BASE_URL
    ):
        problems.append(
            f"  - ONEC_BASE_URL={onec_settings.ONEC_BASE_URL!r} "
            "(must start with http:// or https://)"
        )

    if app_settings.MAX_RESPONSES < 1:
        problems.append(
            f"  - MAX_RESPONSES must be >= 1, got {app_settings.MAX_RESPONSES}"
        )

    if app_settings.MAX_FILE_SIZE_MB < 1:
        problems.append(
            f"  - MAX_FILE_SIZE_MB must be >= 1, got {app_settings.MAX_FILE_SIZE_MB}"
        )

    if not (1 <= app_settings.SERVER_PORT <= 65535):
        problems.append(
            f"  - SERVER_PORT must be 1-65535, got {app_settings.SERVER_PORT}"
        )

    if n8n_settings.N8N_TIMEOUT <= 0:
        problems.append(
            f"  - N8N_TIMEOUT must be positive, got {n8n_settings.N8N_TIMEOUT}"
        )

    if problems:
        error_msg = "Invalid configuration:\n" + "\n".join(problems)
        logger.error(error_msg)
        raise RuntimeError(error_msg)

    logger.info("All critical settings validated successfully")
    logger.info(f"  - n8n webhook: {n8n_settings.N8N_WEBHOOK_URL}")
    logger.info(f"  - Max stored results: {app_settings.MAX_RESPONSES}")
    logger.info(f"  - Max file size: {app_settings.MAX_FILE_SIZE_MB} MB")
    logger.info(f"  - Static dir: {app_settings.STATIC_DIR}")
