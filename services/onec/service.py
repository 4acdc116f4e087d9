"""1C integration service.

Decides whether an n8n result is forwarded to 1C, applies the per-document-type
field mapping and reports the outcome as an IntegrationResult.

Configuration comes from an optional JSON file overridden by ONEC_* environment
variables. Missing credentials or a failed connection check disable the
integration instead of failing startup.
"""

import logging
from pathlib import Path
from typing import Any

from core.logging_utils import sanitize_secret
from core.settings import OneCSettings, app_settings, onec_settings
from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError
from relay.core.exceptions import ExternalServiceError, IntegrationDisabledError
from relay.models.dto import IntegrationResult
from services.onec.client import DEFAULT_TIMEOUT_SECONDS, OneCClient
from services.onec.mapping import apply_field_mapping, parse_n8n_response

logger = logging.getLogger(__name__)


class DocumentTypeConfig(BaseModel):
    """Target 1C object and field renames for one document type."""

    target_object: str = ""
    fields: dict[str, str] = Field(default_factory=dict)


class IntegrationConfig(BaseModel):
    base_url: str = ""
    username: str = ""
    password: str = ""
    timeout: int = 0
    enabled: bool = False
    auto_send: bool = False
    mapping: dict[str, DocumentTypeConfig] = Field(default_factory=dict)


def _read_config_file(config_path: Path) -> IntegrationConfig:
    if not config_path.exists():
        logger.info("1C config file %s not found", config_path)
        return IntegrationConfig()

    try:
        config = IntegrationConfig.model_validate_json(config_path.read_bytes())
    except OSError as e:
        logger.warning("Cannot read 1C config file %s: %s", config_path, e)
        return IntegrationConfig()
    except PydanticValidationError as e:
        logger.warning("Cannot parse 1C config file %s: %s", config_path, e)
        return IntegrationConfig()

    logger.info("1C config loaded from file: %s", config_path)
    return config


def _override_from_env(config: IntegrationConfig, env: OneCSettings) -> IntegrationConfig:
    overrides: dict[str, Any] = {}
    if env.ONEC_BASE_URL:
        overrides["base_url"] = env.ONEC_BASE_URL
    if env.ONEC_USERNAME:
        overrides["username"] = env.ONEC_USERNAME
    if env.ONEC_PASSWORD is not None and env.ONEC_PASSWORD.get_secret_value():
        overrides["password"] = env.ONEC_PASSWORD.get_secret_value()
    if env.ONEC_TIMEOUT is not None:
        overrides["timeout"] = env.ONEC_TIMEOUT
    if env.ONEC_ENABLED is not None:
        overrides["enabled"] = env.ONEC_ENABLED
    if env.ONEC_AUTO_SEND is not None:
        overrides["auto_send"] = env.ONEC_AUTO_SEND

    for key, value in overrides.items():
        shown = sanitize_secret(value) if key == "password" else value
        logger.info("1C setting %s overridden from environment: %s", key, shown)

    return config.model_copy(update=overrides)


def load_integration_config(
    config_path: str | Path, env: OneCSettings | None = None
) -> IntegrationConfig:
    """Load 1C settings: JSON file first, environment variables on top."""
    config = _read_config_file(Path(config_path))
    config = _override_from_env(config, env or onec_settings)

    updates: dict[str, Any] = {}
    if config.timeout <= 0:
        updates["timeout"] = DEFAULT_TIMEOUT_SECONDS
    if config.enabled and not (config.base_url and config.username and config.password):
        logger.warning("1C connection settings incomplete, disabling integration")
        updates["enabled"] = False
    return config.model_copy(update=updates)


class OneCService:
    """Forwards n8n results to 1C.

    Args:
        config: Integration settings
        client: 1C client, required when the integration is enabled
    """

    def __init__(self, config: IntegrationConfig, client: OneCClient | None = None):
        self.config = config
        self.client = client
        self.enabled = config.enabled and client is not None

    @classmethod
    async def create(
        cls,
        config_path: str | Path,
        env: OneCSettings | None = None,
        client: OneCClient | None = None,
    ) -> "OneCService":
        """Build the service and verify the 1C connection.

        A failed connection check disables the integration with a warning.
        """
        config = load_integration_config(config_path, env)

        if not config.enabled:
            return cls(config)

        client = client or OneCClient(
            base_url=config.base_url,
            username=config.username,
            password=config.password,
            timeout=config.timeout,
        )
        try:
            await client.test_connection()
        except ExternalServiceError as e:
            logger.warning(
                "Cannot connect to 1C, integration disabled: %s",
                e.details.get("detail", e.message),
                extra={"service": "onec"},
            )
            return cls(config.model_copy(update={"enabled": False}))

        logger.info("Connected to 1C at %s", config.base_url, extra={"service": "onec"})
        return cls(config, client)

    def is_enabled(self) -> bool:
        return self.enabled

    async def _process(self, data: dict[str, Any], force_send: bool) -> IntegrationResult:
        if not self.enabled:
            logger.info("1C integration disabled, skipping delivery")
            return IntegrationResult(success=True, error_message="Integration disabled")

        document = parse_n8n_response(data)

        type_config = self.config.mapping.get(document.document_type)
        if type_config is not None:
            document = apply_field_mapping(
                document, type_config.target_object, type_config.fields
            )
            logger.info(
                "Field mapping applied for document type: %s",
                document.document_type,
                extra={"document_type": document.document_type},
            )
        else:
            logger.warning(
                "No field mapping for document type '%s', sending fields as is",
                document.document_type,
                extra={"document_type": document.document_type},
            )

        if not (self.config.auto_send or force_send):
            logger.info("Document prepared for 1C, auto-send is off")
            return IntegrationResult(
                success=True,
                document_id=document.id,
                error_message="Document prepared, auto-send disabled",
            )

        response = await self.client.send_document(document)

        if response.success:
            logger.info(
                "Document created in 1C: %s",
                response.reference,
                extra={"document_id": document.id, "service": "onec"},
            )
            return IntegrationResult(
                success=True, document_id=document.id, onec_ref=response.reference
            )

        logger.error(
            "1C rejected document: %s",
            response.error,
            extra={"document_id": document.id, "service": "onec"},
        )
        return IntegrationResult(
            success=False, document_id=document.id, error_message=response.error
        )

    async def process_n8n_response(self, data: dict[str, Any]) -> IntegrationResult:
        """Forward one n8n result; delivery failures become a failed result."""
        try:
            return await self._process(data, force_send=False)
        except ExternalServiceError as e:
            detail = e.details.get("detail", e.message)
            logger.error(
                "1C delivery failed: %s", detail, extra={"service": "onec"}
            )
            return IntegrationResult(success=False, error_message=detail)

    async def send_manually(
        self, document_id: str, data: dict[str, Any]
    ) -> IntegrationResult:
        """Send a payload to 1C regardless of the auto-send flag.

        Raises:
            IntegrationDisabledError: If the integration is off
            ExternalServiceError: If delivery fails
        """
        if not self.enabled:
            raise IntegrationDisabledError("onec")

        logger.info(
            "Manual 1C delivery requested", extra={"document_id": document_id}
        )
        result = await self._process(data, force_send=True)
        if document_id and not result.document_id:
            result = result.model_copy(update={"document_id": document_id})
        return result

    async def get_status(self) -> dict[str, Any]:
        status: dict[str, Any] = {
            "enabled": self.enabled,
            "auto_send": self.config.auto_send,
        }

        if self.enabled and self.client is not None:
            try:
                await self.client.test_connection()
                status["connection"] = "ok"
            except ExternalServiceError as e:
                status["connection"] = "error"
                status["error"] = e.details.get("detail", e.message)
        else:
            status["connection"] = "disabled"

        return status


async def create_onec_service_from_env() -> OneCService:
    """Factory function to create OneCService from centralized settings."""
    return await OneCService.create(app_settings.ONEC_CONFIG_PATH, onec_settings)
