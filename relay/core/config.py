"""Constants shared by the normalizer, the store and the upload relay."""

from typing import Final

DEFAULT_MAX_RESPONSES: Final = 20
DEFAULT_STATUS: Final = "completed"
EMPTY_TEXT_PLACEHOLDER: Final = "no content extracted"
RESULT_ID_PREFIX: Final = "res_"

# Bookkeeping keys n8n echoes back; never rendered into the result text
EXCLUDED_PAYLOAD_KEYS: Final[frozenset[str]] = frozenset(
    {"status", "webhookUrl", "executionMode", "timestamp", "id"}
)

ALLOWED_EXTENSIONS: Final[frozenset[str]] = frozenset({".pdf", ".jpg", ".jpeg", ".png"})
EXECUTION_MODE: Final = "production"

LOG_PREVIEW_LENGTH: Final = 50
