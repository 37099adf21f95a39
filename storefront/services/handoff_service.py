# storefront/services/handoff_service.py
import re
from urllib.parse import quote

from storefront.domain.errors import HandoffConfigError
from storefront.utils.settings import WHATSAPP_BASE_URL
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

MIN_PHONE_DIGITS = 10


def normalize_number(raw: str | None) -> str:
    return re.sub(r"\D", "", raw or "")


class WhatsAppHandoff:
    """Buduje link wa.me z gotowa wiadomoscia, reszta dzieje sie po stronie przegladarki."""

    def __init__(self, base_url: str | None = None):
        self.base_url = (base_url or WHATSAPP_BASE_URL).rstrip("/")

    def ensure_configured(self, store_number: str | None) -> str:
        number = normalize_number(store_number)
        if len(number) < MIN_PHONE_DIGITS:
            raise HandoffConfigError()
        return number

    def build_url(self, store_number: str | None, message: str) -> str:
        number = self.ensure_configured(store_number)
        url = f"{self.base_url}/{number}?text={quote(message, safe='')}"
        logger.info(f"Handoff URL built for {number} ({len(message)} chars)")
        return url
