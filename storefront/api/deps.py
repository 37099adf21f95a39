# storefront/api/deps.py
import hmac

from fastapi import Header, HTTPException

from storefront.utils.settings import ADMIN_TOKEN


def get_session_id(x_session_id: str = Header(..., min_length=8, max_length=128)) -> str:
    """Id sesji przegladarki (odpowiednik localStorage), nadawany przez frontend."""
    return x_session_id


def require_admin(x_admin_token: str | None = Header(None)) -> None:
    if not x_admin_token or not hmac.compare_digest(x_admin_token.encode(), ADMIN_TOKEN.encode()):
        raise HTTPException(status_code=403, detail="Acesso negado")
