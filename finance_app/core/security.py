# finance_app/core/security.py
import hmac
import hashlib
import logging
from urllib.parse import parse_qsl
from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any

logger = logging.getLogger(__name__)

def _parse_and_validate_session_data(
    session_data: str,
    secret: str,
    c_str: str = "SessionData",
    expiration_hours: int = 24
) -> Optional[Dict[str, Any]]:
    """
    Parse and validate the signed session string issued by the auth service.

    Args:
        session_data: URL-encoded claims (user_id, email, name, auth_date) plus `hash`.
        secret: Shared secret between the auth service and this backend.
        c_str: Constant used to derive the HMAC key.
        expiration_hours: Maximum session age in hours.

    Returns:
        The parsed claims with `_valid` set to True, or None if the data is
        malformed, expired or carries a wrong signature.
    """
    try:
        # parse_qsl keeps order and unquotes values
        parsed_data = dict(parse_qsl(session_data, strict_parsing=True))
    except ValueError:
        logger.info("Session validation failed: malformed session data")
        return None

    if "hash" not in parsed_data:
        return None

    received_hash = parsed_data.pop("hash")

    try:
        auth_date_unix = int(parsed_data.get("auth_date", 0))
        auth_date = datetime.fromtimestamp(auth_date_unix, tz=timezone.utc)
    except (ValueError, TypeError, OverflowError, OSError):
        return None

    now = datetime.now(tz=timezone.utc)
    if now - auth_date > timedelta(hours=expiration_hours):
        logger.info("Session validation failed: auth_date expired (auth_date=%s)", auth_date)
        return None

    # Every key=value pair except hash, sorted by key, joined with \n
    data_check_string = "\n".join(
        f"{k}={v}" for k, v in sorted(parsed_data.items())
    )

    secret_key = hmac.new(c_str.encode(), secret.encode(), hashlib.sha256).digest()
    calculated_hash = hmac.new(secret_key, data_check_string.encode(), hashlib.sha256).hexdigest()

    if not hmac.compare_digest(calculated_hash, received_hash):
        logger.info("Session validation failed: hash mismatch")
        return None

    if not parsed_data.get("user_id"):
        logger.info("Session validation failed: no user_id claim")
        return None

    parsed_data["_valid"] = True
    return parsed_data
