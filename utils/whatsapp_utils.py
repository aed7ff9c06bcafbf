"""
utils/whatsapp_utils.py

Purpose: WhatsApp address helpers

- Twilio addresses WhatsApp users as "whatsapp:+<E.164 number>"
- Chat user ids are stored without the prefix
"""

from typing import Optional

WHATSAPP_PREFIX = "whatsapp:"


def to_whatsapp_address(value: str) -> str:
    """
    Adds the whatsapp: prefix if it is missing.

    Example:
        "+15551234567" -> "whatsapp:+15551234567"
    """
    value = value.strip()
    if value.startswith(WHATSAPP_PREFIX):
        return value
    return f"{WHATSAPP_PREFIX}{value}"


def strip_whatsapp_prefix(value: str) -> str:
    """
    Removes the whatsapp: prefix, giving the bare user id.
    """
    value = value.strip()
    if value.startswith(WHATSAPP_PREFIX):
        return value[len(WHATSAPP_PREFIX):]
    return value


def same_address(a: Optional[str], b: Optional[str]) -> bool:
    """True if both values refer to the same WhatsApp address."""
    if not a or not b:
        return False
    return strip_whatsapp_prefix(a) == strip_whatsapp_prefix(b)
