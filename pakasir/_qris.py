"""
Simulated QRIS payload: EMV merchant-presented QR string.

Not accepted by any real acquirer; it only has the right shape so a
front end can render a scannable code and show the amount.
"""

from __future__ import annotations

from pakasir._types import Money

_GUID = "ID.CO.QRIS.WWW"
_CURRENCY_IDR = "360"
_COUNTRY = "ID"
_MCC_GENERAL = "5999"


def tlv(tag: str, value: str) -> str:
    """One EMV field: 2-char tag, 2-digit length, value."""
    if len(value) > 99:
        raise ValueError(f"field {tag} too long ({len(value)})")
    return f"{tag}{len(value):02d}{value}"


def crc16_ccitt(data: str) -> str:
    """CRC-16/CCITT-FALSE (poly 0x1021, init 0xFFFF), 4 upper-case hex digits."""
    crc = 0xFFFF
    for byte in data.encode("utf-8"):
        crc ^= byte << 8
        for _ in range(8):
            if crc & 0x8000:
                crc = ((crc << 1) ^ 0x1021) & 0xFFFF
            else:
                crc = (crc << 1) & 0xFFFF
    return f"{crc:04X}"


def build_qris_payload(
    *,
    amount: Money,
    reference: str,
    merchant_name: str,
    merchant_city: str,
    merchant_id: str = "ID1020000000001",
) -> str:
    """
    Dynamic (point-of-initiation 12) QR for a fixed amount.

    reference goes into the bill-number slot of field 62 so the scanner
    side can tie a payment back to its order.
    """
    account = tlv("00", _GUID) + tlv("01", merchant_id) + tlv("02", merchant_id[-10:]) + tlv("03", "UMI")
    body = (
        tlv("00", "01")
        + tlv("01", "12")
        + tlv("26", account)
        + tlv("52", _MCC_GENERAL)
        + tlv("53", _CURRENCY_IDR)
        + tlv("54", str(amount))
        + tlv("58", _COUNTRY)
        + tlv("59", merchant_name[:25])
        + tlv("60", merchant_city[:15])
        + tlv("62", tlv("01", reference[:25]))
        + "6304"
    )
    return body + crc16_ccitt(body)


def verify_qris_payload(payload: str) -> bool:
    """True when the trailing CRC matches the rest of the payload."""
    if len(payload) < 8 or payload[-8:-4] != "6304":
        return False
    return crc16_ccitt(payload[:-4]) == payload[-4:].upper()


__all__ = (
    "tlv",
    "crc16_ccitt",
    "build_qris_payload",
    "verify_qris_payload",
)
