# oauth_store/shared/utils/encoding.py

"""
Conversions between the hex strings used at the API and in configuration
and the raw bytes the stores keep.
"""

from typing import Any, Union

from oauth_store.domain.exceptions import InvalidInputException


def buf(value: Union[str, bytes, bytearray]) -> bytes:
    """
    Return ``value`` as bytes, decoding hex strings.

    Raises:
        InvalidInputException: If a string is not valid hex
    """
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    try:
        return bytes.fromhex(value)
    except (TypeError, ValueError):
        raise InvalidInputException(detail="Invalid hex value", fields={"value": repr(value)})


def unbuf(value: Any) -> Any:
    """Hex encode binary values; anything else is returned unchanged."""
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value).hex()
    return value
