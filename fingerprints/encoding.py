"""
Base64 helpers shared by the matcher, examples and plugin fingerprints
"""
import base64
import binascii

from .exceptions import DecodeError, TextEncodingError


def decode_base64_bytes(value: str) -> bytes:
    """Decode standard-alphabet base64, rejecting non-alphabet characters"""
    try:
        return base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError) as e:
        raise DecodeError(f"Invalid base64 input: {e}", original_error=e)


def decode_base64_text(value: str) -> str:
    """
    Decode base64 input into UTF-8 text

    Raises:
        DecodeError: input is not valid base64
        TextEncodingError: decoded bytes are not valid UTF-8
    """
    raw = decode_base64_bytes(value)
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise TextEncodingError(f"Decoded input is not valid UTF-8: {e}", original_error=e)
