"""
String-to-bytes encoding for string uploads.

Everything here is pure: no I/O, no logging. A string upload is
turned into a FileUpload that the transport can put on the wire.
"""

import base64
import binascii
import re
from typing import Optional, Union
from urllib.parse import unquote_to_bytes

from .errors import DataURLFormatError, StorageValidationError
from .models import DEFAULT_FILE_NAME, DataURLContent, FileUpload, StringFormat


DATA_URL_PATTERN = re.compile(r"^data:([^,]+)?,")
BASE64_SUFFIX = ";base64"


def utf8_bytes(value: str) -> bytes:
    return value.encode("utf-8")


def base64_bytes(fmt: StringFormat, value: str) -> bytes:
    """
    Decode standard or URL-safe base64.

    Missing padding is tolerated since data URLs and JWT-style
    strings routinely drop it.
    """
    if fmt not in (StringFormat.BASE64, StringFormat.BASE64URL):
        raise ValueError(f"Not a base64 format: {fmt}")

    padded = value + "=" * (-len(value) % 4)
    try:
        if fmt is StringFormat.BASE64URL:
            return base64.b64decode(padded, altchars=b"-_", validate=True)
        return base64.b64decode(padded, validate=True)
    except (binascii.Error, ValueError):
        raise StorageValidationError(f"Invalid character found in {fmt.value} string")


def percent_encoded_bytes(value: str) -> bytes:
    """URL-decode a string to the raw bytes it stands for."""
    return unquote_to_bytes(value)


def parse_data_url(value: str) -> DataURLContent:
    """
    Split a data URL into media type, base64 flag and payload.

    Raises DataURLFormatError if the string has no `data:...,` header.
    """
    match = DATA_URL_PATTERN.match(value)
    if match is None:
        raise DataURLFormatError()

    header = match.group(1)
    mime_type = None
    is_base64 = False
    if header is not None:
        is_base64 = header.endswith(BASE64_SUFFIX)
        mime_type = (header[: -len(BASE64_SUFFIX)] if is_base64 else header) or None

    return DataURLContent(
        mime_type=mime_type,
        is_base64=is_base64,
        payload=value[value.index(",") + 1:],
    )


def decode_data_url(content: DataURLContent) -> bytes:
    if content.is_base64:
        return base64_bytes(StringFormat.BASE64, content.payload)
    return percent_encoded_bytes(content.payload)


def resolve_format(encoding: Optional[Union[StringFormat, str]]) -> Optional[StringFormat]:
    """None means raw; an unknown name resolves to None."""
    if encoding is None:
        return StringFormat.RAW
    if isinstance(encoding, StringFormat):
        return encoding
    try:
        return StringFormat(encoding)
    except ValueError:
        return None


def encode_string(
    data: str,
    encoding: Optional[Union[StringFormat, str]] = None,
    content_type: Optional[str] = None,
) -> FileUpload:
    """
    Turn string upload input into the file that gets sent.

    content_type is the caller's hint and applies to every format
    except data URLs, which declare their own media type.
    """
    fmt = resolve_format(encoding)
    file_data: Optional[bytes] = None

    if fmt is StringFormat.RAW:
        file_data = utf8_bytes(data)
    elif fmt in (StringFormat.BASE64, StringFormat.BASE64URL):
        file_data = base64_bytes(fmt, data)
    elif fmt is StringFormat.DATA_URL:
        parsed = parse_data_url(data)
        content_type = parsed.mime_type
        file_data = decode_data_url(parsed)

    if not file_data:
        raise StorageValidationError("Unable to generate file data")

    return FileUpload(
        content=file_data,
        name=DEFAULT_FILE_NAME,
        content_type=content_type,
    )
