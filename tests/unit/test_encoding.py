"""
Unit tests for string upload encoding.

Pure functions only: no transport, no client.
"""

import pytest

from nhost_storage.core.encoding import (
    base64_bytes,
    encode_string,
    parse_data_url,
    percent_encoded_bytes,
    resolve_format,
    utf8_bytes,
)
from nhost_storage.core.errors import DataURLFormatError, StorageValidationError
from nhost_storage.core.models import StringFormat, StringUploadSpec


# ---------------------------------------------------------------------------
# Primitive decoders
# ---------------------------------------------------------------------------

class TestPrimitiveDecoders:
    """Tests for the byte-level helpers."""

    @pytest.mark.parametrize("text", ["hello", "héllo wörld", "日本語", "emoji 🏊"])
    def test_utf8_round_trip(self, text):
        """Encoding a raw string and decoding it back yields the same string."""
        assert utf8_bytes(text).decode("utf-8") == text

    def test_base64_decodes_standard_alphabet(self):
        assert base64_bytes(StringFormat.BASE64, "SGVsbG8=") == b"Hello"

    def test_base64_tolerates_missing_padding(self):
        assert base64_bytes(StringFormat.BASE64, "SGVsbG8") == b"Hello"

    def test_base64url_decodes_url_safe_alphabet(self):
        """'-' and '_' stand in for '+' and '/'."""
        assert base64_bytes(StringFormat.BASE64URL, "-_8") == b"\xfb\xff"

    def test_base64_rejects_garbage(self):
        with pytest.raises(StorageValidationError, match="base64"):
            base64_bytes(StringFormat.BASE64, "not base64 at all!")

    def test_base64_rejects_non_base64_format(self):
        with pytest.raises(ValueError):
            base64_bytes(StringFormat.RAW, "SGVsbG8=")

    def test_percent_decoding(self):
        assert percent_encoded_bytes("Hello%20World") == b"Hello World"

    def test_percent_decoding_keeps_raw_bytes(self):
        """Percent escapes are bytes, not necessarily valid UTF-8."""
        assert percent_encoded_bytes("%FF%00") == b"\xff\x00"


# ---------------------------------------------------------------------------
# Data URL parsing
# ---------------------------------------------------------------------------

class TestParseDataUrl:
    """Tests for splitting a data URL into its parts."""

    def test_base64_data_url(self):
        parsed = parse_data_url("data:text/plain;base64,SGVsbG8=")

        assert parsed.mime_type == "text/plain"
        assert parsed.is_base64
        assert parsed.payload == "SGVsbG8="

    def test_plain_data_url_keeps_header_verbatim(self):
        parsed = parse_data_url("data:text/plain;charset=utf-8,Hello%20World")

        assert parsed.mime_type == "text/plain;charset=utf-8"
        assert not parsed.is_base64
        assert parsed.payload == "Hello%20World"

    def test_missing_media_type(self):
        """`data:,x` is valid and has no declared media type."""
        parsed = parse_data_url("data:,Hello")

        assert parsed.mime_type is None
        assert not parsed.is_base64
        assert parsed.payload == "Hello"

    def test_base64_without_media_type(self):
        parsed = parse_data_url("data:;base64,SGk=")

        assert parsed.mime_type is None
        assert parsed.is_base64

    def test_payload_is_everything_after_first_comma(self):
        parsed = parse_data_url("data:text/csv,a,b,c")
        assert parsed.payload == "a,b,c"

    @pytest.mark.parametrize(
        "value",
        ["not-a-data-url", "text/plain;base64,SGVsbG8=", "data:text/plain", ""],
    )
    def test_rejects_malformed_input(self, value):
        with pytest.raises(DataURLFormatError, match=r"data:\[<mediatype>\]"):
            parse_data_url(value)


# ---------------------------------------------------------------------------
# encode_string
# ---------------------------------------------------------------------------

class TestEncodeString:
    """Tests for turning string upload input into a file."""

    def test_raw_is_utf8_with_hinted_content_type(self):
        file = encode_string("héllo", StringFormat.RAW, content_type="text/plain")

        assert file.content == "héllo".encode("utf-8")
        assert file.content_type == "text/plain"
        assert file.name == "untitled"

    def test_raw_without_hint_leaves_content_type_unset(self):
        file = encode_string("hello")
        assert file.content_type is None

    def test_encoding_defaults_to_raw(self):
        assert encode_string("hello", None).content == b"hello"

    def test_encoding_accepts_string_names(self):
        assert encode_string("SGVsbG8=", "base64").content == b"Hello"

    def test_base64_data_url(self):
        file = encode_string("data:text/plain;base64,SGVsbG8=", StringFormat.DATA_URL)

        assert file.content == b"Hello"
        assert file.content_type == "text/plain"

    def test_percent_encoded_data_url(self):
        file = encode_string("data:text/plain,Hello%20World", StringFormat.DATA_URL)

        assert file.content == b"Hello World"
        assert file.content_type == "text/plain"

    def test_data_url_media_type_overrides_hint(self):
        file = encode_string(
            "data:image/png;base64,iVBORw0KGgo=",
            StringFormat.DATA_URL,
            content_type="text/plain",
        )
        assert file.content_type == "image/png"

    def test_malformed_data_url_raises_format_error(self):
        with pytest.raises(DataURLFormatError):
            encode_string("not-a-data-url", StringFormat.DATA_URL)

    def test_unknown_encoding_cannot_generate_data(self):
        with pytest.raises(StorageValidationError, match="Unable to generate file data"):
            encode_string("hello", "hex")

    def test_empty_payload_cannot_generate_data(self):
        with pytest.raises(StorageValidationError, match="Unable to generate file data"):
            encode_string("", StringFormat.RAW)

    def test_resolve_format(self):
        assert resolve_format(None) is StringFormat.RAW
        assert resolve_format("data_url") is StringFormat.DATA_URL
        assert resolve_format("nope") is None


class TestStringUploadSpec:
    """Tests for reading the content type hint out of metadata."""

    def test_content_type_hint_is_case_insensitive(self):
        spec = StringUploadSpec(path="/a", data="x", metadata={"Content-Type": "text/csv"})
        assert spec.content_type_hint() == "text/csv"

    def test_no_metadata_means_no_hint(self):
        spec = StringUploadSpec(path="/a", data="x")
        assert spec.content_type_hint() is None
