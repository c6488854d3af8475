"""Tests for base64url helpers."""

import os

import pytest

from gke_mcp.auth.encoding import base64url_decode, base64url_encode


class TestBase64Url:
    """Tests for base64url_encode / base64url_decode."""

    @pytest.mark.parametrize(
        "data",
        [b"", b"\x00", b"\xfb\xff", b"\xfb\xef\xbe", b"ab", b"abc", os.urandom(257)],
    )
    def test_round_trip(self, data):
        """Test decode(encode(x)) == x across padding lengths."""
        assert base64url_decode(base64url_encode(data)) == data

    def test_output_uses_url_alphabet_without_padding(self):
        """Test that +, / and = never appear in encoded output."""
        for _ in range(50):
            encoded = base64url_encode(os.urandom(31))
            assert "+" not in encoded
            assert "/" not in encoded
            assert "=" not in encoded

    def test_replaces_plus_and_slash(self):
        """Test the characters standard base64 would emit as + and /."""
        # Standard base64 of b"\xfb\xff" is "+/8="
        assert base64url_encode(b"\xfb\xff") == "-_8"

    def test_encodes_text_as_utf8(self):
        """Test that str input is encoded as UTF-8 first."""
        assert base64url_decode(base64url_encode("héllo")) == "héllo".encode()
