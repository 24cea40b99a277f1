"""
Tests for content fingerprints.
"""

from telemetry_store.services.hashing import fingerprint


class TestFingerprint:
    """Tests for fingerprint()."""

    def test_known_sha256_digest(self):
        """Test that fingerprint is the lowercase SHA-256 hex digest."""
        assert fingerprint("abc") == (
            "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"
        )

    def test_text_and_bytes_agree(self):
        """Test that text is hashed as its UTF-8 bytes."""
        text = '{"ph":6.1,"tempC":23.5,"unit":"°C"}'
        assert fingerprint(text) == fingerprint(text.encode("utf-8"))

    def test_deterministic(self):
        payload = '{"ppm":800.0}'
        assert fingerprint(payload) == fingerprint(payload)

    def test_different_payloads_differ(self):
        assert fingerprint('{"ppm":800.0}') != fingerprint('{"ppm":800.1}')
