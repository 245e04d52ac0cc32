"""
Tests for shared validators
"""

from booster_api.shared.validators import sanitize_reason, validate_uuid


class TestValidateUuid:
    def test_valid(self):
        assert validate_uuid("3f2b8c1e-6a1d-4a4e-9a53-0b9d1f2e7c11")

    def test_invalid(self):
        assert not validate_uuid("booking-1")
        assert not validate_uuid(None)

    def test_upper_case_allowed(self):
        assert validate_uuid("3F2B8C1E-6A1D-4A4E-9A53-0B9D1F2E7C11")

    def test_non_canonical_forms_rejected(self):
        assert not validate_uuid("3f2b8c1e6a1d4a4e9a530b9d1f2e7c11")
        assert not validate_uuid("{3f2b8c1e-6a1d-4a4e-9a53-0b9d1f2e7c11}")
        assert not validate_uuid("urn:uuid:3f2b8c1e-6a1d-4a4e-9a53-0b9d1f2e7c11")
        assert not validate_uuid("3f2b8c1e-6a1d-4a4e-9a53-0b9d1f2e7c11\n")


class TestSanitizeReason:
    def test_strips_angle_brackets(self):
        assert sanitize_reason("<b>Sick</b>") == "bSick/b"

    def test_truncates(self):
        assert len(sanitize_reason("x" * 800)) == 500

    def test_blank_is_none(self):
        assert sanitize_reason(None) is None
        assert sanitize_reason("   ") is None

    def test_non_string_is_cast(self):
        assert sanitize_reason(42) == "42"
