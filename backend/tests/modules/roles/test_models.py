"""Tests for roles module models."""

import pytest
from pydantic import ValidationError

from modules.roles.models import (
    IdentifierRoleRow,
    RiderRecord,
    RiderStatus,
    Role,
    RoleResolution,
    SelfRoleRow,
    UserRecord,
    normalize_rider_status,
    normalize_role,
)


class TestNormalizeRole:
    @pytest.mark.parametrize("raw,expected", [
        ("admin", Role.ADMIN),
        ("rider", Role.RIDER),
        ("business", Role.BUSINESS),
        ("customer", Role.CUSTOMER),
        (" Admin ", Role.ADMIN),
    ])
    def test_known_roles(self, raw, expected):
        assert normalize_role(raw) is expected

    @pytest.mark.parametrize("raw", ["superuser", "", None, 42, ["admin"]])
    def test_unknown_values_become_customer(self, raw):
        assert normalize_role(raw) is Role.CUSTOMER


class TestNormalizeRiderStatus:
    def test_approved_is_verified(self):
        assert normalize_rider_status("approved") is RiderStatus.VERIFIED
        assert normalize_rider_status("verified") is RiderStatus.VERIFIED

    def test_rejected(self):
        assert normalize_rider_status("REJECTED") is RiderStatus.REJECTED

    def test_missing_or_unknown_is_pending(self):
        assert normalize_rider_status(None) is RiderStatus.PENDING
        assert normalize_rider_status("in_review") is RiderStatus.PENDING


class TestRoleResolution:
    def test_default_customer(self):
        resolution = RoleResolution.default_customer()
        assert resolution.role is Role.CUSTOMER
        assert resolution.rider_status is None
        assert resolution.is_blocked is False
        assert resolution.needs_registration is False

    def test_rider_needs_registration(self):
        resolution = RoleResolution.rider_needs_registration()
        assert resolution.role is Role.RIDER
        assert resolution.rider_status is RiderStatus.NONE
        assert resolution.is_blocked is False
        assert resolution.needs_registration is True

    def test_rider_status_only_for_riders(self):
        with pytest.raises(ValidationError):
            RoleResolution(role=Role.ADMIN, rider_status=RiderStatus.VERIFIED)

    def test_blocked_and_needs_registration_exclusive(self):
        with pytest.raises(ValidationError):
            RoleResolution(role=Role.CUSTOMER, is_blocked=True, needs_registration=True)

    def test_immutable(self):
        resolution = RoleResolution.default_customer()
        with pytest.raises(ValidationError):
            resolution.role = Role.ADMIN


class TestRows:
    def test_null_flags_read_as_false(self):
        row = SelfRoleRow.model_validate(
            {"role": "rider", "is_blocked": None, "needs_registration": None}
        )
        assert row.is_blocked is False
        assert row.needs_registration is False

    @pytest.mark.parametrize("raw, expected", [("false", False), ("true", True), (0, False), (1, True)])
    def test_textual_flags_coerced(self, raw, expected):
        assert IdentifierRoleRow.model_validate({"role": "admin", "is_blocked": raw}).is_blocked is expected

    def test_unreadable_flag_rejected(self):
        with pytest.raises(ValidationError):
            SelfRoleRow.model_validate({"role": "admin", "is_blocked": "maybe"})

    def test_missing_flags_default_false(self):
        assert IdentifierRoleRow.model_validate({"role": "admin"}).is_blocked is False
        assert UserRecord.model_validate({"role": "admin"}).is_blocked is False

    def test_extra_columns_ignored(self):
        row = UserRecord.model_validate({"role": "admin", "is_blocked": True, "full_name": "A"})
        assert row.is_blocked is True

    def test_rider_record_status(self):
        record = RiderRecord(verification_status="approved", is_active=True)
        assert record.status is RiderStatus.VERIFIED
        assert record.deactivated is False

    def test_rider_record_inactive(self):
        assert RiderRecord(verification_status="pending", is_active=False).deactivated is True

    def test_rider_record_null_active_is_not_deactivated(self):
        assert RiderRecord().deactivated is False
