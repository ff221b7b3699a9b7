"""Tests for slot parsing, contiguity and conflict detection."""
import pytest
from sqlalchemy.exc import OperationalError

from groundbook.core.exceptions import StoreUnavailable, ValidationError
from groundbook.models import BookingStatus
from groundbook.services.slot_validator import (
    SlotConflict,
    check_conflict,
    find_conflicts,
    format_slot,
    normalize_slot,
    parse_slot_hour,
    validate_consecutive,
)
from tests.conftest import BOOKING_DATE, make_booking, make_ground


class TestParseSlotHour:

    def test_reads_starting_hour(self):
        assert parse_slot_hour("09:00 - 11:00") == 9
        assert parse_slot_hour("22:00 - 24:00") == 22

    def test_midnight_wraps(self):
        assert parse_slot_hour("22:00 - 00:00") == 22

    @pytest.mark.parametrize("label", ["", "morning", "9 - 11", "09:30 - 11:30", "25:00 - 27:00"])
    def test_malformed_labels_rejected(self, label):
        with pytest.raises(ValidationError) as exc:
            parse_slot_hour(label)
        assert exc.value.reason == "invalid-slot-label"

    def test_block_must_span_two_hours(self):
        with pytest.raises(ValidationError):
            parse_slot_hour("09:00 - 10:00")

    def test_format_slot_pads_hours(self):
        assert format_slot(6) == "06:00 - 08:00"
        assert format_slot(22) == "22:00 - 24:00"


class TestNormalizeSlot:

    @pytest.mark.parametrize("label", ["9:00 - 11:00", "09:00-11:00", " 09:00 -  11:00 ", "09:00 - 11:00"])
    def test_spellings_collapse(self, label):
        assert normalize_slot(label) == "09:00 - 11:00"

    def test_midnight_written_as_24(self):
        assert normalize_slot("22:00 - 00:00") == "22:00 - 24:00"

    def test_malformed_label_rejected(self):
        with pytest.raises(ValidationError):
            normalize_slot("9am - 11am")


class TestValidateConsecutive:

    def test_empty_and_single_pass(self):
        assert validate_consecutive([]) is True
        assert validate_consecutive(["09:00 - 11:00"]) is True

    def test_contiguous_run(self):
        assert validate_consecutive(["09:00 - 11:00", "11:00 - 13:00", "13:00 - 15:00"]) is True

    def test_gap_rejected(self):
        assert validate_consecutive(["09:00 - 11:00", "13:00 - 15:00"]) is False

    def test_out_of_order_rejected_by_default(self):
        assert validate_consecutive(["13:00 - 15:00", "09:00 - 11:00"]) is False
        assert validate_consecutive(["11:00 - 13:00", "09:00 - 11:00"]) is False

    def test_out_of_order_accepted_when_not_strict(self):
        slots = ["11:00 - 13:00", "09:00 - 11:00"]
        assert validate_consecutive(slots, strict_order=False) is True

    def test_gap_still_rejected_when_not_strict(self):
        slots = ["13:00 - 15:00", "09:00 - 11:00"]
        assert validate_consecutive(slots, strict_order=False) is False

    def test_duplicate_slot_rejected(self):
        assert validate_consecutive(["09:00 - 11:00", "09:00 - 11:00"]) is False


class TestFindConflicts:

    def test_intersection_by_label(self):
        overlap = find_conflicts(["10:00 - 12:00", "12:00 - 14:00"], ["10:00 - 12:00"])
        assert overlap == frozenset({"10:00 - 12:00"})

    def test_disjoint(self):
        assert find_conflicts(["14:00 - 16:00"], ["10:00 - 12:00"]) == frozenset()

    def test_differently_spelled_labels_collide(self):
        overlap = find_conflicts(["9:00-11:00", "22:00 - 00:00"], ["09:00 - 11:00", "22:00 - 24:00"])
        assert overlap == frozenset({"09:00 - 11:00", "22:00 - 24:00"})


class TestCheckConflict:

    async def test_reports_overlapping_slots(self, db, ground, user):
        await make_booking(db, ground, user, ["10:00 - 12:00"])

        result = await check_conflict(db, ground.id, BOOKING_DATE, {"10:00 - 12:00", "12:00 - 14:00"})

        assert result == SlotConflict(conflict=True, conflicting_slots=frozenset({"10:00 - 12:00"}))

    async def test_unpadded_request_still_conflicts(self, db, ground, user):
        await make_booking(db, ground, user, ["08:00 - 10:00"])

        result = await check_conflict(db, ground.id, BOOKING_DATE, ["8:00-10:00"])

        assert result.conflicting_slots == frozenset({"08:00 - 10:00"})

    async def test_no_conflict_for_free_slots(self, db, ground, user):
        await make_booking(db, ground, user, ["10:00 - 12:00"])

        result = await check_conflict(db, ground.id, BOOKING_DATE, {"14:00 - 16:00"})

        assert result.conflict is False
        assert result.conflicting_slots == frozenset()

    async def test_ignores_cancelled_and_pending(self, db, ground, user):
        await make_booking(db, ground, user, ["10:00 - 12:00"], status=BookingStatus.CANCELLED)
        await make_booking(db, ground, user, ["12:00 - 14:00"], status=BookingStatus.PENDING)

        result = await check_conflict(db, ground.id, BOOKING_DATE, {"10:00 - 12:00", "12:00 - 14:00"})

        assert result.conflict is False

    async def test_scoped_to_ground_and_date(self, db, ground, user, admin):
        other = await make_ground(db, name="Lake View Arena", created_by=admin.id)
        await make_booking(db, other, user, ["10:00 - 12:00"])
        await make_booking(db, ground, user, ["10:00 - 12:00"], booking_date=BOOKING_DATE.replace(day=18))

        result = await check_conflict(db, ground.id, BOOKING_DATE, {"10:00 - 12:00"})

        assert result.conflict is False

    async def test_store_failure_is_surfaced(self):
        class FailingSession:
            async def execute(self, *args, **kwargs):
                raise OperationalError("SELECT", {}, Exception("connection refused"))

        with pytest.raises(StoreUnavailable):
            await check_conflict(FailingSession(), 1, BOOKING_DATE, {"10:00 - 12:00"})
