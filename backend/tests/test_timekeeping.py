"""
Attendance tests.

Verifies:
- Clocking in twice on the same day without clocking out fails
- Clocking out without an open clock-in fails
- Clock-out only closes a record opened today
- Duration is the floor of elapsed minutes
- On-shift flags drive the active staff list
"""

from datetime import timedelta

import pytest

from winehouse.errors import ConflictError
from winehouse.models import AttendanceRecord
from winehouse.services import timekeeping_service


class TestClockInOut:

    def test_clock_in_sets_on_shift(self, db_session, staff):
        record = timekeeping_service.clock_in(staff)

        assert record.is_open
        assert staff.is_on_shift is True
        assert staff.last_time_in == record.time_in

    def test_clock_in_twice_same_day_fails(self, db_session, staff):
        timekeeping_service.clock_in(staff)
        with pytest.raises(ConflictError, match="already clocked in"):
            timekeeping_service.clock_in(staff)
        assert db_session.query(AttendanceRecord).count() == 1

    def test_clock_out_without_clock_in_fails(self, db_session, staff):
        with pytest.raises(ConflictError):
            timekeeping_service.clock_out(staff)

    def test_clock_out_closes_record(self, db_session, staff):
        record = timekeeping_service.clock_in(staff)
        # Pretend the shift started 95.5 minutes ago
        record.time_in = record.time_in - timedelta(minutes=95, seconds=30)
        db_session.commit()

        closed = timekeeping_service.clock_out(staff)

        assert closed.id == record.id
        assert not closed.is_open
        assert closed.duration_minutes == 95
        assert staff.is_on_shift is False
        assert staff.last_time_out == closed.time_out

    def test_clock_in_again_after_clock_out(self, db_session, staff):
        timekeeping_service.clock_in(staff)
        timekeeping_service.clock_out(staff)
        timekeeping_service.clock_in(staff)

        assert len(timekeeping_service.today_attendance()) == 2

    def test_second_clock_out_fails(self, db_session, staff):
        timekeeping_service.clock_in(staff)
        timekeeping_service.clock_out(staff)
        with pytest.raises(ConflictError):
            timekeeping_service.clock_out(staff)


class TestActiveStaff:

    def test_only_staff_on_shift_listed(self, db_session, admin, staff, other_staff):
        timekeeping_service.clock_in(staff)
        timekeeping_service.clock_in(admin)

        assert [u.username for u in timekeeping_service.active_staff()] == ["clerk"]

        timekeeping_service.clock_out(staff)
        assert timekeeping_service.active_staff() == []


class TestShiftLeftOpen:

    def test_clock_out_ignores_record_open_since_yesterday(self, db_session, staff):
        record = timekeeping_service.clock_in(staff)
        record.work_date = record.work_date - timedelta(days=1)
        record.time_in = record.time_in - timedelta(days=1)
        db_session.commit()

        with pytest.raises(ConflictError, match="No active clock-in record found for today"):
            timekeeping_service.clock_out(staff)
        assert record.is_open

        today = timekeeping_service.clock_in(staff)
        closed = timekeeping_service.clock_out(staff)
        assert closed.id == today.id
        assert record.is_open
