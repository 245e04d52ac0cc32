"""
Tests for release notification fan-out
"""

from booster_api.domain.release import notifications
from booster_api.domain.release.notifications import (
    Recipient,
    notify,
    notify_admins,
    notify_released_job,
)
from booster_api.domain.release.repository import ReleaseRepository
from booster_api.models import Notification

from .conftest import make_admin, make_booking, make_booster


class TestNotify:
    """Tests for the per-recipient writer"""

    def test_one_row_per_recipient(self, db_session):
        sent = notify(db_session, [Recipient("a"), Recipient("b")], "Title", "Body", "job_released")

        assert sent == 2
        assert sorted(n.recipient_id for n in db_session.query(Notification).all()) == ["a", "b"]

    def test_failed_write_is_skipped(self, db_session, monkeypatch):
        """Test one failing recipient does not stop the others"""
        real_create = ReleaseRepository.create_notification

        def flaky_create(db, recipient_id, title, message, notification_type):
            if recipient_id == "b":
                raise RuntimeError("insert failed")
            return real_create(db, recipient_id, title, message, notification_type)

        monkeypatch.setattr(ReleaseRepository, "create_notification", staticmethod(flaky_create))

        sent = notify(
            db_session, [Recipient("a"), Recipient("b"), Recipient("c")], "T", "B", "job_released"
        )

        assert sent == 2
        assert sorted(n.recipient_id for n in db_session.query(Notification).all()) == ["a", "c"]


class TestReleaseMessages:
    """Tests for the booster and admin messages"""

    def test_booster_message(self, db_session):
        booking = make_booking(db_session, location=None, amount=1499.5)
        candidate = make_booster(db_session, name="P2")

        assert notify_released_job(db_session, booking, [candidate]) == 1

        note = db_session.query(Notification).one()
        assert note.type == notifications.JOB_RELEASED
        assert note.recipient_id == candidate.id
        assert "unknown location" in note.message
        assert "1499.50 DKK" in note.message
        assert "2026-11-14" in note.message

    def test_admin_message_with_reason(self, db_session):
        booking = make_booking(db_session)
        releaser = make_booster(db_session, name="Sofie")
        admins = [make_admin(db_session), make_admin(db_session)]

        assert notify_admins(db_session, booking, releaser, "Ill") == 2

        notes = db_session.query(Notification).all()
        assert sorted(n.recipient_id for n in notes) == sorted(admins)
        assert all(n.type == notifications.JOB_RELEASED_ADMIN for n in notes)
        assert notes[0].message.startswith('Sofie released the job "Bryllupsmakeup"')
        assert "Reason: Ill" in notes[0].message

    def test_admin_message_without_booster_or_reason(self, db_session):
        booking = make_booking(db_session)
        make_admin(db_session)

        notify_admins(db_session, booking, None)

        note = db_session.query(Notification).one()
        assert note.message.startswith("A booster released")
        assert "Reason" not in note.message

    def test_no_admins(self, db_session):
        booking = make_booking(db_session)
        assert notify_admins(db_session, booking, None) == 0
