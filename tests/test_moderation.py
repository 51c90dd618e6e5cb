# tests/test_moderation.py
import pytest

from saconnect import models
from saconnect.errors import NotFound, ValidationError
from saconnect.services import ConnectionService, ModerationService
from saconnect.services.moderation import blocked_user_ids, is_blocked


@pytest.fixture
def moderation(db_session):
    return ModerationService(db_session)


def test_block_is_idempotent(moderation, make_user, db_session):
    """
    Повторне блокування повертає той самий запис.
    """
    a, b = make_user(), make_user()
    first = moderation.block(a.id, b.id)
    second = moderation.block(a.id, b.id)
    assert first.id == second.id
    assert db_session.query(models.UserBlock).count() == 1
    assert moderation.list_blocked(a.id) == [b.id]
    assert moderation.list_blocked(b.id) == []


def test_block_validation(moderation, make_user):
    a = make_user()
    with pytest.raises(ValidationError):
        moderation.block(a.id, a.id)
    with pytest.raises(NotFound):
        moderation.block(a.id, "missing")


def test_blocked_relation_is_symmetric(moderation, make_user, db_session):
    a, b, c = make_user(), make_user(), make_user()
    moderation.block(a.id, b.id)
    moderation.block(c.id, a.id)

    assert blocked_user_ids(db_session, a.id) == {b.id, c.id}
    assert blocked_user_ids(db_session, b.id) == {a.id}
    assert is_blocked(db_session, a.id, b.id)
    assert is_blocked(db_session, b.id, a.id)
    assert not is_blocked(db_session, b.id, c.id)


def test_unblock_keeps_connections(moderation, make_user, db_session):
    """
    Зняття блокування не видаляє і не змінює зв'язок.
    """
    a, b = make_user(), make_user()
    connections = ConnectionService(db_session)
    connection = connections.request(a.id, b.id)
    connections.respond(connection.id, "connected", b.id)

    moderation.block(a.id, b.id)
    assert connections.list_for(a.id) == []

    moderation.unblock(a.id, b.id)
    moderation.unblock(a.id, b.id)
    assert moderation.list_blocked(a.id) == []
    listed = connections.list_for(a.id)
    assert [(c.connection.id, c.connection.status) for c in listed] == [(connection.id, "connected")]


def test_report_requires_reason(moderation, make_user):
    a, b = make_user(), make_user()
    with pytest.raises(ValidationError):
        moderation.report(a.id, b.id, "")
    with pytest.raises(ValidationError):
        moderation.report(a.id, b.id, "   ")
    with pytest.raises(NotFound):
        moderation.report(a.id, "missing", "spam")


def test_report_starts_pending(moderation, make_user):
    a, b = make_user(), make_user()
    report = moderation.report(a.id, b.id, "spam", "Keeps sending links")
    assert report.status == "pending"
    assert report.details == "Keeps sending links"


def test_report_status_any_known_to_any_known(moderation, make_user):
    a, b = make_user(), make_user()
    report = moderation.report(a.id, b.id, "spam")

    assert moderation.set_report_status(report.id, "resolved").status == "resolved"
    assert moderation.set_report_status(report.id, "pending").status == "pending"
    assert moderation.set_report_status(report.id, "dismissed").status == "dismissed"

    with pytest.raises(ValidationError):
        moderation.set_report_status(report.id, "archived")
    with pytest.raises(NotFound):
        moderation.set_report_status("missing", "reviewed")


def test_list_reports_newest_first_with_users(moderation, make_user):
    a, b, c = make_user(), make_user(), make_user()
    older = moderation.report(a.id, b.id, "spam")
    newer = moderation.report(c.id, b.id, "rude")

    reports = moderation.list_reports()
    assert [r.id for r in reports] == [newer.id, older.id]
    assert reports[0].reporter.id == c.id
    assert reports[0].reported_user.id == b.id


def test_list_blocks_for_audit(moderation, make_user):
    a, b = make_user(), make_user()
    moderation.block(a.id, b.id)
    blocks = moderation.list_blocks()
    assert [(x.user.id, x.blocked_user.id) for x in blocks] == [(a.id, b.id)]
