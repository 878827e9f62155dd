# tests/unit/test_provisioning.py
from unittest.mock import patch

from app.models import User, UserRole
from app.scripts import provision_admin
from app.services.provisioning import promote_to_admin


def test_promote_grants_admin_role(factory, owner):
    user = promote_to_admin(factory, "  Alice@Example.com ")

    assert user.id == owner.id
    assert user.role == UserRole.ADMIN


def test_promote_is_idempotent(factory, admin):
    assert promote_to_admin(factory, admin.email).role == UserRole.ADMIN
    assert promote_to_admin(factory, admin.email).role == UserRole.ADMIN


def test_promote_unknown_email_changes_nothing(factory, owner):
    assert promote_to_admin(factory, "nobody@example.com") is None
    assert factory.get_user_repository().get(owner.id).role == UserRole.USER


def test_script_exit_codes(db_session, owner):
    user_id, email = owner.id, owner.email

    with patch.object(provision_admin, "SessionLocal", return_value=db_session):
        assert provision_admin.main(["--email", "nobody@example.com"]) == 1
        assert provision_admin.main(["--email", email]) == 0

    assert db_session.get(User, user_id).role == UserRole.ADMIN


def test_script_without_email(monkeypatch):
    monkeypatch.setattr(provision_admin.settings, "ADMIN_EMAIL", "")
    assert provision_admin.main([]) == 2
