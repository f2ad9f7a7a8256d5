# tests/test_admin.py

"""
Tests for the super-admin surface: explicit 403 vs quiet defaults.
"""

import pytest
from fastapi.testclient import TestClient

from core.super_admin import is_global_admin, is_super_admin
from dependencies.auth import CurrentUser, get_current_user, get_optional_auth


def auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


SUPER = auth_headers("token-super")
ACCOUNTANT = auth_headers("token-accountant")


# -----------------------------------------------------
# Predicates
# -----------------------------------------------------

def test_is_super_admin(fake_supabase):
    assert is_super_admin("u-super")
    assert not is_super_admin("u-accountant")
    assert not is_super_admin("u-unknown")
    assert not is_super_admin(None)


def test_is_global_admin(fake_supabase):
    assert is_global_admin("prof-global-admin")
    assert not is_global_admin("prof-owner")
    assert not is_global_admin(None)


def test_super_admin_check_never_reads_permission_rows(fake_supabase):
    is_super_admin("u-super")
    assert fake_supabase.queried_tables() == {"users"}


# -----------------------------------------------------
# Explicit 403 endpoints
# -----------------------------------------------------

@pytest.mark.parametrize(
    "method, path, body",
    [
        ("get", "/admin/notifications", None),
        ("post", "/admin/notifications/mark-read", {}),
        ("get", "/admin/features", None),
        ("get", "/admin/plan-features?plan_name=starter", None),
        ("put", "/admin/plan-features", {"plan_name": "starter", "features": {"advanced_analytics": True}}),
        ("post", "/admin/organizations/org-1/default-profiles", None),
    ],
)
def test_non_super_admin_is_forbidden(client: TestClient, fake_supabase, method, path, body):
    kwargs = {"headers": ACCOUNTANT}
    if body is not None:
        kwargs["json"] = body

    response = getattr(client, method)(path, **kwargs)

    assert response.status_code == 403
    assert response.json() == {"detail": "Super admin access required"}


def test_forbidden_write_changes_nothing(client: TestClient, fake_supabase):
    client.put(
        "/admin/plan-features",
        json={"plan_name": "starter", "features": {"advanced_analytics": True}},
        headers=ACCOUNTANT,
    )
    assert all(op == "select" for op, _ in fake_supabase.queries)


def test_super_admin_bypasses_plan_and_profile(client: TestClient, fake_supabase):
    # u-super has no organization, no profile and no plan
    response = client.get("/admin/features", headers=SUPER)

    assert response.status_code == 200
    assert {f["name"] for f in response.json()} == {"advanced_analytics", "accounting.journal", "messaging"}
    assert "profile_object_permissions" not in fake_supabase.queried_tables()
    assert "subscriptions" not in fake_supabase.queried_tables()


# -----------------------------------------------------
# Quiet defaults
# -----------------------------------------------------

def test_check_super_admin_quiet_for_regular_user(client: TestClient):
    response = client.get("/admin/check-super-admin", headers=ACCOUNTANT)
    assert response.status_code == 200
    assert response.json() == {"is_super_admin": False, "is_global_admin": False}


def test_check_super_admin(client: TestClient):
    response = client.get("/admin/check-super-admin", headers=SUPER)
    assert response.json() == {"is_super_admin": True, "is_global_admin": False}


def test_check_global_admin(app, client: TestClient):
    app.dependency_overrides[get_optional_auth] = lambda: CurrentUser(
        id="u-platform",
        auth_user_id="auth-platform",
        email="ops@samba.test",
        profile_id="prof-global-admin",
    )
    response = client.get("/admin/check-super-admin")
    assert response.json() == {"is_super_admin": False, "is_global_admin": True}


def test_check_super_admin_quiet_without_token(client: TestClient):
    response = client.get("/admin/check-super-admin")
    assert response.status_code == 200
    assert response.json() == {"is_super_admin": False, "is_global_admin": False}


def test_check_super_admin_quiet_on_fault(app, client: TestClient, fake_supabase, super_admin_user):
    app.dependency_overrides[get_optional_auth] = lambda: super_admin_user
    fake_supabase.fail = True

    response = client.get("/admin/check-super-admin")
    assert response.status_code == 200
    assert response.json() == {"is_super_admin": False, "is_global_admin": False}


def test_check_super_admin_quiet_when_identity_lookup_fails(client: TestClient, fake_supabase):
    fake_supabase.fail = True

    response = client.get("/admin/check-super-admin", headers=SUPER)
    assert response.status_code == 200
    assert response.json() == {"is_super_admin": False, "is_global_admin": False}


def test_unread_count_quiet_for_regular_user(client: TestClient):
    response = client.get("/admin/notifications/unread-count", headers=ACCOUNTANT)
    assert response.status_code == 200
    assert response.json() == {"unread_count": 0}


def test_unread_count_quiet_on_fault(app, client: TestClient, fake_supabase, super_admin_user):
    app.dependency_overrides[get_current_user] = lambda: super_admin_user
    fake_supabase.fail = True

    response = client.get("/admin/notifications/unread-count")
    assert response.status_code == 200
    assert response.json() == {"unread_count": 0}


def test_unauthenticated_unread_count_is_401(client: TestClient):
    assert client.get("/admin/notifications/unread-count").status_code == 401


# -----------------------------------------------------
# Super-admin operations
# -----------------------------------------------------

def test_notifications_and_mark_read(client: TestClient):
    response = client.get("/admin/notifications", headers=SUPER)
    assert response.status_code == 200
    assert [n["id"] for n in response.json()["notifications"]] == ["n-2", "n-1", "n-3"]

    assert client.get("/admin/notifications/unread-count", headers=SUPER).json() == {"unread_count": 2}

    response = client.post("/admin/notifications/mark-read", json={"notificationId": "n-1"}, headers=SUPER)
    assert response.json() == {"success": True}
    assert client.get("/admin/notifications/unread-count", headers=SUPER).json() == {"unread_count": 1}

    client.post("/admin/notifications/mark-read", headers=SUPER)
    assert client.get("/admin/notifications/unread-count", headers=SUPER).json() == {"unread_count": 0}


def test_plan_features_admin(client: TestClient):
    response = client.get("/admin/plan-features", params={"plan_name": "starter"}, headers=SUPER)
    assert response.status_code == 200
    enabled = {s["key"] for s in response.json() if s["is_enabled"]}
    assert enabled == {"accounting.journal"}

    response = client.put(
        "/admin/plan-features",
        json={"plan_name": "starter", "features": {"advanced_analytics": True, "accounting.journal": False}},
        headers=SUPER,
    )
    assert response.status_code == 200
    enabled = {s["key"] for s in response.json() if s["is_enabled"]}
    assert enabled == {"advanced_analytics"}


def test_plan_features_unknown_plan(client: TestClient):
    response = client.get("/admin/plan-features", params={"plan_name": "enterprise"}, headers=SUPER)
    assert response.status_code == 404


def test_seed_default_profiles(client: TestClient):
    response = client.post("/admin/organizations/org-2/default-profiles", headers=SUPER)
    assert response.status_code == 200
    assert sorted(p["name"] for p in response.json()) == ["Accountant", "Owner", "Viewer"]

    response = client.post("/admin/organizations/org-404/default-profiles", headers=SUPER)
    assert response.status_code == 404
