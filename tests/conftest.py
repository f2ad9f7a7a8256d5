# tests/conftest.py

"""
Pytest configuration and shared fixtures.

Table lookups run against an in-memory stand-in for the Supabase query
builder (table().select().eq().is_().order().limit().execute()), seeded
with a small two-organization data set.
"""

import copy
import uuid
from types import SimpleNamespace
from typing import Generator
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from main import create_app
from dependencies.auth import CurrentUser


# ============================================================
# Fake Supabase client
# ============================================================

class FakeQuery:
    def __init__(self, client, table):
        self.client = client
        self.table = table
        self.op = "select"
        self.payload = None
        self.filters = []
        self.order_col = None
        self.order_desc = False
        self.limit_n = None
        self.count_mode = None

    def select(self, columns="*", count=None):
        self.op = "select"
        self.count_mode = count
        return self

    def insert(self, data, returning=None):
        self.op = "insert"
        self.payload = data
        return self

    def update(self, data, returning=None):
        self.op = "update"
        self.payload = data
        return self

    def eq(self, key, value):
        self.filters.append(lambda row: row.get(key) == value)
        return self

    def is_(self, key, value):
        assert value == "null"
        self.filters.append(lambda row: row.get(key) is None)
        return self

    def order(self, column, desc=False):
        self.order_col = column
        self.order_desc = desc
        return self

    def limit(self, n):
        self.limit_n = n
        return self

    def _matches(self):
        rows = self.client.tables.setdefault(self.table, [])
        return [r for r in rows if all(f(r) for f in self.filters)]

    def execute(self):
        self.client.queries.append((self.op, self.table))
        if self.client.fail:
            raise RuntimeError("connection refused")

        if self.op == "insert":
            row = dict(self.payload)
            row.setdefault("id", str(uuid.uuid4()))
            self.client.tables.setdefault(self.table, []).append(row)
            return SimpleNamespace(data=[dict(row)], count=None)

        if self.op == "update":
            updated = []
            for row in self._matches():
                row.update(self.payload)
                updated.append(dict(row))
            return SimpleNamespace(data=updated, count=None)

        rows = [dict(r) for r in self._matches()]
        total = len(rows)
        if self.order_col:
            rows.sort(
                key=lambda r: (r.get(self.order_col) is None, r.get(self.order_col)),
                reverse=self.order_desc,
            )
        if self.limit_n:
            rows = rows[: self.limit_n]
        return SimpleNamespace(data=rows, count=total if self.count_mode else None)


class FakeAuth:
    def __init__(self, tokens):
        self.tokens = tokens

    def get_user(self, token):
        if token not in self.tokens:
            raise Exception("invalid JWT")
        auth_id, email = self.tokens[token]
        return SimpleNamespace(user=SimpleNamespace(id=auth_id, email=email))


class FakeSupabaseClient:
    def __init__(self, tables, tokens):
        self.tables = tables
        self.auth = FakeAuth(tokens)
        self.queries = []
        self.fail = False

    def table(self, name):
        return FakeQuery(self, name)

    def queried_tables(self):
        return {table for _, table in self.queries}


# ============================================================
# Seed data
# ============================================================

SEED = {
    "organizations": [
        {"id": "org-1", "name": "Acme Gestion", "slug": "acme"},
        {"id": "org-2", "name": "Blue Immo", "slug": "blue"},
    ],
    "plans": [
        {"id": "plan-free", "name": "freemium", "max_properties": 5, "max_users": 1, "max_tenants": 0, "is_active": True, "sort_order": 1},
        {"id": "plan-starter", "name": "starter", "max_properties": 50, "max_users": 5, "max_tenants": 10, "is_active": True, "sort_order": 2},
        {"id": "plan-pro", "name": "pro", "max_properties": -1, "max_users": None, "max_tenants": -1, "is_active": True, "sort_order": 3},
    ],
    "features": [
        {"id": "f-analytics", "name": "advanced_analytics", "display_name": "Advanced analytics", "category": "reports", "is_active": True},
        {"id": "f-journal", "name": "accounting.journal", "display_name": "Journal", "category": "accounting", "is_active": True},
        {"id": "f-messaging", "name": "messaging", "display_name": "Messaging", "category": "communication", "is_active": True},
        {"id": "f-legacy", "name": "legacy_reports", "display_name": "Legacy reports", "category": "reports", "is_active": False},
    ],
    "plan_features": [
        {"id": "pf-1", "plan_id": "plan-starter", "feature_id": "f-analytics", "is_enabled": False, "limits": None},
        {"id": "pf-2", "plan_id": "plan-starter", "feature_id": "f-journal", "is_enabled": True, "limits": {"max_entries": 100}},
        {"id": "pf-3", "plan_id": "plan-pro", "feature_id": "f-analytics", "is_enabled": True, "limits": {"max_reports": -1}},
        {"id": "pf-4", "plan_id": "plan-pro", "feature_id": "f-journal", "is_enabled": True, "limits": {}},
        {"id": "pf-5", "plan_id": "plan-free", "feature_id": "f-messaging", "is_enabled": True, "limits": {"max_messages": 20}},
        {"id": "pf-6", "plan_id": "plan-pro", "feature_id": "f-legacy", "is_enabled": True, "limits": {}},
    ],
    "subscriptions": [
        {"id": "sub-old", "organization_id": "org-1", "plan_id": "plan-pro", "status": "canceled", "created_at": "2024-01-01T00:00:00Z"},
        {"id": "sub-1", "organization_id": "org-1", "plan_id": "plan-starter", "status": "active", "created_at": "2024-06-01T00:00:00Z"},
    ],
    "profiles": [
        {"id": "prof-accountant", "organization_id": "org-1", "name": "Accountant", "is_system_profile": True, "is_global": False, "is_active": True},
        {"id": "prof-owner", "organization_id": "org-1", "name": "Owner", "is_system_profile": True, "is_global": False, "is_active": True},
        {"id": "prof-disabled", "organization_id": "org-1", "name": "Former staff", "is_system_profile": False, "is_global": False, "is_active": False},
        {"id": "prof-blue-agent", "organization_id": "org-2", "name": "Agent", "is_system_profile": True, "is_global": False, "is_active": True},
        {"id": "prof-global-admin", "organization_id": None, "name": "Global Administrator", "is_system_profile": True, "is_global": True, "is_active": True},
    ],
    "profile_object_permissions": [
        {"id": "op-1", "profile_id": "prof-accountant", "object_type": "JournalEntry", "access_level": "Read", "can_create": False, "can_read": True, "can_edit": False, "can_delete": False, "can_view_all": False},
        {"id": "op-2", "profile_id": "prof-accountant", "object_type": "Payment", "access_level": "All", "can_create": True, "can_read": True, "can_edit": True, "can_delete": True, "can_view_all": True},
        {"id": "op-3", "profile_id": "prof-accountant", "object_type": "Tenant", "access_level": "Read", "can_create": False, "can_read": True, "can_edit": False, "can_delete": False, "can_view_all": True},
        # stored level disagrees with the flags; the flags decide
        {"id": "op-4", "profile_id": "prof-accountant", "object_type": "Lease", "access_level": "All", "can_create": False, "can_read": False, "can_edit": False, "can_delete": False, "can_view_all": None},
        {"id": "op-5", "profile_id": "prof-owner", "object_type": "Profile", "access_level": "ReadWrite", "can_create": False, "can_read": True, "can_edit": True, "can_delete": False, "can_view_all": False},
        {"id": "op-6", "profile_id": "prof-disabled", "object_type": "Payment", "access_level": "All", "can_create": True, "can_read": True, "can_edit": True, "can_delete": True, "can_view_all": True},
        {"id": "op-7", "profile_id": "prof-blue-agent", "object_type": "Property", "access_level": "ReadWrite", "can_create": True, "can_read": True, "can_edit": True, "can_delete": False, "can_view_all": True},
        {"id": "op-8", "profile_id": "prof-owner", "object_type": "Organization", "access_level": "Read", "can_create": False, "can_read": True, "can_edit": False, "can_delete": False, "can_view_all": False},
    ],
    "profile_field_permissions": [
        {"id": "fp-1", "profile_id": "prof-accountant", "object_type": "Payment", "field_name": "amount", "access_level": "Read", "can_read": True, "can_edit": False, "is_sensitive": False},
        {"id": "fp-2", "profile_id": "prof-accountant", "object_type": "Tenant", "field_name": "iban", "access_level": "None", "can_read": False, "can_edit": False, "is_sensitive": True},
    ],
    "users": [
        {"id": "u-accountant", "sb_user_id": "auth-accountant", "email": "compta@acme.test", "organization_id": "org-1", "profile_id": "prof-accountant", "is_super_admin": False},
        {"id": "u-owner", "sb_user_id": None, "email": "owner@acme.test", "organization_id": "org-1", "profile_id": "prof-owner", "is_super_admin": False},
        {"id": "u-blue", "sb_user_id": "auth-blue", "email": "agent@blue.test", "organization_id": "org-2", "profile_id": "prof-blue-agent", "is_super_admin": False},
        {"id": "u-super", "sb_user_id": "auth-super", "email": "root@samba.test", "organization_id": None, "profile_id": None, "is_super_admin": True},
        {"id": "u-noorg", "sb_user_id": "auth-noorg", "email": "drifter@acme.test", "organization_id": None, "profile_id": "prof-accountant", "is_super_admin": False},
        {"id": "u-ghost-org", "sb_user_id": "auth-ghost", "email": "ghost@acme.test", "organization_id": "org-deleted", "profile_id": "prof-accountant", "is_super_admin": False},
    ],
    "notifications": [
        {"id": "n-1", "user_id": "u-super", "organization_id": "org-1", "type": "organization_created", "content": "Acme", "created_at": "2024-06-01T00:00:00Z", "read_at": None},
        {"id": "n-2", "user_id": "u-super", "organization_id": "org-2", "type": "organization_created", "content": "Blue", "created_at": "2024-07-01T00:00:00Z", "read_at": None},
        {"id": "n-3", "user_id": "u-super", "organization_id": "org-1", "type": "subscription_changed", "content": None, "created_at": "2024-05-01T00:00:00Z", "read_at": "2024-05-02T00:00:00Z"},
    ],
    "units": [
        {"id": "unit-1", "organization_id": "org-1"},
        {"id": "unit-2", "organization_id": "org-1"},
        {"id": "unit-3", "organization_id": "org-2"},
    ],
    "tenants": [
        {"id": "t-1", "organization_id": "org-1", "has_extranet_access": True},
        {"id": "t-2", "organization_id": "org-1", "has_extranet_access": False},
    ],
}

TOKENS = {
    "token-accountant": ("auth-accountant", "compta@acme.test"),
    "token-owner": ("u-owner", "owner@acme.test"),
    "token-blue": ("auth-blue", "agent@blue.test"),
    "token-super": ("auth-super", "root@samba.test"),
    "token-noorg": ("auth-noorg", "drifter@acme.test"),
    "token-ghost": ("auth-ghost", "ghost@acme.test"),
    "token-new": ("auth-new", "new@acme.test"),
}


# ============================================================
# Fixtures
# ============================================================

@pytest.fixture
def fake_supabase() -> Generator[FakeSupabaseClient, None, None]:
    """Seeded fake client, patched in wherever the code obtains a client."""
    fake = FakeSupabaseClient(copy.deepcopy(SEED), TOKENS)
    with patch("core.supabase_helpers.get_supabase_client", return_value=fake), \
            patch("dependencies.auth.get_supabase_client", return_value=fake), \
            patch("core.supabase_client.get_supabase_client", return_value=fake):
        yield fake


@pytest.fixture(scope="function")
def app():
    """Create a test FastAPI application instance."""
    return create_app()


@pytest.fixture(scope="function")
def client(app, fake_supabase) -> Generator[TestClient, None, None]:
    """Test client backed by the seeded fake Supabase client."""
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client


@pytest.fixture
def accountant_user():
    return CurrentUser(
        id="u-accountant",
        auth_user_id="auth-accountant",
        email="compta@acme.test",
        organization_id="org-1",
        profile_id="prof-accountant",
    )


@pytest.fixture
def super_admin_user():
    return CurrentUser(
        id="u-super",
        auth_user_id="auth-super",
        email="root@samba.test",
        is_super_admin=True,
    )
