"""
Tests for the permission snapshot and access gates.
"""

import pytest

from orderdesk.core.permissions import Gate, PermissionSet


@pytest.fixture
def perms():
    return PermissionSet(
        permissions=frozenset({"view_products", "view_orders"}),
        role_key="sales_staff",
        warehouse_id=3,
    )


class TestPermissionQueries:

    def test_any_vs_all(self, perms):
        keys = ["view_products", "delete_products"]
        assert perms.has_any_permission(keys) is True
        assert perms.has_all_permissions(keys) is False

    def test_single_permission(self, perms):
        assert perms.has_permission("view_orders")
        assert not perms.has_permission("undefined_key")

    def test_role(self, perms):
        assert perms.is_role("sales_staff")
        assert not perms.is_role("admin")

    def test_guest_answers_false(self):
        guest = PermissionSet()
        assert not guest.has_permission("view_products")
        assert not guest.has_any_permission(["view_products"])
        assert not guest.is_role("admin")
        assert not guest.has_warehouse_access(1)


class TestWarehouseAccess:

    @pytest.mark.parametrize("role", ["admin", "warehouse_manager"])
    def test_managers_see_every_warehouse(self, role):
        perms = PermissionSet(role_key=role)
        assert perms.has_warehouse_access(1)
        assert perms.has_warehouse_access(42)

    def test_staff_limited_to_assigned_warehouse(self, perms):
        assert perms.has_warehouse_access(3)
        assert not perms.has_warehouse_access(4)

    def test_staff_without_assignment_sees_none(self):
        perms = PermissionSet(role_key="warehouse_staff")
        assert not perms.has_warehouse_access(3)


class TestFromSession:

    def test_reads_claims(self):
        perms = PermissionSet.from_session(
            {
                "permissions": ["view_products", "create_sales_order"],
                "role": {"roleKey": "sales_staff"},
                "warehouseId": 2,
            }
        )
        assert perms.permissions == frozenset({"view_products", "create_sales_order"})
        assert perms.role_key == "sales_staff"
        assert perms.warehouse_id == 2

    @pytest.mark.parametrize(
        "session",
        [
            None,
            "admin",
            {},
            {"permissions": "view_products", "role": "admin", "warehouseId": "2"},
            {"permissions": None, "role": {"roleKey": 5}, "warehouseId": True},
        ],
    )
    def test_malformed_sessions_grant_nothing(self, session):
        perms = PermissionSet.from_session(session)
        assert perms.permissions == frozenset()
        assert perms.role_key is None
        assert perms.warehouse_id is None

    def test_non_string_permission_entries_dropped(self):
        perms = PermissionSet.from_session({"permissions": ["view_orders", 7, None]})
        assert perms.permissions == frozenset({"view_orders"})


class TestGate:

    def test_inverted_permission_gate_opens_without_permission(self, perms):
        gate = Gate(permission="admin", invert=True)
        assert gate.allows(perms) is True
        assert gate.choose(perms, "primary", "fallback") == "primary"

    def test_inverted_gate_closes_with_permission(self):
        admin = PermissionSet(permissions=frozenset({"admin"}))
        assert Gate(permission="admin", invert=True).allows(admin) is False

    def test_no_predicate_is_false(self, perms):
        assert Gate().allows(perms) is False
        assert Gate(invert=True).allows(perms) is True

    def test_choose_returns_fallback(self, perms):
        gate = Gate(permission="delete_orders")
        assert gate.choose(perms, "primary", "fallback") == "fallback"
        assert gate.choose(perms, "primary") is None

    def test_single_permission_takes_precedence(self, perms):
        gate = Gate(
            permission="delete_orders",
            any_permissions=("view_products",),
            role="sales_staff",
        )
        assert gate.allows(perms) is False

    def test_any_before_all(self, perms):
        gate = Gate(
            any_permissions=("view_products", "delete_products"),
            all_permissions=("view_products", "delete_products"),
        )
        assert gate.allows(perms) is True

    def test_empty_lists_fall_through_to_role(self, perms):
        gate = Gate(any_permissions=(), all_permissions=(), role="sales_staff")
        assert gate.allows(perms) is True

    def test_all_permissions(self, perms):
        assert Gate(all_permissions=("view_products", "view_orders")).allows(perms)
        assert not Gate(all_permissions=("view_products", "edit_orders")).allows(perms)

    def test_role_gate(self, perms):
        assert Gate(role="sales_staff").allows(perms)
        assert not Gate(role="admin").allows(perms)
