import pytest

from erpgate.access.roles import (
    ROLE_CAPABILITIES,
    coerce_role,
    has_minimum_role,
    is_admin_level,
    is_admin_subrole,
    is_valid_role,
    role_level,
    roles_in_tier,
    tier_of,
)
from erpgate.types import Role, Tier


@pytest.mark.unit
class TestCapabilityTable:
    def test_every_role_has_exactly_one_row(self) -> None:
        assert set(ROLE_CAPABILITIES) == set(Role)

    def test_role_tiers(self) -> None:
        assert tier_of(Role.SUPER_ADMIN) == Tier.COMPANY
        assert tier_of(Role.COMPANY_ADMIN) == Tier.COMPANY
        assert tier_of(Role.BRAND_ADMIN) == Tier.BRAND
        assert tier_of(Role.BRAND_STAFF) == Tier.BRAND
        assert tier_of(Role.STORE_MANAGER) == Tier.STORE
        assert tier_of(Role.STORE_STAFF) == Tier.STORE

    def test_two_roles_per_tier(self) -> None:
        for tier in Tier:
            assert len(roles_in_tier(tier)) == 2

    def test_brand_and_store_tiers_split_admin_and_staff(self) -> None:
        for tier in (Tier.BRAND, Tier.STORE):
            flags = sorted(is_admin_subrole(r) for r in roles_in_tier(tier))
            assert flags == [False, True]

    def test_levels_strictly_ordered(self) -> None:
        levels = [role_level(r) for r in Role]
        assert levels == sorted(levels, reverse=True)
        assert len(set(levels)) == len(levels)


@pytest.mark.unit
class TestRoleCoercion:
    def test_raw_strings(self) -> None:
        assert coerce_role("brand_staff") == Role.BRAND_STAFF
        assert coerce_role(Role.STORE_STAFF) == Role.STORE_STAFF

    def test_unknown_values(self) -> None:
        assert coerce_role("owner") is None
        assert coerce_role("") is None
        assert coerce_role(None) is None

    def test_is_valid_role(self) -> None:
        assert is_valid_role("super_admin")
        assert not is_valid_role("admin")
        assert not is_valid_role(42)

    def test_unknown_role_has_no_tier_or_level(self) -> None:
        assert tier_of("ghost") is None
        assert role_level("ghost") == 0


@pytest.mark.unit
class TestAdminChecks:
    def test_admin_subrole(self) -> None:
        assert is_admin_subrole(Role.BRAND_ADMIN)
        assert is_admin_subrole(Role.STORE_MANAGER)
        assert not is_admin_subrole(Role.BRAND_STAFF)
        assert not is_admin_subrole(Role.STORE_STAFF)
        assert not is_admin_subrole("ghost")

    def test_admin_level_is_brand_tier_or_above(self) -> None:
        assert is_admin_level(Role.SUPER_ADMIN)
        assert is_admin_level(Role.COMPANY_ADMIN)
        assert is_admin_level(Role.BRAND_ADMIN)
        assert not is_admin_level(Role.BRAND_STAFF)
        assert not is_admin_level(Role.STORE_MANAGER)
        assert not is_admin_level(Role.STORE_STAFF)

    def test_has_minimum_role(self) -> None:
        assert has_minimum_role(Role.SUPER_ADMIN, Role.COMPANY_ADMIN)
        assert has_minimum_role(Role.STORE_MANAGER, Role.STORE_MANAGER)
        assert not has_minimum_role(Role.STORE_STAFF, Role.STORE_MANAGER)
        assert not has_minimum_role("ghost", Role.STORE_STAFF)
        assert not has_minimum_role(Role.SUPER_ADMIN, "ghost")
