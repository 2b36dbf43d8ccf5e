import pytest

from erpgate.exceptions import (
    ConfigError,
    ErpGateError,
    IdentityError,
    OwnershipLookupError,
)
from erpgate.types import DomainType, EntityType, Outcome, Role, Tier


@pytest.mark.unit
class TestEnums:
    def test_role_values(self) -> None:
        assert [r.value for r in Role] == [
            "super_admin",
            "company_admin",
            "brand_admin",
            "brand_staff",
            "store_manager",
            "store_staff",
        ]

    def test_tier_values(self) -> None:
        assert Tier.COMPANY.value == "company"
        assert Tier.BRAND.value == "brand"
        assert Tier.STORE.value == "store"

    def test_domain_type_values(self) -> None:
        assert {d.value for d in DomainType} == {"main", "creator", "business", "admin"}

    def test_entity_type_values(self) -> None:
        assert EntityType.BRAND.value == "brand"
        assert EntityType.STORE.value == "store"

    def test_outcome_values(self) -> None:
        assert Outcome.ALLOW.value == "allow"
        assert Outcome.REDIRECT.value == "redirect"
        assert Outcome.DENY.value == "deny"

    def test_roles_compare_equal_to_raw_strings(self) -> None:
        assert Role.STORE_STAFF == "store_staff"


@pytest.mark.unit
class TestExceptions:
    def test_base_exception_hierarchy(self) -> None:
        assert issubclass(ConfigError, ErpGateError)
        assert issubclass(IdentityError, ErpGateError)
        assert issubclass(OwnershipLookupError, ErpGateError)

    def test_exception_message(self) -> None:
        err = OwnershipLookupError("data api down")
        assert str(err) == "data api down"

    def test_exceptions_catchable_as_base(self) -> None:
        with pytest.raises(ErpGateError):
            raise IdentityError("no subject")
