import pytest

from erpgate.routing.domain import (
    classify_domain,
    domain_from_host,
    domain_prefix,
    is_valid_domain,
)
from erpgate.types import DomainType


@pytest.mark.unit
class TestDomainFromHost:
    def test_strips_port(self) -> None:
        assert domain_from_host("crt.example.com:3002") == "crt.example.com"

    def test_without_port_unchanged(self) -> None:
        assert domain_from_host("example.com") == "example.com"

    def test_empty_and_none(self) -> None:
        assert domain_from_host("") == ""
        assert domain_from_host(None) == ""

    def test_ipv6_literal_keeps_brackets(self) -> None:
        assert domain_from_host("[::1]:3000") == "[::1]"

    def test_non_numeric_suffix_kept(self) -> None:
        assert domain_from_host("weird:host") == "weird:host"


@pytest.mark.unit
class TestClassifyDomain:
    def test_creator_host_with_port(self) -> None:
        assert classify_domain("crt.example.com:3002") == DomainType.CREATOR

    def test_business_host(self) -> None:
        assert classify_domain("biz.example.com") == DomainType.BUSINESS

    def test_admin_host(self) -> None:
        assert classify_domain("adm.example.com") == DomainType.ADMIN

    def test_case_insensitive(self) -> None:
        assert classify_domain("CRT.Example.COM") == DomainType.CREATOR

    def test_marker_anywhere_in_hostname(self) -> None:
        assert classify_domain("staging.biz.example.com") == DomainType.BUSINESS

    def test_plain_host_is_main(self) -> None:
        assert classify_domain("example.com") == DomainType.MAIN
        assert classify_domain("localhost:3000") == DomainType.MAIN

    def test_empty_or_missing_host_is_main(self) -> None:
        assert classify_domain("") == DomainType.MAIN
        assert classify_domain(None) == DomainType.MAIN

    def test_marker_without_dot_is_main(self) -> None:
        assert classify_domain("crtexample.com") == DomainType.MAIN


@pytest.mark.unit
class TestDomainHelpers:
    def test_prefixes(self) -> None:
        assert domain_prefix(DomainType.MAIN) == ""
        assert domain_prefix(DomainType.CREATOR) == "/creator"
        assert domain_prefix(DomainType.BUSINESS) == "/business"
        assert domain_prefix(DomainType.ADMIN) == "/admin"

    def test_every_non_main_prefix_is_non_empty(self) -> None:
        for domain in DomainType:
            if domain != DomainType.MAIN:
                assert domain_prefix(domain).startswith("/")
                assert len(domain_prefix(domain)) > 1

    def test_is_valid_domain(self) -> None:
        assert is_valid_domain("creator")
        assert is_valid_domain(DomainType.ADMIN)
        assert not is_valid_domain("tenant")
        assert not is_valid_domain(None)
