import pytest

from erpgate.routing.rewrite import (
    EXCLUDED_PREFIXES,
    normalize_path,
    rewrite_path,
    split_path,
)
from erpgate.types import DomainType

SAMPLE_PATHS = [
    "",
    "/",
    "/dashboard",
    "/dashboard/",
    "//orders///today",
    "/brand/b1/sales?range=7d",
    "/store/s1#top",
    "/reports?x=1#chart",
    "/creator",
    "/creator/feed",
    "/creatorx",
    "/auth/signin",
    "/api/health",
    "/favicon.ico",
    "?only=query",
    "menu",
]


@pytest.mark.unit
class TestSplitPath:
    def test_path_query_fragment(self) -> None:
        assert split_path("/a?b=1#c") == ("/a", "?b=1", "#c")

    def test_fragment_before_question_mark_owns_it(self) -> None:
        assert split_path("/a#frag?x") == ("/a", "", "#frag?x")

    def test_collapses_slashes_in_path_only(self) -> None:
        assert split_path("//a//b?next=//x") == ("/a/b", "?next=//x", "")

    def test_empty_is_root(self) -> None:
        assert split_path("") == ("/", "", "")
        assert split_path(None) == ("/", "", "")

    def test_adds_leading_slash(self) -> None:
        assert split_path("menu") == ("/menu", "", "")


@pytest.mark.unit
class TestRewritePath:
    def test_root_on_creator_goes_to_dashboard(self) -> None:
        assert rewrite_path("/", DomainType.CREATOR) == "/creator/dashboard"

    def test_dashboard_alias(self) -> None:
        assert rewrite_path("/dashboard", DomainType.BUSINESS) == "/business/dashboard"

    def test_excluded_auth_path_unchanged(self) -> None:
        assert rewrite_path("/auth/signin", DomainType.BUSINESS) == "/auth/signin"

    def test_general_path_gets_prefix(self) -> None:
        assert rewrite_path("/orders", DomainType.ADMIN) == "/admin/orders"

    def test_already_prefixed_unchanged(self) -> None:
        assert rewrite_path("/creator/feed", DomainType.CREATOR) == "/creator/feed"
        assert rewrite_path("/creator", DomainType.CREATOR) == "/creator"

    def test_prefix_match_is_segment_aware(self) -> None:
        assert rewrite_path("/creatorx", DomainType.CREATOR) == "/creator/creatorx"

    def test_query_and_fragment_reattached(self) -> None:
        assert rewrite_path("/?tab=1#top", DomainType.CREATOR) == "/creator/dashboard?tab=1#top"
        assert rewrite_path("/sales?range=7d", DomainType.BUSINESS) == "/business/sales?range=7d"

    def test_repeated_slashes_collapsed(self) -> None:
        assert rewrite_path("//sales//today", DomainType.ADMIN) == "/admin/sales/today"

    def test_main_never_prefixed(self) -> None:
        assert rewrite_path("/", DomainType.MAIN) == "/"
        assert rewrite_path("/dashboard", DomainType.MAIN) == "/dashboard"

    def test_empty_path(self) -> None:
        assert rewrite_path("", DomainType.MAIN) == "/"
        assert rewrite_path("", DomainType.CREATOR) == "/creator/dashboard"
        assert rewrite_path(None, DomainType.ADMIN) == "/admin/dashboard"

    def test_accepts_raw_domain_string(self) -> None:
        assert rewrite_path("/", "creator") == "/creator/dashboard"

    def test_unknown_domain_string_treated_as_main(self) -> None:
        assert rewrite_path("/orders", "tenant-x") == "/orders"

    def test_base_url_ignored(self) -> None:
        assert rewrite_path("/", DomainType.CREATOR, "https://crt.example.com") == "/creator/dashboard"


@pytest.mark.unit
class TestRewriteProperties:
    @pytest.mark.parametrize("domain", list(DomainType))
    def test_idempotent(self, domain: DomainType) -> None:
        for path in SAMPLE_PATHS:
            once = rewrite_path(path, domain)
            assert rewrite_path(once, domain) == once, path

    def test_main_is_normalize(self) -> None:
        for path in SAMPLE_PATHS:
            assert rewrite_path(path, DomainType.MAIN) == normalize_path(path)

    @pytest.mark.parametrize("prefix", EXCLUDED_PREFIXES)
    def test_excluded_prefixes_unchanged_on_every_domain(self, prefix: str) -> None:
        path = f"{prefix}some//thing?q=1"
        for domain in DomainType:
            assert rewrite_path(path, domain) == normalize_path(path)
