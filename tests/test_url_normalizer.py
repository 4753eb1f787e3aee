"""Tests for web_extractor.services.url_normalizer."""

import re

import pytest

from web_extractor.errors import InvalidUrlError
from web_extractor.models.options import NormalizeUrlOptions
from web_extractor.services.url_normalizer import (
    build_absolute_url,
    deduplicate_urls,
    extract_domain,
    extract_root_domain,
    filter_urls_by_pattern,
    get_url_depth,
    is_same_domain,
    is_same_root_domain,
    is_subdomain,
    is_valid_url,
    normalize_url,
    validate_url,
)


class TestValidateUrl:
    def test_accepts_https_url(self):
        parsed = validate_url("https://example.com/path")
        assert parsed.hostname == "example.com"
        assert parsed.path == "/path"

    def test_accepts_http_url_with_port(self):
        assert validate_url("http://localhost:8000/").port == 8000

    @pytest.mark.parametrize(
        "url",
        [
            "invalid-url",
            "",
            "/relative/path",
            "ftp://example.com/file",
            "javascript:alert(1)",
            "http://",
            "https://example.com:notaport/",
        ],
    )
    def test_rejects_invalid_urls(self, url):
        with pytest.raises(InvalidUrlError):
            validate_url(url)

    def test_error_is_a_value_error_and_names_the_url(self):
        with pytest.raises(ValueError) as excinfo:
            validate_url("ftp://example.com")
        assert "ftp://example.com" in str(excinfo.value)
        assert excinfo.value.url == "ftp://example.com"

    def test_is_valid_url_never_raises(self):
        assert is_valid_url("https://example.com") is True
        assert is_valid_url("not a url") is False


class TestNormalizeUrl:
    def test_default_normalization(self):
        assert (
            normalize_url("https://Example.com/Path/?b=2&a=1#frag")
            == "https://example.com/path?a=1&b=2"
        )

    def test_root_trailing_slash_removed(self):
        assert normalize_url("https://example.com/") == "https://example.com"

    def test_strips_exactly_one_trailing_slash(self):
        assert normalize_url("https://example.com/a//") == "https://example.com/a/"

    def test_inner_double_slashes_are_kept(self):
        assert normalize_url("https://example.com/a//b/") == "https://example.com/a//b"

    def test_sort_is_stable_for_repeated_keys(self):
        assert (
            normalize_url("https://example.com/s?b=2&a=3&a=1")
            == "https://example.com/s?a=3&a=1&b=2"
        )

    def test_keep_fragment(self):
        opts = NormalizeUrlOptions(remove_fragment=False)
        assert normalize_url("https://example.com/a#section", opts) == "https://example.com/a#section"

    def test_remove_query_params(self):
        opts = NormalizeUrlOptions(remove_query_params=True)
        assert normalize_url("https://example.com/a?x=1&y=2", opts) == "https://example.com/a"

    def test_unsorted_query_keeps_order(self):
        opts = NormalizeUrlOptions(sort_query_params=False)
        assert normalize_url("https://example.com/a?b=2&a=1", opts) == "https://example.com/a?b=2&a=1"

    def test_keep_trailing_slash(self):
        opts = NormalizeUrlOptions(remove_trailing_slash=False)
        assert normalize_url("https://example.com/a/", opts) == "https://example.com/a/"

    def test_no_lowercasing(self):
        opts = NormalizeUrlOptions(lowercase=False)
        assert normalize_url("https://Example.com/Path", opts) == "https://Example.com/Path"

    def test_idempotent_on_sample(self):
        once = normalize_url("HTTPS://WWW.Example.COM/Docs/Guide/?z=1&a=2#top")
        assert normalize_url(once) == once

    def test_invalid_url_raises(self):
        with pytest.raises(InvalidUrlError):
            normalize_url("mailto:someone@example.com")


class TestDomains:
    def test_extract_domain(self):
        assert extract_domain("https://Blog.Example.com/post") == "blog.example.com"

    def test_extract_root_domain(self):
        assert extract_root_domain("https://docs.api.example.com/x") == "example.com"

    def test_root_domain_ignores_multi_part_suffixes(self):
        assert extract_root_domain("https://www.example.co.uk/") == "co.uk"

    def test_root_domain_single_label(self):
        assert extract_root_domain("http://localhost:8000/") == "localhost"

    def test_is_same_domain(self):
        assert is_same_domain("https://example.com/a", "http://EXAMPLE.com/b") is True
        assert is_same_domain("https://blog.example.com", "https://api.example.com") is False

    def test_is_same_root_domain(self):
        assert is_same_root_domain("https://blog.example.com", "https://api.example.com") is True
        assert is_same_root_domain("https://example.com", "https://other.com") is False

    def test_is_subdomain(self):
        assert is_subdomain("https://blog.example.com", "https://example.com") is True
        assert is_subdomain("https://example.com", "https://example.com") is False
        assert is_subdomain("https://notexample.com", "https://example.com") is False

    @pytest.mark.parametrize("predicate", [is_same_domain, is_same_root_domain, is_subdomain])
    def test_predicates_return_false_for_invalid_input(self, predicate):
        assert predicate("not a url", "https://example.com") is False
        assert predicate("https://example.com", "ftp://example.com") is False


class TestDeduplicateUrls:
    def test_collapses_case_and_trailing_slash(self):
        urls = ["https://a.com/x", "https://a.com/x/", "https://A.COM/x"]
        assert deduplicate_urls(urls) == ["https://a.com/x"]

    def test_keeps_first_original_form(self):
        urls = ["https://Example.com/page/", "https://example.com/page"]
        assert deduplicate_urls(urls) == ["https://Example.com/page/"]

    def test_query_order_and_fragment_collapse(self):
        urls = [
            "https://example.com/p?a=1&b=2",
            "https://example.com/p?b=2&a=1",
            "https://example.com/p?a=1&b=2#top",
            "https://example.com/other",
        ]
        assert deduplicate_urls(urls) == [
            "https://example.com/p?a=1&b=2",
            "https://example.com/other",
        ]

    def test_different_query_values_are_distinct(self):
        urls = ["https://example.com/page", "https://example.com/page?query=1"]
        assert deduplicate_urls(urls) == urls

    def test_invalid_urls_dropped(self):
        assert deduplicate_urls(["nope", "https://example.com"]) == ["https://example.com"]

    def test_options_are_applied(self):
        opts = NormalizeUrlOptions(remove_query_params=True)
        urls = ["https://example.com/a?x=1", "https://example.com/a?x=2"]
        assert deduplicate_urls(urls, opts) == ["https://example.com/a?x=1"]


class TestFilterUrlsByPattern:
    URLS = [
        "https://example.com/api/users",
        "https://example.com/blog/post-1",
        "https://example.com/api/posts",
        "https://example.com/about",
    ]

    def test_no_patterns_keeps_everything(self):
        assert filter_urls_by_pattern(self.URLS) == self.URLS

    def test_include_patterns(self):
        assert filter_urls_by_pattern(self.URLS, [re.compile(r"/api/")]) == [
            "https://example.com/api/users",
            "https://example.com/api/posts",
        ]

    def test_exclude_patterns(self):
        assert filter_urls_by_pattern(self.URLS, exclude_patterns=[r"/api/"]) == [
            "https://example.com/blog/post-1",
            "https://example.com/about",
        ]

    def test_exclude_wins_over_include(self):
        result = filter_urls_by_pattern(self.URLS, [r"/api/"], [r"users"])
        assert result == ["https://example.com/api/posts"]

    def test_exclude_everything(self):
        assert filter_urls_by_pattern(self.URLS, [r".*"], [r"^https://"]) == []

    def test_empty_include_list_keeps_everything(self):
        assert filter_urls_by_pattern(self.URLS, []) == self.URLS


class TestDepthAndJoin:
    def test_get_url_depth(self):
        assert get_url_depth("https://example.com/a/b/c") == 3
        assert get_url_depth("https://example.com") == 0
        assert get_url_depth("https://example.com/a//b/") == 2

    def test_build_absolute_url(self):
        assert build_absolute_url("https://example.com/docs/intro", "../api") == "https://example.com/api"
        assert build_absolute_url("https://example.com/docs/", "guide") == "https://example.com/docs/guide"

    def test_build_absolute_url_with_absolute_reference(self):
        assert build_absolute_url("https://example.com/", "https://other.com/x") == "https://other.com/x"

    def test_build_absolute_url_rejects_bad_base(self):
        with pytest.raises(InvalidUrlError):
            build_absolute_url("example.com", "/x")
