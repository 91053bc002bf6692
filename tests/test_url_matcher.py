"""Tests for wildcard URL pattern matching."""

import pytest

from e2e_suite.mocking.url_matcher import compile_pattern, url_matches


class TestWildcards:
    """Tests for * and ** translation."""

    @pytest.mark.parametrize(
        "url",
        ["https://x/a/b/users/42", "https://x/users/abc"],
    )
    def test_double_star_prefix_with_single_star_segment(self, url):
        """Test **/users/* matches nested and shallow user URLs."""
        assert url_matches(url, "**/users/*") is True

    def test_missing_trailing_segment_does_not_match(self):
        """Test **/users/* requires the slash after users."""
        assert url_matches("https://x/users", "**/users/*") is False

    def test_single_star_does_not_cross_slash(self):
        """Test * stops at a path separator."""
        regex = compile_pattern("/api/*/detail")
        assert regex.search("https://x/api/42/detail")
        assert not regex.search("https://x/api/42/extra/detail")

    def test_double_star_crosses_slash(self):
        """Test ** spans multiple path segments."""
        assert url_matches("https://x/api/42/extra/detail", "/api/**/detail")

    def test_search_semantics_match_substring(self):
        """Test matching is a search, not a full match."""
        assert url_matches("https://x/users/42/posts", "**/users/*")
        assert url_matches("https://api.example.com/v1/items?page=2", "/v1/items")


class TestLiteralCharacters:
    """Tests for characters that are not wildcards."""

    def test_question_mark_is_literal(self):
        """Test ? matches only a literal question mark."""
        assert url_matches("https://x/search?q=1", "/search?q=1")
        assert not url_matches("https://x/searchXq=1", "/search?q=1")

    def test_dot_is_escaped(self):
        """Test . matches only a dot."""
        assert url_matches("https://api.example.com/x", "api.example.com")
        assert not url_matches("https://apiXexample.com/x", "api.example.com")

    def test_parentheses_and_plus_are_literal(self):
        """Test other regex metacharacters do not act as regex syntax."""
        assert url_matches("https://x/files/a+b(1).txt", "/files/a+b(1).txt")
        assert not url_matches("https://x/files/aab1.txt", "/files/a+b(1).txt")


class TestEdgeCases:
    """Tests for degenerate patterns."""

    def test_empty_pattern_matches_everything(self):
        """Test an empty pattern matches any URL."""
        assert url_matches("https://anything/at/all", "")
        assert url_matches("", "")

    def test_compiled_patterns_are_cached(self):
        """Test the same pattern compiles to the same regex object."""
        assert compile_pattern("**/cached/*") is compile_pattern("**/cached/*")
