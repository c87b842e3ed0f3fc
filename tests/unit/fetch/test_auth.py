"""Tests for auth token parsing and host scoping."""

import logging

import httpx
import pytest

from modcache.core.fetch import AuthTokens, parse_auth_tokens


class TestParse:
    def test_bearer_and_basic(self):
        """Test entries split into bearer and basic credentials."""
        tokens = parse_auth_tokens("example.com@abc123;private.dev@user:pass")

        assert [(t.host, t.type) for t in tokens] == [
            ("example.com", "bearer"),
            ("private.dev", "basic"),
        ]
        assert tokens[0].token == "abc123"
        assert (tokens[1].username, tokens[1].password) == ("user", "pass")

    def test_host_is_left_of_last_at(self):
        """Test the host comes before the last '@' and the credential after it."""
        (token,) = parse_auth_tokens("example.com@abc123")

        assert token.host == "example.com"
        assert token.type == "bearer"
        assert token.token == "abc123"

    def test_password_may_contain_colons(self):
        """Test only the first ':' separates username from password."""
        (token,) = parse_auth_tokens("registry.test@me:p:w")

        assert token.host == "registry.test"
        assert token.type == "basic"
        assert (token.username, token.password) == ("me", "p:w")
        assert token.header_value() == "Basic me:p:w"

    def test_malformed_entries_discarded(self, caplog: pytest.LogCaptureFixture):
        """Test entries without '@' are dropped with a warning."""
        with caplog.at_level(logging.WARNING):
            tokens = parse_auth_tokens("garbage;example.com@tok;;")

        assert [t.host for t in tokens] == ["example.com"]
        assert "Badly formed auth token discarded" in caplog.text

    @pytest.mark.parametrize("value", [None, "", ";;"])
    def test_empty(self, value):
        assert parse_auth_tokens(value) == []

    def test_secrets_not_in_repr(self):
        (token,) = parse_auth_tokens("example.com@supersecret")
        assert "supersecret" not in repr(token)


class TestLookup:
    """Tests for host suffix matching."""

    @pytest.fixture
    def tokens(self) -> AuthTokens:
        return AuthTokens.from_string("example.com@abc;localhost:8080@u:p")

    @pytest.mark.parametrize(
        "url",
        ["https://example.com/mod.ts", "https://sub.example.com/mod.ts", "https://EXAMPLE.com/"],
    )
    def test_matching_hosts(self, tokens: AuthTokens, url: str):
        assert tokens.get(url) == "Bearer abc"

    def test_lookalike_host_not_matched(self, tokens: AuthTokens):
        """Test a host merely ending in the same text does not match."""
        assert tokens.get("https://notexample.com/mod.ts") is None

    def test_port_is_part_of_host(self, tokens: AuthTokens):
        """Test basic credentials render verbatim for host:port tokens."""
        assert tokens.get("http://localhost:8080/a.ts") == "Basic u:p"
        assert tokens.get("http://localhost/a.ts") is None

    def test_first_match_wins(self):
        tokens = AuthTokens.from_string("example.com@first;sub.example.com@second")
        assert tokens.get("https://sub.example.com/") == "Bearer first"

    def test_from_env(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("DENO_AUTH_TOKENS", "deno.land@envtoken")
        assert AuthTokens.from_env().get("https://deno.land/x") == "Bearer envtoken"


class TestAuthFlow:
    async def test_header_applied_per_request_host(self):
        """Test the httpx auth flow only authorizes matching hosts."""
        seen: dict[str, str | None] = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen[request.url.host] = request.headers.get("authorization")
            return httpx.Response(200)

        tokens = AuthTokens.from_string("example.com@abc")
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            await client.get("https://cdn.example.com/a", auth=tokens)
            await client.get("https://other.test/a", auth=tokens)

        assert seen == {"cdn.example.com": "Bearer abc", "other.test": None}
