"""Tests for the fallback resolvers and the provider factory."""

import json
from pathlib import Path

import httpx
import pytest

from transresolve.config import FallbackSettings
from transresolve.fallback import (
    FallbackClient,
    FallbackError,
    HttpFallbackResolver,
    LocalFallbackResolver,
    MockFallbackResolver,
    build_fallback_client,
    get_fallback_resolver,
)
from transresolve.types import Dictionary

ENDPOINT = "https://resolver.example.com/api/translate"
RAW = "Hello ct_translate('GREETING')"


def _http_resolver(handler, **overrides) -> HttpFallbackResolver:  # noqa: ANN001, ANN003
    settings = FallbackSettings(provider="http", endpoint=ENDPOINT, **overrides)
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return HttpFallbackResolver(settings, client=client)


async def test_http_posts_text_and_locale() -> None:
    """1. Success: The text and locale are posted and data.resolved is returned."""
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"success": True, "data": {"resolved": "Hello Bonjour"}})

    resolver = _http_resolver(handler)
    assert await resolver.resolve(RAW, "fr") == "Hello Bonjour"
    assert str(seen[0].url) == ENDPOINT
    assert seen[0].method == "POST"
    assert json.loads(seen[0].content) == {"text": RAW, "locale": "fr"}
    await resolver.client.aclose()


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(500, json={"success": True, "data": {"resolved": "x"}}),
        httpx.Response(200, text="not json"),
        httpx.Response(200, json={"success": False, "error": "nope"}),
        httpx.Response(200, json={"success": True, "data": {}}),
        httpx.Response(200, json={"success": True, "data": {"resolved": ""}}),
        httpx.Response(200, json=["success"]),
    ],
    ids=["server-error", "non-json", "not-successful", "missing-resolved", "empty-resolved", "not-an-object"],
)
async def test_http_bad_responses_are_failures(response: httpx.Response) -> None:
    """2. Failure: Any non-2xx or malformed response raises FallbackError."""
    resolver = _http_resolver(lambda _request: response)
    with pytest.raises(FallbackError):
        await resolver.resolve(RAW, "en")


@pytest.mark.parametrize(
    ("error", "message"),
    [
        (lambda request: httpx.ConnectError("connection refused", request=request), "connection refused"),
        (lambda _request: httpx.InvalidURL("Invalid non-printable ASCII character in URL"), "Invalid non-printable"),
    ],
    ids=["connect-error", "invalid-url"],
)
async def test_http_network_error_is_failure(error, message: str) -> None:  # noqa: ANN001
    """3. Failure: Transport and URL errors are wrapped in FallbackError."""

    def handler(request: httpx.Request) -> httpx.Response:
        raise error(request)

    resolver = _http_resolver(handler)
    with pytest.raises(FallbackError, match=message):
        await resolver.resolve(RAW, "en")


async def test_http_long_text_keeps_unsent_tail(caplog: pytest.LogCaptureFixture) -> None:
    """4. Bound: Only max_text_length characters are sent and the rest is appended unchanged."""
    sent: list[dict] = []

    def handler(request: httpx.Request) -> httpx.Response:
        sent.append(json.loads(request.content))
        return httpx.Response(200, json={"success": True, "data": {"resolved": "ok"}})

    resolver = _http_resolver(handler, max_text_length=5)
    with caplog.at_level("WARNING", logger="transresolve.fallback.base"):
        assert await resolver.resolve("abcdefghij", "en") == "okfghij"
    assert sent[0]["text"] == "abcde"
    assert "max_text_length" in caplog.text


async def test_http_owned_client_carries_headers() -> None:
    """5. Client: A resolver-built client sends JSON and custom headers, and is closed by aclose."""
    resolver = HttpFallbackResolver(FallbackSettings(provider="http", endpoint=ENDPOINT, headers={"X-Api-Key": "k"}))
    assert resolver.client.headers["Content-Type"] == "application/json"
    assert resolver.client.headers["X-Api-Key"] == "k"
    await resolver.aclose()
    assert resolver.client.is_closed


async def test_http_injected_client_is_not_closed() -> None:
    """6. Client: An injected client is left open by aclose."""
    resolver = _http_resolver(lambda _request: httpx.Response(200))
    await resolver.aclose()
    assert not resolver.client.is_closed
    await resolver.client.aclose()


def test_http_requires_endpoint() -> None:
    """7. Validation: The http provider needs an endpoint."""
    with pytest.raises(ValueError, match="endpoint"):
        HttpFallbackResolver(FallbackSettings(provider="http"))


async def test_mock_resolver() -> None:
    """8. Mock: Canned answers, a default prefix and configured failures."""
    resolver = MockFallbackResolver(responses={"a": "A"}, fail_times=1)
    with pytest.raises(FallbackError):
        await resolver.resolve("a", "en")
    assert await resolver.resolve("a", "en") == "A"
    assert await resolver.resolve("b", "de") == "[MOCK] b"
    assert resolver.calls == [("a", "en"), ("a", "en"), ("b", "de")]


async def test_local_resolver_uses_dictionary_per_locale() -> None:
    """9. Local: Patterns are resolved with the dictionary for the requested language."""
    resolver = LocalFallbackResolver(
        dictionaries={
            "fr": Dictionary(entries={"GREETING": "Bonjour"}, locale="fr"),
            "de": Dictionary(entries={"GREETING": "Hallo"}, locale="de"),
        },
    )
    assert await resolver.resolve(RAW, "fr_CA") == "Hello Bonjour"
    assert await resolver.resolve(RAW, "de") == "Hello Hallo"


async def test_local_resolver_failures() -> None:
    """10. Local: Empty text, unknown locales and unchanged text are failures."""
    resolver = LocalFallbackResolver(dictionaries={"en": Dictionary(entries={"A": "a"})})
    with pytest.raises(FallbackError, match="required"):
        await resolver.resolve("", "en")
    with pytest.raises(FallbackError, match="No dictionary"):
        await resolver.resolve(RAW, "ja")
    with pytest.raises(FallbackError, match="resolved"):
        await resolver.resolve("plain text", "en")


async def test_local_resolver_loads_from_directory(tmp_path: Path) -> None:
    """11. Local: Dictionaries are read from `<iso2>.json` in the directory."""
    (tmp_path / "es.json").write_text(json.dumps({"GREETING": "Hola"}), encoding="utf-8")
    resolver = LocalFallbackResolver(dictionary_dir=tmp_path)
    assert await resolver.resolve(RAW, "es-MX") == "Hello Hola"


def test_factory() -> None:
    """12. Factory: Providers map to resolver classes and 'none' disables the fallback."""
    assert get_fallback_resolver("none", FallbackSettings()) is None
    assert isinstance(get_fallback_resolver("mock", FallbackSettings(provider="mock")), MockFallbackResolver)
    assert isinstance(get_fallback_resolver("local", FallbackSettings(provider="local")), LocalFallbackResolver)


def test_factory_unknown_provider(caplog: pytest.LogCaptureFixture) -> None:
    """13. Factory: An unknown provider logs a warning and returns None."""
    with caplog.at_level("WARNING", logger="transresolve.fallback"):
        assert get_fallback_resolver("carrier-pigeon", FallbackSettings()) is None
    assert "Unknown fallback provider" in caplog.text


def test_build_fallback_client() -> None:
    """14. Client: The client takes its timings from the settings."""
    assert build_fallback_client(FallbackSettings()) is None
    client = build_fallback_client(FallbackSettings(provider="mock", debounce=0.1, retry_delay=0.2, max_retries=0))
    assert isinstance(client, FallbackClient)
    assert isinstance(client.resolver, MockFallbackResolver)
    assert (client.debounce, client.retry_delay, client.max_retries) == (0.1, 0.2, 0)
