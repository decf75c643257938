from starlette.requests import Request

from app.middleware import build_cors_headers, extract_client_ip


def _request(headers: dict[str, str] | None = None, client=("198.51.100.2", 40000)) -> Request:
    return Request(
        {
            "type": "http",
            "method": "GET",
            "path": "/track",
            "headers": [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()],
            "client": client,
        }
    )


def test_extract_client_ip_prefers_first_forwarded_address():
    request = _request({"X-Forwarded-For": "203.0.113.7, 10.0.0.1, 10.0.0.2"})

    assert extract_client_ip(request) == "203.0.113.7"


def test_extract_client_ip_falls_back_to_peer():
    assert extract_client_ip(_request()) == "198.51.100.2"


def test_extract_client_ip_unknown_without_peer():
    assert extract_client_ip(_request(client=None)) == "unknown"


def test_extract_client_ip_ignores_forwarded_for_when_untrusted(monkeypatch):
    monkeypatch.setattr("app.middleware.request_context.settings.TRUST_X_FORWARDED_FOR", False)
    request = _request({"X-Forwarded-For": "203.0.113.7"})

    assert extract_client_ip(request) == "198.51.100.2"


def test_extract_client_ip_requires_trusted_proxy_when_configured(monkeypatch):
    monkeypatch.setattr(
        "app.middleware.request_context.settings.TRUSTED_PROXY_IPS", ["10.0.0.254"]
    )
    request = _request({"X-Forwarded-For": "203.0.113.7"})

    assert extract_client_ip(request) == "198.51.100.2"


def test_build_cors_headers_wildcard():
    headers = build_cors_headers(None, ["*"])

    assert headers["Access-Control-Allow-Origin"] == "*"
    assert headers["Access-Control-Allow-Methods"] == "GET, POST, OPTIONS"
    assert headers["Access-Control-Allow-Headers"] == "Origin, X-Requested-With, Content-Type, Accept"
    assert "Access-Control-Allow-Credentials" not in headers


def test_build_cors_headers_allowlist():
    allowed = ["https://intranet.company.com"]

    assert build_cors_headers("https://evil.example", allowed) == {}
    headers = build_cors_headers("https://intranet.company.com", allowed, allow_credentials=True)
    assert headers["Access-Control-Allow-Origin"] == "https://intranet.company.com"
    assert headers["Access-Control-Allow-Credentials"] == "true"
