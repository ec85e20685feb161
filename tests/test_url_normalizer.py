"""
Tests for URL cleaning
"""

import pytest

from errors import CaptureErrorKind, InvalidUrlError
from utils.url_normalizer import is_provider_host, normalize_url


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("example.com", "https://example.com"),
        ("  example.com/about  ", "https://example.com/about"),
        ("http://example.com/page?x=1", "http://example.com/page?x=1"),
        ("HTTPS://Example.com", "HTTPS://Example.com"),
    ],
)
def test_scheme_is_added_only_when_missing(raw, expected):
    assert normalize_url(raw) == expected


def test_hosted_site_is_truncated_to_subdomain_root():
    assert normalize_url("https://foo.squarespace.com/anything/here?x=1") == "https://foo.squarespace.com"


def test_hosted_site_without_scheme():
    assert normalize_url("foo.squarespace.com/blog#top") == "https://foo.squarespace.com"


def test_provider_domain_itself_is_not_truncated():
    assert normalize_url("https://squarespace.com/pricing") == "https://squarespace.com/pricing"


def test_lookalike_domain_is_not_truncated():
    url = "https://foo.notsquarespace.com/page"
    assert normalize_url(url) == url


def test_custom_provider_domain():
    assert normalize_url("https://shop.example-host.com/x/y", provider_domain="example-host.com") == (
        "https://shop.example-host.com"
    )


@pytest.mark.parametrize("raw", ["http://", "https://"])
def test_malformed_url_is_rejected(raw):
    with pytest.raises(InvalidUrlError) as exc_info:
        normalize_url(raw)
    assert exc_info.value.kind == CaptureErrorKind.INVALID_URL
    assert exc_info.value.status_code == 400


@pytest.mark.parametrize("raw", [None, "", "   "])
def test_missing_url_is_rejected(raw):
    with pytest.raises(InvalidUrlError) as exc_info:
        normalize_url(raw)
    assert exc_info.value.message == "URL parameter is required"


def test_is_provider_host():
    assert is_provider_host("a.squarespace.com", "squarespace.com")
    assert is_provider_host("A.SquareSpace.com", "squarespace.com")
    assert not is_provider_host("squarespace.com", "squarespace.com")
    assert not is_provider_host("a.squarespace.com", "")
