"""
URL normalization for screenshot requests.

Cleans a user-supplied URL, adds a scheme when missing and truncates hosted
site URLs (e.g. https://foo.squarespace.com/some/page) to the site root.
"""

from urllib.parse import urlsplit

from pydantic import HttpUrl, TypeAdapter, ValidationError

from errors import InvalidUrlError

_http_url = TypeAdapter(HttpUrl)


def normalize_url(raw_url: str, provider_domain: str = "squarespace.com") -> str:
    """
    Normalize a raw URL for navigation.

    Args:
        raw_url: URL as typed by the user
        provider_domain: Hosting domain whose subdomain root identifies a site

    Returns:
        Absolute http(s) URL string

    Raises:
        InvalidUrlError: If the URL is blank or cannot be parsed
    """
    if raw_url is None or not raw_url.strip():
        raise InvalidUrlError("URL parameter is required", stage="normalize")

    clean_url = raw_url.strip()

    # Add https:// if no protocol specified
    if not clean_url.lower().startswith(("http://", "https://")):
        clean_url = "https://" + clean_url

    try:
        _http_url.validate_python(clean_url)
        parts = urlsplit(clean_url)
        host = parts.hostname
    except (ValidationError, ValueError) as e:
        raise InvalidUrlError(f"Invalid URL format: {clean_url}", stage="normalize") from e

    if not host:
        raise InvalidUrlError(f"Invalid URL format: {clean_url}", stage="normalize")

    if is_provider_host(host, provider_domain):
        netloc = parts.netloc.rsplit("@", 1)[-1]
        return f"{parts.scheme.lower()}://{netloc}"

    return clean_url


def is_provider_host(host: str, provider_domain: str) -> bool:
    """True when host is <sub>.<provider_domain> with a non-empty subdomain"""
    if not provider_domain:
        return False
    suffix = "." + provider_domain.lower().strip(".")
    host = host.lower()
    return host.endswith(suffix) and len(host) > len(suffix)
