"""Query-string and asset path helpers."""

from __future__ import annotations

from urllib.parse import parse_qsl, quote, urlencode, urlsplit, urlunsplit

# Characters encodeURIComponent leaves untouched besides alphanumerics and "-_.~".
URI_COMPONENT_SAFE = "!*'()"


def get_query_param(url: str | None, name: str) -> str | None:
    if not url:
        return None
    for key, value in parse_qsl(urlsplit(url).query, keep_blank_values=True):
        if key == name:
            return value
    return None


def with_query_param(url: str, name: str, value: str) -> str:
    """Return ``url`` with ``name`` set to ``value``, keeping other parameters."""
    parts = urlsplit(url)
    params: list[tuple[str, str]] = []
    replaced = False
    for key, current in parse_qsl(parts.query, keep_blank_values=True):
        if key != name:
            params.append((key, current))
        elif not replaced:
            params.append((name, value))
            replaced = True
    if not replaced:
        params.append((name, value))
    return urlunsplit(parts._replace(query=urlencode(params)))


def encode_path_segment(segment: str = "") -> str:
    return "/".join(quote(part, safe=URI_COMPONENT_SAFE) for part in segment.split("/"))


def build_asset_path(*segments: str | None) -> str:
    """Join non-empty segments into an encoded relative URL."""
    return "/".join(encode_path_segment(segment) for segment in segments if segment)


def join_asset_url(base_url: str | None, *segments: str | None) -> str:
    """Build an asset URL, leaving an absolute ``base_url`` unencoded."""
    if base_url and urlsplit(base_url).scheme:
        relative = build_asset_path(*segments)
        base = base_url.rstrip("/")
        return f"{base}/{relative}" if relative else base
    return build_asset_path(base_url, *segments)
