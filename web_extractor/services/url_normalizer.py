"""URL utilities: validation, canonical form, dedup, domain predicates and pattern filters."""

import re
from re import Pattern
from typing import Iterable, List, Optional, Union
from urllib.parse import SplitResult, parse_qsl, urlencode, urljoin, urlsplit, urlunsplit

from web_extractor.errors import InvalidUrlError
from web_extractor.models.options import NormalizeUrlOptions

ALLOWED_SCHEMES = {"http", "https"}

_DEFAULT_OPTIONS = NormalizeUrlOptions()

PatternLike = Union[str, Pattern]


def validate_url(url: str) -> SplitResult:
    """Parse *url* as an absolute http(s) URL.

    This is the only place scheme and host checks live; every other helper in
    this module goes through it.

    Raises:
        InvalidUrlError: if *url* cannot be parsed, has no host, has an
            invalid port, or uses a scheme other than http/https.
    """
    if not isinstance(url, str) or not url.strip():
        raise InvalidUrlError(str(url), "URL must be a non-empty string")

    try:
        parsed = urlsplit(url.strip())
        # Accessing .port validates it; urlsplit alone does not.
        parsed.port
    except ValueError as exc:
        raise InvalidUrlError(url, str(exc)) from exc

    if parsed.scheme.lower() not in ALLOWED_SCHEMES:
        raise InvalidUrlError(url, "Only HTTP and HTTPS protocols are supported")

    hostname = parsed.hostname
    if not hostname or re.search(r"\s", hostname):
        raise InvalidUrlError(url, "URL must have a valid hostname")

    return parsed


def is_valid_url(url: str) -> bool:
    """Return True when :func:`validate_url` accepts *url*."""
    try:
        validate_url(url)
    except InvalidUrlError:
        return False
    return True


def normalize_url(url: str, options: Optional[NormalizeUrlOptions] = None) -> str:
    """Return the canonical string form of *url* used for comparison and dedup.

    Steps, in order: lowercase host and path, drop the fragment, drop or
    key-sort the query string, then strip one trailing slash from the path.
    Sorting is stable, so repeated keys keep their original value order.

    Raises:
        InvalidUrlError: under the same conditions as :func:`validate_url`.
    """
    opts = options or _DEFAULT_OPTIONS
    parsed = validate_url(url)

    scheme = parsed.scheme.lower()
    netloc = parsed.netloc
    path = parsed.path
    query = parsed.query
    fragment = parsed.fragment

    if opts.lowercase:
        # Keep user info untouched; only the host[:port] part is case-insensitive.
        userinfo, at, hostport = netloc.rpartition("@")
        netloc = f"{userinfo}{at}{hostport.lower()}"
        path = path.lower()

    if opts.remove_fragment:
        fragment = ""

    if opts.remove_query_params:
        query = ""
    elif opts.sort_query_params and query:
        pairs = parse_qsl(query, keep_blank_values=True)
        query = urlencode(sorted(pairs, key=lambda pair: pair[0]))

    if opts.remove_trailing_slash and path.endswith("/"):
        path = path[:-1]

    return urlunsplit((scheme, netloc, path, query, fragment))


def extract_domain(url: str) -> str:
    """Return the (lowercase) hostname of *url*."""
    return validate_url(url).hostname or ""


def extract_root_domain(url: str) -> str:
    """Return the last two labels of the hostname of *url*.

    Multi-part public suffixes are not special-cased: ``www.example.co.uk``
    yields ``co.uk``.
    """
    domain = extract_domain(url)
    parts = domain.split(".")
    if len(parts) >= 2:
        return ".".join(parts[-2:])
    return domain


def is_same_domain(url: str, other: str) -> bool:
    try:
        return extract_domain(url) == extract_domain(other)
    except InvalidUrlError:
        return False


def is_same_root_domain(url: str, other: str) -> bool:
    try:
        return extract_root_domain(url) == extract_root_domain(other)
    except InvalidUrlError:
        return False


def is_subdomain(url: str, parent_url: str) -> bool:
    """Return True when the host of *url* is a strict subdomain of *parent_url*'s host."""
    try:
        domain = extract_domain(url)
        parent = extract_domain(parent_url)
    except InvalidUrlError:
        return False
    return domain != parent and domain.endswith(f".{parent}")


def deduplicate_urls(
    urls: Iterable[str],
    options: Optional[NormalizeUrlOptions] = None,
) -> List[str]:
    """Drop URLs whose normalized form was already seen.

    The first original-form URL of each normalized key is kept, in input
    order.  URLs that fail validation are skipped.
    """
    seen: set = set()
    unique: List[str] = []
    for url in urls:
        try:
            key = normalize_url(url, options)
        except InvalidUrlError:
            continue
        if key not in seen:
            seen.add(key)
            unique.append(url)
    return unique


def _compile(patterns: Optional[Iterable[PatternLike]]) -> List[Pattern]:
    if not patterns:
        return []
    return [p if isinstance(p, Pattern) else re.compile(p) for p in patterns]


def filter_urls_by_pattern(
    urls: Iterable[str],
    include_patterns: Optional[Iterable[PatternLike]] = None,
    exclude_patterns: Optional[Iterable[PatternLike]] = None,
) -> List[str]:
    """Keep URLs matching the include patterns and none of the exclude patterns.

    Exclusion wins.  With no include patterns every non-excluded URL is kept.
    Patterns are searched anywhere in the URL string.
    """
    include = _compile(include_patterns)
    exclude = _compile(exclude_patterns)

    kept: List[str] = []
    for url in urls:
        if any(p.search(url) for p in exclude):
            continue
        if include and not any(p.search(url) for p in include):
            continue
        kept.append(url)
    return kept


def get_url_depth(url: str) -> int:
    """Return the number of non-empty path segments in *url*."""
    path = validate_url(url).path
    return len([segment for segment in path.split("/") if segment])


def build_absolute_url(base_url: str, relative: str) -> str:
    """Resolve *relative* against the validated *base_url*."""
    base = validate_url(base_url)
    return urljoin(base.geturl(), relative)
