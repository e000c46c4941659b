"""Request and filename guards for rendering untrusted HTML."""

from __future__ import annotations

import ipaddress
import re
from pathlib import PurePosixPath, PureWindowsPath
from urllib.parse import urlparse

# Hostnames that resolve to the render host itself or its cloud metadata service.
_LOCAL_HOSTNAMES = frozenset(
    {
        "localhost",
        "localhost.localdomain",
        "host.docker.internal",
        "metadata.google.internal",
    }
)

# Schemes a document can load without touching the network.
_INLINE_SCHEMES = frozenset({"about", "blob", "data"})
_NETWORK_SCHEMES = frozenset({"http", "https"})

_FILENAME_UNSAFE = re.compile(r"[^\w.\- ]+", re.ASCII)


def request_url_block_reason(
    url: str,
    *,
    allow_private_network: bool,
    block_file_scheme: bool,
) -> str | None:
    """
    Decide whether the page being rendered may fetch `url`.

    Every subresource the caller's HTML pulls in (images, fonts, stylesheets,
    the CSS framework script) passes through here from the page's route
    handler. Inline data and public http(s) hosts are let through; local
    files, the render host's own network and unknown schemes are refused so
    an exported document cannot read them into a PDF.

    Returns:
        A short reason when the request must be aborted, else None.
    """
    parsed = urlparse(url)
    scheme = (parsed.scheme or "").lower()

    if scheme == "file":
        return "file:// requests are blocked" if block_file_scheme else None
    if scheme in _INLINE_SCHEMES:
        return None
    if scheme not in _NETWORK_SCHEMES:
        return f"Unsupported URL scheme: {scheme or 'none'}"

    host = parsed.hostname
    if not host:
        return "Missing host"
    if allow_private_network or not is_private_or_local_host(host):
        return None
    return f"Private/local host blocked: {host}"


def is_private_or_local_host(host: str) -> bool:
    """True for hosts on the render machine's own network: loopback, LAN, link-local, metadata."""
    name = host.rstrip(".").lower()
    if name in _LOCAL_HOSTNAMES or name.endswith(".local"):
        return True

    try:
        address = ipaddress.ip_address(name)
    except ValueError:
        # A DNS name; only literal addresses and the names above are judged here.
        return False

    return any(
        (
            address.is_private,
            address.is_loopback,
            address.is_link_local,
            address.is_reserved,
            address.is_multicast,
            address.is_unspecified,
        )
    )


def safe_pdf_filename(raw: str | None, default: str = "document.pdf") -> str:
    """Reduce a caller-supplied name to a header-safe basename ending in .pdf."""
    name = (raw or "").strip()
    # Strip any directory part, whichever separator the client used.
    name = PureWindowsPath(PurePosixPath(name).name).name
    if name.lower().endswith(".pdf"):
        name = name[:-4]
    name = _FILENAME_UNSAFE.sub("_", name).strip(" ._")
    if not name:
        return default
    return f"{name}.pdf"
