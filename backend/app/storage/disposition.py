"""
Content-Disposition header values.

HTTP header values must be ASCII, but album files are often named in other
scripts (e.g. "报告.pdf"). Every disposition built here carries two names:
an ASCII-sanitized ``filename="..."`` fallback for old clients and an
RFC 5987 / RFC 6266 ``filename*=UTF-8''...`` form holding the exact name.
"""
import re
import unicodedata
from typing import Optional
from urllib.parse import quote

INLINE = "inline"
ATTACHMENT = "attachment"

FALLBACK_BASENAME = "download"

_EXTENSION = re.compile(r"\.([^.]+)$")
_NON_PRINTABLE_ASCII = re.compile(r"[^\x20-\x7E]")
_HEADER_UNSAFE = re.compile(r'["\\;]')


def _to_header_ascii(text: str) -> str:
    text = unicodedata.normalize("NFKD", text)
    text = _NON_PRINTABLE_ASCII.sub("_", text)
    return _HEADER_UNSAFE.sub("_", text)


def ascii_filename_fallback(name: str) -> str:
    """
    Build an ASCII-only stand-in for ``name``.

    Basename and extension are both NFKD-normalized, with non-ASCII and
    header-breaking characters replaced by "_". The extension is lowercased
    and an empty basename falls back to "download".

    >>> ascii_filename_fallback("报告.pdf")
    '__.pdf'
    """
    match = _EXTENSION.search(name)
    ext = _to_header_ascii(match.group(1).lower()).strip() if match else None
    basename = _EXTENSION.sub("", name)

    ascii_name = _to_header_ascii(basename).strip()
    if not ascii_name:
        ascii_name = FALLBACK_BASENAME

    return f"{ascii_name}.{ext}" if ext else ascii_name


def encode_rfc5987(name: str) -> str:
    """Percent-encode UTF-8 bytes of ``name`` for a ``filename*`` parameter."""
    return quote(name, safe="")


def build_content_disposition(name: Optional[str], disposition: str = INLINE) -> str:
    """
    Build a Content-Disposition value.

    Args:
        name: Original (human) filename; None or "" yields the bare disposition
        disposition: "inline" to preview in the browser, "attachment" to download

    Returns:
        Header value made only of printable ASCII characters
    """
    if disposition not in (INLINE, ATTACHMENT):
        raise ValueError(f"Unsupported disposition: {disposition}")
    if not name:
        return disposition
    return (
        f'{disposition}; filename="{ascii_filename_fallback(name)}"; '
        f"filename*=UTF-8''{encode_rfc5987(name)}"
    )
