"""Utility functions for the ABAP file store."""

import codecs
from urllib.parse import quote, unquote

# =============================================================================
# Constants for the file store protocol
# =============================================================================

# Escaped path separator used inside file store object ids
SLASH_ESCAPED: str = "%2f"

# Number of leading bytes inspected for binary detection
BINARY_SAMPLE_SIZE: int = 512

# Payload sent in place of an empty file (the server rejects empty bodies)
EMPTY_FILE_PAYLOAD: bytes = b" "

_TEXT_BOMS = (
    codecs.BOM_UTF8,
    codecs.BOM_UTF32_LE,
    codecs.BOM_UTF32_BE,
    codecs.BOM_UTF16_LE,
    codecs.BOM_UTF16_BE,
)

# Control characters that commonly occur in text files
_TEXT_CONTROL_BYTES = frozenset({7, 8, 9, 10, 11, 12, 13, 27})


# =============================================================================
# URL encoding
# =============================================================================


def encode_uri_component(value: str) -> str:
    """Percent-encode a value the way the file store expects it.

    Leaves only letters, digits and ``-_.!~*'()`` unescaped.

    Examples:
        >>> encode_uri_component("/NS/APP")
        '%2FNS%2FAPP'
        >>> encode_uri_component("my file.js")
        'my%20file.js'
    """
    return quote(value, safe="!~*'()")


# =============================================================================
# Artifact id helpers
# =============================================================================


def split_into_path_and_object(artifact_id: str) -> tuple[str, str]:
    """Split an artifact id into its parent path and object name.

    Examples:
        >>> split_into_path_and_object("/sub/dir/file.js")
        ('/sub/dir', 'file.js')
        >>> split_into_path_and_object("/index.html")
        ('', 'index.html')
    """
    path, _, obj = artifact_id.rpartition("/")
    return path, obj


def path_depth(artifact_id: str) -> int:
    """Return the number of path segments in an artifact id.

    Examples:
        >>> path_depth("/a.txt")
        1
        >>> path_depth("/sub/deeper/b.txt")
        3
    """
    return artifact_id.count("/")


def normalize_remote_id(remote_id: str, container: str) -> str:
    """Turn a file store object id into a container-relative artifact id.

    Object ids are returned by the server as escaped segments joined by an
    escaped slash and prefixed by the container name, e.g.
    ``ZAPP%2fsub%2findex.html``. The container prefix is stripped, the id is
    split on the escaped separator and each segment is unescaped.

    Namespaced containers (``/NS/APP``) encode as ``%2FNS%2FAPP`` while the
    server spells their two slashes in lowercase, so the first two escaped
    slashes are upper-cased before the prefix is stripped.

    Args:
        remote_id: Object id as found in the listing feed
        container: Container name as configured (unescaped)

    Returns:
        Root-relative id starting with ``/``

    Examples:
        >>> normalize_remote_id("ZAPP%2fsub%2findex.html", "ZAPP")
        '/sub/index.html'
        >>> normalize_remote_id("%2fNS%2fAPP%2fi18n", "/NS/APP")
        '/i18n'
    """
    encoded_container = encode_uri_component(container)

    if "%2F" in encoded_container:
        remote_id = remote_id.replace(SLASH_ESCAPED, "%2F", 2)

    remote_id = remote_id.removeprefix(encoded_container)
    segments = remote_id.split(SLASH_ESCAPED)

    if segments and segments[0] == "":
        segments = segments[1:]

    return "/" + "/".join(unquote(segment) for segment in segments)


# =============================================================================
# Content inspection
# =============================================================================


def is_binary_content(data: bytes) -> bool:
    """Guess whether file content is binary.

    Empty content and content starting with a Unicode byte order mark count
    as text. A NUL byte marks the content as binary; otherwise content that
    decodes as UTF-8 is text, and anything else is binary when more than
    10% of the sampled bytes are unusual control characters.
    """
    if not data:
        return False

    sample = data[:BINARY_SAMPLE_SIZE]

    if sample.startswith(_TEXT_BOMS):
        return False

    if b"\x00" in sample:
        return True

    decoder = codecs.getincrementaldecoder("utf-8")()
    try:
        decoder.decode(sample, final=False)
        return False
    except UnicodeDecodeError:
        pass

    suspicious = sum(
        1 for byte in sample if byte < 32 and byte not in _TEXT_CONTROL_BYTES
    )
    return suspicious * 10 > len(sample)
