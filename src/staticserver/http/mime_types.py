"""
=============================================================================
MIME TYPE DETECTION
=============================================================================

The Content-Type header tells the client how to interpret the body:

    index.html  →  text/html                 (render as a page)
    logo.png    →  image/png                 (display as an image)
    data.bin    →  application/octet-stream  (opaque bytes, download)

The server knows exactly two types. Everything else, including files with
no extension at all, is served as application/octet-stream.

=============================================================================
EXTENSION RULE
=============================================================================

The extension is everything from the LAST dot of the file name onward,
dot included. Matching is case-sensitive:

    "index.html"     →  ".html"
    "archive.tar.gz" →  ".gz"
    "README"         →  ""
    ".bashrc"        →  ".bashrc"
    "PHOTO.PNG"      →  ".PNG"   (not in the table → octet-stream)

This differs from Path.suffix, which returns "" for ".bashrc".

=============================================================================
"""

from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Union


# Built once at import, shared read-only by every handler thread.
CONTENT_TYPES: Mapping[str, str] = MappingProxyType({
    ".html": "text/html",
    ".png": "image/png",
})

DEFAULT_CONTENT_TYPE = "application/octet-stream"


def get_file_extension(path: Union[str, Path]) -> str:
    """
    Extract the extension (with leading dot) from a file path.

    Args:
        path: File path or bare file name.

    Returns:
        Substring of the file name starting at its final ".", or "" if
        the name contains no dot.
    """
    name = Path(path).name
    dot_index = name.rfind(".")
    if dot_index == -1:
        return ""
    return name[dot_index:]


def get_content_type(path: Union[str, Path]) -> str:
    """
    Look up the Content-Type for a file.

    Examples:
        >>> get_content_type("/srv/public/index.html")
        'text/html'
        >>> get_content_type("notes.txt")
        'application/octet-stream'
    """
    return CONTENT_TYPES.get(get_file_extension(path), DEFAULT_CONTENT_TYPE)
