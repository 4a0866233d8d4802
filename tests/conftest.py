"""Shared fixtures: small EPUB archives built in memory."""

import io
import zipfile
from pathlib import Path

import pytest

CONTAINER_XML = """<?xml version="1.0" encoding="UTF-8"?>
<container version="1.0" xmlns="urn:oasis:names:tc:opendocument:xmlns:container">
  <rootfiles>
    <rootfile full-path="{rootfile}" media-type="application/oebps-package+xml"/>
  </rootfiles>
</container>
"""

PACKAGE_OPF = """<?xml version="1.0" encoding="UTF-8"?>
<package xmlns="http://www.idpf.org/2007/opf" version="3.0" unique-identifier="uid">
  <metadata xmlns:dc="http://purl.org/dc/elements/1.1/">
    <dc:title>Test Book</dc:title>
    <dc:creator>Ada Author</dc:creator>
    <dc:creator>Bo Writer</dc:creator>
    <dc:language>en</dc:language>
    <dc:identifier id="uid">urn:uuid:1234</dc:identifier>
    <dc:publisher>Example Press</dc:publisher>
    <dc:date>2020-01-01</dc:date>
    <dc:subject>Testing</dc:subject>
    <dc:description>A tiny book.</dc:description>
    <dc:rights>Public domain</dc:rights>
  </metadata>
  <manifest>
    <item id="c1" href="c1.xhtml" media-type="application/xhtml+xml"/>
    <item id="c2" href="text/c2.xhtml" media-type="application/xhtml+xml"/>
    <item id="css" href="style.css" media-type="text/css"/>
  </manifest>
  <spine>
    <itemref idref="c1"/>
    <itemref idref="c2"/>
  </spine>
</package>
"""

CHAPTER_ONE = b"""<?xml version="1.0" encoding="UTF-8"?>
<html xmlns="http://www.w3.org/1999/xhtml">
<head><title>One</title></head>
<body><h1>Chapter One</h1><p>Hello world</p></body>
</html>
"""

CHAPTER_TWO = b"""<html><body><p>Second chapter text here.</p><!-- note --></body></html>"""


def build_epub(files: dict[str, str | bytes]) -> bytes:
    """Zip ``files`` (entry name -> content) into an in-memory archive."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as zf:
        zf.writestr("mimetype", "application/epub+zip", zipfile.ZIP_STORED)
        for name, content in files.items():
            zf.writestr(name, content)
    return buffer.getvalue()


def mark_encrypted(data: bytes, name: str) -> bytes:
    """Set the encryption flag on the central directory record of ``name``."""
    buffer = bytearray(data)
    start = 0
    while True:
        pos = buffer.find(b"PK\x01\x02", start)
        if pos < 0:
            raise KeyError(name)
        name_len = int.from_bytes(buffer[pos + 28 : pos + 30], "little")
        if buffer[pos + 46 : pos + 46 + name_len] == name.encode():
            buffer[pos + 8] |= 0x01
            return bytes(buffer)
        start = pos + 4


def book_files(overrides: dict[str, str | bytes | None] | None = None) -> dict[str, str | bytes]:
    """Files of the sample book, with entries replaced or removed (None)."""
    files: dict[str, str | bytes] = {
        "META-INF/container.xml": CONTAINER_XML.format(rootfile="OEBPS/content.opf"),
        "OEBPS/content.opf": PACKAGE_OPF,
        "OEBPS/c1.xhtml": CHAPTER_ONE,
        "OEBPS/text/c2.xhtml": CHAPTER_TWO,
        "OEBPS/style.css": "p { margin: 0; }",
    }
    for name, content in (overrides or {}).items():
        if content is None:
            files.pop(name, None)
        else:
            files[name] = content
    return files


@pytest.fixture
def epub_bytes() -> bytes:
    return build_epub(book_files())


@pytest.fixture
def epub_path(tmp_path: Path, epub_bytes: bytes) -> Path:
    path = tmp_path / "Test Book.epub"
    path.write_bytes(epub_bytes)
    return path
