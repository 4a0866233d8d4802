"""Container and package document parsing.

Both documents are read in a single SAX pass through defusedxml, with
namespace processing off: element names arrive exactly as written, so
``dc:title`` and ``title`` are both recognised by their local part.
"""

import logging
import posixpath
from xml.sax import SAXException
from xml.sax.handler import ContentHandler
from xml.sax.xmlreader import AttributesImpl

import defusedxml.sax
from defusedxml import DefusedXmlException

from epub_extract.exceptions import InvalidPackageError, XmlError
from epub_extract.models.epub import (
    ContainerDescriptor,
    PackageDocument,
    ResolvedEntry,
)

log = logging.getLogger(__name__)

# Dublin Core elements set once (first non-empty value wins)
SINGLE_VALUE_FIELDS = {"title", "description", "publisher", "date", "rights"}

# Dublin Core elements appended in document order
MULTI_VALUE_FIELDS = {
    "creator": "creators",
    "language": "languages",
    "subject": "subjects",
    "identifier": "identifiers",
    "contributor": "contributors",
}


def _local_name(name: str) -> str:
    """Strip an optional ``prefix:`` and lowercase."""
    return name.rsplit(":", 1)[-1].lower()


def _run_sax(data: bytes, handler: ContentHandler, document: str) -> None:
    try:
        defusedxml.sax.parseString(bytes(data), handler)
    except (SAXException, DefusedXmlException) as exc:
        raise XmlError(f"Malformed {document}: {exc}") from exc


class _ContainerHandler(ContentHandler):
    """Remember the attributes of the first ``rootfile`` element."""

    def __init__(self) -> None:
        super().__init__()
        self.found = False
        self.full_path: str | None = None

    def startElement(self, name: str, attrs: AttributesImpl) -> None:
        if self.found or _local_name(name) != "rootfile":
            return
        self.found = True
        self.full_path = attrs.get("full-path")


class _PackageHandler(ContentHandler):
    """Track metadata / manifest / spine scope and fill a PackageDocument."""

    def __init__(self) -> None:
        super().__init__()
        self.package = PackageDocument()
        self._in_metadata = False
        self._in_manifest = False
        self._in_spine = False
        self._current: str | None = None
        self._text: list[str] = []

    def startElement(self, name: str, attrs: AttributesImpl) -> None:
        self._flush_text()
        local = _local_name(name)
        self._current = local

        if local == "metadata":
            self._in_metadata = True
        elif local == "manifest":
            self._in_manifest = True
        elif local == "spine":
            self._in_spine = True
        elif local == "item" and self._in_manifest:
            item_id = attrs.get("id")
            href = attrs.get("href")
            if item_id and href:
                self.package.manifest[item_id] = href
        elif local == "itemref" and self._in_spine:
            idref = attrs.get("idref")
            if idref:
                self.package.spine.append(idref)

    def endElement(self, name: str) -> None:
        self._flush_text()
        local = _local_name(name)
        if local == "metadata":
            self._in_metadata = False
        elif local == "manifest":
            self._in_manifest = False
        elif local == "spine":
            self._in_spine = False
        self._current = None

    def characters(self, content: str) -> None:
        # SAX may split one text node across several calls
        self._text.append(content)

    def _flush_text(self) -> None:
        if not self._text:
            return
        text = "".join(self._text).strip()
        self._text = []
        if not text or not self._in_metadata or self._current is None:
            return

        if self._current in SINGLE_VALUE_FIELDS:
            if getattr(self.package, self._current) is None:
                setattr(self.package, self._current, text)
        elif self._current in MULTI_VALUE_FIELDS:
            getattr(self.package, MULTI_VALUE_FIELDS[self._current]).append(text)


def parse_container(data: bytes) -> ContainerDescriptor:
    """Find the package document path in ``META-INF/container.xml``.

    Only the first ``rootfile`` element is honoured.

    Raises:
        XmlError: The container is not well-formed XML
        InvalidPackageError: No rootfile element, or it has no full-path
    """
    handler = _ContainerHandler()
    _run_sax(data, handler, "container.xml")

    if not handler.found:
        raise InvalidPackageError("No rootfile found in container.xml")
    if not handler.full_path:
        raise InvalidPackageError("Rootfile in container.xml has no full-path")
    return ContainerDescriptor(rootfile_path=handler.full_path)


def parse_package(data: bytes) -> PackageDocument:
    """Parse the package document into metadata, manifest and spine.

    Absent optional fields are left empty; only malformed XML is an error.
    """
    handler = _PackageHandler()
    _run_sax(data, handler, "package document")
    package = handler.package
    log.debug(
        "Package parsed: %d manifest items, %d spine items",
        len(package.manifest),
        len(package.spine),
    )
    return package


def resolve_href(rootfile_path: str, href: str) -> str:
    """Join a manifest href onto the package document's directory and normalize it.

    ``.`` and ``..`` segments are collapsed with ``posixpath.normpath``, so
    ``OEBPS/./c1.xhtml`` resolves to ``OEBPS/c1.xhtml``. The href is not
    percent-decoded.
    """
    base = posixpath.dirname(rootfile_path)
    return posixpath.normpath(posixpath.join(base, href))


def resolve_spine(rootfile_path: str, package: PackageDocument) -> list[ResolvedEntry]:
    """Map spine ids to absolute archive paths, in spine order.

    Spine ids missing from the manifest are dropped.
    """
    entries = []
    for item_id in package.spine:
        href = package.manifest.get(item_id)
        if href is None:
            log.debug("Spine item '%s' not found in manifest", item_id)
            continue
        entries.append(ResolvedEntry(id=item_id, path=resolve_href(rootfile_path, href)))
    return entries
