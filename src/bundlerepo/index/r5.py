"""
bundlerepo.index.r5 - R5 Repository Index
============================================

The built-in generator, registered under type key ``"R5"``. It writes the
OSGi R5 repository XML format, gzip-compressed into ``index.xml.gz`` (or as
plain indented XML into ``index.xml`` when ``pretty`` is set):

    <repository xmlns="http://www.osgi.org/xmlns/repository/v1.0.0"
                name="local" increment="1700000000000">
      <resource>
        <capability namespace="osgi.identity">
          <attribute name="osgi.identity" value="org.example.api"/>
          <attribute name="type" value="osgi.bundle"/>
          <attribute name="version" type="Version" value="2.6.1"/>
        </capability>
        <capability namespace="osgi.content">
          <attribute name="osgi.content" value="<sha-1 hex>"/>
          <attribute name="url" value="org.example.api/org.example.api-2.6.1.jar"/>
          <attribute name="size" type="Long" value="1234"/>
          <attribute name="mime" value="application/vnd.osgi.bundle"/>
        </capability>
        <capability namespace="bundlerepo.manifest">
          <attribute name="Export-Package" value="org.example.api"/>
        </capability>
      </resource>
    </repository>

Artifact URLs are relative to the directory holding the index, so an index
and its artifacts can be moved together.
"""

from __future__ import annotations

import gzip
import io
import time
import xml.etree.ElementTree as ET
import zlib
from collections.abc import Sequence
from pathlib import Path
from typing import BinaryIO, Optional

import structlog

from bundlerepo.core.digest import sha1_file
from bundlerepo.core.exceptions import GeneratorError, IndexFormatError
from bundlerepo.core.models import ArtifactIdentity, ArtifactRecord
from bundlerepo.core.uris import path_to_uri, resolve_uri
from bundlerepo.index.generator import ContentIndexGenerator, GenerationContext


logger = structlog.get_logger()

R5_NAMESPACE = "http://www.osgi.org/xmlns/repository/v1.0.0"
IDENTITY_NAMESPACE = "osgi.identity"
CONTENT_NAMESPACE = "osgi.content"
MANIFEST_NAMESPACE = "bundlerepo.manifest"
BUNDLE_MIME_TYPE = "application/vnd.osgi.bundle"

_GZIP_MAGIC = b"\x1f\x8b"
_NS = {"r": R5_NAMESPACE}

ET.register_namespace("", R5_NAMESPACE)


def _tag(name: str) -> str:
    return f"{{{R5_NAMESPACE}}}{name}"


class R5IndexGenerator(ContentIndexGenerator):
    """Generates and parses R5 XML repository indexes."""

    def __init__(self) -> None:
        self._logger = logger.bind(component="r5_index_generator")

    @property
    def name(self) -> str:
        return "R5"

    def index_name(self, pretty: bool = False) -> str:
        return "index.xml" if pretty else "index.xml.gz"

    # -------------------------------------------------------------------------
    # Generation
    # -------------------------------------------------------------------------
    def generate(
        self,
        files: Sequence[Path],
        output: BinaryIO,
        context: GenerationContext,
    ) -> None:
        repository = ET.Element(
            _tag("repository"),
            {
                "name": context.repository_name,
                "increment": str(int(time.time() * 1000)),
            },
        )
        for path in files:
            resource = self._resource(path, context)
            if resource is not None:
                repository.append(resource)

        tree = ET.ElementTree(repository)
        if context.pretty:
            ET.indent(tree)

        buffer = io.BytesIO()
        tree.write(buffer, encoding="utf-8", xml_declaration=True)
        data = buffer.getvalue()

        if context.pretty:
            output.write(data)
        else:
            with gzip.GzipFile(fileobj=output, mode="wb", mtime=0) as compressed:
                compressed.write(data)

    def _resource(self, path: Path, context: GenerationContext) -> Optional[ET.Element]:
        identity = context.resolver.resolve(path)
        if identity is None:
            # Not a recognizable artifact; it stays invisible to readers
            self._logger.warning("artifact_not_indexed", path=str(path))
            return None

        try:
            digest = sha1_file(path)
            size = path.stat().st_size
        except OSError as e:
            raise GeneratorError(
                message=f"Cannot read {path}: {e}",
                generator=self.name,
                details={"path": str(path)},
            ) from e

        resource = ET.Element(_tag("resource"))
        _capability(
            resource,
            IDENTITY_NAMESPACE,
            [
                (IDENTITY_NAMESPACE, identity.symbolic_name, None),
                ("type", "osgi.bundle", None),
                ("version", str(identity.version), "Version"),
            ],
        )
        _capability(
            resource,
            CONTENT_NAMESPACE,
            [
                (CONTENT_NAMESPACE, digest.hex(), None),
                ("url", _relative_url(path, context.root), None),
                ("size", str(size), "Long"),
                ("mime", BUNDLE_MIME_TYPE, None),
            ],
        )
        properties = context.resolver.describe(path)
        if properties:
            _capability(
                resource,
                MANIFEST_NAMESPACE,
                [(name, value, None) for name, value in sorted(properties.items())],
            )
        return resource

    # -------------------------------------------------------------------------
    # Parsing
    # -------------------------------------------------------------------------
    def can_parse(self, head: bytes) -> bool:
        if head.startswith(_GZIP_MAGIC):
            try:
                head = zlib.decompressobj(16 + zlib.MAX_WBITS).decompress(head)
            except zlib.error:
                return False
        return b"<repository" in head or b":repository" in head

    def parse(self, stream: BinaryIO, base_uri: str) -> list[ArtifactRecord]:
        data = stream.read()
        if data.startswith(_GZIP_MAGIC):
            try:
                data = gzip.decompress(data)
            except (OSError, EOFError) as e:
                raise IndexFormatError(
                    message=f"Corrupt compressed index: {e}",
                    location=base_uri,
                ) from e

        try:
            repository = ET.fromstring(data)
        except ET.ParseError as e:
            raise IndexFormatError(
                message=f"Malformed index XML: {e}",
                location=base_uri,
            ) from e

        if repository.tag != _tag("repository"):
            raise IndexFormatError(
                message=f"Not an R5 repository index (root element {repository.tag!r})",
                location=base_uri,
            )

        records = []
        for resource in repository.findall("r:resource", _NS):
            record = self._record(resource, base_uri)
            if record is not None:
                records.append(record)
        return records

    def _record(self, resource: ET.Element, base_uri: str) -> Optional[ArtifactRecord]:
        capabilities: dict[str, dict[str, str]] = {}
        for capability in resource.findall("r:capability", _NS):
            attributes = capabilities.setdefault(capability.get("namespace", ""), {})
            for attribute in capability.findall("r:attribute", _NS):
                attributes[attribute.get("name", "")] = attribute.get("value", "")

        identity = capabilities.get(IDENTITY_NAMESPACE)
        content = capabilities.get(CONTENT_NAMESPACE)
        if identity is None or content is None:
            # Resources without identity or content (e.g. fragments of other
            # tools' indexes) cannot be resolved to a file
            return None

        try:
            return ArtifactRecord(
                identity=ArtifactIdentity(
                    symbolic_name=identity[IDENTITY_NAMESPACE],
                    version=identity.get("version", "0.0.0"),
                ),
                digest=bytes.fromhex(content[CONTENT_NAMESPACE]),
                location=resolve_uri(base_uri, content["url"]),
                size=int(content.get("size", "0")),
                properties=capabilities.get(MANIFEST_NAMESPACE, {}),
            )
        except (KeyError, ValueError) as e:
            raise IndexFormatError(
                message=f"Invalid resource in index: {e}",
                location=base_uri,
            ) from e


def _capability(
    resource: ET.Element,
    namespace: str,
    attributes: list[tuple[str, str, Optional[str]]],
) -> None:
    capability = ET.SubElement(resource, _tag("capability"), {"namespace": namespace})
    for name, value, value_type in attributes:
        attrib = {"name": name, "value": value}
        if value_type is not None:
            attrib["type"] = value_type
        ET.SubElement(capability, _tag("attribute"), attrib)


def _relative_url(path: Path, root: Path) -> str:
    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        return path_to_uri(path)
