"""Local copies of the region calendars and their freshness check.

Network access is injected: ``probe`` returns the remote
:class:`DocumentVersion` and ``fetch`` returns the document bytes with their
version. Without them the source only serves what is already on disk.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Callable, Optional, Protocol, Tuple, runtime_checkable

from farmaguardia.fs.paths import atomic_write_bytes, atomic_write_text, document_stem, documents_dir
from farmaguardia.model.regions import Region

LOGGER = logging.getLogger(__name__)


class DocumentUnavailableError(RuntimeError):
    """Raised when no usable copy of a region's calendar exists."""


@dataclass(frozen=True, slots=True)
class DocumentVersion:
    last_modified: Optional[str] = None
    content_length: Optional[int] = None
    etag: Optional[str] = None

    def to_json(self) -> str:
        return json.dumps(asdict(self), indent=2, sort_keys=True)

    @classmethod
    def from_json(cls, text: str) -> "DocumentVersion":
        data = json.loads(text)
        length = data.get("content_length")
        return cls(
            last_modified=data.get("last_modified") or None,
            content_length=int(length) if length is not None else None,
            etag=data.get("etag") or None,
        )


def same_version(cached: DocumentVersion, remote: DocumentVersion) -> bool:
    """Compare by Last-Modified, then Content-Length, then ETag.

    The first field known on both sides decides; with nothing comparable the
    cached copy is kept.
    """

    for field_name in ("last_modified", "content_length", "etag"):
        ours = getattr(cached, field_name)
        theirs = getattr(remote, field_name)
        if ours is not None and theirs is not None:
            return ours == theirs
    return True


Probe = Callable[[Region], DocumentVersion]
Fetch = Callable[[Region], Tuple[bytes, DocumentVersion]]


@runtime_checkable
class DocumentSource(Protocol):
    def has_cached_file(self, region: Region) -> bool:
        ...

    def effective_document(self, region: Region) -> Path:
        ...

    def is_up_to_date(self, region: Region) -> bool:
        ...


class LocalDocumentSource:
    """``<region-id>.pdf`` files plus a ``.json`` sidecar holding their version."""

    def __init__(
        self,
        directory: Optional[Path] = None,
        *,
        probe: Optional[Probe] = None,
        fetch: Optional[Fetch] = None,
    ) -> None:
        self.directory = Path(directory) if directory is not None else documents_dir()
        self._probe = probe
        self._fetch = fetch

    def path_for(self, region: Region) -> Path:
        return self.directory / f"{document_stem(region.id)}.pdf"

    def _sidecar(self, region: Region) -> Path:
        return self.path_for(region).with_suffix(".json")

    def has_cached_file(self, region: Region) -> bool:
        path = self.path_for(region)
        return path.is_file() and path.stat().st_size > 0

    def cached_version(self, region: Region) -> Optional[DocumentVersion]:
        sidecar = self._sidecar(region)
        try:
            return DocumentVersion.from_json(sidecar.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return None
        except (OSError, ValueError, TypeError, AttributeError):
            LOGGER.warning("Ignoring unreadable version sidecar %s", sidecar, exc_info=True)
            return None

    def store(self, region: Region, payload: bytes, version: DocumentVersion) -> Path:
        path = atomic_write_bytes(self.path_for(region), payload)
        atomic_write_text(self._sidecar(region), version.to_json())
        LOGGER.info("[%s] stored %s bytes at %s", region.id, len(payload), path)
        return path

    def is_up_to_date(self, region: Region) -> bool:
        if not self.has_cached_file(region):
            return False
        if self._probe is None:
            return True
        cached = self.cached_version(region)
        if cached is None:
            return False
        try:
            remote = self._probe(region)
        except Exception:  # probe is network-bound; any failure keeps the local copy
            LOGGER.warning("[%s] version probe failed; keeping cached copy", region.id, exc_info=True)
            return True
        fresh = same_version(cached, remote)
        LOGGER.debug("[%s] cached=%s remote=%s fresh=%s", region.id, cached, remote, fresh)
        return fresh

    def effective_document(self, region: Region) -> Path:
        """Return a path to the best available copy, refreshing it if stale."""

        cached = self.has_cached_file(region)
        if cached and self.is_up_to_date(region):
            return self.path_for(region)

        if self._fetch is not None:
            try:
                payload, version = self._fetch(region)
            except Exception as exc:  # fetch is network-bound
                LOGGER.exception("[%s] document download failed", region.id)
                if cached:
                    return self.path_for(region)
                raise DocumentUnavailableError(f"No copy of the {region.id} calendar") from exc
            if payload:
                return self.store(region, payload, version)
            LOGGER.warning("[%s] download returned an empty document", region.id)

        if cached:
            LOGGER.info("[%s] serving stale cached copy", region.id)
            return self.path_for(region)
        raise DocumentUnavailableError(f"No copy of the {region.id} calendar")


__all__ = [
    "DocumentUnavailableError",
    "DocumentVersion",
    "same_version",
    "DocumentSource",
    "LocalDocumentSource",
]
