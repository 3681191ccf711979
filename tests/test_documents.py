from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from farmaguardia.fs.paths import document_stem  # noqa: E402
from farmaguardia.model.regions import CUELLAR  # noqa: E402
from farmaguardia.service.documents import (  # noqa: E402
    DocumentSource,
    DocumentUnavailableError,
    DocumentVersion,
    LocalDocumentSource,
    same_version,
)

V1 = DocumentVersion(last_modified="Wed, 01 Jan 2025 10:00:00 GMT", content_length=100, etag='"a"')
V2 = DocumentVersion(last_modified="Thu, 02 Jan 2025 10:00:00 GMT", content_length=100, etag='"b"')


class FakeRemote:
    def __init__(self, version=V1, payload=b"%PDF-1.7 v1", fail=False):
        self.version = version
        self.payload = payload
        self.fail = fail
        self.fetches = 0
        self.probes = 0

    def probe(self, region):
        self.probes += 1
        if self.fail:
            raise OSError("offline")
        return self.version

    def fetch(self, region):
        self.fetches += 1
        if self.fail:
            raise OSError("offline")
        return self.payload, self.version


@pytest.mark.parametrize(
    "cached, remote, expected",
    [
        (V1, V1, True),
        (V1, V2, False),
        # Last-Modified decides before the other fields are looked at.
        (V1, DocumentVersion(last_modified=V1.last_modified, content_length=5), True),
        (DocumentVersion(content_length=100), DocumentVersion(last_modified="x", content_length=101), False),
        (DocumentVersion(etag='"a"'), DocumentVersion(etag='"a"'), True),
        (DocumentVersion(), V2, True),
    ],
)
def test_same_version(cached, remote, expected):
    assert same_version(cached, remote) is expected


def test_version_sidecar_round_trip():
    assert DocumentVersion.from_json(V1.to_json()) == V1


def test_document_stem_is_filesystem_safe():
    assert document_stem("fuentidueña") == "fuentidue_a"
    assert document_stem("../..") == "region"


def test_download_on_first_use(tmp_path):
    remote = FakeRemote()
    source = LocalDocumentSource(tmp_path, probe=remote.probe, fetch=remote.fetch)
    assert isinstance(source, DocumentSource)
    assert not source.has_cached_file(CUELLAR)

    path = source.effective_document(CUELLAR)
    assert path == tmp_path / "cuellar.pdf"
    assert path.read_bytes() == b"%PDF-1.7 v1"
    assert source.cached_version(CUELLAR) == V1
    assert source.is_up_to_date(CUELLAR)


def test_fresh_copy_is_not_downloaded_again(tmp_path):
    remote = FakeRemote()
    source = LocalDocumentSource(tmp_path, probe=remote.probe, fetch=remote.fetch)
    source.effective_document(CUELLAR)
    source.effective_document(CUELLAR)
    assert remote.fetches == 1


def test_stale_copy_is_replaced(tmp_path):
    remote = FakeRemote()
    source = LocalDocumentSource(tmp_path, probe=remote.probe, fetch=remote.fetch)
    source.effective_document(CUELLAR)

    remote.version = V2
    remote.payload = b"%PDF-1.7 v2"
    assert not source.is_up_to_date(CUELLAR)
    assert source.effective_document(CUELLAR).read_bytes() == b"%PDF-1.7 v2"
    assert source.cached_version(CUELLAR) == V2


def test_offline_keeps_cached_copy(tmp_path):
    remote = FakeRemote()
    source = LocalDocumentSource(tmp_path, probe=remote.probe, fetch=remote.fetch)
    source.effective_document(CUELLAR)

    remote.fail = True
    assert source.is_up_to_date(CUELLAR)
    assert source.effective_document(CUELLAR).read_bytes() == b"%PDF-1.7 v1"


def test_missing_sidecar_counts_as_stale(tmp_path):
    (tmp_path / "cuellar.pdf").write_bytes(b"%PDF old")
    remote = FakeRemote(fail=True)
    source = LocalDocumentSource(tmp_path, probe=remote.probe, fetch=remote.fetch)
    assert not source.is_up_to_date(CUELLAR)
    # Download fails, so the stale copy is still served.
    assert source.effective_document(CUELLAR).read_bytes() == b"%PDF old"


def test_no_copy_and_no_network(tmp_path):
    with pytest.raises(DocumentUnavailableError):
        LocalDocumentSource(tmp_path).effective_document(CUELLAR)
    remote = FakeRemote(fail=True)
    with pytest.raises(DocumentUnavailableError):
        LocalDocumentSource(tmp_path, fetch=remote.fetch).effective_document(CUELLAR)


def test_empty_file_is_not_a_cached_copy(tmp_path):
    (tmp_path / "cuellar.pdf").write_bytes(b"")
    source = LocalDocumentSource(tmp_path)
    assert not source.has_cached_file(CUELLAR)
    assert not source.is_up_to_date(CUELLAR)


def test_empty_download_is_not_stored(tmp_path):
    remote = FakeRemote(payload=b"")
    source = LocalDocumentSource(tmp_path, fetch=remote.fetch)
    with pytest.raises(DocumentUnavailableError):
        source.effective_document(CUELLAR)
    assert not (tmp_path / "cuellar.pdf").exists()


def test_without_probe_a_local_copy_is_trusted(tmp_path):
    (tmp_path / "cuellar.pdf").write_bytes(b"%PDF local")
    assert LocalDocumentSource(tmp_path).is_up_to_date(CUELLAR)
