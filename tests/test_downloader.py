"""Archive download: URL construction, success path and failure cleanup."""

import pytest
import requests

from jenkins_updater.core.exceptions import FetchFailure
from jenkins_updater.host.downloader import ArchiveDownloader

from conftest import FakeResponse, FakeSession


def test_url_for_joins_base_and_filename():
    downloader = ArchiveDownloader("http://pkg.jenkins-ci.org/debian/binary", session=FakeSession())
    assert (
        downloader.url_for("jenkins_1.652_all.deb")
        == "http://pkg.jenkins-ci.org/debian/binary/jenkins_1.652_all.deb"
    )


def test_fetch_writes_archive(tmp_path):
    session = FakeSession(FakeResponse(body=b"deb-bytes"))
    downloader = ArchiveDownloader("http://example.invalid/binary/", session=session)

    archive = downloader.fetch("jenkins_1.652_all.deb", tmp_path / "downloads")

    assert archive == tmp_path / "downloads" / "jenkins_1.652_all.deb"
    assert archive.read_bytes() == b"deb-bytes"
    assert not (tmp_path / "downloads" / "jenkins_1.652_all.deb.part").exists()
    assert session.requested == ["http://example.invalid/binary/jenkins_1.652_all.deb"]


def test_http_error_raises_and_leaves_nothing(tmp_path):
    session = FakeSession(FakeResponse(status_code=404))
    downloader = ArchiveDownloader("http://example.invalid/binary/", session=session)

    with pytest.raises(FetchFailure):
        downloader.fetch("jenkins_0.1_all.deb", tmp_path)
    assert list(tmp_path.iterdir()) == []


def test_network_error_raises(tmp_path):
    session = FakeSession(error=requests.ConnectionError("Name or service not known"))
    downloader = ArchiveDownloader("http://example.invalid/binary/", session=session)

    with pytest.raises(FetchFailure) as excinfo:
        downloader.fetch("jenkins_1.652_all.deb", tmp_path)
    assert "http://example.invalid/binary/" in excinfo.value.message
