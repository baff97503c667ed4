"""Version token validation, equality comparison and archive names."""

import pytest

from jenkins_updater.core.enums import VersionAction
from jenkins_updater.core.exceptions import BadArguments, InvalidVersionError
from jenkins_updater.validation.version_manager import (
    archive_filename,
    compare_versions,
    validate_version_token,
)


@pytest.mark.parametrize("version", ["1.652", "2.426.3", "2.60.3+deb1~bpo", "2.0-1"])
def test_plain_versions_are_accepted(version):
    assert validate_version_token(version) == version


@pytest.mark.parametrize(
    "version",
    [
        "",
        "   ",
        None,
        "../../etc/passwd",
        "1.652/../x",
        "1:2.0",
        "2.0;rm -rf /",
        "2.0 3",
        "v2.0",
        "2.0?x=1",
        "1.652\n",
        "1.652\n../x",
        "1" * 129,
    ],
)
def test_unsafe_versions_are_rejected(version):
    with pytest.raises(InvalidVersionError):
        validate_version_token(version)


def test_invalid_version_is_a_bad_argument():
    assert issubclass(InvalidVersionError, BadArguments)


def test_compare_versions():
    assert compare_versions("2.1", "2.1") is VersionAction.SAME_VERSION
    assert compare_versions("2.1", "2.2") is VersionAction.VERSION_CHANGE
    # Opaque strings, no ordering
    assert compare_versions("2.10", "2.9") is VersionAction.VERSION_CHANGE


@pytest.mark.parametrize("running,candidate", [(None, "2.1"), ("2.1", None), ("", "")])
def test_unknown_versions_are_undecidable(running, candidate):
    assert compare_versions(running, candidate) is VersionAction.UNKNOWN


def test_archive_filename():
    assert archive_filename("jenkins", "1.652") == "jenkins_1.652_all.deb"


def test_archive_filename_validates_version():
    with pytest.raises(InvalidVersionError):
        archive_filename("jenkins", "../1.652")
