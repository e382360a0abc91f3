import semver

from dungeonrs.version import version


def test_version_matches_workspace_version():
    assert version() == semver.Version.parse("0.0.1")


def test_version_is_cached():
    first = version()
    second = version()
    assert second is first
    assert str(second) == "0.0.1"


def test_version_round_trips_through_string():
    assert semver.Version.parse(str(version())) == version()


def test_version_has_no_prerelease():
    assert version().prerelease is None
    assert version().build is None