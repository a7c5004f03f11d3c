import asyncio
import logging
import re
from pathlib import Path

from conftest import write_project
from symwizard.core import locator


def test_locate_recursive_and_skips_node_modules(tmp_path):
    app = write_project(tmp_path, "platforms/ios/App.xcodeproj/project.pbxproj", "{}")
    write_project(tmp_path, "node_modules/pkg/Lib.xcodeproj/project.pbxproj", "{}")
    write_project(tmp_path, "platforms/ios/App.xcodeproj/other.txt", "")

    found = asyncio.run(locator.locate("**/*.xcodeproj/project.pbxproj", [tmp_path]))
    assert found == {app}


def test_locate_with_platform_root(tmp_path):
    app = write_project(tmp_path, "platforms/ios/App.xcodeproj/project.pbxproj", "{}")
    write_project(tmp_path, "elsewhere/ios/Other.xcodeproj/project.pbxproj", "{}")

    found = asyncio.run(locator.locate("ios/*.xcodeproj/project.pbxproj", [tmp_path / "platforms"]))
    assert found == {app}


def test_locate_no_match_is_empty(tmp_path):
    assert asyncio.run(locator.locate("**/*.pbxproj", [tmp_path])) == set()
    assert asyncio.run(locator.locate("**/*.pbxproj", [tmp_path / "missing"])) == set()


def test_locate_skips_symlinks(tmp_path):
    real = write_project(tmp_path, "a/App.xcodeproj/project.pbxproj", "{}")
    link_dir = tmp_path / "b" / "Link.xcodeproj"
    link_dir.mkdir(parents=True)
    (link_dir / "project.pbxproj").symlink_to(real)

    found = asyncio.run(locator.locate("**/*.xcodeproj/project.pbxproj", [tmp_path]))
    assert found == {real}


def test_content_matches(tmp_path):
    write_project(tmp_path, "a/App.xcodeproj/project.pbxproj", "{ script = \"SENTRY-CLI upload\"; }")
    write_project(tmp_path, "b/App.xcodeproj/project.pbxproj", "{ }")
    pattern = "**/*.xcodeproj/project.pbxproj"

    assert asyncio.run(locator.content_matches(pattern, re.compile("sentry-cli", re.I), [tmp_path]))
    assert not asyncio.run(locator.content_matches(pattern, re.compile("fastlane"), [tmp_path]))


def test_content_matches_continues_after_read_error(tmp_path, monkeypatch, caplog):
    bad = write_project(tmp_path, "a/App.xcodeproj/project.pbxproj", "sentry-cli")
    write_project(tmp_path, "b/App.xcodeproj/project.pbxproj", "sentry-cli")
    original = Path.read_text

    def flaky(self, *args, **kwargs):
        if self == bad:
            raise PermissionError(13, "Permission denied")
        return original(self, *args, **kwargs)

    monkeypatch.setattr(Path, "read_text", flaky)
    with caplog.at_level(logging.WARNING, logger="symwizard.locator"):
        matched = asyncio.run(locator.content_matches(
            "**/*.xcodeproj/project.pbxproj", re.compile("sentry-cli"), [tmp_path]
        ))

    assert matched
    assert "Permission denied" in caplog.text


def test_content_matches_does_not_modify(tmp_path):
    path = write_project(tmp_path, "App.xcodeproj/project.pbxproj", "{ }")
    before = path.stat().st_mtime_ns
    asyncio.run(locator.content_matches("**/*.xcodeproj/project.pbxproj", re.compile("x"), [tmp_path]))
    assert path.stat().st_mtime_ns == before
