import asyncio
import gc
import os

import pytest

from conftest import write_project
from symwizard.core.engine import Operation, PatchEngine, summarize
from symwizard.core.errors import LocateError, ParseError, WriteError


def test_apply_writes_once_then_noops(tmp_path, clean_text):
    path = write_project(tmp_path, "App.xcodeproj/project.pbxproj", clean_text)
    engine = PatchEngine()

    first = asyncio.run(engine.patch(path, Operation.APPLY))
    assert first.changed and first.written
    assert first.status == "PATCHED"
    patched = path.read_text(encoding="utf-8")
    assert "sentry-cli upload-dsym" in patched

    second = asyncio.run(engine.patch(path, Operation.APPLY))
    assert not second.changed and not second.written
    assert second.status == "UNCHANGED"
    assert path.read_text(encoding="utf-8") == patched


def test_revert_restores_file(tmp_path, clean_text):
    path = write_project(tmp_path, "App.xcodeproj/project.pbxproj", clean_text)
    engine = PatchEngine()

    asyncio.run(engine.patch(path, Operation.APPLY))
    result = asyncio.run(engine.patch(path, Operation.REVERT))

    assert result.written
    assert path.read_bytes() == clean_text.encode("utf-8")
    assert not list(tmp_path.rglob("*.symwizard.tmp"))


def test_dry_run_does_not_touch_disk(tmp_path, clean_text):
    path = write_project(tmp_path, "App.xcodeproj/project.pbxproj", clean_text)
    result = asyncio.run(PatchEngine(dry_run=True).patch(path, Operation.APPLY))

    assert result.changed and not result.written
    assert result.status == "PREVIEW"
    assert result.original == clean_text
    assert "upload-dsym" in result.content
    assert path.read_text(encoding="utf-8") == clean_text


def test_crlf_file_keeps_line_endings(tmp_path, clean_text):
    path = tmp_path / "App.xcodeproj" / "project.pbxproj"
    path.parent.mkdir()
    path.write_bytes(clean_text.replace("\n", "\r\n").encode("utf-8"))

    asyncio.run(PatchEngine().patch(path, Operation.APPLY))
    asyncio.run(PatchEngine().patch(path, Operation.REVERT))

    assert b"\r\n" in path.read_bytes()


def test_malformed_file_raises_parse_error_with_path(tmp_path):
    path = write_project(tmp_path, "Broken.xcodeproj/project.pbxproj", "{ objects = { A = ")
    with pytest.raises(ParseError) as info:
        asyncio.run(PatchEngine().patch(path, Operation.APPLY))
    assert info.value.path == str(path)


def test_binary_file_raises_parse_error(tmp_path):
    path = tmp_path / "project.pbxproj"
    path.write_bytes(b"\xff\xfe\x00garbage")
    with pytest.raises(ParseError):
        asyncio.run(PatchEngine().patch(path, Operation.APPLY))


def test_missing_file_raises_locate_error(tmp_path):
    with pytest.raises(LocateError):
        asyncio.run(PatchEngine().patch(tmp_path / "nope.pbxproj", Operation.APPLY))


def test_write_failure_raises_write_error(tmp_path, clean_text, monkeypatch):
    path = write_project(tmp_path, "App.xcodeproj/project.pbxproj", clean_text)

    def refuse(src, dst):
        raise PermissionError(13, "Permission denied")

    monkeypatch.setattr(os, "replace", refuse)
    with pytest.raises(WriteError):
        asyncio.run(PatchEngine().patch(path, Operation.APPLY))
    assert path.read_text(encoding="utf-8") == clean_text
    assert not list(tmp_path.rglob("*.symwizard.tmp"))


def test_patch_matching_files_isolates_failures(tmp_path, clean_text):
    good = write_project(tmp_path, "a/Good.xcodeproj/project.pbxproj", clean_text)
    write_project(tmp_path, "b/Bad.xcodeproj/project.pbxproj", "not a project")

    results = asyncio.run(PatchEngine().patch_matching_files(
        "**/*.xcodeproj/project.pbxproj", Operation.APPLY, roots=[tmp_path]
    ))

    by_name = {r.path.parent.name: r for r in results}
    assert by_name["Good.xcodeproj"].written
    assert isinstance(by_name["Bad.xcodeproj"].error, ParseError)
    assert "upload-dsym" in good.read_text(encoding="utf-8")
    assert summarize(results) == {"total_files": 2, "patched": 1, "unchanged": 0, "failed": 1}


def test_concurrent_patches_of_one_file_apply_once(tmp_path, clean_text):
    path = write_project(tmp_path, "App.xcodeproj/project.pbxproj", clean_text)
    engine = PatchEngine()

    async def both():
        return await asyncio.gather(
            engine.patch(path, Operation.APPLY),
            engine.patch(path, Operation.APPLY),
        )

    results = asyncio.run(both())
    assert sorted(r.written for r in results) == [False, True]
    assert path.read_text(encoding="utf-8").count("upload-dsym\";") == 1


def test_path_locks_are_released_after_patching(tmp_path, clean_text):
    path = write_project(tmp_path, "App.xcodeproj/project.pbxproj", clean_text)
    engine = PatchEngine()

    asyncio.run(engine.patch(path, Operation.APPLY))
    gc.collect()

    assert len(engine._locks) == 0
