#!/usr/bin/env python3
"""
SYMWIZARD ENGINE - Patch Orchestrator
-------------------------------------
The PatchEngine runs one project file through parse -> mutate ->
serialize and writes the result back only when the bytes changed.
Re-applying a patch therefore ends in a no-op instead of a rewrite.

Author: SymWizard Team
Date: 2026-10-19
"""

import asyncio
import logging
import os
import weakref
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Pattern, Union

from symwizard.core import locator
from symwizard.core.constants import PHASE_LABEL, RECOGNITION_PATTERN, SHELL_PATH, UPLOAD_SCRIPT
from symwizard.core.errors import LocateError, ParseError, WizardError, WriteError
from symwizard.pbxproj.descriptor import parse, serialize
from symwizard.pbxproj.patcher import add_shell_script_phase, remove_shell_script_phases_matching

logger = logging.getLogger("symwizard.engine")


class Operation(str, Enum):
    APPLY = "apply"
    REVERT = "revert"


@dataclass
class PatchResult:
    path: Path
    operation: Operation
    changed: bool = False
    written: bool = False
    original: Optional[str] = None
    content: Optional[str] = None     # New text, only when changed
    error: Optional[WizardError] = None

    @property
    def status(self) -> str:
        if self.error is not None:
            return "FAILED"
        if not self.changed:
            return "UNCHANGED"
        return "PATCHED" if self.written else "PREVIEW"


class PatchEngine:
    """
    Applies or reverts the upload build phase on project files.
    One asyncio.Lock per resolved path keeps two units in the same process
    from interleaving a read and a write on one file.
    """

    def __init__(self, label: str = PHASE_LABEL, shell_path: str = SHELL_PATH,
                 script: str = UPLOAD_SCRIPT, recognition: Pattern = RECOGNITION_PATTERN,
                 dry_run: bool = False):
        self.label = label
        self.shell_path = shell_path
        self.script = script
        self.recognition = recognition
        self.dry_run = dry_run
        # Entries vanish once no patch holds or awaits the lock.
        self._locks: "weakref.WeakValueDictionary[Path, asyncio.Lock]" = weakref.WeakValueDictionary()

    def _lock_for(self, path: Path) -> asyncio.Lock:
        key = path.resolve()
        lock = self._locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[key] = lock
        return lock

    def transform(self, text: str, operation: Operation) -> str:
        """Pure part of a patch: parse, mutate, serialize."""
        descriptor = parse(text)
        if operation is Operation.APPLY:
            add_shell_script_phase(descriptor, self.label, self.shell_path, self.script,
                                   recognition=self.recognition)
        else:
            remove_shell_script_phases_matching(descriptor, self.recognition)
        return serialize(descriptor)

    async def patch(self, path: Union[str, Path], operation: Operation) -> PatchResult:
        """
        Patches a single file. Raises ParseError or WriteError; the caller
        decides whether that ends the unit of work.
        """
        path = Path(path)
        async with self._lock_for(path):
            try:
                raw = await asyncio.to_thread(path.read_bytes)
            except OSError as e:
                raise LocateError(str(path), e.strerror or str(e))
            try:
                original = raw.decode("utf-8")
            except UnicodeDecodeError as e:
                raise ParseError(f"Project file is not UTF-8: {e.reason}", path=str(path))

            try:
                updated = self.transform(original, operation)
            except ParseError as e:
                raise e.with_path(str(path))

            result = PatchResult(path=path, operation=operation, original=original)
            if updated == original:
                logger.debug(f"{path}: {operation.value} is a no-op")
                return result

            result.changed = True
            result.content = updated
            if not self.dry_run:
                await asyncio.to_thread(self._atomic_write, path, updated)
                result.written = True
                logger.info(f"{path}: {operation.value} written")
            return result

    async def patch_matching_files(self, pattern: str, operation: Operation,
                                   roots: Optional[Iterable[Union[str, Path]]] = None) -> List[PatchResult]:
        """
        Patches every file matching `pattern`. A failing file is recorded on
        its result and does not stop the remaining ones.
        """
        results = []
        for path in sorted(await locator.locate(pattern, roots)):
            try:
                results.append(await self.patch(path, operation))
            except WizardError as e:
                logger.debug(f"Error processing {path}: {e}")
                results.append(PatchResult(path=path, operation=operation, error=e))
        return results

    def _atomic_write(self, target_path: Path, content: str):
        if not os.access(target_path.parent, os.W_OK):
            raise WriteError(str(target_path), f"No write access to {target_path.parent}")
        temp_file = target_path.with_name(target_path.name + ".symwizard.tmp")
        try:
            # newline="" keeps CRLF files byte-identical outside the spliced region
            with open(temp_file, "w", encoding="utf-8", newline="") as f:
                f.write(content)
            os.replace(temp_file, target_path)
        except OSError as e:
            if temp_file.exists():
                temp_file.unlink()
            raise WriteError(str(target_path), str(e))


def summarize(results: List[PatchResult]) -> Dict[str, int]:
    return {
        "total_files": len(results),
        "patched": sum(1 for r in results if r.written),
        "unchanged": sum(1 for r in results if r.status == "UNCHANGED"),
        "failed": sum(1 for r in results if r.error is not None),
    }
