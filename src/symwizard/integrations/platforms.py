#!/usr/bin/env python3
"""
SYMWIZARD PLATFORMS - Per-Platform Capabilities
-----------------------------------------------
Each Cordova platform is described by what it can do: find its project
descriptors, patch them, and write its properties file. Variants are
plain classes looked up in PLATFORM_VARIANTS; none inherits from another.

Author: SymWizard Team
Date: 2026-10-19
"""

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List, Protocol, Set

from symwizard.core import locator
from symwizard.core.config import WizardConfig
from symwizard.core.engine import Operation, PatchEngine, PatchResult
from symwizard.core.errors import DirectoryCreateError, WriteError
from symwizard.core.output import dim

logger = logging.getLogger("symwizard.platforms")


@dataclass
class PlatformContext:
    root: Path
    config: WizardConfig
    engine: PatchEngine

    @property
    def prefix_dir(self) -> Path:
        return self.root / self.config.folder_prefix

    def platform_dir(self, platform: str) -> Path:
        return self.prefix_dir / platform

    def properties_path(self, platform: str) -> Path:
        return self.platform_dir(platform) / self.config.properties_filename


class PlatformVariant(Protocol):
    name: str

    async def locate_descriptors(self) -> Set[Path]: ...

    async def patch_descriptors(self, operation: Operation) -> List[PatchResult]: ...

    async def write_properties(self, text: str) -> Path: ...


def _ensure_dir(path: Path, label: str) -> None:
    if path.is_dir():
        return
    dim(f"{label} folder did not exist, creating it.")
    try:
        path.mkdir()
    except OSError as e:
        raise DirectoryCreateError(str(path), e.strerror or str(e))


def _write_properties_file(context: PlatformContext, platform: str, text: str) -> Path:
    if context.engine.dry_run:
        dim(f"Dry run: would write {context.properties_path(platform)}")
        return context.properties_path(platform)
    _ensure_dir(context.prefix_dir, context.config.folder_prefix)
    _ensure_dir(context.platform_dir(platform), platform)
    target = context.properties_path(platform)
    try:
        with open(target, "w", encoding="utf-8") as f:
            f.write(text)
    except OSError as e:
        raise WriteError(str(target), e.strerror or str(e))
    logger.debug(f"Wrote {target}")
    return target


class XcodePlatform:
    """iOS: patches every Xcode project under platforms/ios, then writes properties."""

    name = "ios"

    def __init__(self, context: PlatformContext):
        self.context = context

    async def locate_descriptors(self) -> Set[Path]:
        return await locator.locate(self.context.config.ios_project_glob, [self.context.prefix_dir])

    async def patch_descriptors(self, operation: Operation) -> List[PatchResult]:
        results = await self.context.engine.patch_matching_files(
            self.context.config.ios_project_glob, operation, roots=[self.context.prefix_dir]
        )
        failures = [r.error for r in results if r.error is not None]
        if failures:
            raise failures[0]
        return results

    async def write_properties(self, text: str) -> Path:
        return await asyncio.to_thread(_write_properties_file, self.context, self.name, text)


class PropertiesOnlyPlatform:
    """Android and anything else: no descriptor to patch, properties only."""

    def __init__(self, context: PlatformContext, name: str = "android"):
        self.context = context
        self.name = name

    async def locate_descriptors(self) -> Set[Path]:
        return set()

    async def patch_descriptors(self, operation: Operation) -> List[PatchResult]:
        return []

    async def write_properties(self, text: str) -> Path:
        return await asyncio.to_thread(_write_properties_file, self.context, self.name, text)


PLATFORM_VARIANTS: Dict[str, Callable[[PlatformContext], PlatformVariant]] = {
    "ios": XcodePlatform,
    "android": PropertiesOnlyPlatform,
}


def variant_for(platform: str, context: PlatformContext) -> PlatformVariant:
    factory = PLATFORM_VARIANTS.get(platform)
    if factory is None:
        return PropertiesOnlyPlatform(context, name=platform)
    return factory(context)
