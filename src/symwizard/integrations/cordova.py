#!/usr/bin/env python3
"""
SYMWIZARD CORDOVA - The Platform Orchestrator
---------------------------------------------
Decides which Cordova platforms still need configuration, then runs one
independent asyncio task per platform: patch the platform's project files
(iOS only) and write its sentry.properties. A failing platform is reported
and does not cancel its siblings.

Uninstall reverts the platforms that currently show the patch, then sweeps
every Xcode project below the project root once more.

Author: SymWizard Team
Date: 2026-10-19
"""

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional

from symwizard.core import locator
from symwizard.core.config import WizardConfig
from symwizard.core.constants import PATCH_MARKER
from symwizard.core.engine import Operation, PatchEngine, PatchResult
from symwizard.core.errors import WizardError
from symwizard.core.output import green, red
from symwizard.integrations.platforms import PlatformContext, variant_for
from symwizard.integrations.properties import SentryCli

logger = logging.getLogger("symwizard.cordova")


class PlatformStatus(str, Enum):
    CONFIGURED = "CONFIGURED"
    REVERTED = "REVERTED"
    FAILED = "FAILED"


@dataclass
class PlatformOutcome:
    platform: str
    status: PlatformStatus
    results: List[PatchResult] = field(default_factory=list)
    properties_path: Optional[Path] = None
    error: Optional[str] = None

    @property
    def files_changed(self) -> int:
        return sum(1 for r in self.results if r.changed)


@dataclass
class RunReport:
    uninstall: bool
    outcomes: Dict[str, PlatformOutcome] = field(default_factory=dict)
    global_results: List[PatchResult] = field(default_factory=list)

    @property
    def failed(self) -> List[str]:
        return [p for p, o in self.outcomes.items() if o.status is PlatformStatus.FAILED]

    @property
    def succeeded(self) -> List[str]:
        return [p for p, o in self.outcomes.items() if o.status is not PlatformStatus.FAILED]

    def patch_results(self) -> List[PatchResult]:
        results = [r for o in self.outcomes.values() for r in o.results]
        return results + self.global_results


class CordovaIntegration:

    def __init__(self, root: Path, config: Optional[WizardConfig] = None,
                 engine: Optional[PatchEngine] = None, uninstall: bool = False):
        self.root = Path(root)
        self.config = config or WizardConfig()
        self.engine = engine or PatchEngine(
            label=self.config.phase_label,
            shell_path=self.config.shell_path,
            script=self.config.shell_script,
        )
        self.uninstall_mode = uninstall
        self.context = PlatformContext(root=self.root, config=self.config, engine=self.engine)
        self.sentry_cli = SentryCli(self.config)

    async def should_configure_platform(self, platform: str) -> bool:
        result = False
        properties = self.context.properties_path(platform)
        if not locator.exists(properties):
            result = True
            logger.debug(f"{platform}/{self.config.properties_filename} does not exist")

        if not await locator.content_matches(self.config.uninstall_glob, PATCH_MARKER, [self.root]):
            result = True
            logger.debug(f"{self.config.uninstall_glob} not matched")

        if self.uninstall_mode:
            # Uninstall touches only platforms that currently carry the patch.
            return not result
        return result

    async def should_configure(self, platforms: Optional[Iterable[str]] = None) -> Dict[str, bool]:
        platforms = list(platforms) if platforms is not None else list(self.config.platforms)
        return {p: await self.should_configure_platform(p) for p in platforms}

    def get_platforms(self, answers: Mapping[str, Any]) -> List[str]:
        """Requested platforms, narrowed to the ones the plan marked as needing work."""
        requested = answers.get("platforms")
        if requested is None:
            requested = self.config.platforms
        requested = list(requested)
        plan = answers.get("should_configure_platforms")
        if isinstance(plan, Mapping):
            return [p for p in requested if plan.get(p)]
        return requested

    async def emit(self, answers: Mapping[str, Any]) -> RunReport:
        if self.uninstall_mode or answers.get("uninstall"):
            return await self.uninstall(answers)

        properties = self.sentry_cli.convert_answers_to_properties(answers)
        text = self.sentry_cli.dump_properties(properties)

        report = RunReport(uninstall=False)
        platforms = self.get_platforms(answers)
        tasks = [asyncio.create_task(self._configure(p, text)) for p in platforms]
        for outcome in await asyncio.gather(*tasks):
            report.outcomes[outcome.platform] = outcome
        return report

    async def uninstall(self, answers: Mapping[str, Any]) -> RunReport:
        report = RunReport(uninstall=True)
        platforms = self.get_platforms(answers)
        tasks = [asyncio.create_task(self._revert(p)) for p in platforms]
        for outcome in await asyncio.gather(*tasks):
            report.outcomes[outcome.platform] = outcome

        report.global_results = await self.engine.patch_matching_files(
            self.config.uninstall_glob, Operation.REVERT, roots=[self.root]
        )
        # Files a platform unit already failed on are reported once, by that unit.
        reported = {o.error for o in report.outcomes.values() if o.error}
        for result in report.global_results:
            if result.error is not None and str(result.error) not in reported:
                red(result.error)
        return report

    async def _configure(self, platform: str, properties_text: str) -> PlatformOutcome:
        variant = variant_for(platform, self.context)
        outcome = PlatformOutcome(platform=platform, status=PlatformStatus.CONFIGURED)
        try:
            outcome.results = await variant.patch_descriptors(Operation.APPLY)
            outcome.properties_path = await variant.write_properties(properties_text)
            green(f"Successfully set up {platform} for cordova")
        except (WizardError, OSError) as e:
            red(e)
            outcome.status = PlatformStatus.FAILED
            outcome.error = str(e)
        return outcome

    async def _revert(self, platform: str) -> PlatformOutcome:
        variant = variant_for(platform, self.context)
        outcome = PlatformOutcome(platform=platform, status=PlatformStatus.REVERTED)
        try:
            outcome.results = await variant.patch_descriptors(Operation.REVERT)
            green(f"Successfully reverted {platform} for cordova")
        except (WizardError, OSError) as e:
            red(e)
            outcome.status = PlatformStatus.FAILED
            outcome.error = str(e)
        return outcome
