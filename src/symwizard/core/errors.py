#!/usr/bin/env python3
"""
SYMWIZARD ERRORS
----------------
Error taxonomy shared by the locator, the patch engine and the platform
orchestrator. Every error raised for a single file or a single platform is
a WizardError, so the orchestrator can catch it at the unit boundary.

Author: SymWizard Team
Date: 2026-10-19
"""

from typing import Optional


class WizardError(Exception):
    """Base class for recoverable, user-reportable failures."""


class LocateError(WizardError):
    """A glob scan could not access a candidate path."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"Unable to read {path}: {reason}")
        self.path = path
        self.reason = reason


class ParseError(WizardError):
    """Project descriptor text does not conform to the expected grammar."""

    def __init__(self, message: str, line: Optional[int] = None, column: Optional[int] = None,
                 path: Optional[str] = None):
        self.message = message
        self.line = line
        self.column = column
        self.path = path
        super().__init__(self._describe())

    def _describe(self) -> str:
        where = ""
        if self.line is not None:
            where = f" (line {self.line}, column {self.column})"
        prefix = f"{self.path}: " if self.path else ""
        return f"{prefix}{self.message}{where}"

    def with_path(self, path: str) -> "ParseError":
        return ParseError(self.message, self.line, self.column, path=path)


class WriteError(WizardError):
    """Writing patched bytes or a properties file failed."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"Write failed for {path}: {reason}")
        self.path = path
        self.reason = reason


class DirectoryCreateError(WizardError):
    """A required output directory is missing and could not be created."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"Could not create directory {path}: {reason}")
        self.path = path
        self.reason = reason


class ConfigError(WizardError):
    """Configuration or answers file is unreadable or invalid."""
