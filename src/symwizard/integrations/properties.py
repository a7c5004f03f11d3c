#!/usr/bin/env python3
"""
SYMWIZARD PROPERTIES - sentry-cli Settings
------------------------------------------
Turns wizard answers into the key/value pairs sentry-cli reads from a
`sentry.properties` file, and serializes them.

Author: SymWizard Team
Date: 2026-10-19
"""

from typing import Any, Dict, Mapping, Optional

from symwizard.core.config import WizardConfig

Properties = Dict[str, Optional[str]]


def _dig(data: Any, *keys: str) -> Optional[Any]:
    for key in keys:
        if not isinstance(data, Mapping):
            return None
        data = data.get(key)
    return data


class SentryCli:

    def __init__(self, config: WizardConfig):
        self.config = config

    def convert_answers_to_properties(self, answers: Mapping[str, Any]) -> Properties:
        props: Properties = {}
        props["defaults/url"] = answers.get("url") or self.config.url
        props["defaults/org"] = _dig(answers, "config", "organization", "slug")
        props["defaults/project"] = _dig(answers, "config", "project", "slug")
        props["auth/token"] = _dig(answers, "config", "auth", "token")
        props["cli/executable"] = self.config.cli_executable.replace("\\", "\\\\")
        return props

    def dump_properties(self, props: Properties) -> str:
        """
        One `key=value` line per property, '/' in keys written as '.'.
        Missing values are kept as commented-out keys so users can fill them in.
        """
        lines = []
        for key, value in props.items():
            key = key.replace("/", ".")
            if value is None or value == "":
                lines.append(f"#{key}=")
            else:
                lines.append(f"{key}={value}")
        return "\n".join(lines) + "\n"
