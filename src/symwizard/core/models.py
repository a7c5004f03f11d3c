#!/usr/bin/env python3
"""
SYMWIZARD CORE MODELS
---------------------
Defines the fundamental data structures used across the SymWizard engine.
Tokens are the lowest level of project-file abstraction; build phases,
native targets and the project descriptor sit on top of the parsed tree.

Author: SymWizard Team
Date: 2026-10-19
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Tuple, Any


class TokenKind(str, Enum):
    STRING = "string"       # bare or quoted string
    DATA = "data"           # <0fab ...> hex literal
    PUNCT = "punct"         # one of { } ( ) = ; ,
    COMMENT = "comment"     # /* ... */ or // ...


@dataclass(frozen=True)
class Token:
    """
    The atomic unit of a project file.

    Offsets index into the original text so that every structural edit can
    be expressed as a splice of the untouched source.
    """
    kind: TokenKind
    text: str               # Raw source text of the token
    start: int              # Offset of the first character
    end: int                # Offset one past the last character
    line_no: int            # 1-based line of the first character
    column: int             # 1-based column of the first character
    value: Optional[str] = None  # Decoded value for STRING tokens, body for COMMENT


class PhaseKind(str, Enum):
    SHELL_SCRIPT = "ShellScript"
    OTHER = "Other"


SHELL_SCRIPT_ISA = "PBXShellScriptBuildPhase"
NATIVE_TARGET_ISA = "PBXNativeTarget"
PROJECT_ISA = "PBXProject"


@dataclass(frozen=True)
class BuildPhase:
    id: str
    kind: PhaseKind
    isa: str
    label: Optional[str] = None
    shell_script: Optional[str] = None
    shell_path: Optional[str] = None


@dataclass(frozen=True)
class NativeTarget:
    id: str
    name: Optional[str] = None
    build_phases: Tuple[str, ...] = ()


@dataclass
class ProjectDescriptor:
    """
    In-memory view of a project file.

    `source` is kept verbatim: serialization returns it unchanged unless a
    patch spliced it, which is what makes parse -> serialize byte-stable.
    """
    source: str
    phases: Dict[str, BuildPhase] = field(default_factory=dict)
    targets: Dict[str, NativeTarget] = field(default_factory=dict)
    comments: Dict[str, str] = field(default_factory=dict)  # "<id>_comment" -> annotation
    first_target_id: Optional[str] = None
    tree: Any = None        # ParseTree the model was built from

    def shell_script_phases(self) -> Dict[str, BuildPhase]:
        return {k: p for k, p in self.phases.items() if p.kind is PhaseKind.SHELL_SCRIPT}

    def owners_of(self, phase_id: str) -> Tuple[str, ...]:
        """Ids of every target whose buildPhases reference `phase_id`."""
        return tuple(t.id for t in self.targets.values() if phase_id in t.build_phases)
