#!/usr/bin/env python3
"""
SYMWIZARD PATCHER - Build Phase Surgery
---------------------------------------
Adds and removes shell-script build phases by splicing the descriptor's
source text, then re-parses it. Untouched regions of the file keep their
exact bytes, which is what lets the engine detect a no-op patch by plain
comparison.

Author: SymWizard Team
Date: 2026-10-19
"""

import logging
import re
import uuid
from typing import Callable, Dict, List, Optional, Pattern, Tuple

from symwizard.core.constants import RECOGNITION_PATTERN
from symwizard.core.errors import ParseError
from symwizard.core.models import ProjectDescriptor, SHELL_SCRIPT_ISA, Token
from symwizard.pbxproj.descriptor import objects_node, reload
from symwizard.pbxproj.lexer import quote_string
from symwizard.pbxproj.parser import ArrayNode, DictNode, StringNode

logger = logging.getLogger("symwizard.patcher")

# (start, end, replacement) applied to the source text
Edit = Tuple[int, int, str]

SECTION_PATTERN = re.compile(r"^(Begin|End) (\w+) section$")


def _line_start(text: str, offset: int) -> int:
    return text.rfind("\n", 0, offset) + 1


def _line_end(text: str, offset: int) -> int:
    """Offset just past the newline ending the line that contains `offset`."""
    idx = text.find("\n", offset)
    return len(text) if idx == -1 else idx + 1


def _indent_at(text: str, offset: int) -> str:
    start = _line_start(text, offset)
    line = text[start:offset]
    return line[:len(line) - len(line.lstrip(" \t"))]


def _line_span(text: str, start: int, end: int) -> Tuple[int, int]:
    """Widens [start, end) to whole lines when nothing else shares them."""
    ls = _line_start(text, start)
    le = _line_end(text, end)
    if text[ls:start].strip() == "" and text[end:le].strip() == "":
        return ls, le
    return start, end


def _is_blank_line(text: str, start: int) -> bool:
    end = _line_end(text, start)
    return start < len(text) and text[start:end].strip() == ""


def apply_edits(text: str, edits: List[Edit]) -> str:
    for start, end, replacement in sorted(edits, key=lambda e: e[0], reverse=True):
        text = text[:start] + replacement + text[end:]
    return text


def find_sections(descriptor: ProjectDescriptor) -> Dict[str, Tuple[Token, Token]]:
    """Maps an isa to its (Begin, End) section marker comments inside `objects`."""
    objects = objects_node(descriptor)
    begins: Dict[str, Token] = {}
    sections: Dict[str, Tuple[Token, Token]] = {}
    for token in descriptor.tree.comments:
        if not (objects.start < token.start < objects.end):
            continue
        match = SECTION_PATTERN.match(token.value or "")
        if not match:
            continue
        marker, isa = match.groups()
        if marker == "Begin":
            begins[isa] = token
        elif isa in begins:
            sections[isa] = (begins.pop(isa), token)
    return sections


def new_object_id(descriptor: ProjectDescriptor) -> str:
    taken = {entry.key.value for entry in objects_node(descriptor).entries}
    while True:
        candidate = uuid.uuid4().hex[:24].upper()
        if candidate not in taken:
            return candidate


def _comment(label: str) -> str:
    return label.replace("*/", "* /")


def _render_phase(object_id: str, label: str, shell_path: str, script: str, indent: str) -> str:
    inner = indent + "\t"
    lines = [
        f"{indent}{object_id} /* {_comment(label)} */ = {{",
        f"{inner}isa = {SHELL_SCRIPT_ISA};",
        f"{inner}buildActionMask = 2147483647;",
        f"{inner}files = (",
        f"{inner});",
        f"{inner}inputPaths = (",
        f"{inner});",
        f"{inner}name = {quote_string(label)};",
        f"{inner}outputPaths = (",
        f"{inner});",
        f"{inner}runOnlyForDeploymentPostprocessing = 0;",
        f"{inner}shellPath = {quote_string(shell_path)};",
        f"{inner}shellScript = {quote_string(script)};",
        f"{indent}}};",
    ]
    return "\n".join(lines) + "\n"


def _object_insertion(descriptor: ProjectDescriptor, phase_text: str) -> Edit:
    """Where the new object goes: its own section, kept in alphabetical order."""
    text = descriptor.source
    objects = objects_node(descriptor)
    sections = find_sections(descriptor)

    if SHELL_SCRIPT_ISA in sections:
        _, end_marker = sections[SHELL_SCRIPT_ISA]
        pos = _line_start(text, end_marker.start)
        return pos, pos, phase_text

    block = (f"/* Begin {SHELL_SCRIPT_ISA} section */\n"
             f"{phase_text}"
             f"/* End {SHELL_SCRIPT_ISA} section */\n")

    if sections:
        later = sorted(isa for isa in sections if isa > SHELL_SCRIPT_ISA)
        if later:
            pos = _line_start(text, sections[later[0]][0].start)
            return pos, pos, block + "\n"
        last_end = max(end for _, end in sections.values()).end
        pos = _line_end(text, last_end)
        return pos, pos, "\n" + block

    # No section markers at all: append before the closing brace of `objects`.
    closing = objects.end - 1
    if text[_line_start(text, closing):closing].strip() == "":
        pos = _line_start(text, closing)
        return pos, pos, phase_text
    return closing, closing, "\n" + phase_text


def _reference_insertion(descriptor: ProjectDescriptor, target_id: str, reference: str) -> List[Edit]:
    text = descriptor.source
    target = objects_node(descriptor).get(target_id)
    phases = target.get("buildPhases")

    if phases is None:
        closing = target.end - 1
        if text[_line_start(text, closing):closing].strip() != "":
            # Closing brace shares a line with the target, so stay inline.
            lead = "" if text[closing - 1] in " \t" else " "
            return [(closing, closing, f"{lead}buildPhases = ({reference}, ); ")]
        anchor = target.entries[0].start if target.entries else target.start
        inner = _indent_at(text, anchor) if target.entries else _indent_at(text, target.start) + "\t"
        pos = _line_start(text, closing)
        return [(pos, pos, f"{inner}buildPhases = (\n{inner}\t{reference},\n{inner});\n")]

    closing = phases.end - 1
    multiline = "\n" in text[phases.start:phases.end]
    edits: List[Edit] = []

    if not phases.items:
        if multiline:
            pos = _line_start(text, closing)
            indent = _indent_at(text, closing) + "\t"
            return [(pos, pos, f"{indent}{reference},\n")]
        return [(closing, closing, f"{reference},")]

    last = phases.items[-1]
    has_comma = text[last.end - 1] == ","
    if not has_comma:
        edits.append((last.end, last.end, ","))

    if multiline and text[last.end:_line_end(text, last.end)].strip() == "":
        pos = _line_end(text, last.end)
        indent = _indent_at(text, last.start)
        edits.append((pos, pos, f"{indent}{reference},\n"))
    else:
        edits.append((closing, closing, f" {reference},"))
    return edits


def add_shell_script_phase(descriptor: ProjectDescriptor, label: str, shell_path: str, script: str,
                           recognition: Pattern = RECOGNITION_PATTERN,
                           id_factory: Optional[Callable[[ProjectDescriptor], str]] = None) -> ProjectDescriptor:
    """
    Appends a shell-script build phase to the mutation target.
    Leaves the descriptor untouched if a matching script phase already exists.
    """
    for phase in descriptor.shell_script_phases().values():
        if phase.shell_script and recognition.search(phase.shell_script):
            logger.debug(f"Build phase {phase.id} already matches {recognition.pattern!r}")
            return descriptor

    target_id = descriptor.first_target_id
    if target_id is None:
        raise ParseError("Project has no native target to attach a build phase to")

    object_id = (id_factory or new_object_id)(descriptor)
    objects = objects_node(descriptor)
    indent = _indent_at(descriptor.source, objects.entries[0].start) if objects.entries else "\t\t"
    phase_text = _render_phase(object_id, label, shell_path, script, indent)
    reference = f"{object_id} /* {_comment(label)} */"

    edits = [_object_insertion(descriptor, phase_text)]
    edits.extend(_reference_insertion(descriptor, target_id, reference))
    reload(descriptor, apply_edits(descriptor.source, edits))
    logger.debug(f"Added build phase {object_id} to target {target_id}")
    return descriptor


def _section_removal(text: str, begin: Token, end: Token) -> Edit:
    start = _line_start(text, begin.start)
    stop = _line_end(text, end.end)
    if _is_blank_line(text, stop):
        stop = _line_end(text, stop)
    elif start > 0 and _is_blank_line(text, _line_start(text, start - 1)):
        start = _line_start(text, start - 1)
    return start, stop, ""


def remove_shell_script_phases_matching(descriptor: ProjectDescriptor, pattern: Pattern) -> List[str]:
    """
    Deletes every shell-script phase whose script matches `pattern`, along
    with its key annotation and its references in all target phase lists.
    Returns the removed ids.
    """
    text = descriptor.source
    objects = objects_node(descriptor)
    removed = [
        phase.id for phase in descriptor.shell_script_phases().values()
        if phase.shell_script and pattern.search(phase.shell_script)
    ]
    if not removed:
        return []

    edits: List[Edit] = []
    doomed = set(removed)

    section = find_sections(descriptor).get(SHELL_SCRIPT_ISA)
    inside = []
    if section:
        inside = [e for e in objects.entries if section[0].end <= e.start < section[1].start]
    if section and inside and all(e.key.value in doomed for e in inside):
        edits.append(_section_removal(text, *section))
        handled = {e.key.value for e in inside}
    else:
        handled = set()

    for entry in objects.entries:
        if entry.key.value in doomed and entry.key.value not in handled:
            edits.append((*_line_span(text, entry.start, entry.end), ""))

    for entry in objects.entries:
        obj = entry.value
        if not isinstance(obj, DictNode):
            continue
        phases = obj.get("buildPhases")
        if not isinstance(phases, ArrayNode):
            continue
        for item in phases.items:
            if isinstance(item.value, StringNode) and item.value.value in doomed:
                edits.append((*_line_span(text, item.start, item.end), ""))

    owners = {phase_id: descriptor.owners_of(phase_id) for phase_id in removed}
    reload(descriptor, apply_edits(text, edits))
    for phase_id in removed:
        logger.debug(f"Removed build phase {phase_id} from {', '.join(owners[phase_id]) or 'no target'}")
    return removed
