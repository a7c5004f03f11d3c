#!/usr/bin/env python3
"""
SYMWIZARD DESCRIPTOR - Project Model Builder
--------------------------------------------
Turns a parse tree into the ProjectDescriptor model (phases, targets,
key annotations) and validates the cross references between them.

Serialization is lossless: the descriptor keeps its source text and a
patch replaces that text through `reload`, so an unmodified descriptor
always serializes to the exact bytes it was parsed from.

Author: SymWizard Team
Date: 2026-10-19
"""

from typing import Dict, Optional

from symwizard.core.errors import ParseError
from symwizard.core.models import (
    BuildPhase,
    NativeTarget,
    PhaseKind,
    ProjectDescriptor,
    NATIVE_TARGET_ISA,
    PROJECT_ISA,
    SHELL_SCRIPT_ISA,
)
from symwizard.pbxproj.parser import ArrayNode, DictNode, ParseTree, StringNode, parse_tree


def objects_node(descriptor: ProjectDescriptor) -> DictNode:
    return descriptor.tree.root.get("objects")


def _fail(tree: ParseTree, message: str, offset: int) -> ParseError:
    line, col = tree.lexer.position(offset)
    return ParseError(message, line, col)


def _phase_ids(tree: ParseTree, obj: DictNode, object_id: str) -> tuple:
    node = obj.get("buildPhases")
    if node is None:
        return ()
    if not isinstance(node, ArrayNode):
        raise _fail(tree, f"buildPhases of {object_id} is not a list", node.start)
    ids = []
    for item in node.items:
        if not isinstance(item.value, StringNode):
            raise _fail(tree, f"buildPhases of {object_id} holds a non-reference value", item.start)
        ids.append(item.value.value)
    return tuple(ids)


def _build(descriptor: ProjectDescriptor, tree: ParseTree) -> None:
    objects = tree.root.get("objects")
    if not isinstance(objects, DictNode):
        raise _fail(tree, "Missing 'objects' dictionary", tree.root.start)

    phases: Dict[str, BuildPhase] = {}
    targets: Dict[str, NativeTarget] = {}
    comments: Dict[str, str] = {}

    for entry in objects.entries:
        object_id = entry.key.value
        obj = entry.value
        if not isinstance(obj, DictNode):
            raise _fail(tree, f"Object {object_id} is not a dictionary", entry.start)
        if entry.key.annotation is not None:
            comments[f"{object_id}_comment"] = entry.key.annotation

        isa = obj.get_str("isa")
        if isa is None:
            raise _fail(tree, f"Object {object_id} has no isa", entry.start)

        if isa.endswith("BuildPhase"):
            is_script = isa == SHELL_SCRIPT_ISA
            phases[object_id] = BuildPhase(
                id=object_id,
                kind=PhaseKind.SHELL_SCRIPT if is_script else PhaseKind.OTHER,
                isa=isa,
                label=entry.key.annotation or obj.get_str("name"),
                shell_script=obj.get_str("shellScript") if is_script else None,
                shell_path=obj.get_str("shellPath") if is_script else None,
            )
        elif isa == NATIVE_TARGET_ISA:
            targets[object_id] = NativeTarget(
                id=object_id,
                name=obj.get_str("name"),
                build_phases=_phase_ids(tree, obj, object_id),
            )

    known = {entry.key.value for entry in objects.entries}
    for target in targets.values():
        for phase_id in target.build_phases:
            if phase_id not in known:
                offset = objects.entry(target.id).start
                raise _fail(tree, f"Target {target.id} references unknown build phase {phase_id}", offset)

    descriptor.tree = tree
    descriptor.phases = phases
    descriptor.targets = targets
    descriptor.comments = comments
    descriptor.first_target_id = select_mutation_target(descriptor)


def select_mutation_target(descriptor: ProjectDescriptor) -> Optional[str]:
    """
    Picks the target a new build phase is attached to.

    Rule: the first entry of the root PBXProject's `targets` list that is a
    native target. Without a usable root project, the first PBXNativeTarget
    in file order. None when the project has no native target at all.
    """
    objects = objects_node(descriptor)
    root_id = descriptor.tree.root.get_str("rootObject")
    project = objects.get(root_id) if root_id else None
    if isinstance(project, DictNode) and project.get_str("isa") == PROJECT_ISA:
        listed = project.get("targets")
        if isinstance(listed, ArrayNode):
            for item in listed.items:
                if isinstance(item.value, StringNode) and item.value.value in descriptor.targets:
                    return item.value.value
    return next(iter(descriptor.targets), None)


def parse(text: str) -> ProjectDescriptor:
    """Parses project text; raises ParseError on malformed input."""
    descriptor = ProjectDescriptor(source=text)
    _build(descriptor, parse_tree(text))
    return descriptor


def reload(descriptor: ProjectDescriptor, text: str) -> ProjectDescriptor:
    """Replaces the descriptor's source in place and rebuilds its model."""
    tree = parse_tree(text)
    descriptor.source = text
    _build(descriptor, tree)
    return descriptor


def serialize(descriptor: ProjectDescriptor) -> str:
    return descriptor.source
