"""
Loads a resolved build graph from a JSON description.

The description is a single object:

    {
        "root_path": "..",                        # relative to the JSON file
        "build_dir": "//out/Debug",
        "args": {"target_os": "ios"},
        "default_toolchain": "//build/toolchain:clang",
        "toolchains": [
            {"label": "//build/toolchain:clang",
             "tools": {"link": {"default_output_dir": "{{root_out_dir}}"}}}
        ],
        "targets": [
            {"label": "//app:app", "type": "executable",
             "sources": ["main.cc"], "private_deps": ["//base:base"]}
        ],
        "items": [{"label": "//build/config:compiler"}],
        "gen_dependencies": ["/abs/path/to/src/.gn"]
    }

Dependencies are referenced by label and resolved once every target is
known, a dangling label raises UnknownLabelError.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from pbxwriter.details.build_graph import BuildGraph, BuildSettings
from pbxwriter.details.label import Label
from pbxwriter.details.source_file import (
    SourceFile,
    is_path_absolute,
    is_source_absolute,
    resolve_relative_file,
)
from pbxwriter.details.targets.target import BundleData, Item, OutputType, Target
from pbxwriter.details.targets.toolchain import Tool, Toolchain
from pbxwriter.errors import GenerationError, UnknownLabelError

logger = logging.getLogger(__name__)

DEPS_KEYS = ("public_deps", "private_deps", "data_deps")


def _parse_label(text: str, context: str) -> Label:
    try:
        return Label.parse(text)
    except ValueError as err:
        raise GenerationError(str(err), context) from err


def _source_file(value: str, label: Label) -> SourceFile:
    if is_source_absolute(value) or is_path_absolute(value):
        return SourceFile(value)
    return resolve_relative_file(label.dir, value)


def _source_files(values: List[str], label: Label) -> List[SourceFile]:
    return [_source_file(value, label) for value in values]


def _output_type(value: str, label: Label) -> OutputType:
    try:
        return OutputType[value.upper()]
    except KeyError as err:
        raise GenerationError(f"unknown output type '{value}'", str(label)) from err


def _load_toolchain(data: Dict[str, Any], default_toolchain: Optional[Label]) -> Toolchain:
    label = _parse_label(data["label"], "toolchains")
    tools = {
        name: Tool(name=name, **tool_data)
        for name, tool_data in data.get("tools", {}).items()
    }
    return Toolchain(
        label=label,
        imported_files=_source_files(data.get("imported_files", []), label),
        is_default=label == default_toolchain,
        tools=tools,
    )


def _load_target(
    data: Dict[str, Any],
    toolchains: Dict[Label, Toolchain],
    default_toolchain: Optional[Label],
) -> Target:
    label = _parse_label(data["label"], "targets")

    toolchain_label = default_toolchain
    if label.has_toolchain:
        toolchain_label = label.toolchain_label()
    toolchain = toolchains.get(toolchain_label) if toolchain_label else None
    if toolchain_label is not None and toolchain is None:
        raise UnknownLabelError(f"unknown toolchain {toolchain_label}", str(label))

    bundle_data = None
    if "bundle_data" in data:
        bundle_data = BundleData(**data["bundle_data"])

    action_script = data.get("action_script")

    return Target(
        label=label,
        imported_files=_source_files(data.get("imported_files", []), label),
        output_type=_output_type(data["type"], label),
        sources=_source_files(data.get("sources", []), label),
        public_headers=_source_files(data.get("public_headers", []), label),
        inputs=_source_files(data.get("inputs", []), label),
        toolchain=toolchain,
        output_name=data.get("output_name", ""),
        output_dir=data.get("output_dir", ""),
        bundle_data=bundle_data,
        action_script=_source_file(action_script, label) if action_script else None,
        defined_from=data.get("defined_from"),
    )


def _resolve_deps(target: Target, data: Dict[str, Any], targets: Dict[Label, Target]) -> None:
    for key in DEPS_KEYS:
        deps = []
        for text in data.get(key, []):
            dep_label = _parse_label(text, str(target.label))
            dep = targets.get(dep_label)
            if dep is None:
                raise UnknownLabelError(
                    f"{key} of {target.label} references unknown target {dep_label}",
                    target.defined_from,
                )
            deps.append(dep)
        setattr(target, key, deps)


def build_graph_from_dict(data: Dict[str, Any], base_dir: Path) -> BuildGraph:
    root_path = Path(data.get("root_path", "."))
    if not root_path.is_absolute():
        root_path = (base_dir / root_path).resolve()

    settings = BuildSettings(
        root_path=root_path,
        build_dir=data["build_dir"],
        args=data.get("args"),
        build_file_name=data.get("build_file_name", "BUILD.gn"),
    )

    default_toolchain = None
    if data.get("default_toolchain"):
        default_toolchain = _parse_label(data["default_toolchain"], "default_toolchain")

    toolchains: Dict[Label, Toolchain] = {}
    for toolchain_data in data.get("toolchains", []):
        toolchain = _load_toolchain(toolchain_data, default_toolchain)
        toolchains[toolchain.label] = toolchain

    # First pass creates the targets, second pass resolves the dependencies
    # (targets may be listed in any order).
    targets: Dict[Label, Target] = {}
    for target_data in data.get("targets", []):
        target = _load_target(target_data, toolchains, default_toolchain)
        if target.label in targets:
            raise GenerationError(f"duplicate target {target.label}", target.defined_from)
        targets[target.label] = target

    for target_data, target in zip(data.get("targets", []), targets.values()):
        _resolve_deps(target, target_data, targets)

    items = []
    for item_data in data.get("items", []):
        label = _parse_label(item_data["label"], "items")
        items.append(
            Item(label=label, imported_files=_source_files(item_data.get("imported_files", []), label))
        )

    logger.debug("loaded %d targets, %d toolchains", len(targets), len(toolchains))
    return BuildGraph(
        settings=settings,
        targets=list(targets.values()),
        items=items,
        toolchains=list(toolchains.values()),
        gen_dependencies=[Path(p) for p in data.get("gen_dependencies", [])],
    )


def load_build_graph(path: Path) -> BuildGraph:
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as err:
        raise GenerationError(f"unable to read {path}: {err.strerror or err}") from err
    except json.JSONDecodeError as err:
        raise GenerationError(f"invalid JSON: {err}", str(path)) from err
    try:
        return build_graph_from_dict(data, path.parent)
    except KeyError as err:
        raise GenerationError(f"missing key {err}", str(path)) from err
