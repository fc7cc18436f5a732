import logging
import os
from typing import Mapping

from pbxwriter.config import Options
from pbxwriter.details.build_graph import BuildGraph
from pbxwriter.details.source_file import resolve_relative_file
from pbxwriter.details.write_file import write_file_if_changed
from pbxwriter.generators.xcode.formatter import format_xcode_project
from pbxwriter.generators.xcode.model import PBXProject
from pbxwriter.generators.xcode.model_builder import generate_xcode_project
from pbxwriter.generators.xcode.validator import (
    validate_ids,
    validate_ownership,
    validate_references,
)
from pbxwriter.generators.xcode.workspace import XcodeWorkspace

logger = logging.getLogger(__name__)


def _write_project(options: Options, graph: BuildGraph, project: PBXProject) -> None:
    settings = graph.settings
    project_dir = f"{project.name}.xcodeproj"

    pbxproj_file = resolve_relative_file(settings.build_dir, f"{project_dir}/project.pbxproj")
    if write_file_if_changed(settings.full_path(pbxproj_file), format_xcode_project(project)):
        logger.info("wrote %s", pbxproj_file)
    else:
        logger.info("%s is up to date", pbxproj_file)

    workspace = XcodeWorkspace(settings, options.build_system)
    workspace.write_workspace(f"{project_dir}/project.xcworkspace")


def _generate(options: Options, graph: BuildGraph, environ: Mapping[str, str]) -> PBXProject:
    # Generate project model
    project = generate_xcode_project(options, graph, environ)

    # Validate ownership, ids and references
    if errors := validate_ownership(project):
        raise ValueError(f"Invalid project ownership: {errors}")

    if errors := validate_ids(project):
        raise ValueError(f"Invalid project ids: {errors}")

    if errors := validate_references(project):
        raise ValueError(f"Invalid project: {errors}")

    # Format and write to disk
    _write_project(options, graph, project)
    return project


class XcodeGenerator:
    def __init__(
        self,
        options: Options,
        graph: BuildGraph,
        environ: Mapping[str, str] = os.environ,
    ):
        self.options = options
        self.graph = graph
        self.environ = environ

        if not self.options.project_name:
            raise ValueError("project name cannot be empty")
        if "/" in self.options.project_name:
            raise ValueError(f"invalid project name {self.options.project_name}")

    def __call__(self) -> PBXProject:
        """Generate the Xcode project."""
        return _generate(self.options, self.graph, self.environ)
