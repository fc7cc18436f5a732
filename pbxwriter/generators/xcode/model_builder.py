import logging
import os
import posixpath
from typing import List, Mapping, Optional, Set, Tuple

from pbxwriter.config import BuildSystem, Options
from pbxwriter.details.build_graph import BuildGraph, BuildSettings
from pbxwriter.details.source_file import (
    SOURCE_ROOT,
    SourceFile,
    is_path_absolute,
    is_string_in_output_dir,
    rebase_path,
)
from pbxwriter.details.targets.target import OutputType, Target
from pbxwriter.details.targets.toolchain import Toolchain, toolchain_label_name
from pbxwriter.errors import MissingToolForOutput
from pbxwriter.generators.xcode.build_script import get_build_script
from pbxwriter.generators.xcode.ids import assign_ids
from pbxwriter.generators.xcode.model import (
    TOOL_PRODUCT_TYPE,
    CompilerFlags,
    FileType,
    PBXAttributes,
    PBXNativeTarget,
    PBXProject,
)
from pbxwriter.generators.xcode.target_selector import get_targets_from_graph
from pbxwriter.generators.xcode.xctest import (
    XCTestFilesResolver,
    find_application_target_by_name,
    is_test_module_target,
    is_xctest_module_target,
    is_xcuitest_module_target,
    is_xcuitest_runner_target,
    strip_module_suffix,
)

logger = logging.getLogger(__name__)

AGGREGATE_TARGET_NAME = "All"

BundleTargets = List[Tuple[Target, PBXNativeTarget]]

# Xcode asks to upgrade the project if those are not set. The build settings
# are never used to compile (ninja does), so they can safely be set.
XCODE_UPGRADE_CHECK_ATTRIBUTES: PBXAttributes = {
    "ALWAYS_SEARCH_USER_PATHS": "NO",
    "CLANG_ANALYZER_LOCALIZABILITY_NONLOCALIZED": "YES",
    "CLANG_WARN__DUPLICATE_METHOD_MATCH": "YES",
    "CLANG_WARN_BLOCK_CAPTURE_AUTORELEASING": "YES",
    "CLANG_WARN_BOOL_CONVERSION": "YES",
    "CLANG_WARN_COMMA": "YES",
    "CLANG_WARN_CONSTANT_CONVERSION": "YES",
    "CLANG_WARN_DEPRECATED_OBJC_IMPLEMENTATIONS": "YES",
    "CLANG_WARN_EMPTY_BODY": "YES",
    "CLANG_WARN_ENUM_CONVERSION": "YES",
    "CLANG_WARN_INFINITE_RECURSION": "YES",
    "CLANG_WARN_INT_CONVERSION": "YES",
    "CLANG_WARN_NON_LITERAL_NULL_CONVERSION": "YES",
    "CLANG_WARN_OBJC_IMPLICIT_RETAIN_SELF": "YES",
    "CLANG_WARN_OBJC_LITERAL_CONVERSION": "YES",
    "CLANG_WARN_QUOTED_INCLUDE_IN_FRAMEWORK_HEADER": "YES",
    "CLANG_WARN_RANGE_LOOP_ANALYSIS": "YES",
    "CLANG_WARN_STRICT_PROTOTYPES": "YES",
    "CLANG_WARN_SUSPICIOUS_MOVE": "YES",
    "CLANG_WARN_UNREACHABLE_CODE": "YES",
    "ENABLE_STRICT_OBJC_MSGSEND": "YES",
    "ENABLE_TESTABILITY": "YES",
    "GCC_NO_COMMON_BLOCKS": "YES",
    "GCC_WARN_64_TO_32_BIT_CONVERSION": "YES",
    "GCC_WARN_ABOUT_RETURN_TYPE": "YES",
    "GCC_WARN_UNDECLARED_SELECTOR": "YES",
    "GCC_WARN_UNINITIALIZED_AUTOS": "YES",
    "GCC_WARN_UNUSED_FUNCTION": "YES",
    "GCC_WARN_UNUSED_VARIABLE": "YES",
    "ONLY_ACTIVE_ARCH": "YES",
}


# Returns a configuration name derived from the build directory, following
# the Xcode convention of naming it out/$configuration-$platform
# ("//out/Debug-iphonesimulator/" -> "Debug").
def config_name_from_build_settings(settings: BuildSettings) -> str:
    build_dir = settings.build_dir[len(SOURCE_ROOT) :].rstrip("/")
    config_name = posixpath.basename(build_dir) or settings.root_path.name
    return config_name.split("-", 1)[0]


# Path of the source root relative to the build directory.
def source_path_from_build_settings(settings: BuildSettings) -> str:
    return rebase_path(SOURCE_ROOT, settings.build_dir)


def project_attributes_from_build_settings(settings: BuildSettings) -> PBXAttributes:
    attributes: PBXAttributes = {}
    if settings.target_os == "ios":
        attributes["SDKROOT"] = "iphoneos"
        attributes["TARGETED_DEVICE_FAMILY"] = "1,2"
    elif settings.target_os == "tvos":
        attributes["SDKROOT"] = "appletvos"
        attributes["TARGETED_DEVICE_FAMILY"] = "3"
    else:
        attributes["SDKROOT"] = "macosx"
    attributes.update(XCODE_UPGRADE_CHECK_ATTRIBUTES)
    return attributes


class XcodeProjectBuilder:
    """
    Builds the PBXProject for a build graph.

    The phases must be run in order: add_sources_from_graph(),
    add_targets_from_graph(), then assign_ids(). Any error is raised and
    leaves the project half built, it must then be discarded.
    """

    def __init__(
        self,
        options: Options,
        settings: BuildSettings,
        environ: Mapping[str, str] = os.environ,
    ):
        self.options = options
        self.settings = settings
        self.environ = environ
        self.root_src_dir = source_path_from_build_settings(settings)
        self.project = PBXProject(
            name=options.project_name,
            config_name=config_name_from_build_settings(settings),
            source_path=self.root_src_dir,
            attributes=project_attributes_from_build_settings(settings),
        )

    def should_include_file_in_project(self, source: SourceFile) -> bool:
        if is_string_in_output_dir(self.settings.build_dir, source.value):
            return False
        if is_path_absolute(source.value):
            return False
        return True

    def add_sources_from_graph(self, graph: BuildGraph) -> None:
        """
        Adds every file known to the build graph to the project: sources,
        inputs, public headers, action scripts, build files (and the files
        they import) and the files read while building the graph.
        """
        candidates: List[SourceFile] = []

        for target in graph.all_resolved_targets():
            candidates.extend(target.sources)
            candidates.extend(target.inputs)
            candidates.extend(target.public_headers)
            if target.output_type in (OutputType.ACTION, OutputType.ACTION_FOREACH):
                if target.action_script is not None:
                    candidates.append(target.action_script)

        for item in graph.all_resolved_items():
            candidates.append(graph.build_file_for_label(item.label))
            candidates.extend(item.imported_files)

        for path in graph.gen_dependencies:
            source = self.settings.source_file_for_path(path)
            if source is not None:
                candidates.append(source)

        sources: Set[SourceFile] = {
            source for source in candidates if self.should_include_file_in_project(source)
        }
        for source in sorted(sources):
            source_file = rebase_path(source.value, SOURCE_ROOT)
            self.project.add_source_file_to_indexing_target(
                source_file, source_file, CompilerFlags.NONE
            )
        logger.info("added %d source files", len(sources))

    def add_targets_from_graph(self, graph: BuildGraph) -> None:
        self.project.add_aggregate_target(
            AGGREGATE_TARGET_NAME,
            get_build_script(
                self.options.root_target_name,
                self.options.ninja_executable,
                self.root_src_dir,
                self.environ,
            ),
        )

        targets = get_targets_from_graph(graph, self.options.dir_filters_string)
        bundle_targets: BundleTargets = []

        for target in targets:
            if target.output_type == OutputType.EXECUTABLE:
                # Executables cannot be run directly on iOS or tvOS
                if self.settings.is_mobile_target_os:
                    logger.debug("skipping %s for %s", target.label, self.settings.target_os)
                    continue
                self.add_binary_target(target)

            elif target.output_type == OutputType.CREATE_BUNDLE:
                if not target.product_type:
                    logger.debug("skipping %s: no product type", target.label)
                    continue
                # XCUITests generate two bundles, ${name}_runner and
                # ${name}_module, only the module is added (named ${name}).
                if is_xcuitest_runner_target(target):
                    logger.debug("skipping xcuitest runner %s", target.label)
                    continue
                bundle_targets.append((target, self.add_bundle_target(target)))

        logger.info("added %d targets", len(self.project.targets))

        self.add_xctest_files_for_test_module_targets(bundle_targets)
        self.add_dependency_targets_for_test_module_targets(bundle_targets)

    def add_binary_target(self, target: Target) -> PBXNativeTarget:
        assert target.output_type == OutputType.EXECUTABLE

        if target.output_dir:
            output_dir = rebase_path(target.output_dir, self.settings.build_dir)
        else:
            output_dir = self._default_output_dir(target)

        return self.project.add_native_target(
            name=target.name,
            type=FileType.EXECUTABLE.value,
            output_name=target.output_name or target.name,
            output_type=TOOL_PRODUCT_TYPE,
            output_dir=output_dir,
            shell_script=self._build_script(target.name),
        )

    def add_bundle_target(self, target: Target) -> PBXNativeTarget:
        assert target.output_type == OutputType.CREATE_BUNDLE

        pbxtarget_name = target.name
        if is_xcuitest_module_target(target):
            pbxtarget_name = strip_module_suffix(target.name)

        extra_attributes = dict(target.bundle_data.extra_attributes)
        if self.options.build_system == BuildSystem.LEGACY:
            extra_attributes["CODE_SIGN_IDENTITY"] = ""

        build_dir = self.settings.build_dir
        return self.project.add_native_target(
            name=pbxtarget_name,
            type="",
            output_name=rebase_path(target.bundle_data.root_dir, build_dir),
            output_type=target.product_type,
            output_dir=rebase_path(target.bundle_data.bundle_dir, build_dir),
            shell_script=self._build_script(pbxtarget_name),
            extra_attributes=extra_attributes,
        )

    def add_xctest_files_for_test_module_targets(self, bundle_targets: BundleTargets) -> None:
        # The new build system no longer accepts compiling files with --help
        # to have them indexed only.
        if self.options.build_system == BuildSystem.NEW:
            return

        resolver = XCTestFilesResolver()
        for target, native_target in bundle_targets:
            if not is_test_module_target(target):
                continue

            # XCTest files are compiled in the host application, XCUITest
            # files in the test module itself.
            if is_xctest_module_target(target):
                target_with_xctest_files, _ = find_application_target_by_name(
                    target.bundle_data.test_application_name,
                    bundle_targets,
                    target.defined_from,
                )
            else:
                target_with_xctest_files = target

            for source in sorted(resolver.search_files_for_target(target_with_xctest_files)):
                source_path = rebase_path(source.value, SOURCE_ROOT)
                self.project.add_source_file(
                    source_path, source_path, CompilerFlags.HELP, native_target
                )

    def add_dependency_targets_for_test_module_targets(self, bundle_targets: BundleTargets) -> None:
        if self.options.build_system == BuildSystem.NEW:
            return

        for target, native_target in bundle_targets:
            if not is_test_module_target(target):
                continue

            _, host_native_target = find_application_target_by_name(
                target.bundle_data.test_application_name,
                bundle_targets,
                target.defined_from,
            )
            self.project.add_target_dependency(host_native_target, native_target)
            logger.debug("%s depends on %s", native_target.name, host_native_target.name)

    def assign_ids(self) -> None:
        assign_ids(self.project)

    def _build_script(self, target_name: str) -> str:
        return get_build_script(
            target_name, self.options.ninja_executable, self.root_src_dir, self.environ
        )

    def _default_output_dir(self, target: Target) -> str:
        toolchain: Optional[Toolchain] = target.toolchain
        tool = toolchain.get_tool_for_target_final_output(target) if toolchain else None
        if tool is None:
            raise MissingToolForOutput(
                Toolchain.tool_name_for_final_output(target),
                toolchain_label_name(toolchain),
                target.label.user_visible_name(),
            )
        return tool.apply_default_output_dir(target)


def generate_xcode_project(
    options: Options,
    graph: BuildGraph,
    environ: Mapping[str, str] = os.environ,
) -> PBXProject:
    builder = XcodeProjectBuilder(options, graph.settings, environ)
    builder.add_sources_from_graph(graph)
    builder.add_targets_from_graph(graph)
    builder.assign_ids()
    return builder.project
