import logging
from typing import Dict, FrozenSet, Iterable, List, Optional, Set, Tuple, TypeVar

from pbxwriter.details.label import Label
from pbxwriter.details.source_file import SourceFile
from pbxwriter.details.targets.target import (
    UI_TEST_PRODUCT_TYPE,
    UNIT_TEST_PRODUCT_TYPE,
    Target,
)
from pbxwriter.errors import DependencyCycleError, HostApplicationNotFound, NotAnApplicationBundle

logger = logging.getLogger(__name__)

XCTEST_FILE_SUFFIXES = (
    "egtest.m",
    "egtest.mm",
    "xctest.m",
    "xctest.mm",
)

XCTEST_MODULE_TARGET_SUFFIX = "_module"
XCUITEST_RUNNER_TARGET_SUFFIX = "_runner"

T = TypeVar("T")


def is_xctest_file(source: SourceFile) -> bool:
    return source.name.endswith(XCTEST_FILE_SUFFIXES)


def is_xcuitest_runner_target(target: Target) -> bool:
    return target.is_application() and target.name.endswith(XCUITEST_RUNNER_TARGET_SUFFIX)


def is_xctest_module_target(target: Target) -> bool:
    return (
        target.is_bundle
        and target.product_type == UNIT_TEST_PRODUCT_TYPE
        and target.name.endswith(XCTEST_MODULE_TARGET_SUFFIX)
    )


def is_xcuitest_module_target(target: Target) -> bool:
    return (
        target.is_bundle
        and target.product_type == UI_TEST_PRODUCT_TYPE
        and target.name.endswith(XCTEST_MODULE_TARGET_SUFFIX)
    )


def is_test_module_target(target: Target) -> bool:
    return is_xctest_module_target(target) or is_xcuitest_module_target(target)


# "Foo_module" -> "Foo"
def strip_module_suffix(name: str) -> str:
    index = name.rfind(XCTEST_MODULE_TARGET_SUFFIX)
    return name[:index] if index >= 0 else name


class XCTestFilesResolver:
    """
    Collects the XCTest files of a target and of all its public and private
    dependencies.

    Results are cached per target label, reuse the same resolver for all the
    targets of a project so shared dependencies are only searched once.
    """

    def __init__(self):
        self.cache: Dict[Label, FrozenSet[SourceFile]] = {}
        self._in_progress: List[Label] = []

    def search_files_for_target(self, target: Target) -> FrozenSet[SourceFile]:
        cached = self.cache.get(target.label)
        if cached is not None:
            return cached

        if target.label in self._in_progress:
            cycle = self._in_progress[self._in_progress.index(target.label) :]
            chain = " -> ".join(str(label) for label in cycle + [target.label])
            raise DependencyCycleError(f"dependency cycle: {chain}", target.defined_from)

        self._in_progress.append(target.label)
        try:
            xctest_files: Set[SourceFile] = {
                source for source in target.sources if is_xctest_file(source)
            }
            for dep in target.linked_deps:
                xctest_files.update(self.search_files_for_target(dep))
        finally:
            self._in_progress.pop()

        result = frozenset(xctest_files)
        self.cache[target.label] = result
        logger.debug("found %d xctest files for %s", len(result), target.label)
        return result


def find_application_target_by_name(
    name: str,
    bundle_targets: Iterable[Tuple[Target, T]],
    location: Optional[str] = None,
) -> Tuple[Target, T]:
    """
    Finds the (target, native target) pair of the application bundle named
    |name| among |bundle_targets|.

    Raises:
        NotAnApplicationBundle: if the target named |name| is not an
            application bundle.
        HostApplicationNotFound: if no target is named |name|.
    """
    for target, native_target in bundle_targets:
        if target.name != name:
            continue
        if not target.is_application():
            raise NotAnApplicationBundle(name, location)
        return target, native_target
    raise HostApplicationNotFound(name, location)
