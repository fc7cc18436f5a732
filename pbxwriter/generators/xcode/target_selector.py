import logging
from typing import List

from pbxwriter.details.build_graph import BuildGraph
from pbxwriter.details.label_pattern import filter_patterns_from_string, filter_targets_by_patterns
from pbxwriter.details.targets.target import OutputType, Target

logger = logging.getLogger(__name__)


def get_targets_from_graph(graph: BuildGraph, dir_filters_string: str = "") -> List[Target]:
    """
    Finds the targets to add to the project.

    Applies the ';' separated label patterns of |dir_filters_string| (if
    any), drops the executables that are linked dependencies of a
    bundle_data target of the default toolchain (they end up in an
    application bundle which is the target to debug), then sorts by label.
    Only those executables are pruned, the bundle_data targets are kept.
    Targets listed more than once are returned once.

    Raises:
        FilterSyntaxError: if |dir_filters_string| is malformed.
    """
    all_targets = graph.all_resolved_targets()

    if dir_filters_string:
        patterns = filter_patterns_from_string(dir_filters_string)
        all_targets = filter_targets_by_patterns(all_targets, patterns)
        logger.debug("%d targets match %r", len(all_targets), dir_filters_string)

    targets = {target.label: target for target in all_targets}
    for target in all_targets:
        if not target.is_default_toolchain:
            continue
        if target.output_type != OutputType.BUNDLE_DATA:
            continue
        for dep in target.linked_deps:
            if dep.output_type != OutputType.EXECUTABLE:
                continue
            if targets.pop(dep.label, None) is not None:
                logger.debug("%s is bundled by %s, skipping", dep.label, target.label)

    return [targets[label] for label in sorted(targets)]
