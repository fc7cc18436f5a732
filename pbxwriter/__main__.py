from argparse import ArgumentParser
import logging
import sys

from pbxwriter.config import BuildSystem, Options
from pbxwriter.details.graph_loader import load_build_graph
from pbxwriter.errors import GenerationError
from pbxwriter.generators.xcode import XcodeGenerator


def main(argv=None):
    parser = ArgumentParser(
        prog="pbxwriter",
        description="Generate an Xcode project delegating the build to ninja.",
    )
    parser.add_argument("--graph", type=str, required=True, help="resolved build graph (JSON)")
    parser.add_argument("--project-name", type=str, default="all")
    parser.add_argument("--ninja-executable", type=str, default="")
    parser.add_argument(
        "--build-system",
        choices=[build_system.value for build_system in BuildSystem],
        default=BuildSystem.LEGACY.value,
    )
    parser.add_argument("--filters", type=str, default="", help="';' separated label patterns")
    parser.add_argument("--root-target", type=str, default="", help="target built by 'All'")
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s: %(name)s: %(message)s",
    )

    options = Options(
        project_name=args.project_name,
        ninja_executable=args.ninja_executable,
        build_system=BuildSystem.from_string(args.build_system),
        dir_filters_string=args.filters,
        root_target_name=args.root_target,
    )

    try:
        graph = load_build_graph(args.graph)
        XcodeGenerator(options, graph)()
    except GenerationError as err:
        print(f"ERROR: {err}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
