from pathlib import Path
from typing import Dict, Iterator, List, Optional

from pbxwriter.details.label import Label
from pbxwriter.details.source_file import SourceFile, as_source_dir
from pbxwriter.details.targets.target import Item, Target
from pbxwriter.details.targets.toolchain import Toolchain

MOBILE_TARGET_OS = ("ios", "tvos")


class BuildSettings:
    def __init__(
        self,
        *,
        root_path: Path,
        build_dir: str,
        args: Optional[Dict[str, str]] = None,
        build_file_name: str = "BUILD.gn",
    ):
        self.root_path = Path(root_path)
        self.build_dir = as_source_dir(build_dir)
        self.args = dict(args or {})
        self.build_file_name = build_file_name

    @property
    def target_os(self) -> str:
        return self.args.get("target_os", "mac")

    @property
    def is_mobile_target_os(self) -> bool:
        return self.target_os in MOBILE_TARGET_OS

    def full_path(self, source_file: SourceFile) -> Path:
        return self.root_path.joinpath(source_file.value[2:])

    # Converts an absolute path below root_path to "//relative/path", returns
    # None for files outside of the source tree.
    def source_file_for_path(self, path: Path) -> Optional[SourceFile]:
        try:
            relative = Path(path).relative_to(self.root_path)
        except ValueError:
            return None
        if not relative.parts:
            return None
        return SourceFile("//" + relative.as_posix())


class BuildGraph:
    def __init__(
        self,
        *,
        settings: BuildSettings,
        targets: List[Target],
        items: List[Item] = [],
        toolchains: List[Toolchain] = [],
        gen_dependencies: List[Path] = [],
    ):
        self.settings = settings
        self.targets = list(targets)
        self.items = list(items)
        self.toolchains = list(toolchains)
        self.gen_dependencies = [Path(p) for p in gen_dependencies]

    def all_resolved_targets(self) -> List[Target]:
        return list(self.targets)

    def all_resolved_items(self) -> Iterator[Item]:
        yield from self.targets
        yield from self.items
        yield from self.toolchains

    def build_file_for_label(self, label: Label) -> SourceFile:
        return SourceFile(label.dir + self.settings.build_file_name)
