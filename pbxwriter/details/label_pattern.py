from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterable, List, Optional, Sequence, TypeVar

from pbxwriter.details.label import Label
from pbxwriter.details.source_file import SOURCE_ROOT, resolve_relative_file
from pbxwriter.errors import FilterSyntaxError, PathResolutionError

# Patterns accepted in a filter string (';' separated, relative to "//"):
#
#   "*"              every target
#   "//foo/*"        every target in //foo and its subdirectories
#   "//foo:*"        every target in //foo
#   "//foo:bar"      the target //foo:bar
#   "//foo"          the target //foo:foo
#
# Any of those may be followed by "(//toolchain:name)" to only match
# targets of that toolchain.


class PatternType(Enum):
    MATCH = auto()
    DIRECTORY = auto()
    RECURSIVE_DIRECTORY = auto()


@dataclass(frozen=True)
class LabelPattern:
    type: PatternType
    dir: str
    name: str = ""
    toolchain: Optional[Label] = None

    def matches(self, label: Label) -> bool:
        if self.toolchain is not None and (
            label.toolchain_dir != self.toolchain.dir
            or label.toolchain_name != self.toolchain.name
        ):
            return False
        if self.type == PatternType.MATCH:
            return label.dir == self.dir and label.name == self.name
        if self.type == PatternType.DIRECTORY:
            return label.dir == self.dir
        return label.dir.startswith(self.dir)


def _resolve_dir(path: str, pattern: str) -> str:
    if not path:
        return SOURCE_ROOT
    if path.startswith("//"):
        relative = path[len(SOURCE_ROOT) :]
    elif path.startswith("/"):
        raise FilterSyntaxError(f"absolute paths are not supported in '{pattern}'")
    else:
        relative = path
    relative = relative.strip("/")
    if not relative:
        return SOURCE_ROOT
    try:
        return resolve_relative_file(SOURCE_ROOT, relative).value + "/"
    except PathResolutionError as err:
        raise FilterSyntaxError(f"invalid directory in '{pattern}': {err.message}") from err


def _parse_toolchain(text: str, pattern: str) -> Optional[Label]:
    if not text:
        return None
    try:
        return Label.parse(text)
    except ValueError as err:
        raise FilterSyntaxError(f"invalid toolchain in '{pattern}': {err}") from err


def parse_label_pattern(pattern: str) -> LabelPattern:
    text = pattern
    toolchain: Optional[Label] = None
    if text.endswith(")"):
        open_index = text.find("(")
        if open_index < 0:
            raise FilterSyntaxError(f"unbalanced parenthesis in '{pattern}'")
        toolchain = _parse_toolchain(text[open_index + 1 : -1], pattern)
        text = text[:open_index]
    elif "(" in text or ")" in text:
        raise FilterSyntaxError(f"unbalanced parenthesis in '{pattern}'")

    if text in ("*", "//*"):
        return LabelPattern(PatternType.RECURSIVE_DIRECTORY, SOURCE_ROOT, toolchain=toolchain)

    if ":" in text:
        path, name = text.split(":", 1)
        if not name or ":" in name or "/" in name:
            raise FilterSyntaxError(f"invalid target name in '{pattern}'")
        if "*" in path:
            raise FilterSyntaxError(f"'*' is not supported in the directory of '{pattern}'")
        if name == "*":
            return LabelPattern(PatternType.DIRECTORY, _resolve_dir(path, pattern), toolchain=toolchain)
        if "*" in name:
            raise FilterSyntaxError(f"'*' must be the whole target name in '{pattern}'")
        return LabelPattern(PatternType.MATCH, _resolve_dir(path, pattern), name, toolchain)

    if text.endswith("/*"):
        path = text[:-2]
        if "*" in path:
            raise FilterSyntaxError(f"'*' is only supported at the end of '{pattern}'")
        return LabelPattern(PatternType.RECURSIVE_DIRECTORY, _resolve_dir(path, pattern), toolchain=toolchain)

    if "*" in text:
        raise FilterSyntaxError(f"'*' is only supported at the end of '{pattern}'")
    directory = _resolve_dir(text, pattern)
    if directory == SOURCE_ROOT:
        raise FilterSyntaxError(f"'{pattern}' does not name a target")
    name = directory.rstrip("/").rsplit("/", 1)[-1]
    return LabelPattern(PatternType.MATCH, directory, name, toolchain)


def filter_patterns_from_string(patterns: str) -> List[LabelPattern]:
    return [
        parse_label_pattern(p.strip())
        for p in patterns.split(";")
        if p.strip()
    ]


T = TypeVar("T")


def filter_targets_by_patterns(targets: Iterable[T], patterns: Sequence[LabelPattern]) -> List[T]:
    return [
        target
        for target in targets
        if any(pattern.matches(target.label) for pattern in patterns)
    ]
