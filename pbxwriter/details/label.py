from dataclasses import dataclass

from pbxwriter.details.source_file import SOURCE_ROOT, as_source_dir, is_source_absolute


def _split_toolchain(text: str) -> tuple[str, str]:
    if not text.endswith(")"):
        if "(" in text or ")" in text:
            raise ValueError(f"unbalanced toolchain in label '{text}'")
        return text, ""
    open_index = text.find("(")
    if open_index < 0:
        raise ValueError(f"unbalanced toolchain in label '{text}'")
    return text[:open_index], text[open_index + 1 : -1]


def _split_dir_and_name(text: str) -> tuple[str, str]:
    if ":" in text:
        dir_part, name = text.split(":", 1)
    else:
        dir_part, name = text, text.rstrip("/").rsplit("/", 1)[-1]
    if not is_source_absolute(dir_part):
        raise ValueError(f"label '{text}' is not source absolute")
    if not name or ":" in name or "/" in name:
        raise ValueError(f"invalid target name in label '{text}'")
    return as_source_dir(dir_part), name


@dataclass(frozen=True, order=True)
class Label:
    dir: str
    name: str
    toolchain_dir: str = ""
    toolchain_name: str = ""

    @staticmethod
    def parse(text: str) -> "Label":
        text = text.strip()
        target_part, toolchain_part = _split_toolchain(text)
        dir_part, name = _split_dir_and_name(target_part)
        if toolchain_part:
            toolchain_dir, toolchain_name = _split_dir_and_name(toolchain_part)
            return Label(dir_part, name, toolchain_dir, toolchain_name)
        return Label(dir_part, name)

    @property
    def has_toolchain(self) -> bool:
        return bool(self.toolchain_name)

    def toolchain_label(self) -> "Label":
        return Label(self.toolchain_dir, self.toolchain_name)

    def with_toolchain(self, toolchain: "Label") -> "Label":
        return Label(self.dir, self.name, toolchain.dir, toolchain.name)

    def user_visible_name(self, include_toolchain: bool = False) -> str:
        result = f"{_dir_without_slash(self.dir)}:{self.name}"
        if include_toolchain and self.has_toolchain:
            result += f"({_dir_without_slash(self.toolchain_dir)}:{self.toolchain_name})"
        return result

    def __str__(self) -> str:
        return self.user_visible_name(include_toolchain=True)


def _dir_without_slash(source_dir: str) -> str:
    if source_dir == SOURCE_ROOT:
        return source_dir
    return source_dir.rstrip("/")
