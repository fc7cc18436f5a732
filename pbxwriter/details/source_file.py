import posixpath
from dataclasses import dataclass

from pbxwriter.errors import PathResolutionError

SOURCE_ROOT = "//"


def is_source_absolute(path: str) -> bool:
    return path.startswith(SOURCE_ROOT)


# System absolute paths ("/usr/include/foo.h"), not source absolute ones.
def is_path_absolute(path: str) -> bool:
    return path.startswith("/") and not is_source_absolute(path)


def as_source_dir(path: str) -> str:
    if not is_source_absolute(path):
        raise PathResolutionError(f"'{path}' is not a source absolute directory")
    return path if path.endswith("/") else path + "/"


@dataclass(frozen=True, order=True)
class SourceFile:
    value: str

    @property
    def name(self) -> str:
        return self.value.rsplit("/", 1)[-1]

    @property
    def extension(self) -> str:
        _, ext = posixpath.splitext(self.name)
        return ext[1:] if ext else ""

    def __str__(self) -> str:
        return self.value


def _as_posix_absolute(path: str) -> str:
    # "//foo/bar" -> "/foo/bar" so posixpath can do the arithmetic
    return "/" + path[len(SOURCE_ROOT):]


# Returns |path| (source absolute) relative to the source absolute directory
# |dest_dir|, e.g. rebase_path("//", "//out/Debug/") == "../..".
def rebase_path(path: str, dest_dir: str) -> str:
    if is_path_absolute(path):
        return path
    if not is_source_absolute(path):
        raise PathResolutionError(f"cannot rebase non source absolute path '{path}'")
    dest_dir = as_source_dir(dest_dir)
    return posixpath.relpath(_as_posix_absolute(path), _as_posix_absolute(dest_dir))


def resolve_relative_file(source_dir: str, name: str) -> SourceFile:
    source_dir = as_source_dir(source_dir)
    if not name or name.endswith("/"):
        raise PathResolutionError(f"'{name}' does not name a file in {source_dir}")
    if is_source_absolute(name) or name.startswith("/"):
        raise PathResolutionError(f"'{name}' must be relative to {source_dir}")
    joined = posixpath.normpath(posixpath.join(source_dir[len(SOURCE_ROOT):], name))
    if joined in (".", "..") or joined.startswith("../"):
        raise PathResolutionError(f"'{name}' resolves outside of the source root")
    return SourceFile(SOURCE_ROOT + joined)


def is_string_in_output_dir(build_dir: str, path: str) -> bool:
    return path.startswith(as_source_dir(build_dir))
