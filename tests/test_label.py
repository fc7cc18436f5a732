import pytest

from pbxwriter.details.label import Label
from pbxwriter.details.source_file import SourceFile, rebase_path, resolve_relative_file
from pbxwriter.details.targets.target import BundleData, OutputType, Target
from pbxwriter.details.targets.toolchain import Tool, Toolchain, toolchain_label_name
from pbxwriter.errors import PathResolutionError


def test_parse():
    assert Label.parse("//base:base") == Label("//base/", "base")
    assert Label.parse("//base") == Label("//base/", "base")
    assert Label.parse("//ios/chrome/app:app") == Label("//ios/chrome/app/", "app")
    assert Label.parse("//:root") == Label("//", "root")


def test_parse_with_toolchain():
    label = Label.parse("//base:base(//build/toolchain:host)")
    assert label.has_toolchain
    assert label.toolchain_label() == Label("//build/toolchain/", "host")
    assert str(label) == "//base:base(//build/toolchain:host)"
    assert label.user_visible_name() == "//base:base"


@pytest.mark.parametrize("text", ["base:base", "//base:", "//base:a/b", "//base:base(//tc:x", "//base:x)"])
def test_parse_errors(text):
    with pytest.raises(ValueError):
        Label.parse(text)


def test_with_toolchain():
    label = Label("//base/", "base").with_toolchain(Label("//build/toolchain/", "clang"))
    assert str(label) == "//base:base(//build/toolchain:clang)"


def test_labels_sort_by_dir_then_name():
    labels = [Label("//b/", "a"), Label("//a/", "z"), Label("//a/", "b")]
    assert sorted(labels) == [Label("//a/", "b"), Label("//a/", "z"), Label("//b/", "a")]


@pytest.mark.parametrize(
    "path,dest_dir,expected",
    [
        ("//", "//out/Debug/", "../.."),
        ("//base/a.cc", "//", "base/a.cc"),
        ("//out/Debug/Foo.app", "//out/Debug/", "Foo.app"),
        ("//out/Debug/", "//out/Debug/", "."),
        ("//base/a.cc", "//out/Debug", "../../base/a.cc"),
        ("/usr/include/stdio.h", "//out/", "/usr/include/stdio.h"),
    ],
)
def test_rebase_path(path, dest_dir, expected):
    assert rebase_path(path, dest_dir) == expected


def test_rebase_path_errors():
    with pytest.raises(PathResolutionError):
        rebase_path("base/a.cc", "//out/")
    with pytest.raises(PathResolutionError):
        rebase_path("//base/a.cc", "out/")


def test_resolve_relative_file():
    assert resolve_relative_file("//out/Debug/", "all.xcodeproj/project.pbxproj") == SourceFile(
        "//out/Debug/all.xcodeproj/project.pbxproj"
    )
    assert resolve_relative_file("//base", "../ios/a.mm") == SourceFile("//ios/a.mm")


@pytest.mark.parametrize("name", ["", "dir/", "//abs", "/abs", "../..", "../../x"])
def test_resolve_relative_file_errors(name):
    with pytest.raises(PathResolutionError):
        resolve_relative_file("//base/", name)


def test_source_file():
    source = SourceFile("//ios/foo_egtest.mm")
    assert source.name == "foo_egtest.mm"
    assert source.extension == "mm"
    assert SourceFile("//BUILD").extension == ""


def test_bundle_dir():
    assert BundleData(root_dir="//out/Debug/Foo.app").bundle_dir == "//out/Debug/"
    assert BundleData(root_dir="//out/Debug/bin/Foo.xctest/").bundle_dir == "//out/Debug/bin/"


def _executable(label: str, toolchain: Toolchain) -> Target:
    return Target(label=Label.parse(label), output_type=OutputType.EXECUTABLE, toolchain=toolchain)


def test_default_output_dir():
    default = Toolchain(label=Label("//build/toolchain/", "clang"), is_default=True)
    host = Toolchain(label=Label("//build/toolchain/", "host"))

    assert Tool(name="link").apply_default_output_dir(_executable("//tools/gn:gn", default)) == "."
    assert Tool(name="link").apply_default_output_dir(_executable("//tools/gn:gn", host)) == "host"

    tool = Tool(name="link", default_output_dir="{{target_out_dir}}/bin")
    assert tool.apply_default_output_dir(_executable("//tools/gn:gn", default)) == "obj/tools/gn/bin"
    assert tool.apply_default_output_dir(_executable("//tools/gn:gn", host)) == "host/obj/tools/gn/bin"


def test_tool_for_final_output():
    toolchain = Toolchain(
        label=Label("//build/toolchain/", "clang"),
        tools={"link": Tool(name="link"), "alink": Tool(name="alink")},
    )
    exe = _executable("//a:a", toolchain)
    lib = Target(label=Label.parse("//b:b"), output_type=OutputType.SHARED_LIBRARY, toolchain=toolchain)
    assert toolchain.get_tool_for_target_final_output(exe).name == "link"
    assert toolchain.get_tool_for_target_final_output(lib) is None
    assert Toolchain.tool_name_for_final_output(lib) == "solink"
    assert toolchain_label_name(toolchain) == "//build/toolchain:clang"
    assert toolchain_label_name(None) == "<no toolchain>"
