import json

import pytest

from pbxwriter.details.graph_loader import build_graph_from_dict, load_build_graph
from pbxwriter.details.label import Label
from pbxwriter.details.source_file import SourceFile
from pbxwriter.details.targets.target import APPLICATION_PRODUCT_TYPE, OutputType
from pbxwriter.errors import GenerationError, UnknownLabelError


def _graph_data(**overrides):
    data = {
        "root_path": "src",
        "build_dir": "//out/Debug",
        "args": {"target_os": "ios"},
        "default_toolchain": "//build/toolchain:clang",
        "toolchains": [
            {
                "label": "//build/toolchain:clang",
                "tools": {"link": {"default_output_dir": "{{root_out_dir}}/bin"}},
            },
            {"label": "//build/toolchain:host", "tools": {"link": {}}},
        ],
        "targets": [
            {
                "label": "//app:app",
                "type": "create_bundle",
                "sources": ["main.mm", "//base/shared.cc"],
                "private_deps": ["//base:base"],
                "bundle_data": {
                    "product_type": APPLICATION_PRODUCT_TYPE,
                    "root_dir": "//out/Debug/app.app",
                },
                "defined_from": "//app/BUILD.gn:3",
            },
            {
                "label": "//base:base",
                "type": "static_library",
                "public_headers": ["base.h"],
                "imported_files": ["//build/config/base.gni"],
            },
            {
                "label": "//tools:gen(//build/toolchain:host)",
                "type": "executable",
                "output_name": "generator",
            },
            {"label": "//tools:script", "type": "action", "action_script": "gen.py"},
        ],
        "items": [{"label": "//build/config:compiler"}],
        "gen_dependencies": ["/src/.gn"],
    }
    data.update(overrides)
    return data


def test_build_graph_from_dict(tmp_path):
    graph = build_graph_from_dict(_graph_data(), tmp_path)

    assert graph.settings.root_path == (tmp_path / "src").resolve()
    assert graph.settings.build_dir == "//out/Debug/"
    assert graph.settings.is_mobile_target_os
    assert [str(t.label) for t in graph.targets] == [
        "//app:app",
        "//base:base",
        "//tools:gen(//build/toolchain:host)",
        "//tools:script",
    ]
    app, base, gen, script = graph.targets

    assert app.output_type == OutputType.CREATE_BUNDLE
    assert app.sources == [SourceFile("//app/main.mm"), SourceFile("//base/shared.cc")]
    assert app.private_deps == [base]
    assert app.is_application()
    assert app.defined_from == "//app/BUILD.gn:3"
    assert app.toolchain.is_default
    assert app.toolchain.tools["link"].default_output_dir == "{{root_out_dir}}/bin"

    assert base.public_headers == [SourceFile("//base/base.h")]
    assert base.imported_files == [SourceFile("//build/config/base.gni")]

    assert gen.toolchain.label == Label("//build/toolchain/", "host")
    assert not gen.is_default_toolchain
    assert gen.output_name == "generator"

    assert script.action_script == SourceFile("//tools/gen.py")

    assert [str(i.label) for i in graph.items] == ["//build/config:compiler"]
    assert [t.name for t in graph.toolchains] == ["clang", "host"]


def test_unknown_dependency(tmp_path):
    data = _graph_data(targets=[{"label": "//a:a", "type": "group", "public_deps": ["//b:b"]}])
    with pytest.raises(UnknownLabelError, match="unknown target //b:b"):
        build_graph_from_dict(data, tmp_path)


def test_unknown_toolchain(tmp_path):
    data = _graph_data(targets=[{"label": "//a:a(//tc:missing)", "type": "group"}])
    with pytest.raises(UnknownLabelError, match="unknown toolchain //tc:missing"):
        build_graph_from_dict(data, tmp_path)


def test_duplicate_target(tmp_path):
    target = {"label": "//a:a", "type": "group"}
    with pytest.raises(GenerationError, match="duplicate target //a:a"):
        build_graph_from_dict(_graph_data(targets=[target, dict(target)]), tmp_path)


def test_unknown_output_type(tmp_path):
    data = _graph_data(targets=[{"label": "//a:a", "type": "rust_library"}])
    with pytest.raises(GenerationError, match="unknown output type 'rust_library'"):
        build_graph_from_dict(data, tmp_path)


def test_invalid_label(tmp_path):
    data = _graph_data(targets=[{"label": "a:a", "type": "group"}])
    with pytest.raises(GenerationError):
        build_graph_from_dict(data, tmp_path)


def test_load_build_graph(tmp_path):
    path = tmp_path / "graph.json"
    path.write_text(json.dumps(_graph_data()))
    graph = load_build_graph(path)
    assert len(graph.targets) == 4


def test_load_build_graph_errors(tmp_path):
    with pytest.raises(GenerationError, match="unable to read"):
        load_build_graph(tmp_path / "missing.json")

    invalid = tmp_path / "invalid.json"
    invalid.write_text("{")
    with pytest.raises(GenerationError, match="invalid JSON"):
        load_build_graph(invalid)

    incomplete = tmp_path / "incomplete.json"
    incomplete.write_text(json.dumps({"targets": []}))
    with pytest.raises(GenerationError, match="missing key 'build_dir'"):
        load_build_graph(incomplete)
