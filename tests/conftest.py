from pathlib import Path
from typing import Dict, List

import pytest

from pbxwriter.details.build_graph import BuildGraph, BuildSettings
from pbxwriter.details.label import Label
from pbxwriter.details.source_file import SourceFile
from pbxwriter.details.targets.target import (
    APPLICATION_PRODUCT_TYPE,
    BundleData,
    Item,
    OutputType,
    Target,
)
from pbxwriter.details.targets.toolchain import Tool, Toolchain

BUNDLE_EXTENSIONS = {
    APPLICATION_PRODUCT_TYPE: "app",
}

FAKE_ENVIRON = {
    "HOME": "/Users/builder",
    "LANG": "en_US.UTF-8",
    "PATH": "/usr/bin:/bin",
    "USER": "builder",
    "TMPDIR": "/tmp/should-not-be-captured",
}


class GraphBuilder:
    """Builds in-memory build graphs for tests."""

    def __init__(self, root_path: Path, build_dir: str = "//out/Debug/", args: Dict[str, str] = None):
        self.settings = BuildSettings(root_path=root_path, build_dir=build_dir, args=args)
        self.toolchain = Toolchain(
            label=Label("//build/toolchain/", "clang"),
            is_default=True,
            tools={"link": Tool(name="link"), "stamp": Tool(name="stamp")},
        )
        self.toolchains: List[Toolchain] = [self.toolchain]
        self.targets: List[Target] = []
        self.items: List[Item] = []
        self.gen_dependencies: List[Path] = []

    def add_target(self, label: str, output_type: OutputType, **kwargs) -> Target:
        kwargs.setdefault("toolchain", self.toolchain)
        kwargs.setdefault("defined_from", f"{label} defined here")
        for key in ("sources", "public_headers", "inputs"):
            kwargs[key] = [SourceFile(s) for s in kwargs.get(key, [])]
        target = Target(label=Label.parse(label), output_type=output_type, **kwargs)
        self.targets.append(target)
        return target

    def add_executable(self, label: str, **kwargs) -> Target:
        return self.add_target(label, OutputType.EXECUTABLE, **kwargs)

    def add_bundle(
        self,
        label: str,
        product_type: str,
        test_application_name: str = "",
        extra_attributes: Dict[str, str] = None,
        **kwargs,
    ) -> Target:
        name = Label.parse(label).name
        extension = BUNDLE_EXTENSIONS.get(product_type, "xctest")
        bundle_data = BundleData(
            product_type=product_type,
            root_dir=f"{self.settings.build_dir}{name}.{extension}",
            extra_attributes=extra_attributes,
            test_application_name=test_application_name,
        )
        return self.add_target(label, OutputType.CREATE_BUNDLE, bundle_data=bundle_data, **kwargs)

    def build(self) -> BuildGraph:
        return BuildGraph(
            settings=self.settings,
            targets=self.targets,
            items=self.items,
            toolchains=self.toolchains,
            gen_dependencies=self.gen_dependencies,
        )


@pytest.fixture
def graph_builder(tmp_path) -> GraphBuilder:
    return GraphBuilder(tmp_path)


@pytest.fixture
def ios_graph_builder(tmp_path) -> GraphBuilder:
    return GraphBuilder(tmp_path, args={"target_os": "ios"})


@pytest.fixture
def fake_environ() -> Dict[str, str]:
    return dict(FAKE_ENVIRON)
