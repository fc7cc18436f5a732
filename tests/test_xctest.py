import pytest

from pbxwriter.details.source_file import SourceFile
from pbxwriter.details.targets.target import (
    APPLICATION_PRODUCT_TYPE,
    UI_TEST_PRODUCT_TYPE,
    UNIT_TEST_PRODUCT_TYPE,
    OutputType,
)
from pbxwriter.errors import DependencyCycleError, HostApplicationNotFound, NotAnApplicationBundle
from pbxwriter.generators.xcode.xctest import (
    XCTestFilesResolver,
    find_application_target_by_name,
    is_xctest_file,
    is_xctest_module_target,
    is_xcuitest_module_target,
    is_xcuitest_runner_target,
    strip_module_suffix,
)


@pytest.mark.parametrize(
    "path,expected",
    [
        ("//ios/foo_egtest.m", True),
        ("//ios/foo_egtest.mm", True),
        ("//ios/foo_xctest.m", True),
        ("//ios/foo_xctest.mm", True),
        ("//ios/foo_unittest.mm", False),
        ("//ios/foo_XCTest.mm", False),
        ("//ios/foo_xctest.h", False),
    ],
)
def test_is_xctest_file(path, expected):
    assert is_xctest_file(SourceFile(path)) == expected


def test_target_kinds(graph_builder):
    unit = graph_builder.add_bundle("//ios:Foo_module", UNIT_TEST_PRODUCT_TYPE)
    ui = graph_builder.add_bundle("//ios:Bar_module", UI_TEST_PRODUCT_TYPE)
    runner = graph_builder.add_bundle("//ios:Bar_runner", APPLICATION_PRODUCT_TYPE)
    app = graph_builder.add_bundle("//ios:App", APPLICATION_PRODUCT_TYPE)
    unsuffixed = graph_builder.add_bundle("//ios:FooTests", UNIT_TEST_PRODUCT_TYPE)

    assert is_xctest_module_target(unit) and not is_xcuitest_module_target(unit)
    assert is_xcuitest_module_target(ui) and not is_xctest_module_target(ui)
    assert is_xcuitest_runner_target(runner)
    assert not is_xcuitest_runner_target(app)
    assert not is_xctest_module_target(unsuffixed)


def test_strip_module_suffix():
    assert strip_module_suffix("Foo_module") == "Foo"
    assert strip_module_suffix("Foo") == "Foo"


def test_search_collects_transitive_files(graph_builder):
    c = graph_builder.add_target(
        "//c:c", OutputType.SOURCE_SET, sources=["//c/c_xctest.mm", "//c/c.mm"]
    )
    b = graph_builder.add_target(
        "//b:b", OutputType.SOURCE_SET, sources=["//b/b_egtest.mm"], private_deps=[c]
    )
    a = graph_builder.add_target(
        "//a:a", OutputType.SOURCE_SET, sources=["//a/a_xctest.m"], public_deps=[b]
    )

    resolver = XCTestFilesResolver()
    files_a = resolver.search_files_for_target(a)
    files_b = resolver.search_files_for_target(b)
    files_c = resolver.search_files_for_target(c)

    assert files_c == {SourceFile("//c/c_xctest.mm")}
    assert files_b == files_c | {SourceFile("//b/b_egtest.mm")}
    assert files_a == files_b | {SourceFile("//a/a_xctest.m")}


def test_data_deps_are_not_searched(graph_builder):
    data = graph_builder.add_target("//d:d", OutputType.SOURCE_SET, sources=["//d/d_xctest.mm"])
    a = graph_builder.add_target("//a:a", OutputType.SOURCE_SET, data_deps=[data])
    assert XCTestFilesResolver().search_files_for_target(a) == set()


def test_search_is_memoized_per_label(graph_builder):
    shared = graph_builder.add_target(
        "//shared:shared", OutputType.SOURCE_SET, sources=["//shared/s_xctest.mm"]
    )
    left = graph_builder.add_target("//left:left", OutputType.SOURCE_SET, public_deps=[shared])
    right = graph_builder.add_target("//right:right", OutputType.SOURCE_SET, public_deps=[shared])
    top = graph_builder.add_target("//top:top", OutputType.SOURCE_SET, private_deps=[left, right])

    visited = []

    class CountingResolver(XCTestFilesResolver):
        def search_files_for_target(self, target):
            if target.label not in self.cache:
                visited.append(target.label)
            return super().search_files_for_target(target)

    resolver = CountingResolver()
    assert resolver.search_files_for_target(top) == {SourceFile("//shared/s_xctest.mm")}
    assert visited.count(shared.label) == 1
    assert set(resolver.cache) == {shared.label, left.label, right.label, top.label}


def test_search_detects_cycles(graph_builder):
    a = graph_builder.add_target("//a:a", OutputType.SOURCE_SET)
    b = graph_builder.add_target("//b:b", OutputType.SOURCE_SET, public_deps=[a])
    a.public_deps.append(b)
    with pytest.raises(DependencyCycleError, match="//a:a -> //b:b -> //a:a"):
        XCTestFilesResolver().search_files_for_target(a)


def test_find_application_target_by_name(graph_builder):
    app = graph_builder.add_bundle("//ios:App", APPLICATION_PRODUCT_TYPE)
    tests = graph_builder.add_bundle("//ios:Tests_module", UNIT_TEST_PRODUCT_TYPE)
    bundle_targets = [(tests, "tests-node"), (app, "app-node")]

    assert find_application_target_by_name("App", bundle_targets) == (app, "app-node")

    with pytest.raises(NotAnApplicationBundle, match='"Tests_module" not an application bundle'):
        find_application_target_by_name("Tests_module", bundle_targets, "//ios/BUILD.gn:12")

    with pytest.raises(HostApplicationNotFound) as info:
        find_application_target_by_name("Missing", bundle_targets, "//ios/BUILD.gn:12")
    assert str(info.value) == '//ios/BUILD.gn:12: cannot find host application bundle "Missing"'
