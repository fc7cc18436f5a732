# Xcode project file model.
#
# This module defines the objects of a generated Xcode project file (.pbxproj)
# and their ownership tree. Every object except the PBXProject is owned by
# exactly one parent; visit() walks that tree depth-first in a stable order
# which is shared by id assignment and by the per-class serialization.
# Objects are created without an id, ids are assigned once the whole tree is
# built (see ids.py).

import posixpath
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Callable, ClassVar, Dict, Iterator, List, Optional


# Object classes, in the order their sections appear in the project file.
class PBXObjectClass(Enum):
    PBXAggregateTarget = auto()
    PBXBuildFile = auto()
    PBXContainerItemProxy = auto()
    PBXFileReference = auto()
    PBXFrameworksBuildPhase = auto()
    PBXGroup = auto()
    PBXNativeTarget = auto()
    PBXProject = auto()
    PBXResourcesBuildPhase = auto()
    PBXShellScriptBuildPhase = auto()
    PBXSourcesBuildPhase = auto()
    PBXTargetDependency = auto()
    XCBuildConfiguration = auto()
    XCConfigurationList = auto()


# Per-file compiler flags used in PBXBuildFile
class CompilerFlags(Enum):
    NONE = auto()
    # Xcode sees (and indexes) the file but clang only prints its help, the
    # real compilation is done by the build backend.
    HELP = auto()


# Source Tree values used in PBXFileReference and PBXGroup
class SourceTree(Enum):
    GROUP = "<group>"
    BUILT_PRODUCTS_DIR = "BUILT_PRODUCTS_DIR"


# File types used in PBXFileReference
class FileType(Enum):
    ARCHIVE = "archive.ar"
    APP = "wrapper.application"
    APP_EXTENSION = "wrapper.app-extension"
    BUNDLE = "wrapper.cfbundle"
    C = "sourcecode.c.c"
    CPP = "sourcecode.cpp.cpp"
    C_HEADER = "sourcecode.c.h"
    CPP_HEADER = "sourcecode.cpp.h"
    CSS = "text.css"
    DYLIB = "compiled.mach-o.dylib"
    EXECUTABLE = "compiled.mach-o.executable"
    FILE = "file"
    FRAMEWORK = "wrapper.framework"
    ICNS = "image.icns"
    JAVA = "sourcecode.java"
    JAVASCRIPT = "sourcecode.javascript"
    KEXT = "wrapper.kext"
    OBJC = "sourcecode.c.objc"
    OBJCPP = "sourcecode.cpp.objcpp"
    NIB = "wrapper.nib"
    OBJECT = "compiled.mach-o.objfile"
    PDF = "image.pdf"
    PERL = "text.script.perl"
    PLIST = "text.plist.xml"
    PNG = "image.png"
    PYTHON = "text.script.python"
    REZ = "sourcecode.rez"
    ASM = "sourcecode.asm"
    STORYBOARD = "file.storyboard"
    STRINGS = "text.plist.strings"
    SWIFT = "sourcecode.swift"
    ASSET_CATALOG = "folder.assetcatalog"
    XCCONFIG = "text.xcconfig"
    XCDATAMODEL = "wrapper.xcdatamodel"
    XCDATAMODELD = "wrapper.xcdatamodeld"
    XIB = "file.xib"
    YACC = "sourcecode.yacc"
    TEXT = "text"

    @staticmethod
    def from_extension(ext: str) -> "FileType":
        if ext.startswith("."):
            ext = ext[1:]

        ext_to_type = {
            "a": FileType.ARCHIVE,
            "app": FileType.APP,
            "appex": FileType.APP_EXTENSION,
            "bdic": FileType.FILE,
            "bundle": FileType.BUNDLE,
            "c": FileType.C,
            "cc": FileType.CPP,
            "cpp": FileType.CPP,
            "css": FileType.CSS,
            "cxx": FileType.CPP,
            "dylib": FileType.DYLIB,
            "framework": FileType.FRAMEWORK,
            "h": FileType.C_HEADER,
            "hxx": FileType.CPP_HEADER,
            "icns": FileType.ICNS,
            "java": FileType.JAVA,
            "js": FileType.JAVASCRIPT,
            "kext": FileType.KEXT,
            "m": FileType.OBJC,
            "mm": FileType.OBJCPP,
            "nib": FileType.NIB,
            "o": FileType.OBJECT,
            "pdf": FileType.PDF,
            "pl": FileType.PERL,
            "plist": FileType.PLIST,
            "pm": FileType.PERL,
            "png": FileType.PNG,
            "py": FileType.PYTHON,
            "r": FileType.REZ,
            "rez": FileType.REZ,
            "s": FileType.ASM,
            "storyboard": FileType.STORYBOARD,
            "strings": FileType.STRINGS,
            "swift": FileType.SWIFT,
            "ttf": FileType.FILE,
            "xcassets": FileType.ASSET_CATALOG,
            "xcconfig": FileType.XCCONFIG,
            "xcdatamodel": FileType.XCDATAMODEL,
            "xcdatamodeld": FileType.XCDATAMODELD,
            "xctest": FileType.BUNDLE,
            "xib": FileType.XIB,
            "y": FileType.YACC,
        }

        return ext_to_type.get(ext, FileType.TEXT)


# Extensions of files that get a PBXBuildFile in a Sources phase (anything
# else is only referenced from the navigator)
SOURCE_EXTENSIONS_FOR_INDEXING = frozenset({"c", "cc", "cpp", "cxx", "m", "mm"})

TOOL_PRODUCT_TYPE = "com.apple.product-type.tool"
BUILD_ACTION_MASK = 2147483647
SHELL_PATH = "/usr/bin/python3"

PBXAttributes = Dict[str, str]
Visitor = Callable[["PBXObject"], None]


def file_extension(path: str) -> str:
    _, ext = posixpath.splitext(posixpath.basename(path))
    return ext[1:]


# Base class for all Xcode objects
@dataclass(eq=False)
class PBXObject(ABC):
    isa: ClassVar[PBXObjectClass]
    # Printed on a single line in the project file (Xcode does so for the
    # most numerous object classes)
    single_line: ClassVar[bool] = False

    id: str = field(init=False, default="")

    @abstractmethod
    def display_name(self) -> str:
        pass

    def comment(self) -> str:
        return self.display_name()

    # Objects owned by this one, in visitation order.
    def children(self) -> Iterator["PBXObject"]:
        return iter(())

    @abstractmethod
    def properties(self) -> Dict[str, Any]:
        pass

    def set_id(self, value: str) -> None:
        if self.id:
            raise ValueError(f"{self.isa.name} {self.display_name()} already has id {self.id}")
        self.id = value

    def visit(self, visitor: Visitor) -> None:
        visitor(self)
        for child in self.children():
            child.visit(visitor)


@dataclass(eq=False)
class PBXFileReference(PBXObject):
    isa = PBXObjectClass.PBXFileReference
    single_line = True

    name: str
    path: str
    type: str = ""  # explicit type, only set for product references
    source_path: str = ""  # path relative to the source root

    def display_name(self) -> str:
        return self.name or self.path

    def properties(self) -> Dict[str, Any]:
        props: Dict[str, Any] = {}
        if self.type:
            props["explicitFileType"] = self.type
            props["includeInIndex"] = 0
        else:
            ext = file_extension(self.name or self.path)
            props["lastKnownFileType"] = FileType.from_extension(ext).value
        if self.name and self.name != self.path:
            props["name"] = self.name
        props["path"] = self.path
        source_tree = SourceTree.BUILT_PRODUCTS_DIR if self.type else SourceTree.GROUP
        props["sourceTree"] = source_tree.value
        return props


def _child_sort_key(child: PBXObject):
    return (0 if isinstance(child, PBXGroup) else 1, child.display_name())


@dataclass(eq=False)
class PBXGroup(PBXObject):
    isa = PBXObjectClass.PBXGroup

    name: str = ""
    path: str = ""
    autosorted: bool = True
    items: List[PBXObject] = field(default_factory=list)

    def display_name(self) -> str:
        return self.name or self.path

    def children(self) -> Iterator[PBXObject]:
        return iter(self.items)

    def add_child(self, child: PBXObject) -> PBXObject:
        self.items.append(child)
        if self.autosorted:
            self.items.sort(key=_child_sort_key)
        return child

    def create_group(self, name: str, path: str = "") -> "PBXGroup":
        group = PBXGroup(name=name, path=path)
        self.add_child(group)
        return group

    # Adds a file reference for |source_path| in the nested groups described
    # by |navigator_path| ("foo/bar/baz.cc" goes in group foo, then bar).
    # A file is only referenced once per (name, source_path) pair.
    def add_source_file(self, navigator_path: str, source_path: str) -> PBXFileReference:
        assert navigator_path and source_path
        component, sep, remainder = navigator_path.partition("/")
        if not sep:
            for child in self.items:
                if (
                    isinstance(child, PBXFileReference)
                    and child.name == navigator_path
                    and child.source_path == source_path
                ):
                    return child
            file_reference = PBXFileReference(
                name=navigator_path, path=navigator_path, source_path=source_path
            )
            self.add_child(file_reference)
            return file_reference

        group = next(
            (
                child
                for child in self.items
                if isinstance(child, PBXGroup) and child.name == component
            ),
            None,
        )
        if group is None:
            group = self.create_group(name=component, path=component)
        return group.add_source_file(remainder, source_path)

    def properties(self) -> Dict[str, Any]:
        props: Dict[str, Any] = {"children": list(self.items)}
        if self.name and self.name != self.path:
            props["name"] = self.name
        if self.path:
            props["path"] = self.path
        props["sourceTree"] = SourceTree.GROUP.value
        return props


@dataclass(eq=False)
class PBXBuildFile(PBXObject):
    isa = PBXObjectClass.PBXBuildFile
    single_line = True

    file_reference: PBXFileReference
    build_phase_name: str
    compiler_flag: CompilerFlags = CompilerFlags.NONE

    def display_name(self) -> str:
        return self.file_reference.display_name()

    def comment(self) -> str:
        return f"{self.display_name()} in {self.build_phase_name}"

    def properties(self) -> Dict[str, Any]:
        props: Dict[str, Any] = {"fileRef": self.file_reference}
        if self.compiler_flag == CompilerFlags.HELP:
            props["settings"] = {"COMPILER_FLAGS": "--help"}
        return props


@dataclass(eq=False)
class PBXBuildPhase(PBXObject):
    files: List[PBXBuildFile] = field(default_factory=list)

    def children(self) -> Iterator[PBXObject]:
        return iter(self.files)

    def properties(self) -> Dict[str, Any]:
        return {
            "buildActionMask": BUILD_ACTION_MASK,
            "files": list(self.files),
            "runOnlyForDeploymentPostprocessing": 0,
        }


@dataclass(eq=False)
class PBXSourcesBuildPhase(PBXBuildPhase):
    isa = PBXObjectClass.PBXSourcesBuildPhase

    def display_name(self) -> str:
        return "Sources"

    def add_build_file(
        self, file_reference: PBXFileReference, compiler_flag: CompilerFlags
    ) -> PBXBuildFile:
        build_file = PBXBuildFile(file_reference, self.display_name(), compiler_flag)
        self.files.append(build_file)
        return build_file


@dataclass(eq=False)
class PBXFrameworksBuildPhase(PBXBuildPhase):
    isa = PBXObjectClass.PBXFrameworksBuildPhase

    def display_name(self) -> str:
        return "Frameworks"


@dataclass(eq=False)
class PBXResourcesBuildPhase(PBXBuildPhase):
    isa = PBXObjectClass.PBXResourcesBuildPhase

    def display_name(self) -> str:
        return "Resources"


@dataclass(eq=False)
class PBXShellScriptBuildPhase(PBXBuildPhase):
    isa = PBXObjectClass.PBXShellScriptBuildPhase

    target_name: str = ""
    shell_script: str = ""

    def display_name(self) -> str:
        return f'Action "Compile and copy {self.target_name} via ninja"'

    def properties(self) -> Dict[str, Any]:
        props = super().properties()
        props.update(
            {
                "inputPaths": [],
                "name": self.display_name(),
                "outputPaths": [],
                "shellPath": SHELL_PATH,
                "shellScript": self.shell_script,
                "showEnvVarsInLog": 0,
            }
        )
        return props


@dataclass(eq=False)
class XCBuildConfiguration(PBXObject):
    isa = PBXObjectClass.XCBuildConfiguration

    name: str
    attributes: PBXAttributes = field(default_factory=dict)

    def display_name(self) -> str:
        return self.name

    def properties(self) -> Dict[str, Any]:
        return {"buildSettings": dict(self.attributes), "name": self.name}


@dataclass(eq=False)
class XCConfigurationList(PBXObject):
    isa = PBXObjectClass.XCConfigurationList

    owner: PBXObject = field(repr=False)
    configurations: List[XCBuildConfiguration] = field(default_factory=list)

    def display_name(self) -> str:
        return (
            f"Build configuration list for {self.owner.isa.name} "
            f'"{self.owner.display_name()}"'
        )

    def children(self) -> Iterator[PBXObject]:
        return iter(self.configurations)

    def properties(self) -> Dict[str, Any]:
        return {
            "buildConfigurations": list(self.configurations),
            "defaultConfigurationIsVisible": 1,
            "defaultConfigurationName": self.configurations[0].name,
        }


@dataclass(eq=False)
class PBXContainerItemProxy(PBXObject):
    isa = PBXObjectClass.PBXContainerItemProxy

    project: "PBXProject" = field(repr=False)
    remote_target: "PBXTarget" = field(repr=False)

    def display_name(self) -> str:
        return self.isa.name

    def properties(self) -> Dict[str, Any]:
        return {
            "containerPortal": self.project,
            "proxyType": 1,
            "remoteGlobalIDString": self.remote_target,
            "remoteInfo": self.remote_target.display_name(),
        }


@dataclass(eq=False)
class PBXTargetDependency(PBXObject):
    isa = PBXObjectClass.PBXTargetDependency

    target: "PBXTarget" = field(repr=False)
    container_item_proxy: PBXContainerItemProxy = field(repr=False)

    def display_name(self) -> str:
        return self.isa.name

    def children(self) -> Iterator[PBXObject]:
        yield self.container_item_proxy

    def properties(self) -> Dict[str, Any]:
        return {"target": self.target, "targetProxy": self.container_item_proxy}


@dataclass(eq=False)
class PBXTarget(PBXObject):
    name: str
    shell_script: str
    config_name: str
    attributes: PBXAttributes
    configurations: XCConfigurationList = field(init=False, repr=False)
    build_phases: List[PBXBuildPhase] = field(init=False, default_factory=list)
    dependencies: List[PBXTargetDependency] = field(init=False, default_factory=list)

    def __post_init__(self) -> None:
        self.configurations = XCConfigurationList(
            owner=self,
            configurations=[XCBuildConfiguration(self.config_name, dict(self.attributes))],
        )
        if self.shell_script:
            self.build_phases.append(
                PBXShellScriptBuildPhase(target_name=self.name, shell_script=self.shell_script)
            )

    def display_name(self) -> str:
        return self.name

    def add_dependency(self, dependency: PBXTargetDependency) -> None:
        self.dependencies.append(dependency)

    def children(self) -> Iterator[PBXObject]:
        yield self.configurations
        yield from self.build_phases
        yield from self.dependencies


@dataclass(eq=False)
class PBXAggregateTarget(PBXTarget):
    isa = PBXObjectClass.PBXAggregateTarget

    def properties(self) -> Dict[str, Any]:
        return {
            "buildConfigurationList": self.configurations,
            "buildPhases": list(self.build_phases),
            "dependencies": list(self.dependencies),
            "name": self.name,
            "productName": self.name,
        }


@dataclass(eq=False)
class PBXNativeTarget(PBXTarget):
    isa = PBXObjectClass.PBXNativeTarget

    product_type: str
    product_name: str
    product_reference: PBXFileReference = field(repr=False)
    source_build_phase: PBXSourcesBuildPhase = field(init=False, repr=False)

    def __post_init__(self) -> None:
        super().__post_init__()
        self.source_build_phase = PBXSourcesBuildPhase()
        self.build_phases.extend(
            [self.source_build_phase, PBXFrameworksBuildPhase(), PBXResourcesBuildPhase()]
        )

    def add_file_for_indexing(
        self, file_reference: PBXFileReference, compiler_flag: CompilerFlags
    ) -> PBXBuildFile:
        return self.source_build_phase.add_build_file(file_reference, compiler_flag)

    def properties(self) -> Dict[str, Any]:
        return {
            "buildConfigurationList": self.configurations,
            "buildPhases": list(self.build_phases),
            "buildRules": [],
            "dependencies": list(self.dependencies),
            "name": self.name,
            "productName": self.product_name,
            "productReference": self.product_reference,
            "productType": self.product_type,
        }


def product_name_from_output_name(output_name: str) -> str:
    # Xcode expects PRODUCT_NAME to be the basename of the product without
    # its extension ("Foo.app" -> "Foo").
    basename = posixpath.basename(output_name)
    stem, ext = posixpath.splitext(basename)
    return stem if ext else basename


@dataclass(eq=False)
class PBXProject(PBXObject):
    isa = PBXObjectClass.PBXProject

    name: str
    config_name: str
    source_path: str
    attributes: PBXAttributes
    main_group: PBXGroup = field(init=False, repr=False)
    sources: PBXGroup = field(init=False, repr=False)
    products: PBXGroup = field(init=False, repr=False)
    configurations: XCConfigurationList = field(init=False, repr=False)
    targets: List[PBXTarget] = field(init=False, default_factory=list)
    target_for_indexing: Optional[PBXNativeTarget] = field(init=False, default=None, repr=False)

    def __post_init__(self) -> None:
        self.main_group = PBXGroup(autosorted=False)
        self.sources = self.main_group.create_group(name="Source", path=self.source_path)
        self.products = self.main_group.create_group(name="Products")
        self.main_group.create_group(name="Build")
        self.configurations = XCConfigurationList(
            owner=self,
            configurations=[XCBuildConfiguration(self.config_name, dict(self.attributes))],
        )

    def display_name(self) -> str:
        return self.name

    def comment(self) -> str:
        return "Project object"

    def children(self) -> Iterator[PBXObject]:
        yield self.main_group
        yield from self.targets
        yield self.configurations

    def add_source_file_to_indexing_target(
        self, navigator_path: str, source_path: str, compiler_flag: CompilerFlags
    ) -> PBXFileReference:
        if self.target_for_indexing is None:
            self._add_indexing_target()
        return self.add_source_file(
            navigator_path, source_path, compiler_flag, self.target_for_indexing
        )

    def add_source_file(
        self,
        navigator_path: str,
        source_path: str,
        compiler_flag: CompilerFlags,
        target: Optional[PBXNativeTarget],
    ) -> PBXFileReference:
        file_reference = self.sources.add_source_file(navigator_path, source_path)
        if file_extension(source_path) not in SOURCE_EXTENSIONS_FOR_INDEXING:
            return file_reference
        assert target is not None
        target.add_file_for_indexing(file_reference, compiler_flag)
        return file_reference

    def add_aggregate_target(self, name: str, shell_script: str) -> PBXAggregateTarget:
        target = PBXAggregateTarget(
            name=name,
            shell_script=shell_script,
            config_name=self.config_name,
            attributes={},
        )
        self.targets.append(target)
        return target

    def add_native_target(
        self,
        name: str,
        type: str,
        output_name: str,
        output_type: str,
        output_dir: str,
        shell_script: str,
        extra_attributes: Optional[PBXAttributes] = None,
    ) -> PBXNativeTarget:
        file_type = type or FileType.from_extension(file_extension(output_name)).value
        product = PBXFileReference(name="", path=output_name, type=file_type)
        self.products.add_child(product)

        product_name = product_name_from_output_name(output_name)
        attributes = dict(extra_attributes or {})
        attributes["CODE_SIGNING_REQUIRED"] = "NO"
        attributes["CONFIGURATION_BUILD_DIR"] = output_dir
        attributes["PRODUCT_NAME"] = product_name

        target = PBXNativeTarget(
            name=name,
            shell_script=shell_script,
            config_name=self.config_name,
            attributes=attributes,
            product_type=output_type,
            product_name=product_name,
            product_reference=product,
        )
        self.targets.append(target)
        return target

    # Makes |dependent| depend on |base|: the dependency is owned by
    # |dependent| and refers to |base| through a container proxy.
    def add_target_dependency(self, base: PBXTarget, dependent: PBXTarget) -> PBXTargetDependency:
        proxy = PBXContainerItemProxy(project=self, remote_target=base)
        dependency = PBXTargetDependency(target=base, container_item_proxy=proxy)
        dependent.add_dependency(dependency)
        return dependency

    def _add_indexing_target(self) -> None:
        assert self.target_for_indexing is None
        product = PBXFileReference(
            name="", path="sources", type=FileType.EXECUTABLE.value
        )
        self.products.add_child(product)
        self.target_for_indexing = PBXNativeTarget(
            name="sources",
            shell_script="",
            config_name=self.config_name,
            attributes={
                "EXECUTABLE_PREFIX": "",
                "HEADER_SEARCH_PATHS": self.sources.path,
                "PRODUCT_NAME": "sources",
            },
            product_type=TOOL_PRODUCT_TYPE,
            product_name="sources",
            product_reference=product,
        )
        self.targets.append(self.target_for_indexing)

    def properties(self) -> Dict[str, Any]:
        return {
            "attributes": {"BuildIndependentTargetsInParallel": "YES"},
            "buildConfigurationList": self.configurations,
            "compatibilityVersion": "Xcode 3.2",
            "developmentRegion": "en",
            "hasScannedForEncodings": 1,
            "knownRegions": ["en", "Base"],
            "mainGroup": self.main_group,
            "productRefGroup": self.products,
            "projectDirPath": "",
            "projectRoot": "",
            "targets": list(self.targets),
        }
