from enum import Enum, auto
from typing import Dict, Iterator, List, Optional, TYPE_CHECKING

from pbxwriter.details.label import Label
from pbxwriter.details.source_file import SourceFile

if TYPE_CHECKING:
    from pbxwriter.details.targets.toolchain import Toolchain


class OutputType(Enum):
    EXECUTABLE = auto()
    CREATE_BUNDLE = auto()
    BUNDLE_DATA = auto()
    ACTION = auto()
    ACTION_FOREACH = auto()
    GROUP = auto()
    SHARED_LIBRARY = auto()
    LOADABLE_MODULE = auto()
    STATIC_LIBRARY = auto()
    SOURCE_SET = auto()
    COPY_FILES = auto()
    GENERATED_FILE = auto()


APPLICATION_PRODUCT_TYPE = "com.apple.product-type.application"
UNIT_TEST_PRODUCT_TYPE = "com.apple.product-type.bundle.unit-test"
UI_TEST_PRODUCT_TYPE = "com.apple.product-type.bundle.ui-testing"


class BundleData:
    def __init__(
        self,
        *,
        product_type: str = "",
        root_dir: str = "",
        extra_attributes: Optional[Dict[str, str]] = None,
        test_application_name: str = "",
    ):
        self.product_type = product_type
        self.root_dir = root_dir
        self.extra_attributes = dict(extra_attributes or {})
        self.test_application_name = test_application_name

    # Directory containing the bundle ("//out/Debug/" for "//out/Debug/Foo.app").
    @property
    def bundle_dir(self) -> str:
        root = self.root_dir.rstrip("/")
        return root.rsplit("/", 1)[0] + "/"


# Any resolved item of the build graph (config, toolchain, target)...
class Item:
    def __init__(self, *, label: Label, imported_files: List[SourceFile] = []):
        self.label = label
        self.imported_files = list(imported_files)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.label})"


class Target(Item):
    def __init__(
        self,
        *,
        output_type: OutputType,
        sources: List[SourceFile] = [],
        public_headers: List[SourceFile] = [],
        inputs: List[SourceFile] = [],
        public_deps: List["Target"] = [],
        private_deps: List["Target"] = [],
        data_deps: List["Target"] = [],
        toolchain: Optional["Toolchain"] = None,
        output_name: str = "",
        output_dir: str = "",
        bundle_data: Optional[BundleData] = None,
        action_script: Optional[SourceFile] = None,
        defined_from: Optional[str] = None,
        **kwargs,
    ):
        super().__init__(**kwargs)
        self.output_type = output_type
        self.sources = list(sources)
        self.public_headers = list(public_headers)
        self.inputs = list(inputs)
        self.public_deps = list(public_deps)
        self.private_deps = list(private_deps)
        self.data_deps = list(data_deps)
        self.toolchain = toolchain
        self.output_name = output_name
        self.output_dir = output_dir
        self.bundle_data = bundle_data or BundleData()
        self.action_script = action_script
        self.defined_from = defined_from

    @property
    def name(self) -> str:
        return self.label.name

    @property
    def linked_deps(self) -> Iterator["Target"]:
        yield from self.public_deps
        yield from self.private_deps

    @property
    def is_default_toolchain(self) -> bool:
        return self.toolchain is None or self.toolchain.is_default

    @property
    def is_bundle(self) -> bool:
        return self.output_type == OutputType.CREATE_BUNDLE

    @property
    def product_type(self) -> str:
        return self.bundle_data.product_type

    def is_application(self) -> bool:
        return self.is_bundle and self.product_type == APPLICATION_PRODUCT_TYPE
