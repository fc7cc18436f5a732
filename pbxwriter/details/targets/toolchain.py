import posixpath
from typing import Dict, Optional

from pbxwriter.details.source_file import SOURCE_ROOT
from pbxwriter.details.targets.target import Item, OutputType, Target

TOOL_FOR_FINAL_OUTPUT: Dict[OutputType, str] = {
    OutputType.EXECUTABLE: "link",
    OutputType.SHARED_LIBRARY: "solink",
    OutputType.LOADABLE_MODULE: "solink_module",
    OutputType.STATIC_LIBRARY: "alink",
}


class Tool:
    def __init__(self, *, name: str, default_output_dir: str = "{{root_out_dir}}"):
        self.name = name
        self.default_output_dir = default_output_dir

    # Expands the default output directory pattern for |target|, the result
    # is relative to the build directory.
    def apply_default_output_dir(self, target: Target) -> str:
        toolchain = target.toolchain
        root_out_dir = "." if toolchain is None or toolchain.is_default else toolchain.name
        target_dir = target.label.dir[len(SOURCE_ROOT) :].rstrip("/")
        substitutions = {
            "{{root_out_dir}}": root_out_dir,
            "{{root_gen_dir}}": posixpath.join(root_out_dir, "gen"),
            "{{target_out_dir}}": posixpath.join(root_out_dir, "obj", target_dir),
            "{{target_gen_dir}}": posixpath.join(root_out_dir, "gen", target_dir),
        }
        result = self.default_output_dir
        for key, value in substitutions.items():
            result = result.replace(key, value)
        return posixpath.normpath(result)


class Toolchain(Item):
    def __init__(self, *, is_default: bool = False, tools: Dict[str, Tool] = {}, **kwargs):
        super().__init__(**kwargs)
        self.is_default = is_default
        self.tools = dict(tools)

    @property
    def name(self) -> str:
        return self.label.name

    @staticmethod
    def tool_name_for_final_output(target: Target) -> str:
        return TOOL_FOR_FINAL_OUTPUT.get(target.output_type, "stamp")

    def get_tool_for_target_final_output(self, target: Target) -> Optional[Tool]:
        return self.tools.get(self.tool_name_for_final_output(target))


def toolchain_label_name(toolchain: Optional[Toolchain]) -> str:
    if toolchain is None:
        return "<no toolchain>"
    return toolchain.label.user_visible_name()
