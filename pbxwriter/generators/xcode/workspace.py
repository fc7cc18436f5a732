from pathlib import Path

from pbxwriter.config import BuildSystem
from pbxwriter.details.build_graph import BuildSettings
from pbxwriter.details.source_file import resolve_relative_file
from pbxwriter.details.write_file import write_file_if_changed

WORKSPACE_DATA = """<?xml version="1.0" encoding="UTF-8"?>
<Workspace
   version = "1.0">
   <FileRef
      location = "self:">
   </FileRef>
</Workspace>
"""


def workspace_settings(build_system: BuildSystem) -> str:
    result = '<?xml version="1.0" encoding="UTF-8"?>\n'
    result += (
        '<!DOCTYPE plist PUBLIC "-//Apple//DTD PLIST 1.0//EN" '
        '"http://www.apple.com/DTDs/PropertyList-1.0.dtd">\n'
    )
    result += '<plist version="1.0">\n'
    result += "<dict>\n"
    if build_system == BuildSystem.LEGACY:
        result += "\t<key>BuildSystemType</key>\n"
        result += "\t<string>Original</string>\n"
    result += "</dict>\n"
    result += "</plist>\n"
    return result


class XcodeWorkspace:
    """
    The workspace embedded in an .xcodeproj, used to select the build system
    shared by all the targets of the project.
    """

    def __init__(self, settings: BuildSettings, build_system: BuildSystem):
        self.settings = settings
        self.build_system = build_system

    # |name| is the workspace directory relative to the build directory
    # ("all.xcodeproj/project.xcworkspace").
    def write_workspace(self, name: str) -> None:
        self.write_workspace_data_file(name)
        self.write_settings_file(name)

    def write_workspace_data_file(self, name: str) -> bool:
        return write_file_if_changed(
            self._full_path(f"{name}/contents.xcworkspacedata"), WORKSPACE_DATA
        )

    def write_settings_file(self, name: str) -> bool:
        return write_file_if_changed(
            self._full_path(f"{name}/xcshareddata/WorkspaceSettings.xcsettings"),
            workspace_settings(self.build_system),
        )

    def _full_path(self, relative: str) -> Path:
        source_file = resolve_relative_file(self.settings.build_dir, relative)
        return self.settings.full_path(source_file)
