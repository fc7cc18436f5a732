from enum import Enum
from typing import Optional


class BuildSystem(Enum):
    LEGACY = "legacy"
    NEW = "new"

    @staticmethod
    def from_string(value: str) -> "BuildSystem":
        for build_system in BuildSystem:
            if build_system.value == value:
                return build_system
        raise ValueError(f"unknown build system '{value}', expected legacy or new")


class Options:
    def __init__(
        self,
        project_name: str = "all",
        ninja_executable: Optional[str] = None,
        build_system: BuildSystem = BuildSystem.LEGACY,
        dir_filters_string: str = "",
        root_target_name: str = "",
        **kwargs
    ):
        self.project_name = project_name
        self.ninja_executable = ninja_executable or ""
        self.build_system = build_system
        self.dir_filters_string = dir_filters_string
        self.root_target_name = root_target_name
        self.__dict__.update(kwargs)
