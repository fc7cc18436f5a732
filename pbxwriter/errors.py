from typing import Optional


class GenerationError(RuntimeError):
    def __init__(self, message: str, location: Optional[str] = None):
        self.message = message
        self.location = location
        super().__init__(f"{location}: {message}" if location else message)


class FilterSyntaxError(GenerationError):
    pass


class HostApplicationNotFound(GenerationError):
    def __init__(self, name: str, location: Optional[str] = None):
        self.name = name
        super().__init__(f'cannot find host application bundle "{name}"', location)


class NotAnApplicationBundle(GenerationError):
    def __init__(self, name: str, location: Optional[str] = None):
        self.name = name
        super().__init__(
            f'host application target "{name}" not an application bundle', location
        )


class MissingToolForOutput(GenerationError):
    def __init__(self, tool_name: str, toolchain_name: str, target_name: str):
        self.tool_name = tool_name
        self.toolchain_name = toolchain_name
        self.target_name = target_name
        super().__init__(
            f"{tool_name} tool not defined: the toolchain {toolchain_name} used by "
            f'target {target_name} doesn\'t define a "{tool_name}" tool.'
        )


class PathResolutionError(GenerationError):
    pass


class WriteFailure(GenerationError):
    def __init__(self, path: str, reason: str):
        self.path = path
        super().__init__(f"unable to write {path}: {reason}")


class DependencyCycleError(GenerationError):
    pass


class UnknownLabelError(GenerationError):
    pass
