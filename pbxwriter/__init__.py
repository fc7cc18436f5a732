from pbxwriter.config import BuildSystem, Options
from pbxwriter.errors import (
    DependencyCycleError,
    FilterSyntaxError,
    GenerationError,
    HostApplicationNotFound,
    MissingToolForOutput,
    NotAnApplicationBundle,
    PathResolutionError,
    UnknownLabelError,
    WriteFailure,
)
