import os
from typing import Mapping, Tuple

DEFAULT_NINJA_EXECUTABLE = "ninja"

# Script run by the shell script build phase of every target. It invokes
# ninja and copies its output, converting every path relative to the source
# root into an absolute path so Xcode can jump to the diagnostics. Only the
# occurrences that start a path are converted (a plain str.replace would also
# rewrite the relative path when it appears inside a longer path).
BUILD_SCRIPT_TEMPLATE = """
import re
import os
import subprocess
import sys

rel_root_src = %(rel_root_src)r
abs_root_src = os.path.abspath(rel_root_src)

build_target = %(build_target)r
ninja_binary = %(ninja_binary)r
ninja_params = [ '-C', '.' ]

%(environ)s

if build_target:
  ninja_params.append(build_target)
  print('Compile "' + build_target + '" via ninja')
else:
  print('Compile "all" via ninja')

process = subprocess.Popen(
    [ ninja_binary ] + ninja_params,
    stdout=subprocess.PIPE,
    stderr=subprocess.STDOUT,
    universal_newlines=True,
    encoding='utf-8',
    env=environ)

pattern = re.compile('(?<!/)' + re.escape(rel_root_src))

for line in iter(process.stdout.readline, ''):
  while True:
    match = pattern.search(line)
    if not match:
      break
    span = match.span()
    print(line[:span[0]], end='')
    print(abs_root_src, end='')
    line = line[span[1]:]
  print(line, flush=True, end='')

process.wait()

sys.exit(process.returncode)
"""

# Environment variables forwarded to ninja, with whether their value is
# captured when the project is generated (True) or read from the environment
# of Xcode when the script runs (False).
SAFE_ENVIRONMENT_VARIABLES: Tuple[Tuple[str, bool], ...] = (
    ("HOME", True),
    ("LANG", True),
    ("PATH", True),
    ("USER", True),
    ("TMPDIR", False),
    ("ICECC_VERSION", True),
    ("ICECC_CLANG_REMOTE_CPP", True),
)


def get_ninja_executable(ninja_executable: str) -> str:
    return ninja_executable or DEFAULT_NINJA_EXECUTABLE


def compute_script_environ(environ: Mapping[str, str]) -> str:
    lines = ["environ = {}"]
    for name, capture_at_generation in SAFE_ENVIRONMENT_VARIABLES:
        if capture_at_generation:
            value = repr(environ.get(name, ""))
        else:
            value = f"os.environ.get({name!r}, '')"
        lines.append(f"environ[{name!r}] = {value}")
    return "\n".join(lines)


def get_build_script(
    target_name: str,
    ninja_executable: str,
    root_src_dir: str,
    environ: Mapping[str, str] = os.environ,
) -> str:
    """
    Returns the python script building |target_name| with ninja (everything
    if |target_name| is empty). |root_src_dir| is the path of the source root
    relative to the build directory.
    """
    return BUILD_SCRIPT_TEMPLATE % {
        "rel_root_src": root_src_dir,
        "build_target": target_name,
        "ninja_binary": get_ninja_executable(ninja_executable),
        "environ": compute_script_environ(environ),
    }
