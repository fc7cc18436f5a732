import os
import stat
import subprocess
import sys
from pathlib import Path

import pytest

from pbxwriter.generators.xcode.build_script import (
    SAFE_ENVIRONMENT_VARIABLES,
    compute_script_environ,
    get_build_script,
)


def test_captured_variables_are_literals(monkeypatch):
    monkeypatch.setenv("ICECC_VERSION", "1")
    monkeypatch.setenv("TMPDIR", "/tmp/generation-time")
    script = get_build_script("foo", "", "../..")
    assert "environ['ICECC_VERSION'] = '1'" in script
    assert "environ['TMPDIR'] = os.environ.get('TMPDIR', '')" in script
    assert "/tmp/generation-time" not in script


def test_missing_captured_variables_are_empty():
    environ = compute_script_environ({})
    assert "environ['HOME'] = ''" in environ
    assert environ.splitlines()[0] == "environ = {}"
    assert len(environ.splitlines()) == len(SAFE_ENVIRONMENT_VARIABLES) + 1


def test_captured_values_are_escaped():
    environ = compute_script_environ({"USER": "o'brien"})
    assert "environ['USER'] = \"o'brien\"" in environ


def test_script_parameters(fake_environ):
    script = get_build_script("base_unittests", "", "../..", fake_environ)
    assert "rel_root_src = '../..'" in script
    assert "build_target = 'base_unittests'" in script
    assert "ninja_binary = 'ninja'" in script
    assert "environ['PATH'] = '/usr/bin:/bin'" in script

    script = get_build_script("", "autoninja", "../..", fake_environ)
    assert "build_target = ''" in script
    assert "ninja_binary = 'autoninja'" in script


FAKE_NINJA = """import sys
print("args: " + " ".join(sys.argv[1:]))
print("{rel}/base/a.cc:1:2: error: in /opt/{rel}/base/a.h")
sys.exit({exit_code})
"""


def _make_fake_ninja(directory: Path, exit_code: int = 0) -> Path:
    backend = directory / "fake_ninja.py"
    backend.write_text(FAKE_NINJA.format(rel="../..", exit_code=exit_code))
    launcher = directory / "fake_ninja"
    launcher.write_text(f'#!/bin/sh\nexec "{sys.executable}" "{backend}" "$@"\n')
    launcher.chmod(launcher.stat().st_mode | stat.S_IEXEC)
    return launcher


def _run_script(script: str, build_dir: Path) -> subprocess.CompletedProcess:
    return subprocess.run(
        [sys.executable, "-c", script],
        cwd=build_dir,
        capture_output=True,
        text=True,
    )


@pytest.fixture
def build_dir(tmp_path) -> Path:
    build_dir = tmp_path / "out" / "Debug"
    build_dir.mkdir(parents=True)
    return build_dir


@pytest.mark.skipif(sys.platform == "win32", reason="requires a shell script backend")
def test_generated_script_rewrites_relative_paths(tmp_path, build_dir, fake_environ):
    fake_ninja = _make_fake_ninja(tmp_path, exit_code=3)

    result = _run_script(get_build_script("base", str(fake_ninja), "../..", fake_environ), build_dir)

    abs_root_src = os.path.realpath(tmp_path)
    lines = result.stdout.splitlines()
    assert result.returncode == 3
    assert lines[0] == 'Compile "base" via ninja'
    assert lines[1] == "args: -C . base"
    # only the occurrence not preceded by a separator is rewritten
    assert lines[2] == f"{abs_root_src}/base/a.cc:1:2: error: in /opt/../../base/a.h"


@pytest.mark.skipif(sys.platform == "win32", reason="requires a shell script backend")
def test_generated_script_builds_all(tmp_path, build_dir, fake_environ):
    fake_ninja = _make_fake_ninja(tmp_path)

    result = _run_script(get_build_script("", str(fake_ninja), "../..", fake_environ), build_dir)

    assert result.returncode == 0
    assert result.stdout.splitlines()[:2] == ['Compile "all" via ninja', "args: -C ."]
