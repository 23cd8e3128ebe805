"""
Shared fixtures: a project directory and shell scripts standing in for gfortran.
"""
import os
from pathlib import Path

import pytest

from fmake.build_config import BuildConfig
from fmake.targets import BuildRecipe


# Fixed, old modification time (2001-09-09) given to sources so that
# artifacts created during a test are always newer.
SOURCE_TIME: int = 1_000_000_000

FAKE_COMPILER = """#!/bin/sh
echo "$*" >> "{log}"
out=""
while [ $# -gt 0 ]; do
    case "$1" in
        -o) out="$2"; shift 2 ;;
        *) shift ;;
    esac
done
if [ -n "$out" ]; then
    touch "$out"
fi
"""

FAILING_COMPILER = """#!/bin/sh
echo "$*" >> "{log}"
case "$*" in
    *{fail_on}*)
        echo "{fail_on}:3:5: Error: Symbol 'x' has no IMPLICIT type" >&2
        exit 1
        ;;
esac
out=""
while [ $# -gt 0 ]; do
    case "$1" in
        -o) out="$2"; shift 2 ;;
        *) shift ;;
    esac
done
touch "$out"
"""


def write_file(path: Path, content: str) -> None:
    """
    Helper to write file with content.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)


def set_mtime(path: Path, seconds: int) -> None:
    """
    Helper to set both access and modification time of a file.
    """
    os.utime(path, (seconds, seconds))


def invocations(log: Path) -> list[str]:
    """
    Command lines recorded by the fake compiler.
    """
    if not log.exists():
        return []
    return log.read_text().splitlines()


def write_script(path: Path, content: str) -> Path:
    """
    Write an executable shell script.
    """
    path.write_text(content)
    path.chmod(0o755)
    return path


@pytest.fixture
def compiler_log(tmp_path: Path) -> Path:
    """
    File the fake compilers append their arguments to.
    """
    return tmp_path / "compiler.log"


@pytest.fixture
def fake_compiler(tmp_path: Path, compiler_log: Path) -> Path:
    """
    Compiler that records its arguments and touches the '-o' output.
    """
    return write_script(tmp_path / "fakefc", FAKE_COMPILER.format(log=compiler_log))


@pytest.fixture
def failing_compiler(tmp_path: Path, compiler_log: Path) -> Path:
    """
    Compiler that fails whenever inefficient.f90 is on its command line.
    """
    return write_script(
        tmp_path / "failfc",
        FAILING_COMPILER.format(log=compiler_log, fail_on="inefficient.f90"),
    )


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """
    Project holding efficient.f90 and inefficient.f90 with old timestamps.
    """
    project = tmp_path / "project"
    project.mkdir()
    for name in ("efficient", "inefficient"):
        source = project / f"{name}.f90"
        write_file(source, f"program {name}\n  implicit none\n  print *, '{name}'\nend program {name}\n")
        set_mtime(source, SOURCE_TIME)
    return project


@pytest.fixture
def recipe(project_dir: Path) -> BuildRecipe:
    """
    Default recipe linking efficient and inefficient.
    """
    return BuildRecipe(
        project_dir,
        {"efficient": ("efficient.o",), "inefficient": ("inefficient.o",)},
    )


@pytest.fixture
def config(fake_compiler: Path) -> BuildConfig:
    """
    Configuration using the fake compiler.
    """
    return BuildConfig(compiler=str(fake_compiler), flags="-g")
