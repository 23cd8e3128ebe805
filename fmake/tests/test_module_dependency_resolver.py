"""
Tests for ModuleDependencyResolver class.
Tests are ordered according to method definitions in module_dependency_resolver.py.
"""

from pathlib import Path

import pytest

from fmake.module_dependency_resolver import ModuleDependencyResolver
from conftest import write_file


@pytest.fixture
def resolver() -> ModuleDependencyResolver:
    """
    Create a ModuleDependencyResolver instance for testing
    """
    return ModuleDependencyResolver(verbose=False)


def test_find_module_dependencies(
    tmp_path: Path,
    resolver: ModuleDependencyResolver,
) -> None:
    """
    Test find_module_dependencies.
    Verify that it finds the sources providing used modules, skipping
    intrinsic modules, the file's own modules and unknown modules.
    """
    write_file(tmp_path / "cars.f90", "module car_mod\nend module car_mod\n")
    write_file(tmp_path / "arrays.f90", "module Array_Utils\nend module Array_Utils\n")
    main = tmp_path / "main.f90"
    write_file(main, """module helpers
end module helpers

program main
    use, intrinsic :: iso_fortran_env
    use array_utils, only: fill
    use car_mod
    use helpers
    use mpi
    use CAR_MOD
end program main
""")

    found = resolver.find_module_dependencies(main)

    assert found == ["arrays.f90", "cars.f90"]


def test_find_module_dependencies_none(
    tmp_path: Path,
    resolver: ModuleDependencyResolver,
) -> None:
    """
    Test find_module_dependencies for a program without use statements.
    """
    main = tmp_path / "efficient.f90"
    write_file(main, "program efficient\nend program efficient\n")

    assert resolver.find_module_dependencies(main) == []


def test_module_providers(
    tmp_path: Path,
    resolver: ModuleDependencyResolver,
) -> None:
    """
    Test module_providers.
    Verify that it maps every module to the first file defining it and only
    scans the given directory.
    """
    write_file(tmp_path / "a.f90", "module alpha\nend module alpha\nmodule beta\nend module beta\n")
    write_file(tmp_path / "b.f90", "module beta\nend module beta\n")
    write_file(tmp_path / "sub" / "c.f90", "module gamma\nend module gamma\n")

    providers = resolver.module_providers(tmp_path)

    assert providers == {"alpha": "a.f90", "beta": "a.f90"}


def test_extract_use_statements(
    tmp_path: Path,
    resolver: ModuleDependencyResolver,
) -> None:
    """
    Test extract_use_statements.
    Verify that it extracts 'use' statements correctly.
    Note: This function extracts all use statements including intrinsic modules.
    Filtering is done in find_module_dependencies.
    """
    f = tmp_path / "sample.f90"
    content = """
module sample
    use iso_fortran_env
    use :: module_a
    use, intrinsic :: iso_c_binding
    use, non_intrinsic :: module_e
    use module_b, only: func1, func2
    ! use module_c (this is a comment)
contains
    subroutine test()
        use module_d  ! inline use
    end subroutine
end module sample
"""
    write_file(f, content)
    uses = resolver.extract_use_statements(f)

    assert uses == [
        "iso_fortran_env",
        "module_a",
        "iso_c_binding",
        "module_e",
        "module_b",
        "module_d",
    ]


def test_extract_module_names(
    tmp_path: Path,
    resolver: ModuleDependencyResolver,
) -> None:
    """
    Test extract_module_names.
    Verify that module procedures are not taken for module definitions.
    """
    f = tmp_path / "shapes.f90"
    write_file(f, """  module My_Shapes
    interface area
        module procedure area_circle
    end interface
  end module My_Shapes
  ! module commented_out
""")

    assert resolver.extract_module_names(f) == ["my_shapes"]


def test_extract_module_names_no_module(
    tmp_path: Path,
    resolver: ModuleDependencyResolver,
) -> None:
    """
    Test extract_module_names when no module is defined.
    Verify that it returns an empty list.
    """
    f = tmp_path / "program.f90"
    write_file(f, "program main\nend program main\n")

    assert resolver.extract_module_names(f) == []


def test_extract_module_names_unreadable(
    tmp_path: Path,
    resolver: ModuleDependencyResolver,
) -> None:
    """
    Test extract_module_names on a file that cannot be decoded.
    """
    f = tmp_path / "binary.f90"
    f.write_bytes(b"\xff\xfe\x00module x")

    assert resolver.extract_module_names(f) == []


def test_find_module_dependencies_submodule(
    tmp_path: Path,
    resolver: ModuleDependencyResolver,
) -> None:
    """
    Test that a submodule depends on the source of its ancestor module.
    """
    write_file(tmp_path / "shapes.f90", "module shapes\nend module shapes\n")
    child = tmp_path / "shapes_impl.f90"
    write_file(child, "submodule (Shapes) shapes_impl\nend submodule shapes_impl\n")

    assert resolver.find_module_dependencies(child) == ["shapes.f90"]
    assert resolver.extract_module_names(child) == []


def test_extract_submodule_parents(
    tmp_path: Path,
    resolver: ModuleDependencyResolver,
) -> None:
    """
    Test extract_submodule_parents with and without a parent submodule.
    """
    f = tmp_path / "impl.f90"
    write_file(f, """submodule(geometry) area_impl
end submodule area_impl
submodule ( geometry : area_impl ) volume_impl
end submodule volume_impl
! submodule (commented) nothing
""")

    assert resolver.extract_submodule_parents(f) == ["geometry"]


def test_extract_use_statements_semicolons(
    tmp_path: Path,
    resolver: ModuleDependencyResolver,
) -> None:
    """
    Test that several use statements on one line are all found.
    """
    f = tmp_path / "main.f90"
    write_file(f, "program main\n  use cars; use garage, only: park ;use :: roads\nend program main\n")

    assert resolver.extract_use_statements(f) == ["cars", "garage", "roads"]
