"""Test that the quickstart API works for apidiff."""
from __future__ import annotations

import json


def test_quickstart_imports() -> None:
    import apidiff

    assert callable(apidiff.load_surface)
    assert callable(apidiff.resolve)
    assert callable(apidiff.validate)
    assert callable(apidiff.compare)


def test_quickstart_version(package_name: str, expected_version: str) -> None:
    import importlib

    module = importlib.import_module(package_name)
    assert module.__version__ == expected_version


def test_quickstart_load_resolve_diff() -> None:
    import apidiff

    old_doc = {
        "name": "lib-1.0",
        "packages": [
            {
                "name": "p",
                "types": [
                    {"name": "Base", "methods": [{"name": "m"}]},
                    {"name": "Derived", "extends": "p.Base"},
                ],
            }
        ],
    }
    new_doc = json.loads(json.dumps(old_doc))
    new_doc["name"] = "lib-2.0"
    new_doc["packages"][0]["types"][0]["methods"].append({"name": "n"})

    old = apidiff.load_surface(json.dumps(old_doc))
    new = apidiff.load_surface(json.dumps(new_doc))
    assert apidiff.resolve(old) == 1
    assert apidiff.resolve(new) == 2
    assert apidiff.validate(new) == []

    result = apidiff.compare(old, new)
    package_diff = result.get_package("p")
    assert package_diff is not None
    assert [t.name for t in package_diff.types_changed] == ["Base", "Derived"]
    assert 0.0 < result.score < 100.0


def test_quickstart_identical_surfaces(simple_surface) -> None:
    import apidiff

    result = apidiff.compare(simple_surface, simple_surface)
    assert not result.has_changes
    assert result.score == 0.0


def test_quickstart_compare_survives_submodule_imports(simple_surface) -> None:
    import apidiff
    import apidiff.diff.tree  # noqa: F401

    first = apidiff.compare(simple_surface, simple_surface)
    second = apidiff.compare(simple_surface, simple_surface)
    assert callable(apidiff.compare)
    assert first == second
    assert not second.has_changes
