#!/usr/bin/env python3
"""Example: API Surface Diffing and Change Ranking

Demonstrates resolving inherited members, comparing two releases of a
small library and ranking the changed types by magnitude.

Usage:
    python examples/01_diff_versioning.py

Requirements:
    pip install apidiff
"""
from __future__ import annotations

import json

import apidiff
from apidiff.config import DiffOptions
from apidiff.diff import by_magnitude

RELEASE_1 = {
    "name": "shapes-1.0",
    "packages": [
        {
            "name": "shapes",
            "types": [
                {
                    "name": "Shape",
                    "abstract": True,
                    "methods": [
                        {"name": "area", "return_type": "double", "abstract": True},
                        {"name": "move", "parameters": [{"name": "dx", "type": "int"}]},
                    ],
                },
                {
                    "name": "Circle",
                    "extends": "shapes.Shape",
                    "constructors": [{"type": "double"}],
                    "methods": [{"name": "area", "return_type": "double"}],
                },
            ],
        }
    ],
}

RELEASE_2 = {
    "name": "shapes-2.0",
    "packages": [
        {
            "name": "shapes",
            "types": [
                {
                    "name": "Shape",
                    "abstract": True,
                    "methods": [
                        {"name": "area", "return_type": "double", "abstract": True},
                        {
                            "name": "move",
                            "parameters": [{"name": "dx", "type": "int"}],
                            "modifiers": {"deprecated": True},
                        },
                        {"name": "move", "parameters": [{"name": "dx", "type": "long"}]},
                    ],
                },
                {
                    "name": "Circle",
                    "extends": "shapes.Shape",
                    "constructors": [{"type": "double"}, {"type": "double, double"}],
                    "methods": [
                        {"name": "area", "return_type": "double"},
                        {"name": "diameter", "return_type": "double"},
                    ],
                },
            ],
        }
    ],
}


def main() -> None:
    print(f"apidiff version: {apidiff.__version__}")

    old = apidiff.load_surface(json.dumps(RELEASE_1))
    new = apidiff.load_surface(json.dumps(RELEASE_2))
    print(f"Inherited members added: old={apidiff.resolve(old)}, new={apidiff.resolve(new)}")

    result = apidiff.compare(old, new)
    print()
    print(result.summary())

    for package_diff in by_magnitude(result.packages_changed):
        print(f"\n{package_diff}")
        for class_diff in by_magnitude(package_diff.types_changed):
            print(f"  {class_diff}")
            for method in class_diff.methods_added:
                print(f"    [+] {method}")
            for method in class_diff.methods_removed:
                print(f"    [-] {method}")
            for member_diff in class_diff.methods_changed:
                print(f"    {member_diff}")
                if member_diff.modifiers_change:
                    print(f"        {member_diff.modifiers_change}")

    # Deprecation-only differences disappear when only incompatible changes matter
    strict = apidiff.compare(old, new, DiffOptions(incompatible_changes_only=True))
    print(f"\nIncompatible-only score: {strict.score:.1f}% (all changes: {result.score:.1f}%)")

    # Self-diff (should produce zero changes)
    same = apidiff.compare(old, old)
    print(f"\nSelf-diff score: {same.score:.1f} (expected 0.0)")


if __name__ == "__main__":
    main()
