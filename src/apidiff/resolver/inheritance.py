"""Inheritance resolution for surface models.

After a model is built, each type only lists the members it declares
itself.  The resolver walks every type's extends/implements chain and
appends copies of the non-private members it inherits, marking each
copy with the qualified name of the ancestor that defines it.

Rules
-----
* Methods are inherited unless the type already has a method with the
  same name and signature (an override or an earlier inherited copy).
* Fields are inherited unless the type already has a field with the same
  name; fields cannot be overloaded.
* Only members an ancestor declares itself are copied; members the
  ancestor inherits are reached by continuing up its own chain.
* Constructors are never inherited.
* Supertypes that are not part of the surface end the walk for that
  branch.
* A chain that returns to a type already on it raises
  :class:`~apidiff.errors.CyclicInheritanceError`.

Running the resolver again on a resolved model adds nothing.
"""
from __future__ import annotations

import dataclasses
import logging

from apidiff.errors import CyclicInheritanceError
from apidiff.model.nodes import SurfaceModel, TypeDecl

logger = logging.getLogger(__name__)


class InheritanceResolver:
    """Adds inherited methods and fields to every type of a surface."""

    def resolve(self, surface: SurfaceModel) -> int:
        """Resolve inherited members in place.

        Parameters
        ----------
        surface:
            The model to resolve.  Its types gain inherited copies.

        Returns
        -------
        int
            The number of inherited members added.

        Raises
        ------
        CyclicInheritanceError
            If any type's ancestry loops back on itself.
        """
        added = 0
        for package, type_decl in surface.iter_types():
            qualified = type_decl.qualified_name(package.name)
            visited: set[str] = set()
            for parent_name in type_decl.supertypes:
                added += self._inherit(
                    surface, type_decl, parent_name, (qualified,), visited
                )
        logger.debug("Resolved surface %r: %d inherited member(s) added", surface.name, added)
        return added

    def _inherit(
        self,
        surface: SurfaceModel,
        child: TypeDecl,
        parent_name: str,
        chain: tuple[str, ...],
        visited: set[str],
    ) -> int:
        if parent_name in chain:
            raise CyclicInheritanceError(chain + (parent_name,))
        parent = surface.lookup(parent_name)
        if parent is None:
            logger.debug("Supertype %r of %r is external; stopping", parent_name, chain[0])
            return 0
        if parent_name in visited:
            # Already walked through another path (diamond); nothing new to add.
            return 0
        visited.add(parent_name)

        added = self._copy_members(child, parent, parent_name)
        for grandparent_name in parent.supertypes:
            added += self._inherit(
                surface, child, grandparent_name, chain + (parent_name,), visited
            )
        return added

    def _copy_members(self, child: TypeDecl, parent: TypeDecl, parent_name: str) -> int:
        added = 0
        method_keys = {m.key for m in child.methods}
        for method in parent.methods:
            if method.inherited_from is not None or method.modifiers.is_private:
                continue
            if method.key in method_keys:
                continue
            child.methods.append(dataclasses.replace(method, inherited_from=parent_name))
            method_keys.add(method.key)
            added += 1

        field_names = {f.name for f in child.fields}
        for fld in parent.fields:
            if fld.inherited_from is not None or fld.modifiers.is_private:
                continue
            if fld.name in field_names:
                continue
            child.fields.append(dataclasses.replace(fld, inherited_from=parent_name))
            field_names.add(fld.name)
            added += 1
        return added


def resolve(surface: SurfaceModel) -> int:
    """Convenience function: resolve inherited members of ``surface`` in place."""
    return InheritanceResolver().resolve(surface)
