"""
Environment for the liberate-case pass.

The environment records, for the point of the tree currently being rewritten:

level
    How many duplicable recursive groups enclose this point.  Top-level and
    free identifiers live at level 0.

bound_at
    The level at which each in-scope local identifier was bound.  Anything
    missing is top-level or imported and is treated as level 0.

unfolding_of
    For each binder of an enclosing duplicable recursive group, the group
    itself (already rewritten, with localized binders).  Only present while
    the right-hand sides of that group are being rewritten.

scrutinized
    (identifier, level) pairs, one per enclosing case whose scrutinee was a
    variable bound strictly outside the current level.  Order is irrelevant.

Environments are immutable.  Every operation returns a new environment, so
sibling subtrees of the rewrite (the two halves of an application, the
alternatives of a case) can never observe each other's additions.

Example: for

    f = \\t -> case v of { A a b -> a : f t }

with v free, rewriting f's right-hand side happens at level 1 (f's own group
bumps the level) while f is recorded at level 0.  The case on v (level 0)
therefore records (v, 1), and at the inner reference to f,
free_scruts(lookup_level(f) = 0) yields [v]: v was scrutinized between f's
definition and the call, so unrolling f once here saves a re-examination
of v.
"""

from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional, Tuple

from liberate.liberate_core import CoreExpr, CoreRec
from liberate.liberate_id import CoreId, localize_id


TOP_LEVEL = 0


@dataclass(frozen=True)
class LiberateCaseEnv:
    """Immutable scope-tracking state threaded through the liberate-case rewrite."""
    budget: Optional[int]
    level: int = TOP_LEVEL
    bound_at: Dict[CoreId, int] = field(default_factory=dict)
    unfolding_of: Dict[CoreId, CoreRec] = field(default_factory=dict)
    scrutinized: Tuple[Tuple[CoreId, int], ...] = ()

    @classmethod
    def initial(cls, budget: Optional[int]) -> 'LiberateCaseEnv':
        """Create the environment for the start of a compilation unit."""
        return cls(budget=budget)

    def add_binders(self, binders: List[CoreId]) -> 'LiberateCaseEnv':
        """Bring *binders* into scope at the current level."""
        bound_at = dict(self.bound_at)
        for binder in binders:
            bound_at[binder] = self.level

        return replace(self, bound_at=bound_at)

    def add_scrutinized(self, ident: CoreId) -> 'LiberateCaseEnv':
        """
        Record that *ident* is scrutinized here.

        Only recorded when *ident* was bound strictly outside the current
        level; a case on something bound at this level tells a duplicate made
        at this level nothing new.
        """
        if self.lookup_level(ident) < self.level:
            return replace(self, scrutinized=self.scrutinized + ((ident, self.level),))

        return self

    def add_recursive_unfoldings(self, pairs: List[Tuple[CoreId, CoreExpr]]) -> 'LiberateCaseEnv':
        """
        Register a duplicable recursive group and step one level deeper.

        *pairs* are the group's binders with their already-rewritten
        right-hand sides.  The binders are recorded at the current level
        while the environment itself moves to the next one, as though one
        iteration of the recursion had already been unrolled.
        """
        group = CoreRec(pairs=[(localize_id(binder), rhs) for binder, rhs in pairs])

        bound_at = dict(self.bound_at)
        unfolding_of = dict(self.unfolding_of)
        for binder, _ in pairs:
            bound_at[binder] = self.level
            unfolding_of[binder] = group

        return replace(self, level=self.level + 1, bound_at=bound_at, unfolding_of=unfolding_of)

    def lookup_unfolding(self, ident: CoreId) -> Optional[CoreRec]:
        """Return the registered recursive group that defines *ident*, if any."""
        return self.unfolding_of.get(ident)

    def lookup_level(self, ident: CoreId) -> int:
        """Return the level at which *ident* was bound (top level if unknown)."""
        return self.bound_at.get(ident, TOP_LEVEL)

    def free_scruts(self, defining_level: int) -> List[CoreId]:
        """Return the identifiers scrutinized deeper than *defining_level*."""
        return [ident for ident, level in self.scrutinized if level > defining_level]
