"""Tests for the Core size heuristic."""

import pytest

from liberate.liberate_core import (
    CoreAlt,
    CoreCase,
    CoreCast,
    CoreCoercion,
    CoreDefaultAlt,
    CoreLam,
    CoreLet,
    CoreLit,
    CoreLitAlt,
    CoreNonRec,
    CoreRec,
    CoreTick,
    CoreType,
    CoreVar,
    mk_core_apps,
    mk_core_lams,
)
from liberate.liberate_id import CoreId
from liberate.liberate_size import core_expr_fits_budget, core_expr_size_within


F = CoreId(1, "f")
X = CoreId(2, "x")
Y = CoreId(3, "y")
WILD = CoreId(4, "wild")

UNLIMITED = 10**9


def _size(expr):
    return core_expr_size_within(expr, UNLIMITED)


class TestCostModel:
    """Sizes of individual node shapes."""

    def test_atoms(self):
        assert _size(CoreVar(id=X)) == 1
        assert _size(CoreLit(42)) == 1
        assert _size(CoreType("Int")) == 0

    def test_leading_lambdas_are_free(self):
        assert _size(mk_core_lams([X, Y], CoreVar(id=X))) == 1

    def test_application(self):
        """f x y: two applications plus three atoms."""
        assert _size(mk_core_apps(CoreVar(id=F), [CoreVar(id=X), CoreVar(id=Y)])) == 5

    def test_type_application_is_free(self):
        assert _size(mk_core_apps(CoreVar(id=F), [CoreType("Int"), CoreVar(id=X)])) == 3

    def test_nested_lambda_allocates(self):
        """A lambda that is not leading costs its body plus an allocation."""
        expr = mk_core_apps(CoreVar(id=F), [CoreLam(param=X, body=CoreVar(id=X))])
        assert _size(expr) == 1 + 1 + 10 + 1

    def test_let(self):
        nonrec = CoreLet(bind=CoreNonRec(binder=X, rhs=CoreLit(1)), body=CoreVar(id=X))
        assert _size(nonrec) == 12

        rec = CoreLet(
            bind=CoreRec(pairs=[(X, CoreVar(id=Y)), (Y, CoreVar(id=X))]),
            body=CoreVar(id=X),
        )
        assert _size(rec) == 23

    def test_case(self):
        """Each alternative beyond the first costs a branch."""
        expr = CoreCase(
            scrutinee=CoreVar(id=X),
            binder=WILD,
            type=CoreType("Int"),
            alts=[
                CoreAlt(con=CoreLitAlt(0), binders=[], rhs=CoreLit(1)),
                CoreAlt(con=CoreDefaultAlt(), binders=[], rhs=CoreLit(2)),
            ],
        )
        assert _size(expr) == 1 + 1 + 1 + 10

    def test_casts_and_ticks_are_free(self):
        expr = CoreTick(tick="scc", expr=CoreCast(expr=CoreVar(id=X), coercion=CoreCoercion("co")))
        assert _size(expr) == 1


class TestBailOut:
    """The walk stops as soon as the limit is passed."""

    def test_exact_limit(self):
        expr = mk_core_apps(CoreVar(id=F), [CoreVar(id=X), CoreVar(id=Y)])
        assert core_expr_size_within(expr, 5) == 5
        assert core_expr_size_within(expr, 4) is None

    def test_huge_expression_small_limit(self):
        """A very large expression is rejected without walking all of it."""
        expr = mk_core_apps(CoreVar(id=F), [CoreLit(n) for n in range(100000)])
        assert core_expr_size_within(expr, 10) is None

    def test_unhandled_node(self):
        with pytest.raises(TypeError, match="unhandled Core node type"):
            core_expr_size_within(mk_core_apps(CoreVar(id=F), [object()]), 100)


class TestFitsBudget:
    """core_expr_fits_budget gates duplication."""

    def test_fits(self):
        assert core_expr_fits_budget(CoreVar(id=X), 1)
        assert not core_expr_fits_budget(CoreVar(id=X), 0)

    def test_no_budget_means_unlimited(self):
        expr = mk_core_apps(CoreVar(id=F), [CoreLit(n) for n in range(10000)])
        assert core_expr_fits_budget(expr, None)
