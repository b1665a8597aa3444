"""Shared fixtures and utilities for liberate-case tests."""

import pytest

from liberate.liberate_case import LiberateCase
from liberate.liberate_core import CoreApp, CoreBind, CoreCase, CoreCast, CoreExpr, CoreLam, CoreLet, CoreNonRec
from liberate.liberate_core import CoreRec, CoreTick, CoreVar, CoreAlt, CoreProgram, mk_core_apps
from liberate.liberate_pretty_printer import CorePrettyPrinter


@pytest.fixture
def liberate_case():
    """Create a fresh LiberateCase pass with the default threshold for each test."""
    return LiberateCase()


@pytest.fixture
def printer():
    """Create a Core pretty printer."""
    return CorePrettyPrinter()


class CoreTestHelpers:
    """Helper utilities for Core testing."""

    @staticmethod
    def strip_liberation(expr: CoreExpr) -> CoreExpr:
        """
        Remove every wrapper the pass inserts.

        A wrapper is a letrec whose body is a bare reference to one of its own
        binders.  Removing all of them from a rewritten tree must give back
        the input tree.
        """
        if isinstance(expr, CoreLet):
            bind = expr.bind
            if (isinstance(bind, CoreRec) and isinstance(expr.body, CoreVar)
                    and any(b == expr.body.id for b, _ in bind.pairs)):
                return expr.body

            return CoreLet(
                bind=CoreTestHelpers.strip_liberation_bind(bind),
                body=CoreTestHelpers.strip_liberation(expr.body),
            )

        if isinstance(expr, CoreApp):
            args = []
            fun = expr
            while isinstance(fun, CoreApp):
                args.append(fun.arg)
                fun = fun.fun

            return mk_core_apps(
                CoreTestHelpers.strip_liberation(fun),
                [CoreTestHelpers.strip_liberation(arg) for arg in reversed(args)],
            )

        if isinstance(expr, CoreLam):
            return CoreLam(param=expr.param, body=CoreTestHelpers.strip_liberation(expr.body))

        if isinstance(expr, CoreCase):
            return CoreCase(
                scrutinee=CoreTestHelpers.strip_liberation(expr.scrutinee),
                binder=expr.binder,
                type=expr.type,
                alts=[
                    CoreAlt(con=alt.con, binders=alt.binders, rhs=CoreTestHelpers.strip_liberation(alt.rhs))
                    for alt in expr.alts
                ],
            )

        if isinstance(expr, CoreCast):
            return CoreCast(expr=CoreTestHelpers.strip_liberation(expr.expr), coercion=expr.coercion)

        if isinstance(expr, CoreTick):
            return CoreTick(tick=expr.tick, expr=CoreTestHelpers.strip_liberation(expr.expr))

        return expr

    @staticmethod
    def strip_liberation_bind(bind: CoreBind) -> CoreBind:
        """Remove liberation wrappers from every right-hand side of *bind*."""
        if isinstance(bind, CoreNonRec):
            return CoreNonRec(binder=bind.binder, rhs=CoreTestHelpers.strip_liberation(bind.rhs))

        return CoreRec(pairs=[(b, CoreTestHelpers.strip_liberation(rhs)) for b, rhs in bind.pairs])

    @staticmethod
    def strip_liberation_program(program: CoreProgram) -> CoreProgram:
        """Remove liberation wrappers from every top-level binding."""
        return [CoreTestHelpers.strip_liberation_bind(bind) for bind in program]

    @staticmethod
    def find_wrappers(expr: CoreExpr) -> list:
        """Return every liberation wrapper in *expr*, outermost first, left to right."""
        found = []
        stack = [expr]
        while stack:
            node = stack.pop()
            if isinstance(node, CoreLet):
                bind = node.bind
                if (isinstance(bind, CoreRec) and isinstance(node.body, CoreVar)
                        and any(b == node.body.id for b, _ in bind.pairs)):
                    found.append(node)

                children = [rhs for _, rhs in bind.pairs] if isinstance(bind, CoreRec) else [bind.rhs]
                stack.extend(reversed(children + [node.body]))

            elif isinstance(node, CoreApp):
                stack.extend([node.arg, node.fun])

            elif isinstance(node, CoreLam):
                stack.append(node.body)

            elif isinstance(node, CoreCase):
                stack.extend(reversed([node.scrutinee] + [alt.rhs for alt in node.alts]))

            elif isinstance(node, (CoreCast, CoreTick)):
                stack.append(node.expr)

        return found


@pytest.fixture
def helpers():
    """Provide the Core test helpers."""
    return CoreTestHelpers
