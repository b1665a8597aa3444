"""
Core size heuristic.

Estimates how big an expression is, for deciding whether it is cheap enough
to duplicate.  The walk keeps a running total and gives up as soon as the
total passes the caller's limit, so asking whether a huge expression fits a
small budget costs only as much as the budget.

Cost model
----------
- Leading lambda binders are free: the size of a function is the size of its
  body.
- Variables and literals cost 1.
- Type literals, coercions and ticks cost nothing.
- An application costs its parts plus 1, unless the argument is a type.
- A nested lambda costs its body plus 10 (it allocates a closure).
- A let costs its right-hand sides and body plus 10 per binder.
- A case costs its scrutinee and alternatives plus 10 for each alternative
  beyond the first.
"""

from typing import List, Optional

from liberate.liberate_core import (
    CoreApp,
    CoreCase,
    CoreCast,
    CoreExpr,
    CoreLam,
    CoreLet,
    CoreLit,
    CoreNonRec,
    CoreTick,
    CoreType,
    CoreVar,
)


ALLOCATION_COST = 10
BRANCH_COST = 10


def core_expr_size_within(expr: CoreExpr, limit: int) -> Optional[int]:
    """
    Return the size of *expr*, or None if it exceeds *limit*.

    Args:
        expr: Expression to measure.
        limit: Largest acceptable size.

    Returns:
        The exact size when it is at most *limit*; None as soon as the running
        total exceeds *limit* (the rest of the tree is not visited).
    """
    while isinstance(expr, CoreLam):
        expr = expr.body

    size = 0
    stack: List[CoreExpr] = [expr]
    while stack:
        node = stack.pop()

        if isinstance(node, (CoreVar, CoreLit)):
            size += 1

        elif isinstance(node, CoreType):
            pass

        elif isinstance(node, CoreApp):
            stack.append(node.fun)
            if not isinstance(node.arg, CoreType):
                size += 1
                stack.append(node.arg)

        elif isinstance(node, CoreLam):
            size += ALLOCATION_COST
            stack.append(node.body)

        elif isinstance(node, CoreLet):
            if isinstance(node.bind, CoreNonRec):
                size += ALLOCATION_COST
                stack.append(node.bind.rhs)

            else:
                for _, rhs in node.bind.pairs:
                    size += ALLOCATION_COST
                    stack.append(rhs)

            stack.append(node.body)

        elif isinstance(node, CoreCase):
            size += BRANCH_COST * max(len(node.alts) - 1, 0)
            stack.append(node.scrutinee)
            stack.extend(alt.rhs for alt in node.alts)

        elif isinstance(node, (CoreCast, CoreTick)):
            stack.append(node.expr)

        else:
            raise TypeError(f"core_expr_size_within: unhandled Core node type {type(node).__name__}")

        if size > limit:
            return None

    return size


def core_expr_fits_budget(expr: CoreExpr, budget: Optional[int]) -> bool:
    """
    Return True if *expr* is small enough to duplicate under *budget*.

    A budget of None means there is no limit.
    """
    if budget is None:
        return True

    return core_expr_size_within(expr, budget) is not None
