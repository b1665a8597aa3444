"""
Core intermediate representation.

Core is a small typed lambda calculus: variables, literals, type literals,
applications, lambdas, lets (non-recursive or recursive groups), case
expressions, casts and ticks.  Types and coercions are opaque to the passes
in this package; they are carried verbatim.

All nodes are plain dataclasses.  Passes build new trees rather than
mutating the ones they are given, so any node may be shared between an input
tree and its rewritten output.
"""

from dataclasses import dataclass, field
from typing import List, Tuple, Union

from liberate.liberate_id import CoreId


@dataclass
class CoreCoercion:
    """An opaque coercion, as produced by the type checker."""
    name: str


@dataclass
class CoreVar:
    """Reference to an identifier."""
    id: CoreId


@dataclass
class CoreLit:
    """Literal value (integer, float, character or string)."""
    value: Union[int, float, str]


@dataclass
class CoreType:
    """Type literal, used as a type argument or as a case result type."""
    name: str


@dataclass
class CoreApp:
    """Application of a function to a single argument."""
    fun: 'CoreExpr'
    arg: 'CoreExpr'


@dataclass
class CoreLam:
    """Lambda abstraction over a single parameter."""
    param: CoreId
    body: 'CoreExpr'


@dataclass
class CoreLet:
    """Local binding (non-recursive or recursive) scoped over a body."""
    bind: 'CoreBind'
    body: 'CoreExpr'


@dataclass
class CoreDataAlt:
    """Alternative matching a data constructor."""
    name: str


@dataclass
class CoreLitAlt:
    """Alternative matching a literal."""
    value: Union[int, float, str]


@dataclass
class CoreDefaultAlt:
    """Catch-all alternative."""


CoreAltCon = Union[CoreDataAlt, CoreLitAlt, CoreDefaultAlt]


@dataclass
class CoreAlt:
    """One case alternative: constructor, pattern variables and right-hand side."""
    con: CoreAltCon
    binders: List[CoreId]
    rhs: 'CoreExpr'


@dataclass
class CoreCase:
    """
    Case expression.

    The scrutinee is evaluated and bound to *binder* in every alternative;
    *type* is the type of the whole expression.
    """
    scrutinee: 'CoreExpr'
    binder: CoreId
    type: CoreType
    alts: List[CoreAlt]


@dataclass
class CoreCast:
    """Expression cast by a coercion."""
    expr: 'CoreExpr'
    coercion: CoreCoercion


@dataclass
class CoreTick:
    """Expression annotated with a tick (profiling or source note)."""
    tick: str
    expr: 'CoreExpr'


# Union type for all expression nodes
CoreExpr = Union[
    CoreVar,
    CoreLit,
    CoreType,
    CoreApp,
    CoreLam,
    CoreLet,
    CoreCase,
    CoreCast,
    CoreTick,
]


@dataclass
class CoreNonRec:
    """Non-recursive binding: the binder is not in scope in its own rhs."""
    binder: CoreId
    rhs: CoreExpr


@dataclass
class CoreRec:
    """Recursive group: every binder is in scope in every rhs."""
    pairs: List[Tuple[CoreId, CoreExpr]] = field(default_factory=list)


CoreBind = Union[CoreNonRec, CoreRec]

# A compilation unit is an ordered list of top-level bindings.
CoreProgram = List[CoreBind]


def core_bind_binders(bind: CoreBind) -> List[CoreId]:
    """Return the binders introduced by *bind*, in order."""
    if isinstance(bind, CoreNonRec):
        return [bind.binder]

    return [binder for binder, _ in bind.pairs]


def mk_core_apps(fun: CoreExpr, args: List[CoreExpr]) -> CoreExpr:
    """Build the left-nested application fun a1 a2 ... an."""
    expr = fun
    for arg in args:
        expr = CoreApp(fun=expr, arg=arg)

    return expr


def mk_core_lams(params: List[CoreId], body: CoreExpr) -> CoreExpr:
    """Build the nested lambda \\p1 -> \\p2 -> ... -> body."""
    expr = body
    for param in reversed(params):
        expr = CoreLam(param=param, body=expr)

    return expr
