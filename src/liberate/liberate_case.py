"""
Liberate-case: unroll recursive functions that repeatedly scrutinize a free variable.

Consider

    f = \\t -> case v of { A a b -> a : f t }

where v is free in f.  Every iteration of f re-examines v, even though after
the first iteration v is known to be an A.  This pass wraps the recursive
call with a private copy of f's definition:

    f = \\t -> case v of { A a b -> a : (letrec { f' = \\t -> case v of ... } in f') t }

A later simplifier can now inline the copy, see that v has already been
scrutinized, and drop the redundant case; what remains is a loop that no
longer tests v on every iteration.

How a call site qualifies
-------------------------
A reference to a binder f of a recursive group is wrapped when:

  - the group is small enough to duplicate (every right-hand side fits the
    size budget), so the group was registered as an unfolding while its own
    right-hand sides are rewritten, and
  - some free variable was scrutinized strictly inside the group's nesting,
    i.e. between f's definition and the call.  Scrutinizing a variable bound
    inside the group itself gains nothing from unrolling.

Levels track that nesting: see LiberateCaseEnv.

Each recursive group is rewritten twice.  The first rewrite, in the body
environment, produces the copy that will be stored as the group's unfolding
(so nested groups inside it are already liberated).  The second rewrite, in
the environment carrying that unfolding, produces the final right-hand sides
in which self and sibling references may be wrapped.

Every qualifying call site gets its own copy; copies are not shared between
call sites.  The pass never inlines anything itself and counts no
simplifications.
"""

import logging
from typing import List, Optional, Tuple

from liberate.liberate_core import (
    CoreAlt,
    CoreApp,
    CoreBind,
    CoreCase,
    CoreCast,
    CoreExpr,
    CoreLam,
    CoreLet,
    CoreLit,
    CoreNonRec,
    CoreProgram,
    CoreRec,
    CoreTick,
    CoreType,
    CoreVar,
    core_bind_binders,
    mk_core_apps,
)
from liberate.liberate_env import LiberateCaseEnv
from liberate.liberate_optimization_pass import CoreOptimizationPass, CorePassResult, CorePassStats
from liberate.liberate_size import core_expr_fits_budget


DEFAULT_THRESHOLD = 2000


class LiberateCase(CoreOptimizationPass):
    """
    The liberate-case pass.

    The environment is threaded explicitly through the recursive walk; the
    only state kept on the instance is the duplication count for the current
    run.

    Usage::

        result = LiberateCase(threshold=2000).run(program)
    """

    name = "liberate-case"

    def __init__(self, threshold: Optional[int] = DEFAULT_THRESHOLD) -> None:
        """
        Initialize the pass.

        Args:
            threshold: Size budget for duplicating a recursive group, or None
                for no limit.
        """
        self._threshold = threshold
        self._duplications = 0
        self._logger = logging.getLogger("LiberateCase")

    @property
    def threshold(self) -> Optional[int]:
        """Size budget for duplicating a recursive group."""
        return self._threshold

    @property
    def duplications(self) -> int:
        """Number of call sites wrapped during the last run() call."""
        return self._duplications

    def run(self, program: CoreProgram) -> CorePassResult:
        """
        Rewrite every top-level binding of *program* in declaration order.

        The environment produced by each binding is used for the next one.

        Args:
            program: Top-level bindings.

        Returns:
            CorePassResult with the rewritten bindings.  simplifications is
            always 0; duplications counts the wrapped call sites.
        """
        self._duplications = 0
        env = LiberateCaseEnv.initial(self._threshold)

        new_program: CoreProgram = []
        for bind in program:
            env, new_bind = self._lib_bind(env, bind)
            new_program.append(new_bind)

        return CorePassResult(
            program=new_program,
            stats=CorePassStats(simplifications=0, duplications=self._duplications),
        )

    def rewrite_expr(self, env: LiberateCaseEnv, expr: CoreExpr) -> CoreExpr:
        """Rewrite a single expression in *env*."""
        return self._lib(env, expr)

    def rewrite_bind(self, env: LiberateCaseEnv, bind: CoreBind) -> Tuple[LiberateCaseEnv, CoreBind]:
        """
        Rewrite a single binding in *env*.

        Returns:
            Tuple of (env, bind) where env is the environment to use for the
            scope of the binding.
        """
        return self._lib_bind(env, bind)

    def _lib_bind(self, env: LiberateCaseEnv, bind: CoreBind) -> Tuple[LiberateCaseEnv, CoreBind]:
        if isinstance(bind, CoreNonRec):
            # The binder is not in scope in its own rhs.
            return env.add_binders([bind.binder]), CoreNonRec(binder=bind.binder, rhs=self._lib(env, bind.rhs))

        if isinstance(bind, CoreRec):
            return self._lib_rec(env, bind)

        raise TypeError(f"LiberateCase: unhandled Core binding type {type(bind).__name__}")

    def _lib_rec(self, env: LiberateCaseEnv, bind: CoreRec) -> Tuple[LiberateCaseEnv, CoreRec]:
        """
        Rewrite a recursive group.

        The returned environment has the group's binders in scope at the
        current level, whether or not the group was duplicable.
        """
        binders = core_bind_binders(bind)
        env_body = env.add_binders(binders)

        if self._is_dupable(env, bind):
            dup_pairs = [(binder, self._lib(env_body, rhs)) for binder, rhs in bind.pairs]
            env_rhs = env.add_recursive_unfoldings(dup_pairs)
            self._logger.debug(
                "Recursive group %s is duplicable at level %d",
                [b.display_name for b in binders], env.level
            )

        else:
            env_rhs = env
            self._logger.debug(
                "Recursive group %s exceeds size budget %s",
                [b.display_name for b in binders], env.budget
            )

        pairs = [(binder, self._lib(env_rhs, rhs)) for binder, rhs in bind.pairs]
        return env_body, CoreRec(pairs=pairs)

    @staticmethod
    def _is_dupable(env: LiberateCaseEnv, bind: CoreRec) -> bool:
        return all(core_expr_fits_budget(rhs, env.budget) for _, rhs in bind.pairs)

    def _lib(self, env: LiberateCaseEnv, expr: CoreExpr) -> CoreExpr:
        """Recursively rewrite *expr* in *env*."""
        if isinstance(expr, CoreVar):
            return self._lib_var(env, expr)

        if isinstance(expr, (CoreLit, CoreType)):
            return expr

        if isinstance(expr, CoreApp):
            return self._lib_app(env, expr)

        if isinstance(expr, CoreTick):
            return CoreTick(tick=expr.tick, expr=self._lib(env, expr.expr))

        if isinstance(expr, CoreCast):
            return CoreCast(expr=self._lib(env, expr.expr), coercion=expr.coercion)

        if isinstance(expr, CoreLam):
            return CoreLam(param=expr.param, body=self._lib(env.add_binders([expr.param]), expr.body))

        if isinstance(expr, CoreLet):
            body_env, new_bind = self._lib_bind(env, expr.bind)
            return CoreLet(bind=new_bind, body=self._lib(body_env, expr.body))

        if isinstance(expr, CoreCase):
            return self._lib_case(env, expr)

        raise TypeError(f"LiberateCase: unhandled Core node type {type(expr).__name__}")

    def _lib_app(self, env: LiberateCaseEnv, expr: CoreApp) -> CoreExpr:
        """
        Rewrite an application spine.

        The spine is unwound iteratively so that applications with many
        arguments do not recurse once per argument.
        """
        args: List[CoreExpr] = []
        fun: CoreExpr = expr
        while isinstance(fun, CoreApp):
            args.append(fun.arg)
            fun = fun.fun

        args.reverse()
        return mk_core_apps(self._lib(env, fun), [self._lib(env, arg) for arg in args])

    def _lib_case(self, env: LiberateCaseEnv, expr: CoreCase) -> CoreCase:
        """
        Rewrite a case expression.

        The alternatives see the scrutiny of the scrutinee (when it is a
        variable, possibly under casts) and the case binder.  Each
        alternative's pattern variables are visible only in that alternative.
        """
        alt_env = self._scrutiny_env(env, expr.scrutinee).add_binders([expr.binder])

        alts: List[CoreAlt] = []
        for alt in expr.alts:
            alts.append(CoreAlt(
                con=alt.con,
                binders=alt.binders,
                rhs=self._lib(alt_env.add_binders(alt.binders), alt.rhs),
            ))

        return CoreCase(
            scrutinee=self._lib(env, expr.scrutinee),
            binder=expr.binder,
            type=expr.type,
            alts=alts,
        )

    @staticmethod
    def _scrutiny_env(env: LiberateCaseEnv, scrutinee: CoreExpr) -> LiberateCaseEnv:
        while isinstance(scrutinee, CoreCast):
            scrutinee = scrutinee.expr

        if isinstance(scrutinee, CoreVar):
            return env.add_scrutinized(scrutinee.id)

        return env

    def _lib_var(self, env: LiberateCaseEnv, expr: CoreVar) -> CoreExpr:
        """
        Rewrite a variable reference.

        If the variable belongs to a registered recursive group and something
        free was scrutinized since that group was defined, wrap this one
        reference with the group's localized copy.  The copy's binders share
        the originals' uniques, so inside the wrapper the reference resolves
        to the copy.
        """
        group = env.lookup_unfolding(expr.id)
        if group is None:
            return expr

        free_scruts = env.free_scruts(env.lookup_level(expr.id))
        if not free_scruts:
            return expr

        self._duplications += 1
        self._logger.debug(
            "Liberating call to %s (scrutinized: %s)",
            expr.id.display_name, [v.display_name for v in free_scruts]
        )
        return CoreLet(bind=CoreRec(pairs=list(group.pairs)), body=expr)
