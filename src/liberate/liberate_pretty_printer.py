"""
Core pretty printer.

Renders Core as compact single-line text, e.g.

    rec { Main.f = \\t_2 -> case Main.v of wild_3 { A a_4 b_5 -> Main.cons a_4 (Main.f t_2) } }

Internal ids are printed with their unique, exported ids with their
qualified name, so a localized copy (f_1) is always distinguishable from the
exported binder it was made from (Main.f).  Output is deterministic, which
makes it suitable for debug dumps and for comparing trees in tests.

Each occurrence is printed from the id it carries, not from the binder it
resolves to.  Binders are identified by unique alone, so in

    letrec { f_1 = \\t_2 -> ... Main.f t_2 ... } in Main.f

both occurrences of Main.f (unique 1) refer to the letrec-bound f_1, even
though they print differently.
"""

from typing import List

from liberate.liberate_core import (
    CoreAlt,
    CoreAltCon,
    CoreApp,
    CoreBind,
    CoreCase,
    CoreCast,
    CoreDataAlt,
    CoreDefaultAlt,
    CoreExpr,
    CoreLam,
    CoreLet,
    CoreLit,
    CoreLitAlt,
    CoreNonRec,
    CoreProgram,
    CoreRec,
    CoreTick,
    CoreType,
    CoreVar,
)


class CorePrettyPrinter:
    """Format Core expressions, bindings and programs as text."""

    def format_program(self, program: CoreProgram) -> str:
        """Format top-level bindings, one per line."""
        return "\n".join(self.format_bind(bind) for bind in program)

    def format_bind(self, bind: CoreBind) -> str:
        """Format a top-level binding."""
        if isinstance(bind, CoreNonRec):
            return self._format_pair(bind.binder.display_name, bind.rhs)

        if isinstance(bind, CoreRec):
            pairs = "; ".join(self._format_pair(b.display_name, rhs) for b, rhs in bind.pairs)
            return f"rec {{ {pairs} }}"

        raise TypeError(f"CorePrettyPrinter: unhandled Core binding type {type(bind).__name__}")

    def format_expr(self, expr: CoreExpr) -> str:
        """Format an expression."""
        if isinstance(expr, CoreVar):
            return expr.id.display_name

        if isinstance(expr, CoreLit):
            return self._format_literal(expr.value)

        if isinstance(expr, CoreType):
            return f"@{expr.name}"

        if isinstance(expr, CoreApp):
            return self._format_app(expr)

        if isinstance(expr, CoreLam):
            params: List[str] = []
            body: CoreExpr = expr
            while isinstance(body, CoreLam):
                params.append(body.param.display_name)
                body = body.body

            return f"\\{' '.join(params)} -> {self.format_expr(body)}"

        if isinstance(expr, CoreLet):
            return self._format_let(expr)

        if isinstance(expr, CoreCase):
            return self._format_case(expr)

        if isinstance(expr, CoreCast):
            return f"{self._format_atom(expr.expr)} |> {expr.coercion.name}"

        if isinstance(expr, CoreTick):
            return f"{{{expr.tick}}} {self._format_atom(expr.expr)}"

        raise TypeError(f"CorePrettyPrinter: unhandled Core node type {type(expr).__name__}")

    def _format_pair(self, name: str, rhs: CoreExpr) -> str:
        return f"{name} = {self.format_expr(rhs)}"

    def _format_atom(self, expr: CoreExpr) -> str:
        """Format *expr*, parenthesized unless it is atomic."""
        text = self.format_expr(expr)
        if isinstance(expr, (CoreVar, CoreLit, CoreType)):
            return text

        return f"({text})"

    def _format_app(self, expr: CoreApp) -> str:
        args: List[CoreExpr] = []
        fun: CoreExpr = expr
        while isinstance(fun, CoreApp):
            args.append(fun.arg)
            fun = fun.fun

        args.reverse()
        parts = [self._format_atom(fun)] + [self._format_atom(arg) for arg in args]
        return " ".join(parts)

    def _format_let(self, expr: CoreLet) -> str:
        bind = expr.bind
        body = self.format_expr(expr.body)
        if isinstance(bind, CoreNonRec):
            return f"let {{ {self._format_pair(bind.binder.display_name, bind.rhs)} }} in {body}"

        pairs = "; ".join(self._format_pair(b.display_name, rhs) for b, rhs in bind.pairs)
        return f"letrec {{ {pairs} }} in {body}"

    def _format_case(self, expr: CoreCase) -> str:
        alts = "; ".join(self._format_alt(alt) for alt in expr.alts)
        return f"case {self.format_expr(expr.scrutinee)} of {expr.binder.display_name} {{ {alts} }}"

    def _format_alt(self, alt: CoreAlt) -> str:
        pattern = [self._format_alt_con(alt.con)] + [b.display_name for b in alt.binders]
        return f"{' '.join(pattern)} -> {self.format_expr(alt.rhs)}"

    def _format_alt_con(self, con: CoreAltCon) -> str:
        if isinstance(con, CoreDataAlt):
            return con.name

        if isinstance(con, CoreLitAlt):
            return self._format_literal(con.value)

        if isinstance(con, CoreDefaultAlt):
            return "_"

        raise TypeError(f"CorePrettyPrinter: unhandled alternative type {type(con).__name__}")

    @staticmethod
    def _format_literal(value: int | float | str) -> str:
        if isinstance(value, str):
            escaped = value.replace('\\', '\\\\').replace('"', '\\"')
            return f'"{escaped}"'

        return str(value)
