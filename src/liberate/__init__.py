"""Liberate-case: a Core-to-Core pass that unrolls recursion over scrutinized free variables."""

# Main API
from liberate.liberate_case import LiberateCase, DEFAULT_THRESHOLD
from liberate.liberate_pipeline import CorePipeline
from liberate.liberate_settings import LiberateSettings

# Exceptions
from liberate.liberate_error import LiberateError, LiberateSettingsError

# Core IR
from liberate.liberate_id import CoreId, localize_id
from liberate.liberate_core import (
    CoreExpr, CoreVar, CoreLit, CoreType, CoreApp, CoreLam, CoreLet, CoreCase,
    CoreCast, CoreCoercion, CoreTick, CoreAlt, CoreDataAlt, CoreLitAlt, CoreDefaultAlt,
    CoreBind, CoreNonRec, CoreRec, CoreProgram
)

# Lower-level components (for advanced usage)
from liberate.liberate_env import LiberateCaseEnv
from liberate.liberate_optimization_pass import CoreOptimizationPass, CorePassResult, CorePassStats
from liberate.liberate_pretty_printer import CorePrettyPrinter
from liberate.liberate_size import core_expr_fits_budget, core_expr_size_within

__all__ = [
    # Main API
    "LiberateCase", "DEFAULT_THRESHOLD", "CorePipeline", "LiberateSettings",

    # Exceptions
    "LiberateError", "LiberateSettingsError",

    # Core IR
    "CoreId", "localize_id",
    "CoreExpr", "CoreVar", "CoreLit", "CoreType", "CoreApp", "CoreLam", "CoreLet", "CoreCase",
    "CoreCast", "CoreCoercion", "CoreTick", "CoreAlt", "CoreDataAlt", "CoreLitAlt", "CoreDefaultAlt",
    "CoreBind", "CoreNonRec", "CoreRec", "CoreProgram",

    # Lower-level components
    "LiberateCaseEnv", "CoreOptimizationPass", "CorePassResult", "CorePassStats",
    "CorePrettyPrinter", "core_expr_fits_budget", "core_expr_size_within",
]
