"""Domain layer for fiscoets application.

The engine functions are pure and work on in-memory records; the services
wrap a Database. Exports are resolved lazily, so ``fiscoets.database`` can
import the entities without loading the services.
"""

_EXPORTS = {
    "classify": "fiscoets.domain.classifier",
    "classify_many": "fiscoets.domain.classifier",
    "apportion_general_costs": "fiscoets.domain.apportionment",
    "evaluate_activity": "fiscoets.domain.compliance",
    "evaluate_entity": "fiscoets.domain.compliance",
    "evaluate_secondary": "fiscoets.domain.compliance",
    "select_regime_and_compute_ires": "fiscoets.domain.ires",
    "evaluate_context": "fiscoets.domain.evaluation",
    "EvaluationService": "fiscoets.domain.evaluation",
    "ProfileService": "fiscoets.domain.profile",
    "FiscalYearService": "fiscoets.domain.fiscal_year",
    "ActivityService": "fiscoets.domain.activity",
    "MovementService": "fiscoets.domain.movement",
}

__all__ = list(_EXPORTS)


def __getattr__(name):
    if name in _EXPORTS:
        from importlib import import_module

        return getattr(import_module(_EXPORTS[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
