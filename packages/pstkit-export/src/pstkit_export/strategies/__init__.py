"""Export strategies and their registry."""

from pstkit_export.strategies.base import ExportStrategy
from pstkit_export.strategies.eml import EMLExportStrategy
from pstkit_export.strategies.registry import (
    StrategyRegistry,
    create_default_registry,
    get_all_export_strategies,
    get_export_strategy_by_name,
)

__all__ = [
    "ExportStrategy",
    "EMLExportStrategy",
    "StrategyRegistry",
    "create_default_registry",
    "get_all_export_strategies",
    "get_export_strategy_by_name",
]
