"""Name-to-instance lookup of export strategies."""

from __future__ import annotations

import logging
from collections.abc import Iterator

from pstkit_export.errors import ErrorCode, ExportException
from pstkit_export.strategies.base import ExportStrategy
from pstkit_export.strategies.eml import EMLExportStrategy


class StrategyRegistry:
    """Ordered mapping of strategy name to strategy instance."""

    def __init__(self, strategies: list[ExportStrategy] | None = None) -> None:
        self._strategies: dict[str, ExportStrategy] = {}
        for strategy in strategies or []:
            self.register(strategy)

    def register(self, strategy: ExportStrategy) -> None:
        """Add *strategy*, replacing any strategy with the same name."""
        self._strategies[strategy.name] = strategy

    def get(self, name: str) -> ExportStrategy:
        """Return the strategy registered under *name*.

        Raises
        ------
        ExportException
            ``E_STRATEGY_NOT_FOUND`` if no strategy has that name.
        """
        try:
            return self._strategies[name]
        except KeyError:
            raise ExportException(
                code=ErrorCode.E_STRATEGY_NOT_FOUND,
                message=f"Failed to find export strategy by name: {name}",
                stage="select",
            ) from None

    def names(self) -> list[str]:
        return list(self._strategies)

    def __iter__(self) -> Iterator[ExportStrategy]:
        return iter(self._strategies.values())

    def __contains__(self, name: object) -> bool:
        return name in self._strategies

    def __len__(self) -> int:
        return len(self._strategies)


def create_default_registry(logger: logging.Logger | None = None) -> StrategyRegistry:
    """Registry holding every built-in strategy."""
    return StrategyRegistry([EMLExportStrategy(logger=logger)])


def get_all_export_strategies() -> list[ExportStrategy]:
    return list(create_default_registry())


def get_export_strategy_by_name(name: str) -> ExportStrategy:
    """Return the built-in strategy called *name*."""
    return create_default_registry().get(name)
