"""Region id to parsing strategy lookup."""

from __future__ import annotations

from datetime import date
from typing import Callable, Dict, Iterable, Optional, Tuple

from farmaguardia.model.regions import CUELLAR, EL_ESPINAR, REGIONS, SEGOVIA_CAPITAL, SEGOVIA_RURAL, Region

from .base import ParsingStrategy
from .capital import CapitalStrategy
from .cuellar import CuellarStrategy
from .el_espinar import ElEspinarStrategy
from .rural import RuralStrategy


class UnknownRegionError(KeyError):
    """Raised when no strategy is registered for a region id."""


class StrategyRegistry:
    def __init__(self, strategies: Optional[Iterable[ParsingStrategy]] = None) -> None:
        self._strategies: Dict[str, ParsingStrategy] = {}
        for strategy in strategies or ():
            self.register(strategy)

    def register(self, strategy: ParsingStrategy) -> None:
        if not strategy.region_id:
            raise ValueError(f"{type(strategy).__name__} has no region id")
        self._strategies[strategy.region_id] = strategy

    def strategy_for(self, region: "Region | str") -> ParsingStrategy:
        region_id = region if isinstance(region, str) else region.id
        try:
            return self._strategies[region_id]
        except KeyError:
            raise UnknownRegionError(region_id) from None

    @property
    def region_ids(self) -> Tuple[str, ...]:
        return tuple(self._strategies)

    def __contains__(self, region: object) -> bool:
        region_id = region if isinstance(region, str) else getattr(region, "id", None)
        return region_id in self._strategies


_STRATEGY_TYPES = {
    SEGOVIA_CAPITAL.id: CapitalStrategy,
    CUELLAR.id: CuellarStrategy,
    EL_ESPINAR.id: ElEspinarStrategy,
    SEGOVIA_RURAL.id: RuralStrategy,
}


def default_registry(*, today: Optional[Callable[[], date]] = None) -> StrategyRegistry:
    """Registry with one strategy per catalogue region, seeded with its URL."""

    return StrategyRegistry(
        _STRATEGY_TYPES[region.id](today=today, source_url=region.pdf_url) for region in REGIONS
    )


__all__ = ["UnknownRegionError", "StrategyRegistry", "default_registry"]
