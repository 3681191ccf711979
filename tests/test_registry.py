from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from farmaguardia.model.regions import CUELLAR, REGIONS, SEGOVIA_RURAL  # noqa: E402
from farmaguardia.parsing.base import ParsingStrategy  # noqa: E402
from farmaguardia.parsing.capital import CapitalStrategy  # noqa: E402
from farmaguardia.parsing.cuellar import CuellarStrategy  # noqa: E402
from farmaguardia.parsing.registry import StrategyRegistry, UnknownRegionError, default_registry  # noqa: E402
from farmaguardia.parsing.rural import RuralStrategy  # noqa: E402


def test_default_registry_covers_catalogue():
    registry = default_registry()
    assert registry.region_ids == tuple(region.id for region in REGIONS)
    assert isinstance(registry.strategy_for(SEGOVIA_RURAL), RuralStrategy)
    assert isinstance(registry.strategy_for("segovia-capital"), CapitalStrategy)
    assert all(isinstance(registry.strategy_for(rid), ParsingStrategy) for rid in registry.region_ids)


def test_strategies_know_their_document_url():
    strategy = default_registry().strategy_for(CUELLAR)
    assert strategy.source_url == CUELLAR.pdf_url


def test_unknown_region():
    registry = StrategyRegistry([CuellarStrategy()])
    assert CUELLAR in registry
    assert "madrid" not in registry
    with pytest.raises(UnknownRegionError):
        registry.strategy_for("madrid")
    with pytest.raises(KeyError):
        registry.strategy_for(SEGOVIA_RURAL)


def test_register_replaces_and_requires_region_id():
    first = CuellarStrategy()
    second = CuellarStrategy()
    registry = StrategyRegistry([first])
    registry.register(second)
    assert registry.strategy_for(CUELLAR) is second

    class Anonymous(CuellarStrategy):
        region_id = ""

    with pytest.raises(ValueError):
        registry.register(Anonymous())
