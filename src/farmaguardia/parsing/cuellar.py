"""Cuéllar weekly rotation calendar."""

from __future__ import annotations

import re

from farmaguardia.model.regions import CUELLAR

from .directory import CUELLAR_PHARMACIES
from .market import MarketTownStrategy


class CuellarStrategy(MarketTownStrategy):
    region_id = CUELLAR.id
    directory = CUELLAR_PHARMACIES
    location_re = re.compile(r"\bCU[ÉE]LLAR\b", re.IGNORECASE)


__all__ = ["CuellarStrategy"]
