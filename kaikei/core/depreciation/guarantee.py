# ===== kaikei/core/depreciation/guarantee.py =====
"""
200%定率法の保証率

減価償却資産の耐用年数等に関する省令 別表第十（平成24年4月1日以後取得）。
耐用年数2年は保証率なし（0）。表にない耐用年数は 1/耐用年数² で近似し、警告を出す。
"""

import logging
from decimal import Decimal

logger = logging.getLogger(__name__)

GUARANTEE_RATES: dict[int, Decimal] = {
    2: Decimal("0"),
    3: Decimal("0.11089"),
    4: Decimal("0.12499"),
    5: Decimal("0.10800"),
    6: Decimal("0.09911"),
    7: Decimal("0.08680"),
    8: Decimal("0.07909"),
    9: Decimal("0.07126"),
    10: Decimal("0.06552"),
    11: Decimal("0.05992"),
    12: Decimal("0.05566"),
    13: Decimal("0.05180"),
    14: Decimal("0.04854"),
    15: Decimal("0.04565"),
    16: Decimal("0.04294"),
    17: Decimal("0.04038"),
    18: Decimal("0.03884"),
    19: Decimal("0.03693"),
    20: Decimal("0.03486"),
}


def guarantee_rate(useful_life: int) -> Decimal:
    rate = GUARANTEE_RATES.get(useful_life)
    if rate is not None:
        return rate

    fallback = Decimal(1) / Decimal(useful_life * useful_life)
    logger.warning(f"耐用年数 {useful_life} 年の保証率は表にありません。1/{useful_life}² = {fallback:.5f} で計算します")
    return fallback

# ===== end guarantee.py =====
