#==== kaikei/core/engine/tax_engine.py ====

from __future__ import annotations

import logging

from kaikei.config.params import EngineParams
from kaikei.core.fiscal import check_range
from kaikei.core.ledger.store import LedgerStore
from kaikei.core.tax.consumption_tax import ConsumptionTaxCalculator, ConsumptionTaxResult

logger = logging.getLogger(__name__)


class TaxEngine:
    """
    消費税計算の窓口。
    方式・事業区分を省略した場合は会社の設定（Company.tax_method / business_type）を使う。
    """

    def __init__(self, store: LedgerStore, params: EngineParams | None = None):
        self.store = store
        self.params = params or EngineParams()

    def calculate_consumption_tax(
        self,
        company_id: str,
        date_from,
        date_to,
        method=None,
        business_type: int | None = None,
    ) -> ConsumptionTaxResult:
        d_from, d_to = check_range(date_from, date_to)
        ledger = self.store.get(company_id)
        company = ledger.company

        calculator = ConsumptionTaxCalculator(
            ledger.tax_categories,
            deemed_purchase_rates=self.params.deemed_purchase_rates,
            national_tax_ratio=self.params.national_tax_ratio,
        )

        lines = [
            line
            for entry in ledger.confirmed_entries(d_from, d_to)
            for line in entry.lines
        ]

        result = calculator.calculate(
            lines,
            method=method if method is not None else company.tax_method,
            business_type=business_type if business_type is not None else company.business_type,
        )
        logger.info(
            f"消費税を計算: {company_id} {d_from}〜{d_to} "
            f"{result.method.value} 納付税額 {result.tax_payable:,}"
        )
        return result

#======= kaikei/core/engine/tax_engine.py end ======
