# ================================
# kaikei/core/tax/consumption_tax.py
# ================================
"""
消費税の計算

- 本則課税: 課税売上に係る消費税 − 課税仕入に係る消費税
- 簡易課税: 課税売上に係る消費税 − みなし仕入税額（売上税額 × みなし仕入率）

明細の消費税額は記録済みの tax_amount を正とし、未記録（None）の明細だけ
税込金額から切り捨て計算する。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Mapping

import pandas as pd

from kaikei.core.errors import UnknownBusinessTypeError, UnsupportedMethodError
from kaikei.core.ledger.types import TaxMethod, TaxType
from kaikei.core.tax.tax_splitter import calculate_tax_amount

logger = logging.getLogger(__name__)


# みなし仕入率（%）
DEEMED_PURCHASE_RATES: dict[int, int] = {
    1: 90,
    2: 80,
    3: 70,
    4: 60,
    5: 50,
    6: 40,
}

BUSINESS_TYPE_LABELS: dict[int, str] = {
    1: "第1種（卸売業）",
    2: "第2種（小売業）",
    3: "第3種（製造業等）",
    4: "第4種（その他）",
    5: "第5種（サービス業等）",
    6: "第6種（不動産業）",
}

# 納付税額のうち国税分（%）。10%のうち7.8%が国税
NATIONAL_TAX_RATIO = 78


@dataclass
class TaxBreakdown:
    """税率別の集計（売上・仕入それぞれ）"""

    rate: int
    is_reduced: bool
    taxable_amount: int  # 税込の課税対象額
    tax_amount: int


@dataclass
class ConsumptionTaxResult:
    method: TaxMethod

    sales_breakdown: list[TaxBreakdown] = field(default_factory=list)
    total_taxable_sales: int = 0
    total_sales_tax: int = 0

    # 簡易課税では集計しない
    purchase_breakdown: list[TaxBreakdown] = field(default_factory=list)
    total_taxable_purchases: int = 0
    total_purchase_tax: int = 0

    business_type: int | None = None
    deemed_purchase_rate: int | None = None  # %
    deemed_purchase_tax: int | None = None

    tax_payable: int = 0  # マイナスは還付
    national_tax: int = 0
    local_tax: int = 0

    @property
    def is_refund(self) -> bool:
        return self.tax_payable < 0


_BREAKDOWN_COLUMNS = ["type", "rate", "is_reduced", "amount", "tax"]


class ConsumptionTaxCalculator:
    """
    ConsumptionTaxCalculator
    -------------------------
    ・確定済み仕訳の明細（JournalLine）を受け取る
    ・税区分で課税売上 / 課税仕入に振り分け、(税率, 軽減税率) ごとに集計
    ・本則 / 簡易で納付税額を求め、国税・地方税に按分する
    """

    def __init__(
        self,
        tax_categories: Mapping,
        deemed_purchase_rates: Mapping[int, int] | None = None,
        national_tax_ratio: int = NATIONAL_TAX_RATIO,
    ):
        self.tax_categories = tax_categories
        self.deemed_purchase_rates = dict(deemed_purchase_rates or DEEMED_PURCHASE_RATES)
        self.national_tax_ratio = national_tax_ratio

    # -------------------------------------------------
    # 明細 → 税率別 DataFrame
    # -------------------------------------------------
    def _taxable_rows(self, lines: Iterable, include_purchases: bool) -> pd.DataFrame:
        rows = []
        for line in lines:
            if not line.tax_category_id:
                continue
            tc = self.tax_categories.get(line.tax_category_id)
            if tc is None or tc.rate == 0:
                continue
            if tc.type == TaxType.TAXABLE_PURCHASE and not include_purchases:
                continue
            if tc.type not in (TaxType.TAXABLE_SALES, TaxType.TAXABLE_PURCHASE):
                continue

            tax = line.tax_amount
            if tax is None:
                tax = calculate_tax_amount(line.amount, tc.rate)

            rows.append({
                "type": tc.type.value,
                "rate": tc.rate,
                "is_reduced": tc.is_reduced,
                "amount": line.amount,
                "tax": tax,
            })

        return pd.DataFrame(rows, columns=_BREAKDOWN_COLUMNS)

    @staticmethod
    def _breakdown(df: pd.DataFrame, tax_type: TaxType) -> list[TaxBreakdown]:
        part = df[df["type"] == tax_type.value]
        if part.empty:
            return []

        grouped = (
            part.groupby(["rate", "is_reduced"], as_index=False)[["amount", "tax"]]
            .sum()
            .sort_values(["rate", "is_reduced"], ascending=[False, True])
        )
        return [
            TaxBreakdown(
                rate=int(r.rate),
                is_reduced=bool(r.is_reduced),
                taxable_amount=int(r.amount),
                tax_amount=int(r.tax),
            )
            for r in grouped.itertuples(index=False)
        ]

    # -------------------------------------------------
    # 計算本体
    # -------------------------------------------------
    def calculate(
        self,
        lines: Iterable,
        method=TaxMethod.STANDARD,
        business_type: int = 5,
    ) -> ConsumptionTaxResult:
        try:
            method = TaxMethod(method)
        except ValueError as e:
            raise UnsupportedMethodError(f"未対応の消費税計算方式です: {method!r}") from e

        simplified = method == TaxMethod.SIMPLIFIED
        if simplified and business_type not in self.deemed_purchase_rates:
            raise UnknownBusinessTypeError(f"簡易課税の事業区分は 1〜6 で指定してください: {business_type!r}")

        df = self._taxable_rows(lines, include_purchases=not simplified)
        result = ConsumptionTaxResult(method=method)

        result.sales_breakdown = self._breakdown(df, TaxType.TAXABLE_SALES)
        result.total_taxable_sales = sum(b.taxable_amount for b in result.sales_breakdown)
        result.total_sales_tax = sum(b.tax_amount for b in result.sales_breakdown)

        if simplified:
            pct = self.deemed_purchase_rates[business_type]
            result.business_type = business_type
            result.deemed_purchase_rate = pct
            result.deemed_purchase_tax = result.total_sales_tax * pct // 100
            result.tax_payable = result.total_sales_tax - result.deemed_purchase_tax
        else:
            result.purchase_breakdown = self._breakdown(df, TaxType.TAXABLE_PURCHASE)
            result.total_taxable_purchases = sum(b.taxable_amount for b in result.purchase_breakdown)
            result.total_purchase_tax = sum(b.tax_amount for b in result.purchase_breakdown)
            result.tax_payable = result.total_sales_tax - result.total_purchase_tax

        result.national_tax = result.tax_payable * self.national_tax_ratio // 100
        result.local_tax = result.tax_payable - result.national_tax

        logger.debug(
            f"消費税計算: method={method.value} 売上税額={result.total_sales_tax:,} "
            f"仕入税額={result.total_purchase_tax:,} 納付={result.tax_payable:,}"
        )
        return result

# ================================
# END consumption_tax.py
# ================================
