#=========== kaikei/config/params.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional

from kaikei.core.errors import DomainLimitError, UnsupportedMethodError
from kaikei.core.finance.fs_mapping import DEFAULT_PL_CLASSIFICATION, PLBucket
from kaikei.core.ledger.types import TaxMethod
from kaikei.core.tax.consumption_tax import (
    DEEMED_PURCHASE_RATES,
    NATIONAL_TAX_RATIO,
)


@dataclass
class Company:
    """会社（帳簿の単位）"""

    id: str
    name: str = ""
    fiscal_year_end_month: int = 3  # 決算月
    tax_method: TaxMethod = TaxMethod.STANDARD  # 本則 / 簡易
    business_type: int = 5  # 簡易課税の事業区分（既定: 第5種）

    def __post_init__(self):
        if not 1 <= int(self.fiscal_year_end_month) <= 12:
            raise DomainLimitError(f"決算月は 1〜12 で指定してください: {self.fiscal_year_end_month}")
        try:
            self.tax_method = TaxMethod(self.tax_method)
        except ValueError as e:
            raise UnsupportedMethodError(f"未対応の消費税計算方式です: {self.tax_method!r}") from e


@dataclass
class PLClassification:
    """
    損益計算書の区分表（科目コード → 区分）

    計算ロジックに手を入れずに分類だけ差し替えられるよう、設定として渡す。
    """

    mapping: Dict[str, PLBucket] = field(default_factory=lambda: dict(DEFAULT_PL_CLASSIFICATION))

    @classmethod
    def from_mapping(cls, raw: dict) -> "PLClassification":
        mapping = {}
        for code, bucket in raw.items():
            try:
                mapping[str(code)] = PLBucket(bucket)
            except ValueError as e:
                valid = [b.value for b in PLBucket]
                raise DomainLimitError(
                    f"損益区分が不正です: {code} → {bucket!r}（有効な値: {valid}）"
                ) from e
        return cls(mapping=mapping)

    def get(self, code: str) -> Optional[PLBucket]:
        return self.mapping.get(code)


@dataclass
class EngineParams:
    """帳票・税額計算の設定値"""

    pl_classification: PLClassification = field(default_factory=PLClassification)
    deemed_purchase_rates: Dict[int, int] = field(default_factory=lambda: dict(DEEMED_PURCHASE_RATES))
    national_tax_ratio: int = NATIONAL_TAX_RATIO  # 国税分（%）。残りが地方消費税

#=========== end params.py
