# ===== kaikei/core/depreciation/unit.py =====

from __future__ import annotations

import datetime
import logging
from dataclasses import dataclass, field
from uuid import uuid4

from kaikei.core.depreciation.guarantee import guarantee_rate
from kaikei.core.errors import DomainLimitError, UnsupportedMethodError
from kaikei.core.fiscal import FiscalPeriod, first_year_months, fiscal_period, fiscal_year_for, to_date
from kaikei.core.ledger.types import DepreciationMethod

logger = logging.getLogger(__name__)

TIME_BASED_METHODS = (DepreciationMethod.STRAIGHT_LINE, DepreciationMethod.DECLINING_BALANCE)


@dataclass
class DepreciationUnit:
    """
    固定資産1件を管理する「レンガ」。
    ・取得価額 / 残存価額（通常1円）
    ・耐用年数
    ・取得日と償却方法
    をもち、事業年度ごとの償却スケジュールを返す。

    帳簿とは独立していて、償却仕訳を計上しても資産そのものは変わらない（除却日のみ）。
    """

    name: str
    acquisition_date: datetime.date
    acquisition_cost: int  # 取得価額（円）
    useful_life: int  # 耐用年数（年）
    depreciation_method: DepreciationMethod = DepreciationMethod.STRAIGHT_LINE
    residual_value: int = 1  # 残存価額（備忘価額）
    account_id: str | None = None  # 資産科目
    expense_account_id: str | None = None  # 減価償却費
    disposal_date: datetime.date | None = None
    memo: str = ""
    id: str = field(default_factory=lambda: uuid4().hex)

    def __post_init__(self):
        self.acquisition_date = to_date(self.acquisition_date)
        if self.disposal_date is not None:
            self.disposal_date = to_date(self.disposal_date)
        try:
            self.depreciation_method = DepreciationMethod(self.depreciation_method)
        except ValueError as e:
            raise UnsupportedMethodError(f"未対応の償却方法です: {self.depreciation_method!r}") from e

    def validate(self) -> None:
        if self.acquisition_cost < 0 or self.residual_value < 0:
            raise DomainLimitError(f"{self.name}: 取得価額・残存価額は0以上で指定してください")
        if self.residual_value > self.acquisition_cost:
            raise DomainLimitError(
                f"{self.name}: 残存価額 {self.residual_value:,} が取得価額 {self.acquisition_cost:,} を超えています"
            )
        if self.depreciation_method in TIME_BASED_METHODS and self.useful_life < 1:
            raise DomainLimitError(f"{self.name}: 耐用年数は1年以上で指定してください: {self.useful_life}")

    def generate_schedule(self, fiscal_year_end_month: int) -> list["DepreciationRow"]:
        return generate_schedule(self, fiscal_year_end_month)

    def get_current_year_depreciation(self, fiscal_year, fiscal_year_end_month: int) -> int:
        return get_current_year_depreciation(self, fiscal_year, fiscal_year_end_month)


@dataclass
class DepreciationRow:
    year: int  # 何年目（1〜）
    fiscal_year: str  # 事業年度ラベル（期首の暦年）
    period_start: datetime.date
    period_end: datetime.date
    months: int  # 使用月数（初年度のみ12未満になり得る）
    start_book_value: int  # 期首帳簿価額
    amount: int  # 当期償却額
    end_book_value: int  # 期末帳簿価額
    accumulated: int  # 償却累計額
    basis: DepreciationMethod  # この年の計算根拠（定率法の切替後は straight_line）


class _ScheduleWriter:
    """帳簿価額を進めながら行を積む。最終年は残存価額ちょうどで止める"""

    def __init__(self, asset: DepreciationUnit, fiscal_year_end_month: int):
        self.asset = asset
        self.end_month = fiscal_year_end_month
        self.first_period = fiscal_year_for(asset.acquisition_date, fiscal_year_end_month)
        self.first_months = first_year_months(asset.acquisition_date, fiscal_year_end_month)
        self.book = asset.acquisition_cost
        self.accumulated = 0
        self.rows: list[DepreciationRow] = []

    @property
    def done(self) -> bool:
        return self.book <= self.asset.residual_value

    @property
    def months(self) -> int:
        """これから積む行の月数"""
        return self.first_months if not self.rows else 12

    def push(self, amount: int, basis: DepreciationMethod) -> None:
        amount = max(0, min(amount, self.book - self.asset.residual_value))
        period = fiscal_period(int(self.first_period.label) + len(self.rows), self.end_month)
        start = self.book
        self.book -= amount
        self.accumulated += amount
        self.rows.append(
            DepreciationRow(
                year=len(self.rows) + 1,
                fiscal_year=period.label,
                period_start=period.start,
                period_end=period.end,
                months=self.months,
                start_book_value=start,
                amount=amount,
                end_book_value=self.book,
                accumulated=self.accumulated,
                basis=basis,
            )
        )


# -------------------------------------------------
# 方法別の計算
# -------------------------------------------------
def _immediate(w: _ScheduleWriter) -> None:
    """即時償却: 取得年度に全額"""
    w.push(w.asset.acquisition_cost - w.asset.residual_value, DepreciationMethod.IMMEDIATE)


def _bulk_3year(w: _ScheduleWriter) -> None:
    """一括償却: 取得価額の1/3ずつ3年。端数は3年目で吸収"""
    annual = w.asset.acquisition_cost // 3
    for i in range(3):
        if w.done:
            break
        amount = w.book - w.asset.residual_value if i == 2 else annual
        w.push(amount, DepreciationMethod.BULK_3YEAR)


def _straight_line(w: _ScheduleWriter) -> None:
    """定額法: (取得価額 − 残存価額) / 耐用年数。初年度は月割"""
    a = w.asset
    annual = max(1, (a.acquisition_cost - a.residual_value) // a.useful_life)
    while not w.done:
        w.push(annual * w.months // 12, DepreciationMethod.STRAIGHT_LINE)


def _declining_balance(w: _ScheduleWriter) -> None:
    """
    200%定率法

    調整前償却額（帳簿価額 × 償却率 × 月数/12）が償却保証額（取得価額 × 保証率）を
    初めて下回った年から、残りの耐用年数で均等償却する定額に切り替え、以後は戻らない。
    """
    a = w.asset
    # 償却率 = min(1, 2/耐用年数) を分数で持つ
    num, den = (1, 1) if a.useful_life <= 2 else (2, a.useful_life)
    guarantee = a.acquisition_cost * guarantee_rate(a.useful_life)

    fixed = None
    while not w.done:
        if fixed is None:
            candidate = w.book * num * w.months // (den * 12)
            if candidate >= guarantee:
                w.push(candidate, DepreciationMethod.DECLINING_BALANCE)
                continue

            remaining_life = max(1, a.useful_life - len(w.rows))
            fixed = max(1, (w.book - a.residual_value) // remaining_life)
            logger.debug(f"{a.name}: {len(w.rows) + 1}年目から定額 {fixed:,} 円に切替")

        w.push(fixed * w.months // 12, DepreciationMethod.STRAIGHT_LINE)


_METHODS = {
    DepreciationMethod.IMMEDIATE: _immediate,
    DepreciationMethod.BULK_3YEAR: _bulk_3year,
    DepreciationMethod.STRAIGHT_LINE: _straight_line,
    DepreciationMethod.DECLINING_BALANCE: _declining_balance,
}


def generate_schedule(asset: DepreciationUnit, fiscal_year_end_month: int) -> list[DepreciationRow]:
    """
    取得年度から帳簿価額が残存価額に達するまでの償却スケジュール

    ・月割は取得月から期末月まで（取得月を含む）の月数で、定額法・定率法に適用する
    ・即時償却・一括償却は月割しない（初年度の判定と月数の表示のみ共通）
    ・取得価額 = 残存価額なら空のスケジュール
    """
    asset.validate()
    w = _ScheduleWriter(asset, fiscal_year_end_month)
    if w.done:
        return []

    _METHODS[asset.depreciation_method](w)
    return w.rows


def get_current_year_depreciation(asset: DepreciationUnit, fiscal_year, fiscal_year_end_month: int) -> int:
    """スケジュールから該当年度の償却額を引く（行がなければ0）"""
    label = str(fiscal_year)
    for row in generate_schedule(asset, fiscal_year_end_month):
        if row.fiscal_year == label:
            return row.amount
    return 0


def is_held_in(asset: DepreciationUnit, period: FiscalPeriod) -> bool:
    """期首より後に除却されていれば、その事業年度は保有中"""
    return asset.disposal_date is None or asset.disposal_date > period.start


# -------------------------------------------------
# 固定資産台帳（年度別の償却サマリー）
# -------------------------------------------------
@dataclass
class AssetDepreciation:
    asset: DepreciationUnit
    schedule: list[DepreciationRow]
    current_year_amount: int  # 当期償却額
    accumulated: int  # 当期末までの償却累計額
    book_value: int  # 当期末帳簿価額


@dataclass
class DepreciationSummary:
    fiscal_year: str
    assets: list[AssetDepreciation]

    @property
    def total_current_year(self) -> int:
        return sum(a.current_year_amount for a in self.assets)


def summarize_depreciation(assets, fiscal_year, fiscal_year_end_month: int) -> DepreciationSummary:
    """
    事業年度末時点の固定資産台帳

    期首以前に除却した資産は載せない。取得前の年度を指定した資産は
    償却0・帳簿価額＝取得価額で載る。
    """
    period = fiscal_period(fiscal_year, fiscal_year_end_month)
    year = int(period.label)

    rows = []
    for asset in assets:
        if not is_held_in(asset, period):
            continue
        schedule = generate_schedule(asset, fiscal_year_end_month)
        current = next((r.amount for r in schedule if r.fiscal_year == period.label), 0)
        accumulated = sum(r.amount for r in schedule if int(r.fiscal_year) <= year)
        rows.append(
            AssetDepreciation(
                asset=asset,
                schedule=schedule,
                current_year_amount=current,
                accumulated=accumulated,
                book_value=asset.acquisition_cost - accumulated,
            )
        )
    return DepreciationSummary(fiscal_year=period.label, assets=rows)

# ===== end unit.py =====
