#============== kaikei/core/reporting/export.py
"""
帳票 → 表形式（DataFrame / CSV）

CSV は Excel でそのまま開けるよう UTF-8（BOM付き）で書き出す。
帳票オブジェクトを並べ替えるだけで、ここで再計算はしない。
"""

from __future__ import annotations

from pathlib import Path

import pandas as pd

from kaikei.core.bookkeeping.year_end_entries import SETTLEMENT_TEMPLATES, TEMPLATE_CATEGORY_LABELS
from kaikei.core.depreciation.unit import DepreciationSummary
from kaikei.core.finance.general_ledger import GeneralLedger
from kaikei.core.finance.statements import BalanceSheet, MonthlySummary, ProfitLoss, TrialBalance
from kaikei.core.ledger.types import (
    ACCOUNT_CATEGORY_LABELS,
    DEPRECIATION_METHOD_LABELS,
    AccountCategory,
    TaxMethod,
)
from kaikei.core.tax.consumption_tax import BUSINESS_TYPE_LABELS, ConsumptionTaxResult

STATEMENT_COLUMNS = ["区分", "勘定科目コード", "勘定科目", "金額"]
TRIAL_BALANCE_COLUMNS = ["勘定科目コード", "勘定科目", "区分", "借方合計", "貸方合計", "借方残高", "貸方残高"]
GENERAL_LEDGER_COLUMNS = ["日付", "摘要", "相手科目", "借方", "貸方", "残高"]
DEPRECIATION_COLUMNS = ["資産名", "取得日", "取得価額", "償却方法", "耐用年数", "当期償却額", "償却累計額", "期末帳簿価額"]
TAX_COLUMNS = ["区分", "項目", "金額"]
TEMPLATE_COLUMNS = ["区分", "ID", "テンプレート", "借方科目コード", "貸方科目コード", "金額"]

CSV_ENCODING = "utf-8-sig"


def _section_rows(section, total_label: str | None = None) -> list[list]:
    rows = [[section.label, item.code, item.name, item.amount] for item in section.items]
    rows.append(["", "", total_label or f"{section.label} 合計", section.total])
    return rows


def trial_balance_df(tb: TrialBalance) -> pd.DataFrame:
    rows = [
        [
            r.account_code,
            r.account_name,
            ACCOUNT_CATEGORY_LABELS[AccountCategory(r.category)],
            r.debit_total,
            r.credit_total,
            r.debit_balance,
            r.credit_balance,
        ]
        for r in tb.rows
    ]
    rows.append(["", "合計", "", tb.total_debit, tb.total_credit, tb.total_debit_balance, tb.total_credit_balance])
    return pd.DataFrame(rows, columns=TRIAL_BALANCE_COLUMNS)


def balance_sheet_df(bs: BalanceSheet) -> pd.DataFrame:
    rows = []
    rows += _section_rows(bs.assets)
    rows.append(["", "", "資産合計", bs.total_assets])
    rows += _section_rows(bs.liabilities)
    rows.append(["", "", "負債合計", bs.total_liabilities])
    rows += _section_rows(bs.equity)
    rows.append(["", "", "純資産合計", bs.total_equity])
    rows.append(["", "", "負債・純資産合計", bs.total_liabilities_and_equity])
    return pd.DataFrame(rows, columns=STATEMENT_COLUMNS)


def profit_loss_df(pl: ProfitLoss) -> pd.DataFrame:
    rows = []
    rows += _section_rows(pl.sales)
    rows += _section_rows(pl.cost_of_sales)
    rows.append(["", "", "売上総利益", pl.gross_profit])
    rows += _section_rows(pl.sga, "販管費 合計")
    rows.append(["", "", "営業利益", pl.operating_income])
    rows += _section_rows(pl.non_operating_income)
    rows += _section_rows(pl.non_operating_expense)
    rows.append(["", "", "経常利益", pl.ordinary_income])
    rows += _section_rows(pl.extraordinary_gain)
    rows += _section_rows(pl.extraordinary_loss)
    rows.append(["", "", "税引前当期純利益", pl.income_before_tax])
    rows.append(["", "", "法人税等", pl.income_tax])
    rows.append(["", "", "当期純利益", pl.net_income])
    return pd.DataFrame(rows, columns=STATEMENT_COLUMNS)


def monthly_trend_df(trend: list[MonthlySummary]) -> pd.DataFrame:
    """
    月次推移のピボット（行 = 科目、列 = 月）

    どこかの月で残高のある科目だけを並べ、残高のない月は0。
    """
    months = [m.month for m in trend]
    records = [
        {
            "コード": a.code,
            "科目名": a.name,
            "区分": AccountCategory(a.category).value,
            "month": m.month,
            "balance": a.balance,
        }
        for m in trend
        for a in m.accounts
    ]
    if not records:
        return pd.DataFrame(columns=["コード", "科目名", "区分", *months])

    pivot = (
        pd.DataFrame(records)
        .pivot_table(
            index=["コード", "科目名", "区分"],
            columns="month",
            values="balance",
            aggfunc="sum",
            fill_value=0,
        )
        .reindex(columns=months, fill_value=0)
        .sort_index(level="コード")
        .astype(int)
        .reset_index()
    )
    pivot.columns.name = None
    return pivot


def general_ledger_df(gl: GeneralLedger) -> pd.DataFrame:
    """総勘定元帳（先頭に前期繰越）"""
    rows = [["", "前期繰越", "", 0, 0, gl.opening_balance]]
    rows += [
        [r.date.isoformat(), r.description, r.counter_account, r.debit, r.credit, r.balance]
        for r in gl.rows
    ]
    return pd.DataFrame(rows, columns=GENERAL_LEDGER_COLUMNS)


def depreciation_summary_df(summary: DepreciationSummary) -> pd.DataFrame:
    rows = [
        [
            a.asset.name,
            a.asset.acquisition_date.isoformat(),
            a.asset.acquisition_cost,
            DEPRECIATION_METHOD_LABELS[a.asset.depreciation_method],
            a.asset.useful_life,
            a.current_year_amount,
            a.accumulated,
            a.book_value,
        ]
        for a in summary.assets
    ]
    rows.append(["合計", "", "", "", "", summary.total_current_year, "", ""])
    return pd.DataFrame(rows, columns=DEPRECIATION_COLUMNS)


def _rate_label(b) -> str:
    return f"{b.rate}%（軽減）" if b.is_reduced else f"{b.rate}%"


def consumption_tax_df(result: ConsumptionTaxResult) -> pd.DataFrame:
    rows = []
    for b in result.sales_breakdown:
        rows.append(["売上", f"課税売上高 {_rate_label(b)}", b.taxable_amount])
        rows.append(["売上", f"消費税額 {_rate_label(b)}", b.tax_amount])
    rows.append(["売上", "売上に係る消費税額 合計", result.total_sales_tax])

    if result.method == TaxMethod.SIMPLIFIED:
        label = BUSINESS_TYPE_LABELS.get(result.business_type, f"第{result.business_type}種")
        rows.append(["仕入", f"みなし仕入率（{label}）", result.deemed_purchase_rate])
        rows.append(["仕入", "控除対象仕入税額（みなし）", result.deemed_purchase_tax])
    else:
        for b in result.purchase_breakdown:
            rows.append(["仕入", f"課税仕入高 {_rate_label(b)}", b.taxable_amount])
            rows.append(["仕入", f"消費税額 {_rate_label(b)}", b.tax_amount])
        rows.append(["仕入", "仕入に係る消費税額 合計", result.total_purchase_tax])

    rows.append(["納付税額", "還付税額" if result.is_refund else "納付税額", result.tax_payable])
    rows.append(["納付税額", "うち国税", result.national_tax])
    rows.append(["納付税額", "うち地方消費税", result.local_tax])
    return pd.DataFrame(rows, columns=TAX_COLUMNS)


def settlement_templates_df() -> pd.DataFrame:
    """決算整理テンプレートの一覧"""
    rows = [
        [
            TEMPLATE_CATEGORY_LABELS[t.category],
            t.id,
            t.name,
            t.debit_account_code,
            t.credit_account_code or "（各資産の科目）",
            "自動計算" if t.auto_calculate else "金額入力",
        ]
        for t in SETTLEMENT_TEMPLATES
    ]
    return pd.DataFrame(rows, columns=TEMPLATE_COLUMNS)


def to_csv(df: pd.DataFrame, path: Path | None = None) -> str | None:
    """path を指定すればファイルへ、なければ BOM 付きの文字列で返す"""
    if path is not None:
        df.to_csv(path, index=False, encoding=CSV_ENCODING)
        return None
    return "\ufeff" + df.to_csv(index=False)

# ============== end kaikei/core/reporting/export.py
