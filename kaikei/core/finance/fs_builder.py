# ===========================================
# kaikei/core/finance/fs_builder.py
# 科目別残高から財務諸表を組み立てる
# ===========================================

from __future__ import annotations

import logging
from dataclasses import asdict

import pandas as pd

from kaikei.config.params import PLClassification
from kaikei.core.engine.aggregate import AccountBalance, MonthlyBalances
from kaikei.core.finance.fs_mapping import (
    BS_SECTION_LABELS,
    NET_INCOME_LABEL,
    PL_BUCKET_LABELS,
    PLBucket,
)
from kaikei.core.finance.statements import (
    BalanceSheet,
    MonthlyAccount,
    MonthlySummary,
    ProfitLoss,
    StatementItem,
    StatementSection,
    TrialBalance,
    TrialBalanceRow,
)
from kaikei.core.ledger.types import AccountCategory

logger = logging.getLogger(__name__)

_BALANCE_COLUMNS = list(AccountBalance.__dataclass_fields__)


def _balances_df(balances: list[AccountBalance]) -> pd.DataFrame:
    df = pd.DataFrame([asdict(b) for b in balances], columns=_BALANCE_COLUMNS)
    df["category"] = df["category"].map(lambda c: AccountCategory(c).value)
    return df.sort_values("account_code", kind="stable")


def _section(df: pd.DataFrame, label: str) -> StatementSection:
    """残高が0でない科目をコード順に並べた区分"""
    rows = df[df["balance"] != 0]
    return StatementSection(
        label=label,
        items=[
            StatementItem(code=r.account_code, name=r.account_name, amount=int(r.balance))
            for r in rows.itertuples(index=False)
        ],
    )


def _net_income(df: pd.DataFrame) -> int:
    revenue = df.loc[df["category"] == AccountCategory.REVENUE.value, "balance"].sum()
    expense = df.loc[df["category"] == AccountCategory.EXPENSE.value, "balance"].sum()
    return int(revenue - expense)


class FinancialStatementBuilder:
    """
    AggregationEngine の科目別残高から
    ・試算表（TB）
    ・貸借対照表（BS）
    ・損益計算書（PL）
    ・月次推移
    を構築する。
    """

    def __init__(self, pl_classification: PLClassification | None = None):
        self.pl_classification = pl_classification or PLClassification()

    # -----------------------------------------
    # 1. 試算表
    # -----------------------------------------
    def build_trial_balance(self, balances: list[AccountBalance]) -> TrialBalance:
        rows = []
        for b in sorted(balances, key=lambda b: b.account_code):
            if b.debit_total == 0 and b.credit_total == 0:
                continue

            # 残高がマイナスなら反対側の欄に絶対値で載せる
            on_debit_side = (b.balance > 0) == b.category.is_debit_normal
            debit_balance = abs(b.balance) if b.balance != 0 and on_debit_side else 0
            credit_balance = abs(b.balance) if b.balance != 0 and not on_debit_side else 0

            rows.append(
                TrialBalanceRow(
                    account_code=b.account_code,
                    account_name=b.account_name,
                    category=b.category,
                    debit_total=b.debit_total,
                    credit_total=b.credit_total,
                    debit_balance=debit_balance,
                    credit_balance=credit_balance,
                )
            )

        return TrialBalance(
            rows=rows,
            total_debit=sum(r.debit_total for r in rows),
            total_credit=sum(r.credit_total for r in rows),
            total_debit_balance=sum(r.debit_balance for r in rows),
            total_credit_balance=sum(r.credit_balance for r in rows),
        )

    # -----------------------------------------
    # 2. 貸借対照表
    # -----------------------------------------
    def build_balance_sheet(self, balances: list[AccountBalance]) -> BalanceSheet:
        """当期純利益（収益−費用）は純資産の部に合成行として加える"""
        df = _balances_df(balances)

        sections = {
            category: _section(df[df["category"] == category], label)
            for category, label in BS_SECTION_LABELS.items()
        }

        net_income = _net_income(df)
        equity = sections["equity"]
        if net_income != 0:
            equity.items.append(StatementItem(code="", name=NET_INCOME_LABEL, amount=net_income))

        return BalanceSheet(
            assets=sections["asset"],
            liabilities=sections["liability"],
            equity=equity,
            net_income=net_income,
        )

    # -----------------------------------------
    # 3. 損益計算書
    # -----------------------------------------
    def _bucket_for(self, code: str, category: str) -> PLBucket:
        is_revenue = category == AccountCategory.REVENUE.value
        default = PLBucket.SALES if is_revenue else PLBucket.SGA

        bucket = self.pl_classification.get(code)
        if bucket is None:
            return default
        if bucket.is_income != is_revenue:
            logger.warning(
                f"損益区分の設定が科目区分と矛盾しています: {code} ({category}) → {bucket.value}。"
                f"{default.value} として扱います"
            )
            return default
        return bucket

    def build_profit_loss(self, balances: list[AccountBalance]) -> ProfitLoss:
        df = _balances_df(balances)
        df = df[df["category"].isin([AccountCategory.REVENUE.value, AccountCategory.EXPENSE.value])]

        buckets = [self._bucket_for(code, cat) for code, cat in zip(df["account_code"], df["category"])]
        df = df.assign(bucket=[b.value for b in buckets])

        sections = {
            bucket: _section(df[df["bucket"] == bucket.value], PL_BUCKET_LABELS[bucket])
            for bucket in PLBucket
        }

        return ProfitLoss(
            sales=sections[PLBucket.SALES],
            cost_of_sales=sections[PLBucket.COST_OF_SALES],
            sga=sections[PLBucket.SGA],
            non_operating_income=sections[PLBucket.NON_OPERATING_INCOME],
            non_operating_expense=sections[PLBucket.NON_OPERATING_EXPENSE],
            extraordinary_gain=sections[PLBucket.EXTRAORDINARY_GAIN],
            extraordinary_loss=sections[PLBucket.EXTRAORDINARY_LOSS],
            income_tax_section=sections[PLBucket.INCOME_TAX],
        )

    # -----------------------------------------
    # 4. 月次推移
    # -----------------------------------------
    def build_monthly_trend(self, monthly: list[MonthlyBalances]) -> list[MonthlySummary]:
        summaries = []
        for m in monthly:
            revenue = sum(b.balance for b in m.balances if b.category == AccountCategory.REVENUE)
            expense = sum(b.balance for b in m.balances if b.category == AccountCategory.EXPENSE)
            summaries.append(
                MonthlySummary(
                    month=m.month,
                    revenue=revenue,
                    expense=expense,
                    accounts=[
                        MonthlyAccount(b.account_code, b.account_name, b.category, b.balance)
                        for b in sorted(m.balances, key=lambda b: b.account_code)
                        if b.balance != 0
                    ],
                )
            )
        return summaries

# ===========================================
# END fs_builder.py
# ===========================================
