# ===========================================
# kaikei/core/engine/aggregate.py
# 確定済み仕訳を勘定科目ごとに集計する（試算表・BS・PL の土台）
# ===========================================

from __future__ import annotations

import logging
from dataclasses import dataclass

import pandas as pd

from kaikei.core.errors import LedgerIntegrityError
from kaikei.core.fiscal import check_range, month_ranges
from kaikei.core.ledger.types import AccountCategory

logger = logging.getLogger(__name__)


@dataclass
class AccountBalance:
    account_id: str
    account_code: str
    account_name: str
    category: AccountCategory
    debit_total: int
    credit_total: int
    balance: int  # 借方正常: 借方−貸方 / 貸方正常: 貸方−借方（マイナスもそのまま）


@dataclass
class MonthlyBalances:
    month: str  # "YYYY/MM"
    balances: list[AccountBalance]


class AggregationEngine:
    """
    AggregationEngine
    ------------------
    ・LedgerStore から会社の帳簿を引き
    ・確定済み・期間内の明細だけを勘定科目 × 貸借で合計する
    ・集計前に仕訳ごとの貸借一致を確かめ、崩れていれば LedgerIntegrityError
    """

    def __init__(self, store):
        self.store = store

    # -----------------------------------------
    # 整合性チェック
    # -----------------------------------------
    @staticmethod
    def _check_integrity(df: pd.DataFrame) -> None:
        if df.empty:
            return
        per_entry = df.groupby("entry_id", sort=False)[["debit", "credit"]].sum()
        broken = per_entry[per_entry["debit"] != per_entry["credit"]]
        if not broken.empty:
            entry_id = broken.index[0]
            debit, credit = int(broken.iloc[0]["debit"]), int(broken.iloc[0]["credit"])
            logger.error(f"貸借不一致の確定済み仕訳: {entry_id} 借方 {debit:,} / 貸方 {credit:,}")
            raise LedgerIntegrityError(entry_id, debit, credit)

    # -----------------------------------------
    # 科目別集計
    # -----------------------------------------
    def aggregate_by_account(self, company_id: str, date_from, date_to) -> list[AccountBalance]:
        """全科目（取引のない科目は0）を科目コード順で返す"""
        d_from, d_to = check_range(date_from, date_to)
        ledger = self.store.get(company_id)

        df = ledger.get_lines_df(d_from, d_to)
        self._check_integrity(df)

        if df.empty:
            totals = {}
        else:
            totals = df.groupby("account_id")[["debit", "credit"]].sum().to_dict("index")

        balances = []
        for account in ledger.registry:
            t = totals.get(account.id, {"debit": 0, "credit": 0})
            debit, credit = int(t["debit"]), int(t["credit"])
            balance = debit - credit if account.is_debit_normal else credit - debit
            balances.append(
                AccountBalance(
                    account_id=account.id,
                    account_code=account.code,
                    account_name=account.name,
                    category=account.category,
                    debit_total=debit,
                    credit_total=credit,
                    balance=balance,
                )
            )
        return balances

    # -----------------------------------------
    # 月別集計（推移表用）
    # -----------------------------------------
    def aggregate_by_month(self, company_id: str, date_from, date_to) -> list[MonthlyBalances]:
        """暦月ごとに aggregate_by_account を呼ぶ（最初と最後の月は指定期間で切り詰め）"""
        return [
            MonthlyBalances(month=label, balances=self.aggregate_by_account(company_id, start, end))
            for label, start, end in month_ranges(date_from, date_to)
        ]
