# ===========================================
# kaikei/core/finance/general_ledger.py
# 総勘定元帳（1科目分の明細と残高の推移）
# ===========================================

from __future__ import annotations

import datetime
from dataclasses import dataclass, field

import pandas as pd

from kaikei.core.errors import DomainLimitError
from kaikei.core.fiscal import check_range, to_date
from kaikei.core.ledger.types import AccountCategory, Side

MULTIPLE_COUNTER_LABEL = "諸口"


@dataclass
class GeneralLedgerRow:
    date: datetime.date
    entry_id: str
    description: str
    counter_account: str  # 相手科目（"コード 科目名"、複数なら 諸口）
    debit: int
    credit: int
    balance: int  # 正常残高側での残高


@dataclass
class GeneralLedger:
    account_code: str
    account_name: str
    category: AccountCategory
    opening_balance: int  # 前期繰越
    rows: list[GeneralLedgerRow] = field(default_factory=list)

    @property
    def closing_balance(self) -> int:
        return self.rows[-1].balance if self.rows else self.opening_balance

    @property
    def debit_total(self) -> int:
        return sum(r.debit for r in self.rows)

    @property
    def credit_total(self) -> int:
        return sum(r.credit for r in self.rows)


def _counter_label(entry, account_id: str, registry) -> str:
    others = list(dict.fromkeys(line.account_id for line in entry.lines if line.account_id != account_id))
    if len(others) != 1:
        return MULTIPLE_COUNTER_LABEL
    counter = registry.get(others[0])
    return f"{counter.code} {counter.name}" if counter is not None else others[0]


def _signed(df: pd.DataFrame, debit_normal: bool) -> pd.Series:
    return df["debit"] - df["credit"] if debit_normal else df["credit"] - df["debit"]


def build_general_ledger(ledger, account, date_from=None, date_to=None) -> GeneralLedger:
    """
    1科目の総勘定元帳を作る

    account は科目ID・科目コードのどちらでもよい。確定済み仕訳だけを日付順に並べ、
    date_from より前の残高を前期繰越として残高を積み上げる。
    """
    resolved = ledger.registry.get(account) or ledger.registry.by_code(account)
    if resolved is None:
        raise DomainLimitError(f"勘定科目が存在しません: {account}")

    if date_from is not None and date_to is not None:
        d_from, d_to = check_range(date_from, date_to)
    else:
        d_from = to_date(date_from) if date_from is not None else None
        d_to = to_date(date_to) if date_to is not None else None

    # 前期繰越
    opening = 0
    if d_from is not None and d_from > datetime.date.min:
        before = ledger.get_lines_df(date_to=d_from - datetime.timedelta(days=1))
        before = before[before["account_id"] == resolved.id]
        opening = int(_signed(before, resolved.is_debit_normal).sum())

    records = [
        {
            "date": e.date,
            "entry_id": e.id,
            "description": line.description or e.description,
            "counter_account": _counter_label(e, resolved.id, ledger.registry),
            "debit": line.amount if line.side == Side.DEBIT else 0,
            "credit": line.amount if line.side == Side.CREDIT else 0,
        }
        for e in ledger.confirmed_entries(d_from, d_to)
        for line in e.lines
        if line.account_id == resolved.id
    ]

    gl = GeneralLedger(
        account_code=resolved.code,
        account_name=resolved.name,
        category=resolved.category,
        opening_balance=opening,
    )
    if not records:
        return gl

    df = pd.DataFrame(records).sort_values("date", kind="stable")
    df["balance"] = opening + _signed(df, resolved.is_debit_normal).cumsum()

    gl.rows = [
        GeneralLedgerRow(
            date=r.date,
            entry_id=r.entry_id,
            description=r.description,
            counter_account=r.counter_account,
            debit=int(r.debit),
            credit=int(r.credit),
            balance=int(r.balance),
        )
        for r in df.itertuples(index=False)
    ]
    return gl

# ===========================================
# END general_ledger.py
# ===========================================
