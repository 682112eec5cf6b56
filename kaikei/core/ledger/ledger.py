# ===============================
# kaikei/core/ledger/ledger.py
# ===============================

from __future__ import annotations

import datetime
import logging
from collections.abc import Mapping
from dataclasses import replace

import numpy as np
import pandas as pd

from kaikei.core.errors import DomainLimitError, EntryValidationError
from kaikei.core.fiscal import to_date
from kaikei.core.ledger.accounts import Account, AccountRegistry, tax_category_map
from kaikei.core.ledger.journal_entry import JournalEntry, JournalLine, validate_entry
from kaikei.core.ledger.types import EntryStatus
from kaikei.core.tax.tax_splitter import calculate_tax_amount

logger = logging.getLogger(__name__)

LINE_COLUMNS = [
    "entry_id",
    "date",
    "status",
    "side",
    "account_id",
    "amount",
    "debit",
    "credit",
    "tax_category_id",
    "tax_amount",
]


class LedgerManager:
    """
    LedgerManager
    --------------
    ・1社分の帳簿（勘定科目・仕訳・固定資産）を持つ
    ・仕訳は検証を通ったものだけを丸ごと追加する（一部だけ登録されることはない）
    ・明細を集計用の DataFrame として吐き出す
    """

    def __init__(self, company, registry: AccountRegistry | None = None, tax_categories=None):
        self.company = company
        self.registry = registry if registry is not None else AccountRegistry.with_defaults()
        self.tax_categories = tax_category_map(tax_categories)
        self._entries: list[JournalEntry] = []
        self.assets: dict = {}

    @property
    def company_id(self) -> str:
        return self.company.id

    # -------------------------------------------------
    # 仕訳の登録
    # -------------------------------------------------
    def _normalize_line(self, line: JournalLine) -> JournalLine:
        """科目コード → 科目ID、税区分コード → 税区分ID に揃え、未記録の税額を埋める"""
        account = self.registry.resolve(line.account_id, line.account_code)
        tc = self.tax_categories.get(line.tax_category_id) if line.tax_category_id else None

        tax_amount = line.tax_amount
        amount_ok = isinstance(line.amount, int) and not isinstance(line.amount, bool)
        if tc is not None and tc.is_taxable and tax_amount is None and amount_ok:
            tax_amount = calculate_tax_amount(line.amount, tc.rate)

        return replace(
            line,
            account_id=account.id if account is not None else line.account_id,
            account_code=account.code if account is not None else line.account_code,
            tax_category_id=tc.id if tc is not None else line.tax_category_id,
            tax_amount=tax_amount,
        )

    def post_entry(self, candidate) -> JournalEntry:
        """
        仕訳を登録する

        candidate は JournalEntry か {date, description, client_name, status, lines[]} の辞書。
        検証に失敗した場合は EntryValidationError（問題の一覧付き）で、帳簿は変わらない。
        """
        if isinstance(candidate, Mapping):
            entry = JournalEntry.from_mapping(candidate)
        elif isinstance(candidate, JournalEntry):
            entry = candidate
        else:
            raise TypeError(f"LedgerManager.post_entry expects JournalEntry or mapping, got {type(candidate)}")

        entry = replace(
            entry,
            company_id=self.company_id,
            lines=[self._normalize_line(line) for line in entry.lines],
        )

        if self.get_entry(entry.id) is not None:
            raise DomainLimitError(f"仕訳IDが重複しています: {entry.id}")

        issues = validate_entry(entry, self.registry, self.tax_categories)
        if issues:
            logger.warning(f"仕訳を拒否: {entry.date} {entry.description} ({len(issues)}件の問題)")
            raise EntryValidationError(issues)

        self._entries.append(entry)
        logger.info(
            f"仕訳を登録: {entry.date} {entry.description} "
            f"{entry.debit_total:,}円 [{entry.status.value}]"
        )
        return entry

    def confirm_entry(self, entry_id: str) -> JournalEntry:
        """下書きを確定する（確定時にもう一度検証する）"""
        entry = self._require_entry(entry_id)
        if entry.is_confirmed:
            return entry

        issues = validate_entry(entry, self.registry, self.tax_categories)
        if issues:
            raise EntryValidationError(issues)

        entry.status = EntryStatus.CONFIRMED
        logger.info(f"仕訳を確定: {entry.id} {entry.date} {entry.description}")
        return entry

    # -------------------------------------------------
    # 参照
    # -------------------------------------------------
    @property
    def entries(self) -> list[JournalEntry]:
        return list(self._entries)

    def get_entry(self, entry_id: str) -> JournalEntry | None:
        for e in self._entries:
            if e.id == entry_id:
                return e
        return None

    def _require_entry(self, entry_id: str) -> JournalEntry:
        entry = self.get_entry(entry_id)
        if entry is None:
            raise DomainLimitError(f"仕訳が存在しません: {entry_id}")
        return entry

    def find_by_source_ref(self, source_ref: str) -> JournalEntry | None:
        for e in self._entries:
            if e.source_ref == source_ref:
                return e
        return None

    def confirmed_entries(self, date_from=None, date_to=None) -> list[JournalEntry]:
        """確定済みで期間内（両端含む）の仕訳"""
        d_from = to_date(date_from) if date_from is not None else datetime.date.min
        d_to = to_date(date_to) if date_to is not None else datetime.date.max
        return [
            e for e in self._entries
            if e.is_confirmed and d_from <= e.date <= d_to
        ]

    # -------------------------------------------------
    # 勘定科目
    # -------------------------------------------------
    def account_in_use(self, account_id: str) -> bool:
        return any(
            line.account_id == account_id
            for e in self._entries
            for line in e.lines
        )

    def remove_account(self, account_id: str) -> None:
        """使用中の科目は AccountInUseError（無効化のみ可）"""
        self.registry.remove(account_id, in_use=self.account_in_use(account_id))

    def accounts(self) -> list[Account]:
        return list(self.registry)

    # -------------------------------------------------
    # 固定資産
    # -------------------------------------------------
    def add_asset(self, asset):
        for account_id in (asset.account_id, asset.expense_account_id):
            if account_id not in self.registry:
                raise DomainLimitError(f"固定資産 {asset.name} の勘定科目が存在しません: {account_id}")
        self.assets[asset.id] = asset
        return asset

    # -------------------------------------------------
    # Ledger → DataFrame 変換
    # -------------------------------------------------
    def get_lines_df(self, date_from=None, date_to=None, confirmed_only: bool = True) -> pd.DataFrame:
        """
        仕訳明細を1行1明細の DataFrame にする

        debit / credit 列は side に応じて amount を振り分けたもの（もう一方は0）。
        """
        if confirmed_only:
            entries = self.confirmed_entries(date_from, date_to)
        else:
            entries = self._entries

        rows = [
            {
                "entry_id": e.id,
                "date": e.date,
                "status": e.status.value,
                "side": line.side.value,
                "account_id": line.account_id,
                "amount": line.amount,
                "tax_category_id": line.tax_category_id,
                "tax_amount": line.tax_amount,
            }
            for e in entries
            for line in e.lines
        ]
        if not rows:
            return pd.DataFrame(columns=LINE_COLUMNS)

        df = pd.DataFrame(rows)
        df["debit"] = np.where(df["side"] == "debit", df["amount"], 0)
        df["credit"] = np.where(df["side"] == "credit", df["amount"], 0)
        return df[LINE_COLUMNS]

# ===============================
# END ledger.py
# ===============================
