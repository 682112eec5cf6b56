# ================================
# kaikei/core/ledger/journal_entry.py
# ================================

from __future__ import annotations

import datetime
from collections.abc import Mapping
from dataclasses import dataclass, field
from uuid import uuid4

from kaikei.core.errors import DomainLimitError, EntryValidationError, LineIssue
from kaikei.core.fiscal import to_date
from kaikei.core.ledger.types import EntryStatus, Side


@dataclass
class JournalLine:
    """
    仕訳明細（1行）

    ・amount は円単位の正の整数
    ・tax_amount は amount（税込）に含まれる消費税額。None は「未記録」
    ・account_code は account_id の代わりに科目コードで指定する場合に使う
    """

    side: Side
    account_id: str | None
    amount: int
    tax_category_id: str | None = None
    tax_amount: int | None = None
    description: str | None = None
    account_code: str | None = None

    def __post_init__(self):
        if isinstance(self.side, str) and not isinstance(self.side, Side):
            try:
                self.side = Side(self.side)
            except ValueError:
                # 不正な値は validate_entry で拾う
                pass


@dataclass
class JournalEntry:
    """
    仕訳伝票

    ・借方合計 = 貸方合計、かつ借方・貸方それぞれ1行以上が登録条件
    ・draft は集計・帳票の対象外。confirmed のみが帳簿に効く
    """

    date: datetime.date
    lines: list[JournalLine]
    description: str = ""
    client_name: str = ""
    status: EntryStatus = EntryStatus.DRAFT
    id: str = field(default_factory=lambda: uuid4().hex)
    company_id: str | None = None
    source_ref: str | None = None  # 自動生成した仕訳の出所（減価償却など）

    def __post_init__(self):
        self.date = to_date(self.date)
        self.status = EntryStatus(self.status)

    @property
    def debit_total(self) -> int:
        return sum(line.amount for line in self.lines if line.side == Side.DEBIT)

    @property
    def credit_total(self) -> int:
        return sum(line.amount for line in self.lines if line.side == Side.CREDIT)

    @property
    def is_confirmed(self) -> bool:
        return self.status == EntryStatus.CONFIRMED

    def is_balanced(self) -> bool:
        """借方合計と貸方合計が一致し、両側に明細があるか（円単位なので誤差は許容しない）"""
        has_debit = any(line.side == Side.DEBIT for line in self.lines)
        has_credit = any(line.side == Side.CREDIT for line in self.lines)
        return has_debit and has_credit and self.debit_total == self.credit_total

    # -------------------------------------------------
    # 辞書（API入力）からの生成
    # -------------------------------------------------
    @classmethod
    def from_mapping(cls, data: Mapping) -> "JournalEntry":
        """
        {date, description, client_name, status, lines[]} 形式の入力から仕訳を作る。

        日付・ステータス・明細の形が壊れているものはここで EntryValidationError。
        科目の存在や貸借一致は validate_entry で見る。
        """
        issues: list[LineIssue] = []

        raw_date = data.get("date", data.get("entry_date"))
        entry_date = None
        try:
            entry_date = to_date(raw_date)
        except DomainLimitError:
            issues.append(LineIssue(None, "date", f"日付形式が不正です: {raw_date!r}"))

        status = data.get("status", EntryStatus.DRAFT)
        try:
            status = EntryStatus(status)
        except ValueError:
            issues.append(LineIssue(None, "status", f"ステータスが不正です: {status!r}"))

        raw_lines = data.get("lines") or []
        if not isinstance(raw_lines, (list, tuple)):
            issues.append(LineIssue(None, "lines", "明細はリストで指定してください"))
            raw_lines = []

        lines: list[JournalLine] = []
        for i, raw in enumerate(raw_lines):
            if not isinstance(raw, Mapping):
                issues.append(LineIssue(i, "line", "明細の形式が不正です"))
                continue
            lines.append(
                JournalLine(
                    side=raw.get("side"),
                    account_id=raw.get("account_id"),
                    account_code=raw.get("account_code"),
                    amount=raw.get("amount"),
                    tax_category_id=raw.get("tax_category_id"),
                    tax_amount=raw.get("tax_amount"),
                    description=raw.get("description"),
                )
            )

        if issues:
            raise EntryValidationError(issues)

        return cls(
            date=entry_date,
            lines=lines,
            description=data.get("description") or "",
            client_name=data.get("client_name") or "",
            status=status,
            source_ref=data.get("source_ref"),
        )


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_entry(entry: JournalEntry, registry, tax_categories: Mapping) -> list[LineIssue]:
    """
    仕訳の登録条件をすべて検査し、問題を一覧で返す（空なら登録可）。

    ・金額は正の整数
    ・科目が存在し、有効であること
    ・税区分が存在し、税額が 0〜金額 の範囲
    ・借方・貸方それぞれ1行以上、かつ合計一致
    """
    issues: list[LineIssue] = []

    if not entry.lines:
        issues.append(LineIssue(None, "lines", "明細がありません"))

    for i, line in enumerate(entry.lines):
        if not isinstance(line.side, Side):
            issues.append(LineIssue(i, "side", f"貸借区分が不正です: {line.side!r}"))

        if not _is_int(line.amount):
            issues.append(LineIssue(i, "amount", f"金額は整数（円）で入力してください: {line.amount!r}"))
        elif line.amount <= 0:
            issues.append(LineIssue(i, "amount", "金額は1円以上で入力してください"))

        account = registry.resolve(line.account_id, line.account_code)
        if account is None:
            ref = line.account_id or line.account_code
            issues.append(LineIssue(i, "account_id", f"勘定科目が存在しません: {ref!r}"))
        elif not account.is_active:
            issues.append(LineIssue(i, "account_id", f"無効な勘定科目です: {account.code} {account.name}"))

        if line.tax_category_id is not None and line.tax_category_id not in tax_categories:
            issues.append(LineIssue(i, "tax_category_id", f"税区分が存在しません: {line.tax_category_id!r}"))

        if line.tax_amount is not None:
            if not _is_int(line.tax_amount) or line.tax_amount < 0:
                issues.append(LineIssue(i, "tax_amount", "税額は0以上の整数で入力してください"))
            elif _is_int(line.amount) and line.tax_amount > line.amount:
                issues.append(LineIssue(i, "tax_amount", "税額が金額を超えています"))

    sides = {line.side for line in entry.lines}
    if entry.lines and not (Side.DEBIT in sides and Side.CREDIT in sides):
        issues.append(LineIssue(None, "lines", "借方・貸方それぞれ1行以上必要です"))

    # 金額が壊れている明細があるときは合計比較をしない（二重に報告しない）
    amounts_ok = all(_is_int(line.amount) for line in entry.lines)
    if amounts_ok and entry.lines and entry.debit_total != entry.credit_total:
        issues.append(
            LineIssue(
                None,
                "lines",
                f"借方合計と貸方合計が一致しません（借方 {entry.debit_total:,} / 貸方 {entry.credit_total:,}）",
            )
        )

    return issues


# =======================================
# 仕訳生成ユーティリティ
# =======================================

def make_entry_pair(
    date,
    debit_account: str,
    credit_account: str,
    amount: int,
    description: str = "",
    status: EntryStatus = EntryStatus.DRAFT,
    source_ref: str | None = None,
) -> JournalEntry:
    """
    借方1行・貸方1行の仕訳を作る（科目は account_id で指定）

        make_entry_pair(date, cash.id, sales.id, 10000, "売上計上")
    """
    return JournalEntry(
        date=date,
        description=description,
        status=status,
        source_ref=source_ref,
        lines=[
            JournalLine(side=Side.DEBIT, account_id=debit_account, amount=amount),
            JournalLine(side=Side.CREDIT, account_id=credit_account, amount=amount),
        ],
    )

# ================================
# END journal_entry.py
# ================================
