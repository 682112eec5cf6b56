# ===============================
# kaikei/core/ledger/accounts.py
# ===============================
"""
勘定科目マスタと消費税区分マスタ

科目は会社ごとのフラットな一覧。parent_id（補助科目）は表示用で、
集計時に親科目へ合算することはない。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator
from uuid import uuid4

from kaikei.core.errors import AccountInUseError, DomainLimitError
from kaikei.core.ledger.types import AccountCategory, TaxType

logger = logging.getLogger(__name__)


# --- 標準勘定科目（法人向け） ---
DEFAULT_ACCOUNTS: list[tuple[str, str, str]] = [
    # (code, name, category)
    # 資産 (1xxx)
    ("1100", "現金", "asset"),
    ("1200", "普通預金", "asset"),
    ("1300", "売掛金", "asset"),
    ("1410", "前払費用", "asset"),
    ("1500", "仮払消費税", "asset"),
    ("1510", "未収消費税等", "asset"),
    ("1700", "工具器具備品", "asset"),
    ("1710", "車両運搬具", "asset"),
    ("1720", "ソフトウェア", "asset"),
    ("1730", "一括償却資産", "asset"),
    # 負債 (2xxx)
    ("2100", "買掛金", "liability"),
    ("2200", "短期借入金", "liability"),
    ("2310", "未払費用", "liability"),
    ("2320", "未払法人税等", "liability"),
    ("2330", "未払消費税等", "liability"),
    ("2340", "預り金", "liability"),
    ("2360", "仮受消費税", "liability"),
    ("2500", "長期借入金", "liability"),
    # 純資産 (3xxx)
    ("3100", "資本金", "equity"),
    ("3200", "繰越利益剰余金", "equity"),
    # 収益 (4xxx)
    ("4100", "売上高", "revenue"),
    ("4200", "受取利息", "revenue"),
    ("4300", "受取配当金", "revenue"),
    ("4400", "雑収入", "revenue"),
    ("4500", "固定資産売却益", "revenue"),
    # 費用 (5xxx)
    ("5100", "売上原価", "expense"),
    ("5110", "仕入高", "expense"),
    ("5200", "役員報酬", "expense"),
    ("5210", "給料手当", "expense"),
    ("5230", "法定福利費", "expense"),
    ("5300", "旅費交通費", "expense"),
    ("5310", "通信費", "expense"),
    ("5320", "消耗品費", "expense"),
    ("5340", "地代家賃", "expense"),
    ("5350", "水道光熱費", "expense"),
    ("5360", "保険料", "expense"),
    ("5370", "支払手数料", "expense"),
    ("5380", "租税公課", "expense"),
    ("5450", "減価償却費", "expense"),
    ("5500", "支払利息", "expense"),
    ("5600", "固定資産売却損", "expense"),
    ("5700", "法人税等", "expense"),
    ("5900", "雑費", "expense"),
]


@dataclass
class Account:
    """勘定科目"""

    id: str
    code: str
    name: str
    category: AccountCategory
    parent_id: str | None = None
    is_active: bool = True
    is_system: bool = False
    sort_order: int = 0

    def __post_init__(self):
        self.category = AccountCategory(self.category)

    @property
    def is_debit_normal(self) -> bool:
        return self.category.is_debit_normal


@dataclass(frozen=True)
class TaxCategory:
    """消費税区分（静的な参照データ）"""

    id: str
    code: str
    name: str
    rate: int  # 0, 8, 10
    type: TaxType
    is_reduced: bool = False
    sort_order: int = 0

    @property
    def is_taxable(self) -> bool:
        return self.rate > 0 and self.type in (TaxType.TAXABLE_SALES, TaxType.TAXABLE_PURCHASE)


DEFAULT_TAX_CATEGORIES: list[TaxCategory] = [
    # 課税売上
    TaxCategory("sales_10", "sales_10", "課税売上10%", 10, TaxType.TAXABLE_SALES, False, 1),
    TaxCategory("sales_8r", "sales_8r", "課税売上8%（軽減）", 8, TaxType.TAXABLE_SALES, True, 2),
    # 課税仕入
    TaxCategory("purchase_10", "purchase_10", "課税仕入10%", 10, TaxType.TAXABLE_PURCHASE, False, 10),
    TaxCategory("purchase_8r", "purchase_8r", "課税仕入8%（軽減）", 8, TaxType.TAXABLE_PURCHASE, True, 11),
    # 非課税・不課税・免税
    TaxCategory("exempt", "exempt", "非課税", 0, TaxType.EXEMPT, False, 20),
    TaxCategory("non_taxable", "non_taxable", "不課税", 0, TaxType.NON_TAXABLE, False, 21),
    TaxCategory("tax_free", "tax_free", "免税", 0, TaxType.TAX_FREE, False, 22),
]


class AccountRegistry:
    """
    AccountRegistry
    ----------------
    ・1社分の勘定科目を保持する
    ・ID / コードどちらでも引ける
    ・使用中の科目は削除させず、無効化のみ許す
    """

    def __init__(self):
        self._by_id: dict[str, Account] = {}
        self._by_code: dict[str, Account] = {}

    @classmethod
    def with_defaults(cls) -> "AccountRegistry":
        registry = cls()
        for order, (code, name, category) in enumerate(DEFAULT_ACCOUNTS):
            registry.add(code, name, category, is_system=True, sort_order=order)
        return registry

    # -------------------------------------------------
    # 登録・参照
    # -------------------------------------------------
    def add(
        self,
        code: str,
        name: str,
        category,
        parent_id: str | None = None,
        is_system: bool = False,
        sort_order: int | None = None,
        account_id: str | None = None,
    ) -> Account:
        if code in self._by_code:
            raise DomainLimitError(f"勘定科目コードが重複しています: {code}")
        if parent_id is not None and parent_id not in self._by_id:
            raise DomainLimitError(f"親科目が存在しません: {parent_id}")

        account = Account(
            id=account_id or uuid4().hex,
            code=code,
            name=name,
            category=category,
            parent_id=parent_id,
            is_system=is_system,
            sort_order=len(self._by_id) if sort_order is None else sort_order,
        )
        self._by_id[account.id] = account
        self._by_code[account.code] = account
        return account

    def get(self, account_id: str) -> Account | None:
        return self._by_id.get(account_id)

    def by_code(self, code: str) -> Account | None:
        return self._by_code.get(code)

    def resolve(self, account_id: str | None = None, account_code: str | None = None) -> Account | None:
        """ID 優先、なければコードで科目を探す"""
        if account_id:
            return self._by_id.get(account_id)
        if account_code:
            return self._by_code.get(account_code)
        return None

    def __iter__(self) -> Iterator[Account]:
        return iter(sorted(self._by_id.values(), key=lambda a: a.code))

    def __len__(self) -> int:
        return len(self._by_id)

    def __contains__(self, account_id: str) -> bool:
        return account_id in self._by_id

    # -------------------------------------------------
    # 無効化・削除
    # -------------------------------------------------
    def deactivate(self, account_id: str) -> Account:
        account = self._require(account_id)
        account.is_active = False
        logger.info(f"勘定科目を無効化: {account.code} {account.name}")
        return account

    def remove(self, account_id: str, in_use: bool) -> None:
        """科目を削除する。in_use は呼び出し側（LedgerManager）が判定する"""
        account = self._require(account_id)
        if in_use:
            raise AccountInUseError(
                f"勘定科目 {account.code} {account.name} は仕訳で使用中のため削除できません（無効化してください）"
            )
        del self._by_id[account.id]
        del self._by_code[account.code]

    def _require(self, account_id: str) -> Account:
        account = self._by_id.get(account_id)
        if account is None:
            raise DomainLimitError(f"勘定科目が存在しません: {account_id}")
        return account


def tax_category_map(categories=None) -> dict[str, TaxCategory]:
    """税区分を ID とコードの両方で引ける辞書にする"""
    table: dict[str, TaxCategory] = {}
    for tc in categories if categories is not None else DEFAULT_TAX_CATEGORIES:
        table[tc.id] = tc
        table.setdefault(tc.code, tc)
    return table
