# ===============================
# kaikei/core/ledger/types.py
# ===============================
"""
複式簿記で使う区分値（Enum）の定義

str を継承しているので JSON / CSV にそのまま書き出せる。
"""

from enum import Enum


class AccountCategory(str, Enum):
    """勘定科目区分"""

    ASSET = "asset"  # 資産
    LIABILITY = "liability"  # 負債
    EQUITY = "equity"  # 純資産
    REVENUE = "revenue"  # 収益
    EXPENSE = "expense"  # 費用

    @property
    def is_debit_normal(self) -> bool:
        """借方残高が正常な区分か（資産・費用）"""
        return self in (AccountCategory.ASSET, AccountCategory.EXPENSE)

    @property
    def normal_side(self) -> "Side":
        return Side.DEBIT if self.is_debit_normal else Side.CREDIT


class Side(str, Enum):
    """貸借区分"""

    DEBIT = "debit"  # 借方
    CREDIT = "credit"  # 貸方


class EntryStatus(str, Enum):
    """仕訳ステータス（draft は集計対象外）"""

    DRAFT = "draft"
    CONFIRMED = "confirmed"


class TaxType(str, Enum):
    """消費税区分の種類"""

    TAXABLE_SALES = "taxable_sales"  # 課税売上
    TAXABLE_PURCHASE = "taxable_purchase"  # 課税仕入
    EXEMPT = "exempt"  # 非課税
    NON_TAXABLE = "non_taxable"  # 不課税
    TAX_FREE = "tax_free"  # 免税


class TaxMethod(str, Enum):
    """消費税の計算方式"""

    STANDARD = "standard"  # 本則課税
    SIMPLIFIED = "simplified"  # 簡易課税


class DepreciationMethod(str, Enum):
    """償却方法"""

    STRAIGHT_LINE = "straight_line"  # 定額法
    DECLINING_BALANCE = "declining_balance"  # 定率法（200%定率法）
    IMMEDIATE = "immediate"  # 少額減価償却資産の特例（即時償却）
    BULK_3YEAR = "bulk_3year"  # 一括償却資産（3年均等）


ACCOUNT_CATEGORY_LABELS: dict[AccountCategory, str] = {
    AccountCategory.ASSET: "資産",
    AccountCategory.LIABILITY: "負債",
    AccountCategory.EQUITY: "純資産",
    AccountCategory.REVENUE: "収益",
    AccountCategory.EXPENSE: "費用",
}

DEPRECIATION_METHOD_LABELS: dict[DepreciationMethod, str] = {
    DepreciationMethod.STRAIGHT_LINE: "定額法",
    DepreciationMethod.DECLINING_BALANCE: "定率法",
    DepreciationMethod.IMMEDIATE: "即時償却",
    DepreciationMethod.BULK_3YEAR: "一括償却",
}

# ===============================
# END types.py
# ===============================
