# ===========================================
# kaikei/core/finance/statements.py
# 帳票（試算表・貸借対照表・損益計算書・月次推移）の入れ物
# ===========================================

from __future__ import annotations

from dataclasses import dataclass, field

from kaikei.core.ledger.types import AccountCategory


@dataclass
class TrialBalanceRow:
    account_code: str
    account_name: str
    category: AccountCategory
    debit_total: int
    credit_total: int
    debit_balance: int  # 借方残高
    credit_balance: int  # 貸方残高


@dataclass
class TrialBalance:
    rows: list[TrialBalanceRow] = field(default_factory=list)
    total_debit: int = 0
    total_credit: int = 0
    total_debit_balance: int = 0
    total_credit_balance: int = 0


@dataclass
class StatementItem:
    code: str  # 当期純利益の行は ""
    name: str
    amount: int


@dataclass
class StatementSection:
    label: str
    items: list[StatementItem] = field(default_factory=list)

    @property
    def total(self) -> int:
        return sum(i.amount for i in self.items)


@dataclass
class BalanceSheet:
    assets: StatementSection
    liabilities: StatementSection
    equity: StatementSection  # 当期純利益（≠0 のとき）を含む
    net_income: int

    @property
    def total_assets(self) -> int:
        return self.assets.total

    @property
    def total_liabilities(self) -> int:
        return self.liabilities.total

    @property
    def total_equity(self) -> int:
        return self.equity.total

    @property
    def total_liabilities_and_equity(self) -> int:
        return self.total_liabilities + self.total_equity

    @property
    def sections(self) -> list[StatementSection]:
        return [self.assets, self.liabilities, self.equity]


@dataclass
class ProfitLoss:
    sales: StatementSection
    cost_of_sales: StatementSection
    sga: StatementSection
    non_operating_income: StatementSection
    non_operating_expense: StatementSection
    extraordinary_gain: StatementSection
    extraordinary_loss: StatementSection
    income_tax_section: StatementSection

    @property
    def gross_profit(self) -> int:
        """売上総利益"""
        return self.sales.total - self.cost_of_sales.total

    @property
    def operating_income(self) -> int:
        """営業利益"""
        return self.gross_profit - self.sga.total

    @property
    def ordinary_income(self) -> int:
        """経常利益"""
        return self.operating_income + self.non_operating_income.total - self.non_operating_expense.total

    @property
    def income_before_tax(self) -> int:
        """税引前当期純利益"""
        return self.ordinary_income + self.extraordinary_gain.total - self.extraordinary_loss.total

    @property
    def income_tax(self) -> int:
        return self.income_tax_section.total

    @property
    def net_income(self) -> int:
        """当期純利益"""
        return self.income_before_tax - self.income_tax

    @property
    def sections(self) -> list[StatementSection]:
        return [
            self.sales,
            self.cost_of_sales,
            self.sga,
            self.non_operating_income,
            self.non_operating_expense,
            self.extraordinary_gain,
            self.extraordinary_loss,
            self.income_tax_section,
        ]


@dataclass
class MonthlyAccount:
    code: str
    name: str
    category: AccountCategory
    balance: int


@dataclass
class MonthlySummary:
    month: str  # "YYYY/MM"
    revenue: int
    expense: int
    accounts: list[MonthlyAccount] = field(default_factory=list)

    @property
    def profit(self) -> int:
        return self.revenue - self.expense
