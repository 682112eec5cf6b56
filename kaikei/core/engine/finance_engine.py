#=========== kaikei/core/engine/finance_engine.py

from __future__ import annotations

from kaikei.config.params import EngineParams
from kaikei.core.engine.aggregate import AggregationEngine
from kaikei.core.finance.fs_builder import FinancialStatementBuilder
from kaikei.core.finance.general_ledger import GeneralLedger, build_general_ledger
from kaikei.core.finance.statements import BalanceSheet, MonthlySummary, ProfitLoss, TrialBalance
from kaikei.core.ledger.store import LedgerStore


class FinanceEngine:
    """
    帳票の窓口。会社IDと期間（両端含む）を受け取り、集計 → 帳票の順に組み立てる。
    同じ帳簿・同じ期間なら何度呼んでも同じ結果になる。
    """

    def __init__(self, store: LedgerStore, params: EngineParams | None = None):
        self.params = params or EngineParams()
        self.store = store
        self.aggregation = AggregationEngine(store)
        self.builder = FinancialStatementBuilder(self.params.pl_classification)

    def get_trial_balance(self, company_id: str, date_from, date_to) -> TrialBalance:
        balances = self.aggregation.aggregate_by_account(company_id, date_from, date_to)
        return self.builder.build_trial_balance(balances)

    def get_balance_sheet(self, company_id: str, date_from, date_to) -> BalanceSheet:
        balances = self.aggregation.aggregate_by_account(company_id, date_from, date_to)
        return self.builder.build_balance_sheet(balances)

    def get_profit_loss(self, company_id: str, date_from, date_to) -> ProfitLoss:
        balances = self.aggregation.aggregate_by_account(company_id, date_from, date_to)
        return self.builder.build_profit_loss(balances)

    def get_monthly_trend(self, company_id: str, date_from, date_to) -> list[MonthlySummary]:
        monthly = self.aggregation.aggregate_by_month(company_id, date_from, date_to)
        return self.builder.build_monthly_trend(monthly)

    def get_general_ledger(self, company_id: str, account, date_from=None, date_to=None) -> GeneralLedger:
        """総勘定元帳（account は科目ID か科目コード）"""
        return build_general_ledger(self.store.get(company_id), account, date_from, date_to)

#========= kaikei/core/engine/finance_engine.py end
