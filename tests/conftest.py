"""
pytest 共通 fixture

標準勘定科目を持つ3月決算の会社（company_id="c1"）を用意する。
"""

import tempfile
from pathlib import Path

import pytest

from kaikei.config.params import Company
from kaikei.core.engine.finance_engine import FinanceEngine
from kaikei.core.engine.tax_engine import TaxEngine
from kaikei.core.ledger.ledger import LedgerManager
from kaikei.core.ledger.store import LedgerStore


@pytest.fixture
def temp_dir() -> Path:
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def company() -> Company:
    return Company(id="c1", name="テスト株式会社", fiscal_year_end_month=3)


@pytest.fixture
def store(company: Company) -> LedgerStore:
    s = LedgerStore()
    s.open(company)
    return s


@pytest.fixture
def ledger(store: LedgerStore) -> LedgerManager:
    return store.get("c1")


@pytest.fixture
def acct(ledger: LedgerManager):
    """科目コード → 科目ID"""

    def _acct(code: str) -> str:
        return ledger.registry.by_code(code).id

    return _acct


@pytest.fixture
def post(ledger: LedgerManager):
    """借方1行・貸方1行の確定済み仕訳を科目コードで登録する"""

    def _post(date, debit_code, credit_code, amount, tax_category_id=None, tax_amount=None, status="confirmed"):
        line_tax = {"tax_category_id": tax_category_id, "tax_amount": tax_amount}
        debit = {"side": "debit", "account_code": debit_code, "amount": amount}
        credit = {"side": "credit", "account_code": credit_code, "amount": amount}
        # 税区分は売上なら貸方、それ以外は借方の明細に付ける
        if tax_category_id and tax_category_id.startswith("sales"):
            credit.update(line_tax)
        elif tax_category_id:
            debit.update(line_tax)
        return ledger.post_entry({"date": date, "status": status, "lines": [debit, credit]})

    return _post


@pytest.fixture
def finance(store: LedgerStore) -> FinanceEngine:
    return FinanceEngine(store)


@pytest.fixture
def tax_engine(store: LedgerStore) -> TaxEngine:
    return TaxEngine(store)
