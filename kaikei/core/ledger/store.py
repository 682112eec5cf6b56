# ===============================
# kaikei/core/ledger/store.py
# ===============================

from __future__ import annotations

import logging
from typing import Iterator

from kaikei.core.errors import CompanyNotFoundError, DomainLimitError
from kaikei.core.ledger.ledger import LedgerManager

logger = logging.getLogger(__name__)


class LedgerStore:
    """会社IDごとの帳簿。集計・帳票は必ず会社IDを指定してここから引く"""

    def __init__(self):
        self._ledgers: dict[str, LedgerManager] = {}

    def open(self, company, registry=None, tax_categories=None) -> LedgerManager:
        """会社の帳簿を作る（同じIDが既にあれば DomainLimitError）"""
        if company.id in self._ledgers:
            raise DomainLimitError(f"会社の帳簿は既に存在します: {company.id}")
        ledger = LedgerManager(company, registry=registry, tax_categories=tax_categories)
        self._ledgers[company.id] = ledger
        logger.info(f"帳簿を作成: {company.id} {company.name}")
        return ledger

    def get(self, company_id: str) -> LedgerManager:
        try:
            return self._ledgers[company_id]
        except KeyError:
            raise CompanyNotFoundError(f"会社が存在しません: {company_id}") from None

    def __contains__(self, company_id: str) -> bool:
        return company_id in self._ledgers

    def __iter__(self) -> Iterator[str]:
        return iter(self._ledgers)
