# ===============================================
# kaikei/core/bookkeeping/year_end_entries.py
# 決算整理仕訳（減価償却・未払/前払・消費税）
# ===============================================

from __future__ import annotations

import logging
from dataclasses import dataclass

from kaikei.core.depreciation.unit import (
    DepreciationSummary,
    get_current_year_depreciation,
    is_held_in,
    summarize_depreciation,
)
from kaikei.core.errors import DomainLimitError
from kaikei.core.fiscal import fiscal_period
from kaikei.core.ledger.journal_entry import JournalEntry, JournalLine, make_entry_pair
from kaikei.core.ledger.types import EntryStatus, Side

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SettlementTemplate:
    id: str
    name: str
    description: str
    category: str  # depreciation / accrual / prepaid / tax
    debit_account_code: str
    credit_account_code: str | None  # None: 固定資産ごとの資産科目
    needs_amount: bool  # 金額の入力が必要か
    auto_calculate: bool  # 帳簿から自動計算できるか


SETTLEMENT_TEMPLATES: list[SettlementTemplate] = [
    # 減価償却
    SettlementTemplate(
        "depreciation", "減価償却費の計上", "固定資産の当期分の減価償却費を計上します",
        "depreciation", "5450", None, needs_amount=False, auto_calculate=True,
    ),
    # 未払費用
    SettlementTemplate(
        "accrued_salary", "未払役員報酬の計上", "月末締め翌月払いの役員報酬の未払分を計上",
        "accrual", "5200", "2310", needs_amount=True, auto_calculate=False,
    ),
    SettlementTemplate(
        "accrued_social_insurance", "未払社会保険料の計上", "会社負担分の社会保険料の未払分を計上",
        "accrual", "5230", "2310", needs_amount=True, auto_calculate=False,
    ),
    SettlementTemplate(
        "accrued_rent", "未払家賃の計上", "期末時点で未払いの家賃を計上",
        "accrual", "5340", "2310", needs_amount=True, auto_calculate=False,
    ),
    # 前払費用
    SettlementTemplate(
        "prepaid_insurance", "前払保険料の振替", "年払い保険料のうち翌期分を前払費用に振替",
        "prepaid", "1410", "5360", needs_amount=True, auto_calculate=False,
    ),
    SettlementTemplate(
        "prepaid_rent", "前払家賃の振替", "前払いした翌期分の家賃を前払費用に振替",
        "prepaid", "1410", "5340", needs_amount=True, auto_calculate=False,
    ),
    # 税金
    SettlementTemplate(
        "consumption_tax", "消費税の確定計上", "仮受消費税と仮払消費税を相殺し、未払消費税を計上",
        "tax", "2360", "2330", needs_amount=False, auto_calculate=True,
    ),
    SettlementTemplate(
        "corporate_tax", "法人税等の計上", "確定した法人税・住民税・事業税を未払計上",
        "tax", "5700", "2320", needs_amount=True, auto_calculate=False,
    ),
]

TEMPLATE_CATEGORY_LABELS = {
    "depreciation": "減価償却",
    "accrual": "未払費用",
    "prepaid": "前払費用",
    "tax": "税金",
}

# 消費税の確定計上で使う科目
OUTPUT_TAX_CODE = "2360"  # 仮受消費税
INPUT_TAX_CODE = "1500"  # 仮払消費税
TAX_PAYABLE_CODE = "2330"  # 未払消費税等
TAX_RECEIVABLE_CODE = "1510"  # 未収消費税等


def get_template(template_id: str) -> SettlementTemplate:
    for t in SETTLEMENT_TEMPLATES:
        if t.id == template_id:
            return t
    raise DomainLimitError(f"決算整理テンプレートが見つかりません: {template_id}")


def templates_by_category() -> dict[str, list[SettlementTemplate]]:
    groups: dict[str, list[SettlementTemplate]] = {}
    for t in SETTLEMENT_TEMPLATES:
        groups.setdefault(t.category, []).append(t)
    return groups


class YearEndEntryGenerator:
    """
    決算整理仕訳を作って帳簿（LedgerManager）に登録する。
    作った仕訳は既定で draft。確定は呼び出し側が confirm_entry で行う。
    """

    def __init__(self, ledger):
        self.ledger = ledger

    @property
    def end_month(self) -> int:
        return self.ledger.company.fiscal_year_end_month

    # ============================================================
    # 減価償却費の計上（資産科目を直接減額）
    # ============================================================
    def generate_depreciation_entries(self, fiscal_year, status=EntryStatus.DRAFT) -> list[JournalEntry]:
        period = fiscal_period(fiscal_year, self.end_month)
        created = []

        for asset in self.ledger.assets.values():
            if not is_held_in(asset, period):
                continue

            amount = get_current_year_depreciation(asset, period.label, self.end_month)
            if amount <= 0:
                continue

            source_ref = f"depreciation:{asset.id}:{period.label}"
            if self.ledger.find_by_source_ref(source_ref) is not None:
                logger.info(f"計上済みのためスキップ: {asset.name} {period.label}年度")
                continue

            if not asset.account_id or not asset.expense_account_id:
                raise DomainLimitError(f"固定資産 {asset.name} に資産科目・費用科目が設定されていません")

            entry = make_entry_pair(
                period.end,
                asset.expense_account_id,
                asset.account_id,
                amount,
                description=f"減価償却費 {asset.name}",
                status=status,
                source_ref=source_ref,
            )
            created.append(self.ledger.post_entry(entry))

        logger.info(f"減価償却仕訳を {len(created)} 件作成: {period.label}年度")
        return created

    def depreciation_summary(self, fiscal_year) -> DepreciationSummary:
        """帳簿に登録された固定資産の当期償却額・償却累計額・期末帳簿価額"""
        return summarize_depreciation(self.ledger.assets.values(), fiscal_year, self.end_month)

    # ============================================================
    # テンプレートからの決算整理仕訳
    # ============================================================
    def generate_from_template(self, template_id: str, fiscal_year, status=EntryStatus.DRAFT) -> list[JournalEntry]:
        """自動計算テンプレート（減価償却・消費税）を帳簿から計算して計上する"""
        template = get_template(template_id)
        if template.id == "depreciation":
            return self.generate_depreciation_entries(fiscal_year, status=status)
        if template.id == "consumption_tax":
            entry = self.generate_consumption_tax_settlement(fiscal_year, status=status)
            return [entry] if entry is not None else []
        raise DomainLimitError(f"金額の入力が必要なテンプレートです: {template_id}（generate_settlement_entry を使ってください）")

    def generate_settlement_entry(self, template_id: str, date, amount: int, memo: str | None = None) -> JournalEntry:
        template = get_template(template_id)
        if template.auto_calculate:
            raise DomainLimitError(
                f"{template.name} は帳簿から自動計算します（generate_from_template を使ってください）"
            )

        registry = self.ledger.registry
        debit = registry.by_code(template.debit_account_code)
        credit = registry.by_code(template.credit_account_code)
        missing = [
            code for code, account in (
                (template.debit_account_code, debit),
                (template.credit_account_code, credit),
            )
            if account is None
        ]
        if missing:
            raise DomainLimitError(f"科目が見つかりません: {' '.join(missing)}")

        entry = make_entry_pair(
            date,
            debit.id,
            credit.id,
            amount,
            description=memo or template.name,
            status=EntryStatus.DRAFT,
        )
        return self.ledger.post_entry(entry)

    # ============================================================
    # 消費税の確定計上（仮受 − 仮払 → 未払消費税等 / 未収消費税等）
    # ============================================================
    def _tax_account_balance(self, code: str, period) -> int:
        account = self.ledger.registry.by_code(code)
        if account is None:
            raise DomainLimitError(f"科目が見つかりません: {code}")

        df = self.ledger.get_lines_df(period.start, period.end)
        if df.empty:
            return 0
        rows = df[df["account_id"] == account.id]
        debit, credit = int(rows["debit"].sum()), int(rows["credit"].sum())
        return debit - credit if account.is_debit_normal else credit - debit

    def generate_consumption_tax_settlement(self, fiscal_year, status=EntryStatus.DRAFT) -> JournalEntry | None:
        period = fiscal_period(fiscal_year, self.end_month)
        source_ref = f"consumption_tax:{period.label}"
        if self.ledger.find_by_source_ref(source_ref) is not None:
            logger.info(f"消費税の確定計上は計上済みです: {period.label}年度")
            return None

        received = self._tax_account_balance(OUTPUT_TAX_CODE, period)
        paid = self._tax_account_balance(INPUT_TAX_CODE, period)
        if received < 0 or paid < 0:
            raise DomainLimitError(f"仮受消費税・仮払消費税の残高がマイナスです（仮受 {received:,} / 仮払 {paid:,}）")
        if received == 0 and paid == 0:
            return None

        diff = received - paid
        lines = [
            (Side.DEBIT, OUTPUT_TAX_CODE, received),
            (Side.CREDIT, INPUT_TAX_CODE, paid),
            (Side.CREDIT, TAX_PAYABLE_CODE, diff) if diff > 0 else (Side.DEBIT, TAX_RECEIVABLE_CODE, -diff),
        ]
        entry = JournalEntry(
            date=period.end,
            description="消費税の確定計上",
            status=status,
            source_ref=source_ref,
            lines=[
                JournalLine(side=side, account_id=None, account_code=code, amount=amount)
                for side, code, amount in lines
                if amount > 0
            ],
        )
        return self.ledger.post_entry(entry)

# kaikei/core/bookkeeping/year_end_entries.py end
