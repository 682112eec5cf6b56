"""
例外の定義

- 入力検証エラー（仕訳の貸借不一致など）: 登録時に拒否し、一部だけ反映することはない
- 整合性エラー（確定済み仕訳の不一致）: 集計を止める致命的エラー
- 範囲外エラー（未対応の償却方法、業種区分、日付範囲の逆転）: 計算前に拒否
"""

from __future__ import annotations

from dataclasses import dataclass


class KaikeiError(Exception):
    """kaikei の全例外の基底クラス"""

    pass


@dataclass(frozen=True)
class LineIssue:
    """仕訳検証で見つかった問題1件

    index が None のものは仕訳全体に関する問題（貸借不一致など）。
    """

    index: int | None
    field: str
    message: str

    def __str__(self) -> str:
        where = "entry" if self.index is None else f"lines[{self.index}]"
        return f"{where}.{self.field}: {self.message}"


class EntryValidationError(KaikeiError):
    """仕訳が登録条件を満たさない"""

    def __init__(self, issues: list[LineIssue]):
        self.issues = list(issues)
        summary = "; ".join(str(i) for i in self.issues)
        super().__init__(f"仕訳の検証に失敗しました: {summary}")

    @property
    def line_indices(self) -> list[int]:
        """問題のあった明細の位置（重複なし・昇順）"""
        return sorted({i.index for i in self.issues if i.index is not None})


class LedgerIntegrityError(KaikeiError):
    """確定済み仕訳の貸借が一致しない（本来あり得ない）"""

    def __init__(self, entry_id: str, debit_total: int, credit_total: int):
        self.entry_id = entry_id
        self.debit_total = debit_total
        self.credit_total = credit_total
        super().__init__(
            f"確定済み仕訳 {entry_id} の貸借が一致しません: "
            f"借方 {debit_total:,} / 貸方 {credit_total:,}"
        )


class DomainLimitError(KaikeiError):
    """計算の前提条件を満たさない入力"""

    pass


class InvalidDateRangeError(DomainLimitError):
    """dateFrom > dateTo"""

    pass


class UnsupportedMethodError(DomainLimitError):
    """未対応の償却方法・消費税計算方式"""

    pass


class UnknownBusinessTypeError(DomainLimitError):
    """簡易課税の事業区分が 1〜6 以外"""

    pass


class AccountInUseError(KaikeiError):
    """仕訳で使用中の勘定科目は削除できない"""

    pass


class CompanyNotFoundError(KaikeiError):
    """指定された会社の帳簿が存在しない"""

    pass


class ConfigLoadError(KaikeiError):
    """設定ファイルの読み込み失敗"""

    pass
