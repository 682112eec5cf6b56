# ================================
# kaikei/core/tax/tax_splitter.py
# ================================


def calculate_tax_amount(amount: int, rate: int) -> int:
    """
    税込金額に含まれる消費税額（円未満切り捨て）

        calculate_tax_amount(11000, 10) -> 1000
        calculate_tax_amount(10800, 8)  -> 800
    """
    if amount <= 0 or rate <= 0:
        return 0
    return amount * rate // (100 + rate)


def split_tax_inclusive(amount: int, rate: int, tax_amount: int | None = None) -> dict:
    """
    税込金額を
      ① 税抜本体
      ② 消費税額
    に分離する。

    tax_amount が記録済みならそれを優先し、なければ切り捨て計算する。
    """
    if tax_amount is None:
        tax_amount = calculate_tax_amount(amount, rate)

    return {
        "tax_base": amount - tax_amount,
        "tax_amount": tax_amount,
    }
