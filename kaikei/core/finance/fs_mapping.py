# ============================================
# kaikei/core/finance/fs_mapping.py
# 損益計算書の科目分類マスター
# ============================================

from enum import Enum


class PLBucket(str, Enum):
    """損益計算書の区分"""

    SALES = "sales"  # 売上高
    COST_OF_SALES = "cost_of_sales"  # 売上原価
    SGA = "sga"  # 販売費及び一般管理費
    NON_OPERATING_INCOME = "non_operating_income"  # 営業外収益
    NON_OPERATING_EXPENSE = "non_operating_expense"  # 営業外費用
    EXTRAORDINARY_GAIN = "extraordinary_gain"  # 特別利益
    EXTRAORDINARY_LOSS = "extraordinary_loss"  # 特別損失
    INCOME_TAX = "income_tax"  # 法人税等

    @property
    def is_income(self) -> bool:
        """収益側の区分か（収益科目だけが入れる）"""
        return self in INCOME_BUCKETS


INCOME_BUCKETS = frozenset({
    PLBucket.SALES,
    PLBucket.NON_OPERATING_INCOME,
    PLBucket.EXTRAORDINARY_GAIN,
})

PL_BUCKET_LABELS: dict[PLBucket, str] = {
    PLBucket.SALES: "売上高",
    PLBucket.COST_OF_SALES: "売上原価",
    PLBucket.SGA: "販売費及び一般管理費",
    PLBucket.NON_OPERATING_INCOME: "営業外収益",
    PLBucket.NON_OPERATING_EXPENSE: "営業外費用",
    PLBucket.EXTRAORDINARY_GAIN: "特別利益",
    PLBucket.EXTRAORDINARY_LOSS: "特別損失",
    PLBucket.INCOME_TAX: "法人税等",
}

# ----------------------------
# 科目コード → 区分（既定）
# 載っていない費用科目は販管費、収益科目は売上高に入る
# ----------------------------
DEFAULT_PL_CLASSIFICATION: dict[str, PLBucket] = {
    "4100": PLBucket.SALES,  # 売上高
    "5100": PLBucket.COST_OF_SALES,  # 売上原価
    "5110": PLBucket.COST_OF_SALES,  # 仕入高
    "4200": PLBucket.NON_OPERATING_INCOME,  # 受取利息
    "4300": PLBucket.NON_OPERATING_INCOME,  # 受取配当金
    "4400": PLBucket.NON_OPERATING_INCOME,  # 雑収入
    "5500": PLBucket.NON_OPERATING_EXPENSE,  # 支払利息
    "4500": PLBucket.EXTRAORDINARY_GAIN,  # 固定資産売却益
    "5600": PLBucket.EXTRAORDINARY_LOSS,  # 固定資産売却損
    "5700": PLBucket.INCOME_TAX,  # 法人税等
}

# ----------------------------
# 貸借対照表の部
# ----------------------------
BS_SECTION_LABELS = {
    "asset": "資産の部",
    "liability": "負債の部",
    "equity": "純資産の部",
}

NET_INCOME_LABEL = "当期純利益"
