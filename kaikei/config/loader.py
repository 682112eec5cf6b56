"""
設定ローダー

engine.yaml（損益区分表・みなし仕入率など）を読み込んで EngineParams を作る。

    pl_classification:
      "4100": sales
      "5110": cost_of_sales
    deemed_purchase_rates:
      5: 50
    national_tax_ratio: 78
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml

from kaikei.config.params import Company, EngineParams, PLClassification
from kaikei.core.errors import ConfigLoadError, DomainLimitError

logger = logging.getLogger(__name__)


def _read_yaml(path: Path) -> dict:
    path = Path(path)
    if not path.exists():
        raise ConfigLoadError(f"設定ファイルが見つかりません: {path}")

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ConfigLoadError(f"設定ファイルの解析に失敗しました: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigLoadError(f"設定ファイルの形式が不正です（マッピングではありません）: {path}")
    return data


def _require_mapping(data: dict, key: str) -> dict:
    value = data.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigLoadError(f"{key} はマッピングで指定してください: {value!r}")
    return value


def _to_int(value, what: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ConfigLoadError(f"{what} は整数で指定してください: {value!r}") from e


def load_engine_params(path: Path | None = None) -> EngineParams:
    """engine.yaml を読み込む（None なら既定値）

    Raises:
        ConfigLoadError: ファイルがない・YAML が壊れている・値が不正
    """
    if path is None:
        return EngineParams()

    data = _read_yaml(path)
    params = EngineParams()

    if "pl_classification" in data:
        try:
            params.pl_classification = PLClassification.from_mapping(_require_mapping(data, "pl_classification"))
        except DomainLimitError as e:
            raise ConfigLoadError(str(e)) from e

    for business_type, pct in _require_mapping(data, "deemed_purchase_rates").items():
        bt = _to_int(business_type, "事業区分")
        pct = _to_int(pct, f"第{bt}種のみなし仕入率")
        if not 0 <= pct <= 100:
            raise ConfigLoadError(f"みなし仕入率は 0〜100 で指定してください: 第{bt}種 {pct}")
        params.deemed_purchase_rates[bt] = pct

    if "national_tax_ratio" in data:
        ratio = _to_int(data["national_tax_ratio"], "national_tax_ratio")
        if not 0 <= ratio <= 100:
            raise ConfigLoadError(f"national_tax_ratio は 0〜100 で指定してください: {ratio}")
        params.national_tax_ratio = ratio

    logger.info(f"設定を読み込みました: {path}")
    return params


def load_company(path: Path) -> Company:
    """company.yaml（id, name, fiscal_year_end_month, tax_method, business_type）を読み込む"""
    data = _read_yaml(path)
    if not data.get("id"):
        raise ConfigLoadError(f"company.yaml に 'id' がありません: {path}")

    try:
        return Company(
            id=str(data["id"]),
            name=data.get("name", ""),
            fiscal_year_end_month=int(data.get("fiscal_year_end_month", 3)),
            tax_method=data.get("tax_method", "standard"),
            business_type=int(data.get("business_type", 5)),
        )
    except (DomainLimitError, TypeError, ValueError) as e:
        raise ConfigLoadError(f"company.yaml の値が不正です: {e}") from e
