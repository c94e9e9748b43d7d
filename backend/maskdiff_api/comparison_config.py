from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict

import yaml
from pydantic import BaseModel, Field, ValidationError


class ComparisonDefaults(BaseModel):
    # 相似度判定閾值（similarity >= threshold 視為匹配）
    threshold_default: float = Field(0.95, ge=0.0, le=1.0)
    # 批次比對的候選圖數量上限
    max_candidates_default: int = Field(20, ge=1, le=200)


def _default_comparison_yaml_path() -> Path:
    # backend/maskdiff_api/comparison_config.py -> backend
    backend_root = Path(__file__).resolve().parents[1]
    return backend_root / "config" / "comparison.yml"


def load_comparison_defaults() -> ComparisonDefaults:
    """
    載入比對預設值。

    優先序：
    - YAML（COMPARISON_CONFIG_PATH 或 backend/config/comparison.yml）
    - 各欄位的 model 預設值
    """
    cfg_path = os.getenv("COMPARISON_CONFIG_PATH")
    path = Path(cfg_path) if cfg_path else _default_comparison_yaml_path()

    data: Dict[str, Any] = {}
    try:
        if path.exists():
            raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
            if isinstance(raw, dict):
                data = raw
    except (OSError, ValueError, yaml.YAMLError):
        # 設定檔壞掉時回退到預設值（UnicodeDecodeError 屬於 ValueError）
        data = {}

    try:
        return ComparisonDefaults.model_validate(data)
    except ValidationError:
        # 數值超出範圍同樣回退到預設值
        return ComparisonDefaults()
