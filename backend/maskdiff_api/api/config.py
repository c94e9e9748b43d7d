from fastapi import APIRouter

from maskdiff_api.comparison_config import load_comparison_defaults

router = APIRouter(tags=["config"])


@router.get("/config/comparison")
def get_comparison_config():
    """
    提供比對預設值（由後端 comparison.yml 管理）。
    - 優先序固定：後端 YAML > 模型預設值
    """
    cfg = load_comparison_defaults()
    return cfg.model_dump()
