"""
應用配置管理
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """應用設置"""
    
    # 應用基本設置
    APP_NAME: str = "遮罩比對系統"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    
    # 上傳設置
    MAX_UPLOAD_SIZE: int = 10 * 1024 * 1024  # 10MB
    
    # CORS 設置
    CORS_ORIGINS: list = ["http://localhost:3000", "http://localhost:5173"]
    
    # API 設置
    API_V1_PREFIX: str = "/api/v1"
    
    # 多執行緒設置
    MAX_COMPARISON_THREADS: int = 8  # 批次比對的最大線程數
    
    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
