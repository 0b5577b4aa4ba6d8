"""
应用配置文件
"""
from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """应用配置"""
    
    # 应用基本配置
    APP_NAME: str = "NoteTree"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    API_PREFIX: str = "/api"
    LOG_LEVEL: str = "INFO"
    
    # 数据库配置
    DB_USERNAME: str = "postgres"
    DB_PASSWORD: str = "postgres"
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432
    DB_NAME: str = "notetree"
    DATABASE_URL_OVERRIDE: Optional[str] = None  # 设置后直接使用，例如 sqlite+aiosqlite:///./notes.db
    
    # CORS配置
    CORS_ORIGINS: list = ["*"]
    
    # 访问码配置
    ACCESS_CODE_LENGTH: int = 6
    ACCESS_CODE_HEADER: str = "X-Access-Code"
    
    # 内容限制
    FOLDER_NAME_MAX_LENGTH: int = 100
    NOTE_TITLE_MAX_LENGTH: int = 200
    
    # 重命名文件夹时是否同时重算所有子孙文件夹的path
    CASCADE_RENAME_PATHS: bool = False
    
    @property
    def DATABASE_URL(self) -> str:
        """获取数据库连接URL"""
        if self.DATABASE_URL_OVERRIDE:
            return self.DATABASE_URL_OVERRIDE
        return f"postgresql+asyncpg://{self.DB_USERNAME}:{self.DB_PASSWORD}@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
    
    class Config:
        case_sensitive = True
        env_file = ".env"


settings = Settings()
