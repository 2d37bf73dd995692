from typing import List

from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    # Настройки приложения
    APP_NAME: str = "E-Learning Platform"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    
    # Настройки базы данных
    DATABASE_URL: str = "sqlite:///./elearning.db"
    
    # Настройки безопасности (SECRET_KEY обязателен, без него приложение не стартует)
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 72 * 60
    BCRYPT_ROUNDS: int = 12
    
    # Настройки загрузки файлов
    MAX_UPLOAD_SIZE: int = 50 * 1024 * 1024  # 50MB
    UPLOAD_DIR: str = "./uploads"
    
    # Настройки CORS
    ALLOWED_ORIGINS: List[str] = ["http://localhost:5173"]
    
    class Config:
        env_file = ".env"

settings = Settings()
