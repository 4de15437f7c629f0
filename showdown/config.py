"""Application configuration."""
import os
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()


@dataclass
class Config:
    """Application configuration loaded from environment variables."""
    
    # Lookup table cache (empty disables caching)
    table_cache_dir: str = os.getenv("SHOWDOWN_TABLE_CACHE_DIR", "")
    
    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "INFO")


config = Config()
