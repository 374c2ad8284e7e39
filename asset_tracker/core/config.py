"""
Configuration settings for the telecom asset tracker
"""

from pydantic_settings import BaseSettings
from typing import List

class Settings(BaseSettings):
    """Application settings"""
    
    # Database
    db_host: str = "localhost"
    db_port: str = "5432"
    db_name: str = "telecom_device_management"
    db_user: str = "postgres"
    db_password: str = "postgres"
    database_url: str = ""
    
    # API Settings
    api_host: str = "0.0.0.0"
    api_port: int = 8080
    debug: bool = False
    cors_origins: List[str] = ["*"]
    
    # Alert rules
    trailing_window_days: int = 30
    low_utilization_hours: float = 2.0  # average hours per day
    high_utilization_hours: float = 20.0
    annual_maintenance_months: int = 12
    warranty_months: int = 36
    end_of_life_years: int = 5
    critical_end_of_life_years: int = 7
    deduplicate_alerts: bool = False
    
    # Analytics
    workday_hours: int = 8
    peak_usage_sample_size: int = 50
    monthly_usage_months: int = 6
    
    # Logging
    log_level: str = "INFO"
    
    class Config:
        env_file = ".env"
        case_sensitive = False

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        # Build database_url from components unless given explicitly
        if not self.database_url:
            self.database_url = f"postgresql://{self.db_user}:{self.db_password}@{self.db_host}:{self.db_port}/{self.db_name}"

# Global settings instance
settings = Settings()
