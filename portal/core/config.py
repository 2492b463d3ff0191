from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    PROJECT_NAME: str = "Back-Office Portal"

    # Tenancy
    DEFAULT_ORG: str = "FLAWLESS"
    ACTIVE_ORG_KEY: str = "active_org"

    # Storage ("memory" or "file")
    STORAGE_BACKEND: str = "memory"
    STORAGE_DIR: str = "./data/store"

    # Mock payment gateway
    PAYMENT_MIN_DELAY_MS: int = 800
    PAYMENT_MAX_DELAY_MS: int = 1800
    BANK_SUCCESS_RATE: float = 0.90
    MOMO_SUCCESS_RATE: float = 0.92
    DEFAULT_SUCCESS_RATE: float = 0.99

    # Payslips
    PDF_ENABLED: bool = True
    PAYSLIP_DIR: str = "./data/payslips"
    COMPANY_NAME: str = "Flawless Graphics"

    LOG_LEVEL: str = "INFO"

    class Config:
        case_sensitive = True

settings = Settings()
