from decimal import Decimal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    db_host: str = "host.docker.internal"
    db_port: int = 5432
    db_database: str = "cverve"
    db_username: str = "cverve"
    db_password: str = "secret"
    db_pool_min_size: int = 1
    db_pool_max_size: int = 10

    pdf_engine: str = "pdfplumber"
    pdf_min_text_length: int = 50

    ocr_language: str = "eng"
    ocr_page_segmentation_mode: int = 6
    ocr_engine_mode: int = 1
    ocr_timeout_seconds: float = 20.0
    ocr_max_pdf_pages: int = 5
    ocr_render_dpi: int = 200
    tesseract_cmd: str = ""
    image_max_dimension: int = 2000

    extraction_timeout_seconds: float = 15.0
    request_timeout_seconds: float = 28.0

    content_min_length: int = 10
    content_min_alnum_ratio: float = 0.3

    payment_receiver_names: list[str] = ["yilak abay", "yilak abay abebe"]
    payment_min_amount: Decimal = Decimal("30")
    payment_id_prefix: str = "FT"

    payment_ai_provider: str = "deepseek"
    payment_ai_max_tokens: int = 1024

    payment_openai_api_key: str = ""
    payment_openai_model_name: str = "gpt-4o-mini"
    payment_openai_timeout_seconds: int = 30

    payment_deepseek_api_key: str = ""
    payment_deepseek_model_name: str = "deepseek-vl"
    payment_deepseek_timeout_seconds: int = 30

    payment_openai_compatible_api_key: str = ""
    payment_openai_compatible_model_name: str = ""
    payment_openai_compatible_base_url: str = ""
    payment_openai_compatible_timeout_seconds: int = 30
