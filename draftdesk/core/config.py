from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    app_title: str = "Draftdesk"
    log_level: str = "INFO"

    # Идентификатор зрителя передается внешним слоем аутентификации
    viewer_header: str = "x-user-id"
    default_viewer_id: str = "writer-aria"

    default_untitled_title: str = "Untitled draft"
    preview_length: int = 160
    max_content_length: int = 1000000  # 1MB max content

    # word | line
    diff_granularity: str = "word"
    # Предел измененной части с каждой стороны сравнения (в токенах)
    max_diff_tokens: int = 2000

    stream_keepalive_seconds: float = 15.0

    model_config = {"env_file": ".env", "env_prefix": "DRAFTDESK_", "extra": "ignore"}


settings = Settings()
