"""
애플리케이션 설정 관리

Pydantic Settings를 사용하여 환경 변수를 로드합니다.
.env 파일 또는 시스템 환경 변수에서 설정을 읽어옵니다.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """애플리케이션 설정 클래스"""

    # 데이터베이스 설정
    database_url: str = "sqlite:///./beautycare.db"

    # 페이지네이션 / 검색 설정
    default_page_size: int = 10
    max_page_size: int = 100
    search_result_limit: int = 20

    # 상품 기본값
    default_product_status: str = "regular"

    # CORS 설정 (쉼표로 구분된 origin 목록, "*"는 전체 허용)
    cors_origins: str = "*"

    # 애플리케이션 설정
    app_env: str = "development"
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # 정의되지 않은 환경 변수 무시
    )

    @property
    def cors_origin_list(self) -> list[str]:
        """
        CORS origin 목록 파싱

        Returns:
            ["*"] 또는 ["http://localhost:3000", "https://shop.example.com", ...]
        """
        if not self.cors_origins or self.cors_origins.strip() == "*":
            return ["*"]
        return [
            origin.strip() for origin in self.cors_origins.split(",") if origin.strip()
        ]

    @property
    def is_sqlite(self) -> bool:
        """SQLite URL 여부 (SQLite 전용 connect_args 적용에 사용)"""
        return self.database_url.startswith("sqlite")


def get_settings() -> Settings:
    """
    Settings 인스턴스를 반환하는 팩토리 함수
    """
    return Settings()
