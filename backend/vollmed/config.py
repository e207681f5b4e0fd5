from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

_PACKAGE_DIR = Path(__file__).resolve().parent
_ENV_FILE = _PACKAGE_DIR.parent / ".env"


class Settings(BaseSettings):
    """Configuração lida de variáveis VOLLMED_* (ou do .env em backend/)."""

    model_config = SettingsConfigDict(
        env_prefix="VOLLMED_",
        env_file=(str(_ENV_FILE), ".env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    env: str = "development"

    database_path: str = str(_PACKAGE_DIR / "data.db")

    # JWT
    secret_key: str = "voll-med-dev-secret"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 120
    token_issuer: str = "API Voll.med"

    bcrypt_rounds: int = 12

    cors_origins: str = "*"

    # Usuário criado na primeira subida, se a tabela estiver vazia
    admin_login: str = "admin@voll.med"
    admin_senha: str = "admin123"

    page_size: int = 10

    @property
    def cors_origins_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    @property
    def production(self) -> bool:
        return self.env == "production"


settings = Settings()
