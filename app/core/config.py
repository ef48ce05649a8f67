import os
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
	# Accept a direct URL (supports either DATABASE_URL or database_url env vars)
	database_url: str | None = None

	# Individual parts, only used when no URL is configured
	DB_DRIVER: str | None = None
	DB_HOST: str = "localhost"
	DB_USER: str = ""
	DB_PASSWORD: str = ""
	DB_NAME: str = "billtracker"
	DB_PORT: int = 5432

	SECRET_KEY: str = "secret"
	ALGORITHM: str = "HS256"
	ACCESS_TOKEN_EXPIRE_MINUTES: int = 30

	# Pairing
	CONNECTION_CODE_LENGTH: int = 6
	CONNECTION_CODE_TTL_HOURS: int = 24
	CONNECTION_CODE_MAX_ATTEMPTS: int = 5

	CURRENCY_SYMBOL: str = "$"

	# Observability flags
	ENABLE_REQUEST_LOGGING: bool = True
	LOG_SAMPLE_RATE: float = 1.0
	LOG_LEVEL: str = "INFO"

	# Prefer explicit database_url if provided; otherwise assemble from parts
	@property
	def DATABASE_URL(self) -> str:
		if self.database_url and self.database_url.strip():
			return self.database_url.strip()
		explicit_url = os.getenv("DATABASE_URL")
		if explicit_url and explicit_url.strip():
			return explicit_url.strip()
		if not self.DB_DRIVER:
			return "sqlite:///./billtracker.db"
		return f"{self.DB_DRIVER}://{self.DB_USER}:{self.DB_PASSWORD}@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"

	model_config = SettingsConfigDict(
		env_file=".env",
		extra="ignore",
		case_sensitive=False,  # accept lowercase keys on Windows and in .env
	)

settings = Settings()
