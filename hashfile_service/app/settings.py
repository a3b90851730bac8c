from __future__ import annotations

from typing import Annotated

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="HASHFILE_",
        extra="ignore",
        env_file=".env",
        env_file_encoding="utf-8",
    )

    service_name: str = "hashfile-service"
    host: str = "0.0.0.0"
    port: int = 8090
    api_token: str = "dev-hashfile-token"
    # CSV 문자열 또는 리스트 모두 허용해요. file:// URI나 절대 경로예요.
    allowed_roots: Annotated[list[str], NoDecode] = Field(default_factory=list)
    server_name: str = "hashfile"
    server_version: str = "0.1.0"
    server_instructions: str = (
        "Hashfile MCP Server - provides reliable file editing using hash-anchored operations."
    )
    log_json: bool = True

    @field_validator("allowed_roots", mode="before")
    @classmethod
    def _parse_allowed_roots(cls, value: object) -> list[str]:
        """환경변수에서 CSV 문자열로 들어온 경우 리스트로 변환해요."""
        if isinstance(value, str):
            return [p.strip() for p in value.split(",") if p.strip()]
        return value  # type: ignore[return-value]

    @model_validator(mode="after")
    def _warn_insecure_token(self) -> "Settings":
        """개발용 기본 토큰이 프로덕션에서 그대로 쓰이지 않도록 경고를 남겨요."""
        import logging
        _log = logging.getLogger("hashfile_service.settings")
        if self.api_token in {"dev-hashfile-token", ""}:
            _log.warning("HASHFILE_API_TOKEN이 기본값이에요. 프로덕션 환경에서는 반드시 교체해야 해요.")
        return self


settings = Settings()
