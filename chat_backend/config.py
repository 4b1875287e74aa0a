import os
from typing import List

from pydantic import BaseModel, Field, SecretStr


# Generation defaults for the advisor
DEFAULT_GENERATION_MODEL_ID = "gpt-3.5-turbo"
GENERATION_TEMPERATURE = 0.7
GENERATION_MAX_TOKENS = 1000


class AdvisorSettings(BaseModel):
    """Process-wide configuration, built once by the entry point and passed to the app."""
    openai_api_key: SecretStr
    generation_model_id: str = DEFAULT_GENERATION_MODEL_ID
    temperature: float = GENERATION_TEMPERATURE
    max_tokens: int = Field(GENERATION_MAX_TOKENS, gt=0)
    allowed_origins: List[str] = Field(default_factory=lambda: ["*"])
    verify_api_key: bool = False
    host: str = "0.0.0.0"
    port: int = 8001

    @classmethod
    def from_env(cls) -> "AdvisorSettings":
        api_key = (os.getenv("OPENAI_API_KEY") or "").strip()
        if not api_key:
            # Fail fast, the service cannot answer anything without a credential
            raise RuntimeError(
                "Missing OpenAI API key. Please add OPENAI_API_KEY to your environment."
            )

        origins = [o.strip() for o in os.getenv("ALLOWED_ORIGINS", "").split(",") if o.strip()]

        return cls(
            openai_api_key=api_key,
            generation_model_id=(os.getenv("GENERATION_MODEL_ID") or DEFAULT_GENERATION_MODEL_ID).strip(),
            allowed_origins=origins or ["*"],
            verify_api_key=os.getenv("VERIFY_OPENAI_API_KEY", "").strip().lower() in {"1", "true", "yes"},
            host=os.getenv("CHAT_BACKEND_HOST", "0.0.0.0"),
            port=int(os.getenv("CHAT_BACKEND_PORT", "8001")),
        )
