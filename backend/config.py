"""
Application configuration — reads all settings from environment variables.
"""

import os
from pydantic import Field
from pydantic_settings import BaseSettings

PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))


class Settings(BaseSettings):
    # ── App ──────────────────────────────────────────────
    APP_NAME: str = "Persona Voice Chat"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    CORS_ORIGINS: str = "*"
    LOG_LEVEL: str = "INFO"

    # ── Model ────────────────────────────────────────────
    MODEL_PROVIDER: str = "huggingface"  # huggingface / openai
    MODEL_TEMPERATURE: float = 0.0
    MODEL_MAX_TOKENS: int = 250

    # ── Hugging Face Inference ───────────────────────────
    HF_API_TOKEN: str = ""
    HF_MODEL: str = "mistralai/Mixtral-8x7B-Instruct-v0.1"
    HF_BASE_URL: str = "https://router.huggingface.co/hf-inference/models"

    # ── OpenAI ───────────────────────────────────────────
    OPENAI_API_KEY: str = ""
    OPENAI_MODEL: str = "gpt-4o"

    # ── ElevenLabs TTS ───────────────────────────────────
    ELEVENLABS_API_KEY: str = ""
    ELEVENLABS_VOICE_ID: str = "6BZyx2XekeeXOkTVn8un"
    ELEVENLABS_MODEL_ID: str = "eleven_turbo_v2_5"
    ELEVENLABS_STABILITY: float = 0.5
    ELEVENLABS_SIMILARITY_BOOST: float = 0.7
    ELEVENLABS_BASE_URL: str = "https://api.elevenlabs.io/v1/text-to-speech"

    UPSTREAM_TIMEOUT_SECONDS: float = 60.0

    # ── Knowledge base ───────────────────────────────────
    KNOWLEDGE_BASE_PATH: str = os.path.join(PROJECT_ROOT, "data", "kb_vectors.json")
    CONTEXT_MAX_CHUNKS: int = Field(default=5, ge=0)  # 0 = unbounded
    ANSWER_MAX_CHARS: int = 2000

    # Answer offline from the phrase/keyword tables instead of the model
    DEMO_MODE: bool = False

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


settings = Settings()
