"""Agent configuration with environment variable loading.

Pydantic-based configuration for the Gemini research agent.
"""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

# Load environment variables from .env file
load_dotenv()


class AgentConfig(BaseModel):
    """Configuration for the Gemini research agent.

    Attributes:
        api_key: API key for the Gemini API.
        model_name: Model identifier to use.
        thinking_budget: Token budget the model may spend on reasoning.
        report_language: Language the agent writes its reports in.
    """

    api_key: str = Field(
        default_factory=lambda: os.getenv(
            "GOOGLE_API_KEY", os.getenv("GEMINI_API_KEY", os.getenv("API_KEY", ""))
        ),
        description="API key for the Gemini API",
    )
    model_name: str = Field(
        default_factory=lambda: os.getenv("LLM_MODEL", "gemini-2.5-flash"),
        description="Model to use",
    )
    thinking_budget: int = Field(
        default_factory=lambda: int(os.getenv("THINKING_BUDGET", "4096")),
        ge=0,
        le=24576,
        description="Reasoning token budget",
    )
    report_language: str = Field(
        default_factory=lambda: os.getenv("REPORT_LANGUAGE", "Russian"),
        min_length=1,
        description="Language of the agent's reports",
    )

    @field_validator("api_key")
    @classmethod
    def validate_api_key(cls, v: str) -> str:
        """Validate that API key is provided and non-empty."""
        if not v or not v.strip():
            raise ValueError("API key required. Set GOOGLE_API_KEY or GEMINI_API_KEY in .env")
        return v.strip()


def get_agent_config() -> AgentConfig:
    """Create agent configuration from environment.

    Returns:
        Configured AgentConfig instance.

    Raises:
        ValueError: If no API key is set.
    """
    return AgentConfig()
