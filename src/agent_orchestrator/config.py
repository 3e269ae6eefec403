"""
Configuration management for the agent orchestrator.

Uses pydantic-settings for environment variable parsing and validation.
Settings are constructed explicitly by the embedding application and passed
to the agents it creates.
"""

from pydantic import AliasChoices, BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigurationError

SUPPORTED_PROVIDERS = ("openai", "anthropic", "openrouter", "ollama")


class LLMConfig(BaseModel):
    """Configuration for a single LLM provider."""

    provider: str = "openai"
    model: str = "gpt-4"
    api_key: str = ""
    base_url: str | None = None
    max_tokens: int = 2000
    temperature: float = 0.7


class MemoryConfig(BaseModel):
    """Per-agent memory options."""

    enabled: bool = False  # registers the remember/recall tools
    short_term_max_items: int = Field(default=50, ge=1)


class AgentConfig(BaseModel):
    """Everything needed to construct an Agent."""

    name: str = Field(min_length=1)
    description: str = ""
    llm: LLMConfig = Field(default_factory=LLMConfig)
    system_prompt: str | None = None
    max_iterations: int = Field(default=10, ge=1)
    tools: list[str] = Field(default_factory=list)
    memory: MemoryConfig = Field(default_factory=MemoryConfig)


class Settings(BaseSettings):
    """Process-level settings read from the environment and .env."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Logging
    log_level: str = "INFO"
    log_json: bool = False

    # LLM Providers (API Keys)
    openai_api_key: str = Field(default="", description="OpenAI API key")
    anthropic_api_key: str = Field(default="", description="Anthropic API key")
    openrouter_api_key: str = Field(default="", description="OpenRouter API key")
    ollama_base_url: str = Field(default="http://localhost:11434", description="Ollama server URL")

    # Default model settings
    default_llm_provider: str = "openai"
    default_model: str = ""
    openrouter_model: str = "google/gemini-2.0-flash-exp:free"
    ollama_model: str = "llama3.2"
    default_temperature: float = 0.7
    default_max_tokens: int = 2000

    # Tools
    tavily_api_key: str = Field(default="", description="Tavily API key for web search")

    # Agents
    agents_dir: str = Field(default="agents", description="Directory holding agent YAML files")
    max_iterations: int = Field(default=10, ge=1)
    short_term_max_items: int = Field(default=50, ge=1)

    # LangSmith tracing
    langchain_api_key: str = Field(
        default="",
        validation_alias=AliasChoices("LANGCHAIN_API_KEY", "LANGSMITH_API_KEY"),
    )
    langchain_tracing_v2: bool = False
    langchain_project: str = "AgentFramework"
    langchain_endpoint: str = "https://api.smith.langchain.com"

    @field_validator("default_llm_provider", mode="before")
    @classmethod
    def normalize_provider(cls, v: str) -> str:
        return v.strip().lower() if v else "openai"

    def get_llm_config(self, provider: str | None = None) -> LLMConfig:
        """Get LLM configuration for a provider.

        Raises ConfigurationError for an unknown provider or a missing API key.
        """
        provider = provider or self.default_llm_provider

        if provider not in SUPPORTED_PROVIDERS:
            raise ConfigurationError(f"LLM provider '{provider}' not configured")

        api_key_map = {
            "openai": self.openai_api_key,
            "anthropic": self.anthropic_api_key,
            "openrouter": self.openrouter_api_key,
            "ollama": "",
        }

        model_map = {
            "openai": self.default_model or "gpt-4",
            "anthropic": self.default_model or "claude-3-opus-20240229",
            "openrouter": self.openrouter_model,
            "ollama": self.ollama_model,
        }

        max_tokens_map = {
            "openrouter": 8192,
        }

        api_key = api_key_map[provider]
        if not api_key and provider != "ollama":
            raise ConfigurationError(
                f"API key not found for provider '{provider}'. "
                f"Set {provider.upper()}_API_KEY in the environment."
            )

        return LLMConfig(
            provider=provider,
            model=model_map[provider],
            api_key=api_key,
            base_url=self.ollama_base_url if provider == "ollama" else None,
            max_tokens=max_tokens_map.get(provider, self.default_max_tokens),
            temperature=self.default_temperature,
        )
