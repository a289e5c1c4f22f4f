from typing import Optional

from pydantic import BaseModel


class LLMConfig(BaseModel):
    """Standard configuration for any LLM instance."""

    model: str
    model_provider: Optional[str] = None
    temperature: float = 0.0
    streaming: Optional[bool] = None  # unset lets the provider decide
    max_tokens: Optional[int] = None
