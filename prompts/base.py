from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Type

from pydantic import BaseModel

PromptBuilder = Callable[[Dict[str, Any]], str]
FallbackBuilder = Callable[[str, Dict[str, Any]], Dict[str, Any]]
DocumentBuilder = Callable[[Dict[str, Any], Dict[str, Any], Dict[str, Any]], Dict[str, Any]]


@dataclass(frozen=True)
class GenerationKind:
    """Prompt/response contract for one kind of AI generation."""
    name: str
    build: PromptBuilder
    fallback: FallbackBuilder
    schema: Type[BaseModel]
    temperature: float = 0.7
    max_tokens: int = 2000
    collection: Optional[str] = None
    document: Optional[DocumentBuilder] = None


def or_default(value: Any, default: str) -> Any:
    return value if value else default


def bullet_list(items: List[str]) -> str:
    return "\n".join(f"- {item}" for item in items)


def joined(items: Optional[List[str]], default: str = "Not specified") -> str:
    return ", ".join(items) if items else default
