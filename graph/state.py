from typing import TypedDict, Optional, List, Dict, Any

class GenerationState(TypedDict, total=False):
    """State shape for the AI generation workflow."""
    kind: str                        # registry name, e.g. "email_campaign"
    request: Dict[str, Any]          # validated request body
    user: Dict[str, Any]             # authenticated user {id, email, name}
    persist: bool
    prompt: str
    temperature: float
    max_tokens: int
    raw_text: str                    # model reply as received
    recovery: str                    # "parsed" | "fallback"
    content: Dict[str, Any]          # recovered (and validated) object
    document: Optional[Dict[str, Any]]
    document_id: Optional[str]
    invoke_error: Optional[str]
    errors: List[str]
