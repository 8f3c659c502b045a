from graph.state import GenerationState
from prompts.registry import get_kind
from pydantic import ValidationError
from loguru import logger

def validate(state: GenerationState) -> GenerationState:
    """Check a parsed object against the kind's response schema."""
    if state.get("recovery") != "parsed":
        return state

    kind = get_kind(state["kind"])
    try:
        kind.schema.model_validate(state["content"])
    except ValidationError as e:
        error_msg = f"{kind.name} response failed validation: {e.error_count()} error(s)"
        logger.warning(f"{error_msg}\n{e}")
        state.setdefault("errors", []).append(error_msg)
        raw_text = state.get("raw_text") or ""
        state["content"] = kind.fallback(raw_text, state.get("request", {}))
        state["recovery"] = "fallback"

    return state
