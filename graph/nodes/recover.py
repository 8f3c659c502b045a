from graph.state import GenerationState
from prompts.registry import get_kind
from tools.recovery import Fallback, recover, recovered_value
from loguru import logger

RAW_PREVIEW_CHARS = 200

def recover_content(state: GenerationState) -> GenerationState:
    """Coerce the raw model reply into an object, falling back to the kind's default."""
    kind = get_kind(state["kind"])
    raw_text = state.get("raw_text") or ""

    result = recover(raw_text, kind.fallback(raw_text, state.get("request", {})))
    if isinstance(result, Fallback):
        logger.warning(f"Could not parse {kind.name} response, using fallback: {raw_text[:RAW_PREVIEW_CHARS]!r}")
        state["recovery"] = "fallback"
    else:
        state["recovery"] = "parsed"

    state["content"] = recovered_value(result)
    return state
