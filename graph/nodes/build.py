from graph.state import GenerationState
from prompts.registry import get_kind
from loguru import logger

def build_prompt(state: GenerationState) -> GenerationState:
    """Render the prompt and sampling parameters for the requested kind."""
    kind = get_kind(state["kind"])
    logger.info(f"Building {kind.name} prompt for user: {state.get('user', {}).get('id', 'unknown')}")

    state["prompt"] = kind.build(state.get("request", {}))
    state["temperature"] = kind.temperature
    state["max_tokens"] = kind.max_tokens
    return state
