from graph.state import GenerationState
from tools import llm
from tools.llm import ModelInvocationError
from loguru import logger

def invoke(state: GenerationState) -> GenerationState:
    """Send the prompt to the model and keep its raw reply."""
    try:
        state["raw_text"] = llm.complete(
            state["prompt"],
            temperature=state.get("temperature", 0.7),
            max_tokens=state.get("max_tokens", 2000),
        )
        logger.info(f"Model replied for {state['kind']}: {len(state['raw_text'])} chars")

    except ModelInvocationError as e:
        error_msg = f"Model invocation failed: {str(e)}"
        logger.error(error_msg)
        state["invoke_error"] = str(e)
        state.setdefault("errors", []).append(error_msg)

    return state
