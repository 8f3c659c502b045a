from graph.state import GenerationState
from prompts.registry import get_kind
from tools.documents import get_document_store
from loguru import logger

def persist(state: GenerationState) -> GenerationState:
    """Store the generated content when the kind has a collection and saving was requested."""
    kind = get_kind(state["kind"])
    if not state.get("persist") or not kind.collection or kind.document is None:
        return state

    document = kind.document(state["content"], state.get("request", {}), state["user"])
    saved = get_document_store().insert(kind.collection, document)
    state["document"] = saved
    state["document_id"] = saved["id"]

    logger.info(f"Stored {kind.name} in {kind.collection}: {saved['id']}")
    return state
