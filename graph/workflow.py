from typing import Any, Dict
from langgraph.graph import StateGraph, START, END
from loguru import logger

from graph.state import GenerationState
from graph.nodes.build import build_prompt
from graph.nodes.invoke import invoke
from graph.nodes.recover import recover_content
from graph.nodes.validate import validate
from graph.nodes.persist import persist

def build_workflow():
    """Build the prompt -> model -> recovery -> storage workflow."""
    workflow = StateGraph(GenerationState)

    # Add nodes
    workflow.add_node("build_prompt", build_prompt)
    workflow.add_node("invoke", invoke)
    workflow.add_node("recover", recover_content)
    workflow.add_node("validate", validate)
    workflow.add_node("store", persist)

    # Add edges
    workflow.add_edge(START, "build_prompt")
    workflow.add_edge("build_prompt", "invoke")

    # A failed model call ends the run before anything is recovered or stored
    def after_invoke(state: GenerationState) -> str:
        if state.get("invoke_error"):
            logger.info(f"Stopping {state['kind']} generation after model failure")
            return "failed"
        return "recover"

    workflow.add_conditional_edges(
        "invoke",
        after_invoke,
        {
            "recover": "recover",
            "failed": END
        }
    )

    workflow.add_edge("recover", "validate")
    workflow.add_edge("validate", "store")
    workflow.add_edge("store", END)

    return workflow.compile()

generation_graph = build_workflow()

def run_generation(kind: str, request: Dict[str, Any], user: Dict[str, Any], persist: bool = False) -> GenerationState:
    """
    Run one generation through the workflow.

    Args:
        kind: Registered generation kind name
        request: Request payload the prompt is built from
        user: Authenticated user {id, email, name}
        persist: Store the result when the kind has a collection

    Returns:
        Final workflow state; `invoke_error` is set when the model call failed
    """
    initial_state = {
        "kind": kind,
        "request": request,
        "user": user,
        "persist": persist,
        "document": None,
        "document_id": None,
        "invoke_error": None,
        "errors": []
    }
    logger.info(f"Starting {kind} generation for user: {user.get('id', 'unknown')}")
    return generation_graph.invoke(initial_state)
