import pytest
import json
import os
import sys
from unittest.mock import patch

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from graph.nodes.build import build_prompt
from graph.nodes.invoke import invoke
from graph.nodes.recover import recover_content
from graph.nodes.validate import validate
from graph.nodes.persist import persist
from graph.workflow import run_generation
from tools.documents import DocumentStore
from tools.llm import ModelInvocationError

class TestGenerationFlow:
    """Test the prompt -> model -> recovery -> storage workflow."""

    def setup_method(self):
        """Set up test fixtures."""
        self.user = {"id": "user-1", "email": "owner@bakery.com", "name": "Owner"}
        self.request = {
            "business_info": {
                "name": "Sunrise Bakery",
                "industry": "Food & Beverage",
                "description": "Artisan bread and pastries",
                "key_services": ["Bread", "Cakes"]
            },
            "preferences": {"template": "modern"}
        }
        self.website_reply = json.dumps({
            "hero": {"headline": "Fresh Every Morning", "subheadline": "Baked daily", "ctaText": "Order"},
            "about": {"title": "About Us", "content": "Family owned since 1990"},
            "services": [{"title": "Bread", "description": "Sourdough", "icon": "bread"}],
            "seo": {"title": "Sunrise Bakery", "description": "Bakery", "keywords": ["bakery"]}
        })

        self.initial_state = {
            "kind": "website",
            "request": self.request,
            "user": self.user,
            "persist": False,
            "document": None,
            "document_id": None,
            "invoke_error": None,
            "errors": []
        }

        with patch('tools.documents.connect_redis', return_value=None):
            self.store = DocumentStore()

    def test_build_prompt_node(self):
        """Test the build node renders the prompt and sampling parameters."""
        state = build_prompt(self.initial_state.copy())

        assert "Sunrise Bakery" in state["prompt"]
        assert state["temperature"] == 0.7
        assert state["max_tokens"] == 2048

    def test_invoke_node(self):
        """Test the invoke node keeps the raw reply."""
        state = build_prompt(self.initial_state.copy())

        with patch('tools.llm.complete') as mock_complete:
            mock_complete.return_value = self.website_reply

            result = invoke(state)

            assert result["raw_text"] == self.website_reply
            assert result["invoke_error"] is None
            mock_complete.assert_called_once_with(state["prompt"], temperature=0.7, max_tokens=2048)

    def test_invoke_node_failure(self):
        """Test the invoke node records provider failures."""
        state = build_prompt(self.initial_state.copy())

        with patch('tools.llm.complete') as mock_complete:
            mock_complete.side_effect = ModelInvocationError("503 Service Unavailable")

            result = invoke(state)

            assert result["invoke_error"] == "503 Service Unavailable"
            assert "Model invocation failed" in result["errors"][0]
            assert "raw_text" not in result

    def test_recover_node_parsed(self):
        """Test the recover node parses a fenced reply."""
        state = self.initial_state.copy()
        state["raw_text"] = f"```json\n{self.website_reply}\n```"

        result = recover_content(state)

        assert result["recovery"] == "parsed"
        assert result["content"]["hero"]["headline"] == "Fresh Every Morning"

    def test_recover_node_fallback(self):
        """Test the recover node builds the kind's fallback from the request."""
        state = self.initial_state.copy()
        state["raw_text"] = "I'm sorry, I can't help with that."

        result = recover_content(state)

        assert result["recovery"] == "fallback"
        assert result["content"]["hero"]["headline"] == "Welcome to Sunrise Bakery"
        assert [s["title"] for s in result["content"]["services"]] == ["Bread", "Cakes"]

    def test_validate_node_rejects_missing_fields(self):
        """Test a parsed object missing required fields is replaced by the fallback."""
        state = self.initial_state.copy()
        state["raw_text"] = '{"about": {"title": "About"}}'
        state["recovery"] = "parsed"
        state["content"] = {"about": {"title": "About"}}

        result = validate(state)

        assert result["recovery"] == "fallback"
        assert result["content"]["hero"]["headline"] == "Welcome to Sunrise Bakery"
        assert "failed validation" in result["errors"][0]

    def test_validate_node_skips_fallback(self):
        """Test fallback content is not validated again."""
        state = self.initial_state.copy()
        state["recovery"] = "fallback"
        state["content"] = {"anything": True}

        result = validate(state)

        assert result["content"] == {"anything": True}
        assert result["errors"] == []

    def test_persist_node(self):
        """Test the persist node stores the document when requested."""
        state = self.initial_state.copy()
        state["persist"] = True
        state["content"] = json.loads(self.website_reply)

        with patch('graph.nodes.persist.get_document_store', return_value=self.store):
            result = persist(state)

        assert result["document_id"]
        stored = self.store.get("websites", result["document_id"], "user-1")
        assert stored["status"] == "draft"
        assert stored["domain"]["subdomain"] == "sunrise-bakery"
        assert stored["seo"]["title"] == "Sunrise Bakery"

    def test_persist_node_not_requested(self):
        """Test nothing is stored unless persistence was requested."""
        state = self.initial_state.copy()
        state["content"] = json.loads(self.website_reply)

        with patch('graph.nodes.persist.get_document_store', return_value=self.store):
            result = persist(state)

        assert result["document_id"] is None
        assert self.store.find("websites") == []

    def test_complete_workflow_parsed(self):
        """Test a full run with a valid reply stores the generated website."""
        with patch('tools.llm.complete') as mock_complete, \
             patch('graph.nodes.persist.get_document_store', return_value=self.store):

            mock_complete.return_value = f"Here you go:\n```json\n{self.website_reply}\n```"

            state = run_generation("website", self.request, self.user, persist=True)

            assert state["recovery"] == "parsed"
            assert state["content"]["hero"]["headline"] == "Fresh Every Morning"
            assert state["document"]["content"] == state["content"]
            assert self.store.get("websites", state["document_id"])["user_id"] == "user-1"

    def test_complete_workflow_fallback(self):
        """Test a full run with an unparseable reply still produces content."""
        with patch('tools.llm.complete') as mock_complete:
            mock_complete.return_value = "not json at all"

            state = run_generation("email_campaign", {"campaign_type": "promotional"}, self.user)

            assert state["recovery"] == "fallback"
            assert state["content"]["subject"] == "AI-Generated Campaign"
            assert "not json at all" in state["content"]["html"]
            assert state.get("document_id") is None

    def test_complete_workflow_invalid_structure(self):
        """Test a parseable reply with the wrong shape falls back structurally."""
        with patch('tools.llm.complete') as mock_complete:
            mock_complete.return_value = '{"faqs": [{"question": "Open on Sunday?"}]}'

            state = run_generation("faq", {"business_info": {"name": "Sunrise Bakery"}}, self.user)

            assert state["recovery"] == "fallback"
            assert state["content"]["faqs"] == []
            assert state["content"]["rawResponse"] == '{"faqs": [{"question": "Open on Sunday?"}]}'
            assert len(state["errors"]) == 1

    def test_complete_workflow_model_failure(self):
        """Test a provider failure ends the run before recovery and storage."""
        with patch('tools.llm.complete') as mock_complete, \
             patch('graph.nodes.persist.get_document_store', return_value=self.store):

            mock_complete.side_effect = ModelInvocationError("timeout")

            state = run_generation("website", self.request, self.user, persist=True)

            assert state["invoke_error"] == "timeout"
            assert state.get("content") is None
            assert state.get("document_id") is None
            assert self.store.find("websites") == []

    def test_unknown_kind(self):
        """Test an unregistered kind is rejected."""
        with pytest.raises(KeyError):
            build_prompt({"kind": "poetry", "request": {}, "user": self.user})

if __name__ == "__main__":
    # Run tests
    pytest.main([__file__, "-v"])
