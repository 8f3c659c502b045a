#!/usr/bin/env python3
"""
Simple test script to verify a running AI Business Toolkit API.

Needs JWT_SECRET set to the server's secret so a test token can be signed.
"""

import time
import sys
import os
import uuid

import jwt
import requests

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

def auth_headers():
    """Sign a short-lived token for a throwaway smoke-test user."""
    token = jwt.encode(
        {"userId": f"smoke-{uuid.uuid4().hex[:8]}", "email": "smoke@example.com", "name": "Smoke Test"},
        os.getenv("JWT_SECRET", "dev-secret"),
        algorithm="HS256"
    )
    return {"Authorization": f"Bearer {token}"}

def test_health_endpoint(base_url="http://localhost:5001"):
    """Test the health check endpoint."""
    try:
        response = requests.get(f"{base_url}/api/health", timeout=10)
        if response.status_code == 200:
            data = response.json()
            print(f"✅ Health check passed: {data}")
            return True
        else:
            print(f"❌ Health check failed: {response.status_code}")
            return False
    except requests.exceptions.RequestException as e:
        print(f"❌ Health check error: {e}")
        return False

def test_business_profile(base_url, headers):
    """Test saving the business profile other features depend on."""
    profile = {
        "business_name": "Smoke Test Bakery",
        "industry": "Food & Beverage",
        "description": "Artisan bread and pastries",
        "key_services": ["Bread", "Cakes"],
        "email": "hello@example.com"
    }

    try:
        response = requests.put(f"{base_url}/api/business/profile", json=profile, headers=headers, timeout=10)
        if response.status_code == 200:
            print("✅ Business profile saved")
            return True
        else:
            print(f"❌ Business profile failed: {response.status_code}")
            print(f"Response: {response.text}")
            return False
    except requests.exceptions.RequestException as e:
        print(f"❌ Business profile error: {e}")
        return False

def test_duplicate_lead(base_url, headers):
    """Test that a second lead with the same email is rejected."""
    sample_lead = {
        "email": "duplicate.test@example.com",
        "first_name": "Duplicate",
        "company": "Duplicate Test Corp"
    }

    try:
        # First request
        response1 = requests.post(f"{base_url}/api/leads", json=sample_lead, headers=headers, timeout=10)

        if response1.status_code != 201:
            print(f"❌ First lead request failed: {response1.status_code}")
            return False

        # Second request (should be rejected)
        response2 = requests.post(f"{base_url}/api/leads", json=sample_lead, headers=headers, timeout=10)

        if response2.status_code == 400:
            print("✅ Duplicate lead test passed - email uniqueness enforced")
            return True
        else:
            print(f"❌ Duplicate lead not properly handled: {response2.status_code} {response2.text}")
            return False

    except requests.exceptions.RequestException as e:
        print(f"❌ Duplicate lead test error: {e}")
        return False

def test_website_generation(base_url, headers):
    """Test website generation end to end (mock LLM mode yields fallback content)."""
    payload = {
        "business_info": {
            "name": "Smoke Test Bakery",
            "industry": "Food & Beverage",
            "description": "Artisan bread and pastries",
            "key_services": ["Bread", "Cakes"]
        }
    }

    try:
        response = requests.post(f"{base_url}/api/websites/generate", json=payload, headers=headers, timeout=120)

        if response.status_code == 201:
            website = response.json()["website"]
            print(f"✅ Website generated: {website['content']['hero'].get('headline')}")
            return True
        else:
            print(f"❌ Website generation failed: {response.status_code}")
            print(f"Response: {response.text}")
            return False

    except requests.exceptions.RequestException as e:
        print(f"❌ Website generation error: {e}")
        return False

def test_chatbot_message(base_url, headers):
    """Test a chatbot round trip and its stored history."""
    session_id = f"smoke_{int(time.time())}"

    try:
        response = requests.post(
            f"{base_url}/api/chatbot/message",
            json={"message": "What are your opening hours?", "session_id": session_id},
            headers=headers,
            timeout=60
        )
        if response.status_code != 200:
            print(f"❌ Chatbot message failed: {response.status_code}")
            return False

        history = requests.get(f"{base_url}/api/chatbot/history/{session_id}", headers=headers, timeout=10).json()
        print(f"✅ Chatbot replied, {history['total_messages']} message(s) stored")
        return True

    except requests.exceptions.RequestException as e:
        print(f"❌ Chatbot test error: {e}")
        return False

def main():
    """Run all tests."""
    print("🚀 Testing AI Business Toolkit API")
    print("=" * 50)

    base_url = os.getenv("BASE_URL", "http://localhost:5001")
    headers = auth_headers()

    # Wait for app to start
    print("⏳ Waiting for application to start...")
    time.sleep(5)

    tests = [
        ("Health Check", lambda: test_health_endpoint(base_url)),
        ("Business Profile", lambda: test_business_profile(base_url, headers)),
        ("Duplicate Lead", lambda: test_duplicate_lead(base_url, headers)),
        ("Website Generation", lambda: test_website_generation(base_url, headers)),
        ("Chatbot Message", lambda: test_chatbot_message(base_url, headers))
    ]

    passed = 0
    total = len(tests)

    for test_name, test_func in tests:
        print(f"\n🧪 Running {test_name}...")
        if test_func():
            passed += 1
        else:
            print(f"❌ {test_name} failed")

    print("\n" + "=" * 50)
    print(f"📊 Test Results: {passed}/{total} tests passed")

    if passed == total:
        print("🎉 All tests passed! Application is working correctly.")
        return 0
    else:
        print("⚠️  Some tests failed. Check the application logs for details.")
        return 1

if __name__ == "__main__":
    sys.exit(main())
