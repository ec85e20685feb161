"""
Smoke test script for the Screenshot Service
Run this after starting the service to check it against a live website

Checks:
- GET /health and /status/detailed
- POST /screenshot-test (URL cleaning only)
- POST /screenshot twice for the same URL and compares image sizes
"""

import base64
import sys
from pathlib import Path

import requests

# Configuration
BASE_URL = "http://localhost:8000"
TEST_URL = sys.argv[1] if len(sys.argv) > 1 else "example.com"
SIZE_TOLERANCE = 0.10  # Rendering is not byte-for-byte deterministic


def test_health_check():
    """Test the basic health check endpoint"""
    print("🔍 Testing health check...")
    response = requests.get(f"{BASE_URL}/health")
    print(f"Status: {response.status_code}")
    print(f"Response: {response.json()}\n")
    return response.status_code == 200


def test_detailed_status():
    """Test the detailed status endpoint"""
    print("🔍 Testing detailed status endpoint...")
    response = requests.get(f"{BASE_URL}/status/detailed")
    print(f"Status: {response.status_code}")

    if response.status_code == 200:
        data = response.json()
        print(f"Overall Status: {data.get('overall_status', 'unknown')}")
        print(f"  Capture enabled: {data.get('capture_enabled')}")
        print(f"  Browser: {data.get('browser', {}).get('status', 'unknown')}\n")
    else:
        print(f"Response: {response.text}\n")

    return response.status_code == 200


def test_url_cleaning():
    """Test URL cleaning without a capture"""
    print(f"🔍 Testing URL cleaning: {TEST_URL}")
    response = requests.post(f"{BASE_URL}/screenshot-test", json={"url": TEST_URL})
    print(f"Status: {response.status_code}")
    print(f"Response: {response.json()}\n")
    return response.status_code == 200


def capture(full_page: bool = True) -> dict:
    response = requests.post(
        f"{BASE_URL}/screenshot",
        json={"url": TEST_URL, "fullPage": full_page},
        timeout=120,
    )
    if response.status_code != 200:
        print(f"❌ Error: {response.status_code}")
        print(response.text)
        return {}
    return response.json()


def test_repeated_capture():
    """Capture the same URL twice and compare encoded sizes"""
    print(f"🔍 Capturing {TEST_URL} twice (this may take 10-20 seconds each)...")

    first = capture()
    second = capture()
    if not first or not second:
        return False

    first_size = len(first["imageData"])
    second_size = len(second["imageData"])
    drift = abs(first_size - second_size) / max(first_size, second_size)
    print(f"  Sizes: {first['size']} / {second['size']} (drift {drift:.1%})")

    screenshot_path = Path("smoke_screenshot.png")
    encoded = first["imageData"].split(",", 1)[1]
    screenshot_path.write_bytes(base64.b64decode(encoded))
    print(f"📸 Screenshot saved to: {screenshot_path.absolute()}\n")

    return drift <= SIZE_TOLERANCE


if __name__ == "__main__":
    print("🚀 Screenshot Service Smoke Test\n")
    print("=" * 60)

    try:
        checks = [
            ("Health check", test_health_check),
            ("Detailed status", test_detailed_status),
            ("URL cleaning", test_url_cleaning),
            ("Repeated capture", test_repeated_capture),
        ]
        failed = 0
        for name, check in checks:
            if check():
                print(f"✅ {name} passed!\n")
            else:
                print(f"❌ {name} failed\n")
                failed += 1

        print("=" * 60)
        sys.exit(1 if failed else 0)

    except requests.exceptions.ConnectionError:
        print(f"\n❌ Could not connect to {BASE_URL}")
        print("Make sure the service is running: python3 main.py")
        sys.exit(1)
