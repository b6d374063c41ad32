"""
Manual check against a running server (python app.py).

Verifies that the computation endpoints answer without a CSRF token and that
write endpoints reject requests without one.
"""

import requests
import sys

BASE_URL = "http://localhost:5000"

SAMPLE_PLANT = {
    'name': 'Java Fern',
    'scientificName': 'Microsorum pteropus',
    'humidity': 'Aquatic (100%)',
    'lightRequirements': 'Low to moderate',
    'watering': 'Fully aquatic',
    'substrate': 'Attach to rock or wood, submerged',
    'category': ['aquatic'],
}


def get_csrf_token(session):
    """Fetch a CSRF token from the API."""
    response = session.get(f"{BASE_URL}/csrf-token")
    if response.status_code != 200:
        print(f"Failed to fetch CSRF token. Status: {response.status_code}")
        return None
    return response.json().get('csrf_token')


def verify_api():
    session = requests.Session()

    print("1. Scoring a posted plant without CSRF token (Expect 200)...")
    response = session.post(f"{BASE_URL}/habitat/score", json=SAMPLE_PLANT)
    if response.status_code != 200:
        print(f"FAIL: Expected 200, got {response.status_code}")
        return False
    data = response.json()
    print(f"PASS: results={data['results']}")
    if 'Aquarium' not in data['results']:
        print("FAIL: Expected Aquarium among the results.")
        return False

    print("\n2. Rebuilding the index without CSRF token (Expect 400)...")
    response = session.post(f"{BASE_URL}/plants/rebuild-index")
    if response.status_code == 400:
        print("PASS: Request rejected with 400 Bad Request (CSRF missing).")
    else:
        print(f"FAIL: Expected 400, got {response.status_code}")
        return False

    print("\n3. Rebuilding the index with a valid CSRF token...")
    token = get_csrf_token(session)
    if not token:
        print("FAIL: Could not retrieve CSRF token.")
        return False
    print(f"Got CSRF token: {token[:10]}...")

    response = session.post(f"{BASE_URL}/plants/rebuild-index", headers={'X-CSRFToken': token})
    if response.status_code == 400:
        print(f"FAIL: CSRF token rejected. Status: {response.status_code}")
        return False
    print(f"PASS: CSRF token accepted (Status: {response.status_code}).")

    print("\n4. Listing profiles...")
    response = session.get(f"{BASE_URL}/habitat/profiles")
    names = [p['name'] for p in response.json().get('profiles', [])]
    print(f"Profiles: {', '.join(names)}")
    return response.status_code == 200 and len(names) == 8


if __name__ == "__main__":
    try:
        success = verify_api()
        if not success:
            sys.exit(1)
        print("\nAPI Verification Successful!")
    except requests.exceptions.ConnectionError:
        print("\nERROR: Could not connect to localhost:5000. Is the server running?")
        sys.exit(1)
