VALID_TOKEN = "valid-token"
TEST_USER_ID = "user-1234567890"


def assert_error_response(response, status_code, error):
    """Assert an error response carries the expected status and error code."""
    assert response.status_code == status_code, f"Expected {status_code}, got {response.status_code}: {response.text}"
    payload = response.json()
    assert payload.get("error") == error, f"Expected error '{error}' in {payload}"
    return payload


def assert_title_shape(title, max_words=5):
    """Assert a title has 1..max_words non-empty whitespace-separated tokens."""
    words = title.split()
    assert 1 <= len(words) <= max_words, f"Title '{title}' has {len(words)} words"
    assert all(words), f"Title '{title}' contains empty tokens"
