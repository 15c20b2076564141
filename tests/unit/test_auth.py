"""Unit tests for shared-secret authentication."""

import pytest

from gallery_gateway.core.errors import AuthInvalidError, AuthMissingError
from gallery_gateway.core.gallery.auth import Authenticator, extract_token


class TestExtractToken:
    """Tests for header selection and Bearer stripping."""

    def test_prefers_custom_header(self):
        assert extract_token("custom", "Bearer standard") == "custom"

    def test_falls_back_to_authorization(self):
        assert extract_token(None, "Bearer abc") == "abc"

    def test_bearer_prefix_is_case_insensitive(self):
        assert extract_token(None, "bEaReR   abc  ") == "abc"

    def test_bearer_prefix_accepted_on_custom_header(self):
        assert extract_token("Bearer abc", None) == "abc"

    def test_no_headers(self):
        assert extract_token(None, None) is None
        assert extract_token("", "") is None


class TestAuthenticator:
    """Tests for the allow/deny decision."""

    def test_disabled_without_secret(self):
        """No configured secret allows every request."""
        auth = Authenticator(secret=None)
        assert not auth.enabled
        auth.check()
        auth.check(x_pt_auth="anything")

    def test_empty_secret_disables_auth(self):
        Authenticator(secret="").check()

    def test_correct_bearer_token_allowed(self):
        Authenticator(secret="s3cret").check(authorization="Bearer s3cret")

    def test_correct_custom_header_allowed(self):
        Authenticator(secret="s3cret").check(x_pt_auth="s3cret")

    def test_missing_header_is_401(self):
        with pytest.raises(AuthMissingError) as exc_info:
            Authenticator(secret="s3cret").check()
        assert exc_info.value.status_code == 401

    def test_wrong_token_is_403(self):
        with pytest.raises(AuthInvalidError) as exc_info:
            Authenticator(secret="s3cret").check(authorization="Bearer nope")
        assert exc_info.value.status_code == 403

    def test_custom_header_wins_even_when_wrong(self):
        """X-PT-Auth is checked first; a correct Authorization doesn't rescue it."""
        with pytest.raises(AuthInvalidError):
            Authenticator(secret="s3cret").check(
                x_pt_auth="wrong", authorization="Bearer s3cret"
            )
