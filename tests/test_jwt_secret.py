"""
tests/test_jwt_secret — Admin JWT Secret Validation
====================================================
Admin endpoints must refuse to verify tokens when JWT_SECRET is missing,
blank, too short, or a known weak default.  The rest of the API keeps
working without one.
"""

from __future__ import annotations

import os
from unittest.mock import patch

import pytest

from slackstats.api.deps import load_jwt_secret


class TestJWTSecretValidation:
    def test_rejects_missing_secret(self):
        with patch.dict(os.environ, {}, clear=False):
            os.environ.pop("JWT_SECRET", None)
            with pytest.raises(RuntimeError, match="JWT_SECRET environment variable is not set"):
                load_jwt_secret()

    def test_rejects_empty_secret(self):
        with patch.dict(os.environ, {"JWT_SECRET": ""}):
            with pytest.raises(RuntimeError, match="JWT_SECRET environment variable is not set"):
                load_jwt_secret()

    @pytest.mark.parametrize("weak", ["slackstats-dev-secret-change-me", "change-me"])
    def test_rejects_known_weak_default(self, weak):
        with patch.dict(os.environ, {"JWT_SECRET": weak}):
            with pytest.raises(RuntimeError, match="known weak default"):
                load_jwt_secret()

    def test_rejects_short_secret(self):
        with patch.dict(os.environ, {"JWT_SECRET": "tooshort"}):
            with pytest.raises(RuntimeError, match="too short"):
                load_jwt_secret()

    def test_accepts_strong_secret(self):
        good_secret = "a" * 64
        with patch.dict(os.environ, {"JWT_SECRET": good_secret}):
            assert load_jwt_secret() == good_secret
