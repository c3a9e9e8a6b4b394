"""
Tests for naming utilities.
"""

import pytest

from controllers_to_sdk.utils import camelcase, replace_suffix


class TestUtils:
    """Test cases for naming utilities"""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("UsersController", "usersController"),
            ("users", "users"),
            ("user-profile", "userProfile"),
            ("admin users", "adminUsers"),
            ("snake_case", "snake_case"),
            ("", ""),
        ],
    )
    def test_camelcase(self, text, expected):
        assert camelcase(text) == expected

    @pytest.mark.parametrize(
        "text,add,remove,expected",
        [
            ("UsersController", "", "Controller", "Users"),
            ("UsersController", "Api", "Controller", "UsersApi"),
            ("users", "Api", "Controller", "usersApi"),
            ("users_controller", "", "", "users_controller"),
        ],
    )
    def test_replace_suffix(self, text, add, remove, expected):
        assert replace_suffix(text, add, remove) == expected


if __name__ == "__main__":
    pytest.main([__file__])
