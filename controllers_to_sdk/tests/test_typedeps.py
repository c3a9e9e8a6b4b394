"""
Tests for the type dependencies resolver.
"""

from __future__ import annotations

import pytest

from controllers_to_sdk.pipeline.analyzer.typedeps import (
    get_import_resolved_type,
    normalize_external_file_path,
    resolve_type_dependencies,
)
from controllers_to_sdk.pipeline.errors import InternalConsistencyError

SRC = "/home/dev/api"


class TestResolveTypeDependencies:
    """Test cases for resolve_type_dependencies"""

    def test_strips_qualifiers_and_collects_edges(self):
        resolved = resolve_type_dependencies(
            'Promise<import("/home/dev/api/dtos/common").Paginated<import("/home/dev/api/dtos/user").User>>',
            "users/users_controller.py",
            SRC,
        )
        assert resolved.resolved_type == "Promise<Paginated<User>>"
        assert resolved.dependencies == {"dtos/common": ("Paginated",), "dtos/user": ("User",)}
        assert "import(" not in resolved.resolved_type

    def test_dependencies_are_deduplicated(self):
        resolved = resolve_type_dependencies(
            'import("/home/dev/api/dtos/user").User | import("/home/dev/api/dtos/user").User[]',
            "users/users_controller.py",
            SRC,
        )
        assert resolved.dependencies == {"dtos/user": ("User",)}
        assert resolved.resolved_type == "User | User[]"

    def test_single_quoted_qualifier(self):
        resolved = resolve_type_dependencies("import('/home/dev/api/dtos/user').Role", "a.py", SRC)
        assert resolved.resolved_type == "Role"
        assert resolved.dependencies == {"dtos/user": ("Role",)}

    def test_relative_qualifier_passes_through(self):
        resolved = resolve_type_dependencies('import("../shared/money").Money', "a.py", SRC)
        assert resolved.dependencies == {"../shared/money": ("Money",)}

    def test_path_above_root_is_made_relative(self):
        resolved = resolve_type_dependencies('import("/home/dev/shared/money").Money', "a.py", SRC)
        assert resolved.dependencies == {"../shared/money": ("Money",)}

    def test_absolute_origin_path_is_internal_error(self):
        with pytest.raises(InternalConsistencyError):
            resolve_type_dependencies("string", "/home/dev/api/a.py", SRC)

    def test_primitive_type_has_no_dependency(self):
        resolved = resolve_type_dependencies("{ id: string; tags: string[] }", "a.py", SRC)
        assert resolved.dependencies == {}
        assert resolved.local_types == ()

    def test_local_types_lists_bare_identifiers(self):
        resolved = resolve_type_dependencies('Paginated<T> | import("/home/dev/api/x").X', "a.py", SRC)
        assert resolved.local_types == ("Paginated", "T")

    def test_local_types_ignores_property_names_and_strings(self):
        resolved = resolve_type_dependencies('{ kind: "Admin"; owner?: Owner }', "a.py", SRC)
        assert resolved.local_types == ("Owner",)


class TestHelpers:
    """Test cases for the qualifier helpers"""

    def test_get_import_resolved_type(self):
        assert get_import_resolved_type('import("dir/file").TypeName[]') == "TypeName[]"

    @pytest.mark.parametrize(
        "path,expected",
        [
            ("dtos/user", "dtos/user"),
            ("../shared/money", "_external1/shared/money"),
            ("../../lib/types", "_external2/lib/types"),
            ("..\\..\\lib\\types", "_external2/lib/types"),
        ],
    )
    def test_normalize_external_file_path(self, path, expected):
        assert normalize_external_file_path(path) == expected


if __name__ == "__main__":
    pytest.main([__file__])
