"""
Tests for the Python source reader.
"""

from __future__ import annotations

import pytest

from controllers_to_sdk.pipeline.errors import SdkFormatError

ANNOTATIONS = """
from datetime import datetime
from typing import Annotated, Any, Awaitable, Literal, Optional, Union
from uuid import UUID

from decorators import Controller


class Item:
    name: str


@Controller()
class Things:
    def string(self) -> str: ...
    def number(self) -> int: ...
    def boolean(self) -> bool: ...
    def nothing(self) -> None: ...
    def unannotated(self): ...
    def optional(self) -> Optional[int]: ...
    def pipe_union(self) -> int | None: ...
    def union_with_any(self) -> Union[str, Any]: ...
    def array(self) -> list[str]: ...
    def array_of_union(self) -> list[int | str]: ...
    def unique(self) -> set[str]: ...
    def mapping(self) -> dict[str, int]: ...
    def pair(self) -> tuple[int, str]: ...
    def variadic(self) -> tuple[int, ...]: ...
    def literal(self) -> Literal["a", 1, True]: ...
    def timestamp(self) -> datetime: ...
    def identifier(self) -> UUID: ...
    def awaitable(self) -> Awaitable[int]: ...
    async def coroutine(self) -> int: ...
    def annotated(self) -> Annotated[int, "meta"]: ...
    def forward(self) -> "Item": ...
    def items(self) -> list[Item]: ...
"""


@pytest.fixture
def things(make_api):
    source = make_api({"things.py": ANNOTATIONS})
    (things_class,) = [node for node in source.classes_in_file("things.py") if node.name == "Things"]
    return source, {method.name: method.return_type_text for method in things_class.methods}


class TestAnnotationRendering:
    """Test cases for Python annotation to TypeScript rendering"""

    @pytest.mark.parametrize(
        "method,expected",
        [
            ("string", "string"),
            ("number", "number"),
            ("boolean", "boolean"),
            ("nothing", "void"),
            ("unannotated", "any"),
            ("optional", "number | null"),
            ("pipe_union", "number | null"),
            ("union_with_any", "any"),
            ("array", "string[]"),
            ("array_of_union", "(number | string)[]"),
            ("unique", "string[]"),
            ("mapping", "Record<string, number>"),
            ("pair", "[number, string]"),
            ("variadic", "number[]"),
            ("literal", '"a" | 1 | true'),
            ("timestamp", "string"),
            ("identifier", "string"),
            ("awaitable", "Promise<number>"),
            ("coroutine", "Promise<number>"),
            ("annotated", "number"),
        ],
    )
    def test_builtin_types(self, things, method, expected):
        _, return_types = things
        assert return_types[method] == expected

    def test_project_types_are_qualified(self, things):
        source, return_types = things
        qualifier = f'import("{(source.root / "things").as_posix()}").Item'
        assert return_types["forward"] == qualifier
        assert return_types["items"] == f"{qualifier}[]"

    def test_type_overrides(self, make_api):
        source = make_api(
            {
                "money.py": """
                from decorators import Controller, Get

                @Controller()
                class Prices:
                    def price(self) -> Money: ...
                """
            },
            type_overrides={"Money": "string"},
        )
        (prices,) = source.classes_in_file("money.py")
        assert prices.methods[0].return_type_text == "string"


class TestClassesAndMarkers:
    """Test cases for class, method and marker extraction"""

    def test_sample_controller(self, sample_source):
        (controller,) = sample_source.classes_in_file("users/users_controller.py")
        assert controller.name == "UsersController"
        assert controller.file_path == "users/users_controller.py"

        decorator = controller.get_decorator("Controller")
        assert decorator.is_called
        assert decorator.args[0].value == "users"
        assert [method.name for method in controller.methods] == [
            "list_all",
            "search",
            "get",
            "create",
            "rename",
            "remove",
            "audit",
        ]

    def test_markers_from_annotated_and_default(self, sample_source):
        (controller,) = sample_source.classes_in_file("users/users_controller.py")
        methods = {method.name: method for method in controller.methods}

        (id_param,) = methods["get"].params
        assert id_param.name == "id"
        assert id_param.type_text == "string"
        assert [(dec.name, dec.args[0].value) for dec in id_param.decorators] == [("Param", "id")]

        (dto,) = methods["create"].params
        assert dto.decorators[0].name == "Body"
        assert dto.decorators[0].is_called
        assert dto.decorators[0].args == ()
        assert dto.is_object
        assert dto.properties == ("name", "email")

        (removed_id,) = methods["remove"].params
        assert removed_id.decorators[0].name == "Param"
        assert not removed_id.is_object

    def test_object_shape_includes_inherited_fields(self, sample_source):
        (controller,) = sample_source.classes_in_file("users/users_controller.py")
        audit = next(method for method in controller.methods if method.name == "audit")
        (user,) = audit.params
        assert user.is_object
        assert user.properties == ("created_at", "id", "name", "role", "email")
        assert user.decorators == ()

    def test_resolve_class_through_imports(self, sample_source):
        controller = sample_source.resolve_class("app_module.py", "UsersController")
        assert controller is not None
        assert controller.file_path == "users/users_controller.py"
        assert sample_source.resolve_class("app_module.py", "Missing") is None

    def test_module_decorator_lists_controllers(self, sample_source):
        (module,) = sample_source.classes_in_file("app_module.py")
        controllers = module.get_decorator("Module").kwargs["controllers"]
        assert controllers.names == ("UsersController", "PostsController")

    def test_list_files(self, sample_source):
        files = sample_source.list_files()
        assert "app_module.py" in files
        assert "users/users_controller.py" in files
        assert all(not path.startswith("..") for path in files)

    def test_syntax_error_is_reported(self, make_api):
        source = make_api({"broken.py": "class Broken(:\n"})
        with pytest.raises(SdkFormatError, match="Failed to parse source file"):
            source.classes_in_file("broken.py")


class TestDeclarations:
    """Test cases for type declarations"""

    def test_interface_with_inherited_and_optional_fields(self, sample_source):
        declaration = sample_source.find_declaration("dtos/user", "User")
        role = f'import("{(sample_source.root / "dtos" / "user").as_posix()}").Role'
        assert declaration.kind == "interface"
        assert declaration.file_path == "dtos/user.py"
        assert declaration.body_text == (
            "{\n"
            "  created_at: string;\n"
            "  id: string;\n"
            "  name: string;\n"
            f"  role: {role};\n"
            "  email?: string | null;\n"
            "}"
        )

    def test_enum(self, sample_source):
        declaration = sample_source.find_declaration("dtos/user", "Role")
        assert declaration.kind == "enum"
        assert declaration.body_text == '{\n  ADMIN = "admin",\n  MEMBER = "member",\n}'

    def test_generic_interface(self, sample_source):
        declaration = sample_source.find_declaration("dtos/common", "Paginated")
        assert declaration.type_params == ("T",)
        assert declaration.body_text == "{\n  items: T[];\n  total: number;\n}"

    def test_declaration_outside_root(self, sample_source):
        declaration = sample_source.find_declaration("../shared/money", "Money")
        assert declaration.file_path == "../shared/money.py"
        assert declaration.body_text == "{\n  amount: number;\n  currency: string;\n}"

    def test_aliases(self, make_api):
        source = make_api(
            {
                "aliases.py": """
                from typing import Literal, NewType, TypeAlias

                UserId = NewType("UserId", str)
                Status = Literal["on", "off"]
                Score: TypeAlias = int | float
                type Pair = tuple[int, int]
                """
            }
        )
        assert source.find_declaration("aliases", "UserId").body_text == "string"
        assert source.find_declaration("aliases", "Status").body_text == '"on" | "off"'
        assert source.find_declaration("aliases", "Score").body_text == "number"
        pair = source.find_declaration("aliases", "Pair")
        assert pair.kind == "alias"
        assert pair.body_text == "[number, number]"

    def test_unknown_declaration(self, sample_source):
        assert sample_source.find_declaration("dtos/user", "Missing") is None
        assert sample_source.find_declaration("dtos/missing", "User") is None


if __name__ == "__main__":
    pytest.main([__file__])
