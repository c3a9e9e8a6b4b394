"""
Tests for the plain flavor backend.
"""

from __future__ import annotations

import pytest

from controllers_to_sdk.pipeline.analyzer import SdkAnalyzer
from controllers_to_sdk.pipeline.backends import PlainSdkBackend
from controllers_to_sdk.pipeline.backends.base import merged_args_type, partition_methods
from controllers_to_sdk.pipeline.errors import SdkFormatError


@pytest.fixture
def sdk_content(sample_source):
    return SdkAnalyzer(sample_source).analyze()


@pytest.fixture
def files(sample_api, make_config, sdk_content):
    return PlainSdkBackend(make_config(sample_api)).generate(sdk_content)


class TestPlainBackend:
    """Test cases for the generated plain SDK"""

    def test_generated_files(self, files):
        assert set(files) == {
            "central.ts",
            "index.ts",
            "usersController.ts",
            "postsController.ts",
            "_types/dtos/user.ts",
            "_types/dtos/common.ts",
            "_types/dtos/post.ts",
            "_types/_external1/shared/money.ts",
        }

    def test_method_without_params(self, files):
        """A GET without parameters sends an empty query"""
        users = files["usersController.ts"]
        assert "async list_all(): Promise<User[]> {" in users
        assert "return request('GET', '/users/list', null, {});" in users

    def test_query_object(self, files):
        users = files["usersController.ts"]
        assert "async search(params: UserFilters): Promise<Paginated<User>> {" in users
        assert "const { ...rest } = params;" in users
        assert "return request('GET', '/users/search', null, rest);" in users

    def test_route_param_is_interpolated(self, files):
        users = files["usersController.ts"]
        assert "async get(params: { id: string }): Promise<User> {" in users
        assert "const { id, ...rest } = params;" in users
        assert "return request('GET', `/users/${id}`, null, rest);" in users

    def test_mutation_sends_body(self, files):
        users = files["usersController.ts"]
        assert "async rename(params: { id: string } & { name: string }): Promise<User> {" in users
        assert "return request('PATCH', `/users/${id}`, rest, {});" in users
        assert "async remove(params: { id: string }): Promise<void> {" in users
        assert "return request('DELETE', `/users/${id}`, rest, {});" in users

    def test_queries_precede_mutations(self, files):
        users = files["usersController.ts"]
        assert users.index("queries: {") < users.index("async list_all") < users.index("mutations: {") < users.index("async create")

    def test_controller_header_and_imports(self, files):
        users = files["usersController.ts"]
        assert "/// Parent module: AppModule" in users
        assert '/// Controller: "UsersController" registered as "users" (6 routes)' in users
        assert "/// File Path: users/users_controller.py" in users
        assert 'import { request } from "./central";' in users
        assert 'import type { User, UserFilters, CreateUserDto } from "./_types/dtos/user";' in users
        assert 'import type { Paginated } from "./_types/dtos/common";' in users

    def test_external_types_are_relocated(self, files):
        posts = files["postsController.ts"]
        assert 'import type { Money } from "./_types/_external1/shared/money";' in posts
        assert "async set_price(params: { postId: string } & { price: Money }): Promise<Post> {" in posts
        assert "return request('PUT', `/posts/${postId}/price`, rest, {});" in posts

    def test_keyed_query(self, files):
        posts = files["postsController.ts"]
        assert "async all(params: { page: number; tag: string | null }): Promise<Post[]> {" in posts
        assert "return request('GET', '/posts', null, rest);" in posts

    def test_index_and_central(self, files):
        assert files["index.ts"] == (
            'export { default as usersController } from "./usersController";\n'
            'export { default as postsController } from "./postsController";\n'
        )
        assert files["central.ts"] == 'export { request } from "../../sdk-interface";\n'

    def test_type_files(self, files):
        user = files["_types/dtos/user.ts"]
        assert user.startswith("/// Types from: dtos/user\n")
        assert "export interface User {\n" in user
        assert "  role: Role;\n" in user
        assert "  email?: string | null;\n" in user
        assert 'export enum Role {\n  ADMIN = "admin",\n  MEMBER = "member",\n}' in user

        post = files["_types/dtos/post.ts"]
        assert 'import type { User } from "./user";' in post
        assert 'import type { Money } from "../_external1/shared/money";' in post

        assert "export interface Paginated<T> {\n  items: T[];\n  total: number;\n}" in files["_types/dtos/common.ts"]

    def test_generation_comment(self, sample_api, make_config, sdk_content):
        """The generation comment heads every generated file"""
        comment = "/// Generated by controllers_to_sdk"
        files = PlainSdkBackend(make_config(sample_api), comment).generate(sdk_content)
        assert all(content.startswith(comment + "\n\n") for content in files.values())


class TestNaming:
    """Test cases for the configurable naming rules"""

    def test_suffix_rules(self, sample_api, make_config, sdk_content):
        config = make_config(
            sample_api,
            controller_output={
                "endpoint_group_name": {"remove_suffix": "Controller", "add_suffix": "Api"},
                "file_name": {"remove_suffix": "Controller"},
            },
        )
        files = PlainSdkBackend(config).generate(sdk_content)

        assert "users.ts" in files
        assert 'export { default as usersApi } from "./users";' in files["index.ts"]

    def test_colliding_file_names(self, make_api, make_config):
        controller = """
        from decorators import Controller, Get

        @Controller()
        class ItemsController:
            @Get("/items")
            def items(self) -> list[str]: ...
        """
        module = """
        from decorators import Module
        from a.items import ItemsController as First
        from b.items import ItemsController as Second

        @Module(controllers=[First])
        class FirstModule:
            pass

        @Module(controllers=[Second])
        class SecondModule:
            pass
        """
        source = make_api({"a/items.py": controller, "b/items.py": controller, "app.py": module})
        content = SdkAnalyzer(source).analyze()

        with pytest.raises(SdkFormatError, match="same file name: itemsController"):
            PlainSdkBackend(make_config(source.root)).generate(content)


class TestLiterals:
    """Test cases for routes and keys that need escaping in TypeScript"""

    @pytest.fixture
    def escapes(self, make_api, make_config):
        controller = r"""
        from typing import Annotated
        from decorators import Controller, Get, Param, Query

        @Controller("c")
        class EscapesController:
            @Get("it's\\raw")
            def quoted(self) -> str: ...

            @Get(":id/a`b/${x}\\y")
            def templated(self, id: Annotated[str, Param("id")]) -> str: ...

            @Get("paged")
            def paged(self, page_size: Annotated[int, Query("page-size")]) -> str: ...
        """
        module = """
        from decorators import Module
        from escapes import EscapesController

        @Module(controllers=[EscapesController])
        class AppModule:
            pass
        """
        source = make_api({"escapes.py": controller, "app.py": module})
        files = PlainSdkBackend(make_config(source.root)).generate(SdkAnalyzer(source).analyze())
        return files["escapesController.ts"]

    def test_string_literal_route(self, escapes):
        """Backslashes and quotes of a route without parameters are escaped"""
        assert r"return request('GET', '/c/it\'s\\raw', null, {});" in escapes

    def test_template_literal_route(self, escapes):
        """Backticks, backslashes and interpolation markers of a parameterized route are escaped"""
        assert r"return request('GET', `/c/${id}/a\`b/\${x}\\y`, null, rest);" in escapes

    def test_non_identifier_key_is_quoted(self, escapes):
        assert 'async paged(params: { "page-size": number }): Promise<string> {' in escapes


class TestHelpers:
    """Test cases for the shared backend helpers"""

    def test_partition_and_args(self, sdk_content):
        controller = sdk_content.modules["AppModule"]["UsersController"]
        queries, mutations = partition_methods(controller.methods)
        assert [method.name for method in queries] == ["list_all", "search", "get"]
        assert [method.name for method in mutations] == ["create", "rename", "remove"]
        assert merged_args_type(queries[0]) == ""


if __name__ == "__main__":
    pytest.main([__file__])
