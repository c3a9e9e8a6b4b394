from typing import Annotated

from decorators import Body, Controller, Delete, Get, Param, Patch, Post, Query
from dtos.common import Paginated
from dtos.user import CreateUserDto, User, UserFilters


@Controller("users")
class UsersController:
    @Get("list")
    def list_all(self) -> list[User]: ...

    @Get("search")
    async def search(self, filters: Annotated[UserFilters, Query()]) -> Paginated[User]: ...

    @Get(":id")
    def get(self, id: Annotated[str, Param("id")]) -> User: ...

    @Post("create")
    def create(self, dto: CreateUserDto = Body()) -> User: ...

    @Patch(":id")
    def rename(self, id: Annotated[str, Param("id")], name: Annotated[str, Body("name")]) -> User: ...

    @Delete(":id")
    def remove(self, id: str = Param("id")) -> None: ...

    def audit(self, user: User) -> None: ...
