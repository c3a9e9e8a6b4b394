from typing import Annotated

from decorators import Body, Controller, Get, Param, Put, Query
from dtos.post import Post
from shared.money import Money


@Controller()
class PostsController:
    @Get("/posts")
    def all(self, page: Annotated[int, Query("page")], tag: Annotated[str | None, Query("tag")]) -> list[Post]: ...

    @Put("/posts/:postId/price")
    def set_price(self, post_id: Annotated[str, Param("postId")], price: Annotated[Money, Body("price")]) -> Post: ...
