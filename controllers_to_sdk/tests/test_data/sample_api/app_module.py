from decorators import Module

from .posts.posts_controller import PostsController
from .users.users_controller import UsersController


@Module(controllers=[UsersController, PostsController])
class AppModule:
    pass
