"""
Users example - one service, one controller, two routes.

Run directly:
    python examples/users_app.py

Or through the CLI from this directory:
    strix routes users_app:AppModule
    strix boot users_app:AppModule --log-level DEBUG

Expected log output includes:
    Mapped GET /users/ -> UserController.getAllUsers()
    Mapped POST /users/ -> UserController.createUser()
"""

import logging

from strix import Controller, Injectable, Module, GET, POST, StrixConfig, bootstrap

logger = logging.getLogger("users_app")


@Injectable()
class UserService:
    def __init__(self):
        self._users = ["alice", "bob"]

    def all(self):
        return list(self._users)

    def create(self, name):
        self._users.append(name)
        return name


@Controller("/users")
class UserController:
    def __init__(self, users: UserService):
        self.users = users

    @GET("/")
    def getAllUsers(self):
        users = self.users.all()
        logger.info("Listing %d users", len(users))
        return users

    @POST("/")
    def createUser(self):
        name = self.users.create(f"user{len(self.users.all()) + 1}")
        logger.info("Created %s", name)
        return name


@Module(providers=[UserService], controllers=[UserController])
class AppModule:
    pass


def main():
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )
    app = bootstrap(AppModule, config=StrixConfig())
    print(app.dispatch("GET", "/users/"))


if __name__ == "__main__":
    main()
