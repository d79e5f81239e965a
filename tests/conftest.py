"""
Shared fixtures for the Strix test suite.

Every test declares its classes against a fresh MetadataStore so nothing
leaks through the process-wide default store.
"""

import pytest

from strix.annotations import Annotations
from strix.config import StrixConfig
from strix.di import Container
from strix.metadata import MetadataStore


@pytest.fixture
def store():
    return MetadataStore()


@pytest.fixture
def ann(store):
    """Decorators bound to the test's private store."""
    return Annotations(store)


@pytest.fixture
def container(store):
    return Container(store)


@pytest.fixture
def config():
    """Settings independent of the working directory and environment."""
    return StrixConfig()


@pytest.fixture
def users_app(ann):
    """
    UserService injected into UserController, two routes under ``/users``.

    Returns ``(AppModule, UserService, UserController, calls)`` where
    ``calls`` records handler invocations in order.
    """
    calls = []

    @ann.injectable()
    class UserService:
        instances = 0

        def __init__(self):
            type(self).instances += 1

        def all(self):
            return ["alice", "bob"]

    @ann.controller("/users")
    class UserController:
        def __init__(self, users: UserService):
            self.users = users

        @ann.get("/")
        def getAllUsers(self):
            calls.append("getAllUsers")
            return self.users.all()

        @ann.post("/")
        def createUser(self):
            calls.append("createUser")
            return "created"

    @ann.module(providers=[UserService], controllers=[UserController])
    class AppModule:
        pass

    return AppModule, UserService, UserController, calls
