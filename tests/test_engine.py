"""
Bootstrap: container, routes, and simulated dispatch wired together.
"""

import logging

import pytest

from strix.config import StrixConfig
from strix.controller import DuplicateRouteError, RouteNotFoundError
from strix.engine import Application, bootstrap, simulate_dispatch
from strix.manifest import ManifestError


class TestBootstrap:

    def test_returns_application(self, users_app, store, config):
        AppModule, UserService, UserController, _ = users_app

        app = bootstrap(AppModule, store=store, config=config)

        assert isinstance(app, Application)
        assert app.module is AppModule
        assert app.manifest.name == "AppModule"
        assert len(app.routes) == 2
        assert app.resolve(UserController).users is app.resolve(UserService)

    def test_simulated_dispatch_invokes_each_handler_once(self, users_app, store, config):
        AppModule, *_, calls = users_app

        bootstrap(AppModule, store=store, config=config)

        assert calls == ["getAllUsers", "createUser"]

    def test_dispatch_can_be_disabled(self, users_app, store):
        AppModule, *_, calls = users_app

        bootstrap(AppModule, store=store, config=StrixConfig(simulate_dispatch=False))

        assert calls == []

    def test_service_constructed_once(self, users_app, store, config):
        AppModule, UserService, *_ = users_app

        bootstrap(AppModule, store=store, config=config)

        assert UserService.instances == 1

    def test_app_dispatch(self, users_app, store):
        AppModule, *_, calls = users_app
        app = bootstrap(AppModule, store=store, config=StrixConfig(simulate_dispatch=False))

        assert app.dispatch("POST", "/users/") == "created"
        assert calls == ["createUser"]

        with pytest.raises(RouteNotFoundError):
            app.dispatch("GET", "/nowhere")

    def test_log_output(self, users_app, store, config, caplog):
        AppModule, *_ = users_app

        with caplog.at_level(logging.INFO, logger="strix"):
            bootstrap(AppModule, store=store, config=config)

        messages = [r.getMessage() for r in caplog.records]
        assert "Mapped GET /users/ -> UserController.getAllUsers()" in messages
        assert "Mapped POST /users/ -> UserController.createUser()" in messages
        assert messages[0].startswith("Bootstrapping AppModule")
        assert messages[-1].startswith("Bootstrap complete: 2 routes")

    def test_diagnostics_flag_attaches_logging_listener(self, users_app, store, caplog):
        AppModule, *_ = users_app

        with caplog.at_level(logging.DEBUG, logger="strix.di.diagnostics"):
            bootstrap(AppModule, store=store, config=StrixConfig(diagnostics=True))

        assert any(r.name == "strix.di.diagnostics" for r in caplog.records)

    def test_missing_manifest(self, store, config):
        class Plain:
            pass

        with pytest.raises(ManifestError):
            bootstrap(Plain, store=store, config=config)

    def test_duplicate_error_policy(self, ann, store):
        @ann.controller("/d")
        class A:
            @ann.get("/")
            def one(self):
                pass

            @ann.route("GET", "/")
            def two(self):
                pass

        @ann.module(controllers=[A])
        class M:
            pass

        with pytest.raises(DuplicateRouteError):
            bootstrap(M, store=store, config=StrixConfig(duplicate_routes="error"))

    def test_module_with_no_controllers(self, ann, store, config):
        @ann.injectable()
        class Lonely:
            pass

        @ann.module(providers=[Lonely])
        class M:
            pass

        app = bootstrap(M, store=store, config=config)
        assert len(app.routes) == 0
        assert app.container.is_resolved(Lonely)


class TestSimulateDispatch:

    def test_handler_error_propagates(self, ann, store, caplog):
        @ann.controller("/boom")
        class Boom:
            @ann.get("/")
            def explode(self):
                raise RuntimeError("handler failed")

        @ann.module(controllers=[Boom])
        class M:
            pass

        with caplog.at_level(logging.ERROR, logger="strix.bootstrap"):
            with pytest.raises(RuntimeError, match="handler failed"):
                bootstrap(M, store=store, config=StrixConfig())

        assert any("GET /boom/" in r.getMessage() for r in caplog.records)

    def test_invokes_in_table_order(self, users_app, store):
        AppModule, *_, calls = users_app
        app = bootstrap(AppModule, store=store, config=StrixConfig(simulate_dispatch=False))

        simulate_dispatch(app.routes)
        simulate_dispatch(app.routes)

        assert calls == ["getAllUsers", "createUser", "getAllUsers", "createUser"]
