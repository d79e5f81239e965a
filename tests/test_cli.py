"""
CLI commands driven through click's CliRunner against generated modules.
"""

import json
import textwrap
import uuid

import pytest
from click.testing import CliRunner

from strix.cli.__main__ import cli, load_target


USERS_APP = '''
from strix import Controller, Injectable, Module, GET, POST

CALLS = []


@Injectable()
class UserService:
    def all(self):
        return ["alice"]


@Controller("/users")
class UserController:
    def __init__(self, users: UserService):
        self.users = users

    @GET("/")
    def getAllUsers(self):
        CALLS.append("getAllUsers")
        return self.users.all()

    @POST("/")
    def createUser(self):
        CALLS.append("createUser")


@Module(providers=[UserService], controllers=[UserController])
class AppModule:
    pass
'''

CYCLIC_APP = '''
from strix import Injectable, Module


class A:
    def __init__(self, b):
        pass


class B:
    def __init__(self, a):
        pass


Injectable(depends_on=[B])(A)
Injectable(depends_on=[A])(B)


@Module(providers=[A, B])
class CyclicModule:
    pass
'''


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def write_app(tmp_path, monkeypatch):
    """Write ``source`` as an importable module; returns its name."""
    monkeypatch.syspath_prepend(str(tmp_path))
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("STRIX_SIMULATE_DISPATCH", raising=False)

    def write(source):
        name = f"strix_app_{uuid.uuid4().hex}"
        (tmp_path / f"{name}.py").write_text(textwrap.dedent(source))
        return name

    return write


# ============================================================================
# routes
# ============================================================================

class TestRoutesCommand:

    def test_lists_routes(self, runner, write_app):
        name = write_app(USERS_APP)
        result = runner.invoke(cli, ["routes", f"{name}:AppModule"], obj={})

        assert result.exit_code == 0, result.output
        assert "Routes (2)" in result.output
        assert "/users/" in result.output
        assert "UserController.getAllUsers()" in result.output
        assert "UserController.createUser()" in result.output

    def test_does_not_invoke_handlers(self, runner, write_app):
        import importlib

        name = write_app(USERS_APP)
        runner.invoke(cli, ["routes", f"{name}:AppModule"], obj={})

        assert importlib.import_module(name).CALLS == []

    def test_json_output(self, runner, write_app):
        name = write_app(USERS_APP)
        result = runner.invoke(cli, ["routes", f"{name}:AppModule", "--json"], obj={})

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["total_routes"] == 2
        assert [(r["method"], r["path"]) for r in data["routes"]] == [("GET", "/users/"), ("POST", "/users/")]

    def test_bad_target(self, runner, write_app):
        result = runner.invoke(cli, ["routes", "no_colon_here"], obj={})
        assert result.exit_code != 0
        assert "package.module:ModuleClass" in result.output

    def test_unknown_attribute(self, runner, write_app):
        name = write_app(USERS_APP)
        result = runner.invoke(cli, ["routes", f"{name}:Nope"], obj={})
        assert result.exit_code != 0
        assert "has no attribute" in result.output

    def test_not_a_module(self, runner, write_app):
        name = write_app(USERS_APP)
        result = runner.invoke(cli, ["routes", f"{name}:UserService"], obj={})

        assert result.exit_code == 1
        assert "MANIFEST_INVALID" in result.output

    def test_json_error(self, runner, write_app):
        name = write_app(USERS_APP)
        result = runner.invoke(cli, ["routes", f"{name}:UserService", "--json"], obj={})

        assert result.exit_code == 1
        error = json.loads(result.output)["error"]
        assert error["code"] == "MANIFEST_INVALID"
        assert error["domain"] == "module"
        assert error["severity"] == "fatal"

    def test_json_includes_module_fingerprint(self, runner, write_app):
        name = write_app(USERS_APP)
        result = runner.invoke(cli, ["routes", f"{name}:AppModule", "--json"], obj={})

        module = json.loads(result.output)["module"]
        assert module["name"] == "AppModule"
        assert len(module["fingerprint"]) == 16


# ============================================================================
# graph
# ============================================================================

class TestGraphCommand:

    def test_tree_and_order(self, runner, write_app):
        name = write_app(USERS_APP)
        result = runner.invoke(cli, ["graph", f"{name}:AppModule"], obj={})

        assert result.exit_code == 0, result.output
        assert "├── UserController" in result.output
        assert "Resolution order" in result.output
        assert result.output.index("1. UserService") < result.output.index("2. UserController")

    def test_cycle_exits_non_zero(self, runner, write_app):
        name = write_app(CYCLIC_APP)
        result = runner.invoke(cli, ["graph", f"{name}:CyclicModule"], obj={})

        assert result.exit_code == 1
        assert "DEPENDENCY_CYCLE" in result.output

    def test_verbose_shows_details(self, runner, write_app):
        name = write_app(CYCLIC_APP)
        result = runner.invoke(cli, ["-v", "graph", f"{name}:CyclicModule"], obj={})

        assert result.exit_code == 1
        assert "Suggested fixes" in result.output


# ============================================================================
# boot
# ============================================================================

class TestBootCommand:

    def test_boot_runs_handlers(self, runner, write_app):
        import importlib

        name = write_app(USERS_APP)
        result = runner.invoke(cli, ["boot", f"{name}:AppModule"], obj={})

        assert result.exit_code == 0, result.output
        assert "Bootstrapped AppModule" in result.output
        assert importlib.import_module(name).CALLS == ["getAllUsers", "createUser"]

    def test_boot_no_dispatch(self, runner, write_app):
        import importlib

        name = write_app(USERS_APP)
        result = runner.invoke(cli, ["boot", f"{name}:AppModule", "--no-dispatch"], obj={})

        assert result.exit_code == 0, result.output
        assert "Handlers were not invoked" in result.output
        assert importlib.import_module(name).CALLS == []

    def test_boot_cycle_fails(self, runner, write_app):
        name = write_app(CYCLIC_APP)
        result = runner.invoke(cli, ["boot", f"{name}:CyclicModule", "--log-level", "debug"], obj={})

        assert result.exit_code == 1
        assert "DEPENDENCY_CYCLE" in result.output

    def test_boot_reads_config_file(self, runner, write_app, tmp_path):
        name = write_app(USERS_APP)
        config = tmp_path / "custom.yaml"
        config.write_text("simulate_dispatch: false\n")

        result = runner.invoke(cli, ["boot", f"{name}:AppModule", "--config", str(config)], obj={})

        assert result.exit_code == 0, result.output
        assert "Handlers were not invoked" in result.output


class TestLoadTarget:

    def test_resolves_attribute(self, write_app):
        name = write_app(USERS_APP)
        assert load_target(f"{name}:AppModule").__name__ == "AppModule"

    def test_unimportable_module(self):
        import click

        with pytest.raises(click.BadParameter, match="cannot import"):
            load_target("strix_definitely_missing_module:App")


def test_version(runner):
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "0.1.0" in result.output
