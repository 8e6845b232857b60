import pytest
from click.testing import CliRunner
from conftest import RecordingRunner
from pzdeploy.CLI import main as cli_main
from pzdeploy.CLI.main import build, deploy

COMPOSE = ["docker", "compose", "-f", "docker-compose.prod.yaml"]


@pytest.fixture
def fake_runner(monkeypatch):
    """Replaces the real CommandRunner and PATH lookup used by the CLI."""
    fake = RecordingRunner()
    monkeypatch.setattr(cli_main, "CommandRunner", lambda working_dir=None: fake)
    monkeypatch.setattr("pzdeploy.MANAGERS.preflight.shutil.which", lambda name: f"/usr/bin/{name}")
    return fake


def invoke(command, project_dir, user_input, **env):
    env.setdefault("PZDEPLOY_PROJECT_DIR", str(project_dir))
    env.setdefault("PZDEPLOY_GRACE_SECONDS", "0")
    return CliRunner().invoke(command, input=user_input, env=env)


def test_cli_help():
    result = CliRunner().invoke(deploy, ['--help'])
    assert result.exit_code == 0
    assert 'build, start, stop' in result.output

def test_config_missing(fake_runner, tmp_path):
    result = invoke(deploy, tmp_path, "2\n")
    assert result.exit_code == 1
    assert ".env file not found" in result.output
    assert "What would you like to do?" not in result.output
    assert fake_runner.calls == []
    assert fake_runner.probes == []

def test_start(fake_runner, project_dir):
    result = invoke(deploy, project_dir, "2\n")
    assert result.exit_code == 0, result.output
    assert "✅ Found .env file" in result.output
    assert fake_runner.commands[0] == COMPOSE + ["up", "-d"]

def test_start_exit_code_is_propagated(fake_runner, project_dir):
    fake_runner.exit_codes[tuple(COMPOSE + ["up", "-d"])] = 4
    result = invoke(deploy, project_dir, "2\n")
    assert result.exit_code == 4
    assert "exit code 4" in result.output

def test_invalid_choice(fake_runner, project_dir):
    result = invoke(deploy, project_dir, "9\n")
    assert result.exit_code == 1
    assert "Invalid choice" in result.output
    assert fake_runner.calls == []

def test_clean_up_cancelled(fake_runner, project_dir):
    result = invoke(deploy, project_dir, "6\nno\n")
    assert result.exit_code == 0
    assert "Cancelled." in result.output
    assert fake_runner.calls == []

def test_clean_up_confirmed(fake_runner, project_dir):
    result = invoke(deploy, project_dir, "6\nyes\n")
    assert result.exit_code == 0
    assert fake_runner.commands == [COMPOSE + ["down", "-v"]]

def test_sudo_fallback(fake_runner, project_dir):
    fake_runner.probe_results[("docker", "ps")] = False
    result = invoke(deploy, project_dir, "1\n")
    assert result.exit_code == 0, result.output
    assert "Docker requires sudo privileges" in result.output
    assert fake_runner.commands
    assert all(command[:2] == ["sudo", "docker"] for command in fake_runner.commands)

def test_daemon_unreachable(fake_runner, project_dir):
    fake_runner.probe_results[("docker", "ps")] = False
    fake_runner.probe_results[("sudo", "docker", "ps")] = False
    result = invoke(deploy, project_dir, "2\n")
    assert result.exit_code == 1
    assert "Cannot access Docker daemon" in result.output
    assert fake_runner.calls == []

def test_build_menu(fake_runner, project_dir):
    result = invoke(build, project_dir, "1\nyes\n")
    assert result.exit_code == 0, result.output
    assert "BuildKit enabled" in result.output
    assert fake_runner.commands[:2] == [
        COMPOSE + ["build", "--progress=plain"],
        COMPOSE + ["up", "-d"],
    ]

def test_build_invalid_choice(fake_runner, project_dir):
    result = invoke(build, project_dir, "4\n")
    assert result.exit_code == 1
    assert fake_runner.calls == []

def test_invalid_setting(fake_runner, project_dir):
    result = invoke(deploy, project_dir, "2\n", PZDEPLOY_GRACE_SECONDS="-5")
    assert result.exit_code == 1
    assert "PZDEPLOY_" in result.output

def test_config_not_utf8(fake_runner, project_dir):
    (project_dir / ".env").write_bytes(b"JWT_SECRET=caf\xe9\nSTORAGE_PROVIDER=local\n")
    result = invoke(deploy, project_dir, "2\n")
    assert result.exit_code == 1
    assert not isinstance(result.exception, UnicodeDecodeError)
    assert "could not be read" in result.output
    assert "What would you like to do?" not in result.output
    assert fake_runner.calls == []

def test_answers_are_trimmed(fake_runner, project_dir):
    result = invoke(deploy, project_dir, " 6 \n  yes \n")
    assert result.exit_code == 0, result.output
    assert "Cancelled." not in result.output
    assert fake_runner.commands == [COMPOSE + ["down", "-v"]]
