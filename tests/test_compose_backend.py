"""Tests for the compose backend."""
from pathlib import Path
from unittest.mock import Mock, patch

from devdock.core.project import ProjectContext
from devdock.services.compose_backend import BACKEND_MISSING, BACKEND_NOT_EXECUTABLE, ComposeBackend


def make_project(tmp_path):
    root = tmp_path / "shop"
    root.mkdir()
    manifest = root / "compose.yml"
    manifest.write_text("services: {}\n")
    return ProjectContext(root=root, manifest=manifest, env={"APP_PORT": "3001"})


class TestComposeBackend:
    def test_mock_mode_does_not_run(self, tmp_path):
        backend = ComposeBackend(["docker", "compose"], mock=True)

        with patch('subprocess.run') as mock_run:
            assert backend.up(make_project(tmp_path)) == 0
            mock_run.assert_not_called()

    @patch('subprocess.run')
    def test_up_command_line(self, mock_run, tmp_path):
        mock_run.return_value = Mock(returncode=0)
        project = make_project(tmp_path)
        backend = ComposeBackend(["docker", "compose"])

        assert backend.up(project) == 0

        cmd = mock_run.call_args[0][0]
        assert cmd == [
            'docker', 'compose',
            '-f', str(project.manifest),
            '--project-directory', str(project.root),
            'up', '-d',
        ]
        assert mock_run.call_args[1]['cwd'] == project.root

    @patch('subprocess.run')
    def test_layered_env_is_passed(self, mock_run, tmp_path, monkeypatch):
        monkeypatch.setenv('HOME_MARKER', 'kept')
        mock_run.return_value = Mock(returncode=0)
        backend = ComposeBackend(["docker", "compose"])

        backend.pull(make_project(tmp_path))

        env = mock_run.call_args[1]['env']
        assert env['APP_PORT'] == '3001'
        assert env['HOME_MARKER'] == 'kept'

    @patch('subprocess.run')
    def test_exit_status_is_passed_through(self, mock_run, tmp_path):
        mock_run.return_value = Mock(returncode=42)
        backend = ComposeBackend(["docker", "compose"])

        assert backend.down(make_project(tmp_path)) == 42

    @patch('subprocess.run')
    def test_exec_and_logs_arguments(self, mock_run, tmp_path):
        mock_run.return_value = Mock(returncode=0)
        project = make_project(tmp_path)
        backend = ComposeBackend(["podman-compose"])

        backend.exec(project, "app", ["npm", "run", "lint"])
        assert mock_run.call_args[0][0][0] == 'podman-compose'
        assert mock_run.call_args[0][0][-4:] == ['app', 'npm', 'run', 'lint']
        assert 'exec' in mock_run.call_args[0][0]

        backend.logs(project, service="db", follow=True)
        assert mock_run.call_args[0][0][-3:] == ['logs', '--follow', 'db']

        backend.up(project, detach=False)
        assert mock_run.call_args[0][0][-1] == 'up'

    @patch('subprocess.run', side_effect=FileNotFoundError("docker"))
    def test_missing_backend_executable(self, mock_run, tmp_path):
        backend = ComposeBackend(["docker", "compose"])

        assert backend.pull(make_project(tmp_path)) == BACKEND_MISSING

    @patch('subprocess.run', side_effect=PermissionError(13, "Permission denied"))
    def test_backend_that_cannot_execute(self, mock_run, tmp_path):
        backend = ComposeBackend(["/opt/compose-wrapper"])

        assert backend.down(make_project(tmp_path)) == BACKEND_NOT_EXECUTABLE

    def test_build_command_without_manifest(self, tmp_path):
        backend = ComposeBackend(["docker", "compose"])
        project = ProjectContext(root=Path(tmp_path))

        cmd = backend.build_command(project, "down")

        assert '-f' not in cmd
        assert cmd[-1] == 'down'
