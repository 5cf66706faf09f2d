"""Tests for the git log helpers."""

import subprocess
from unittest.mock import MagicMock

import pytest

from ticketmatch_core.exceptions import GitLogError
from ticketmatch_core.git.log import get_commit_log, is_inside_work_tree


class TestIsInsideWorkTree:
    def test_true_inside_repo(self, mocker):
        mocker.patch("subprocess.run", return_value=MagicMock(returncode=0, stdout="true\n"))
        assert is_inside_work_tree() is True

    def test_false_outside_repo(self, mocker):
        mocker.patch("subprocess.run", return_value=MagicMock(returncode=128, stdout=""))
        assert is_inside_work_tree() is False

    def test_false_inside_git_dir(self, mocker):
        mocker.patch("subprocess.run", return_value=MagicMock(returncode=0, stdout="false\n"))
        assert is_inside_work_tree() is False

    def test_false_when_git_missing(self, mocker):
        mocker.patch("subprocess.run", side_effect=FileNotFoundError)
        assert is_inside_work_tree() is False


class TestGetCommitLog:
    def test_runs_oneline_log_for_range(self, mocker):
        mock_run = mocker.patch(
            "subprocess.run", return_value=MagicMock(returncode=0, stdout="a1b2c3 (ABC-1) add feature\n")
        )

        output = get_commit_log("1.0.0", "master", cwd="/repo")

        assert output == "a1b2c3 (ABC-1) add feature\n"
        args = mock_run.call_args.args[0]
        assert args == ["git", "log", "--no-merges", "--oneline", "1.0.0..master"]
        assert mock_run.call_args.kwargs["cwd"] == "/repo"

    def test_nonzero_exit_raises(self, mocker):
        mocker.patch(
            "subprocess.run",
            return_value=MagicMock(returncode=128, stdout="", stderr="fatal: bad revision 'nope..master'\n"),
        )
        with pytest.raises(GitLogError, match="bad revision"):
            get_commit_log("nope", "master")

    def test_missing_git_raises(self, mocker):
        mocker.patch("subprocess.run", side_effect=FileNotFoundError)
        with pytest.raises(GitLogError):
            get_commit_log("1.0.0", "master")

    def test_real_repository(self, tmp_path):
        def git(*args):
            subprocess.run(["git", *args], cwd=tmp_path, check=True, capture_output=True)

        try:
            git("init", "-q")
        except (FileNotFoundError, subprocess.CalledProcessError):
            pytest.skip("git is not available")
        git("config", "user.email", "dev@example.com")
        git("config", "user.name", "Dev")
        git("-c", "commit.gpgsign=false", "commit", "-q", "--allow-empty", "-m", "(MAINT) initial")
        git("tag", "start")
        git("-c", "commit.gpgsign=false", "commit", "-q", "--allow-empty", "-m", "(ABC-1) add feature")

        output = get_commit_log("start", "HEAD", cwd=str(tmp_path))

        lines = output.splitlines()
        assert len(lines) == 1
        assert lines[0].endswith(" (ABC-1) add feature")
        assert is_inside_work_tree(cwd=str(tmp_path)) is True
