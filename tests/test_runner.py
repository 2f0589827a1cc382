import stat
import zipfile
from unittest.mock import patch

import pytest

import config as cfg
import runner


def _dist_zip(root, files):
    archive = root / "distribution" / "target" / "app-1.0-SNAPSHOT.zip"
    archive.parent.mkdir(parents=True)
    with zipfile.ZipFile(archive, "w") as zf:
        for name, content in files.items():
            info = zipfile.ZipInfo(f"app-1.0-SNAPSHOT/{name}")
            info.external_attr = (stat.S_IFREG | 0o755) << 16
            zf.writestr(info, content)
    return archive


@pytest.mark.usefixtures("at_toplevel")
class TestRebuildUpdated:
    @patch("maven.build_modules")
    @patch("git.status_porcelain", return_value="")
    def test_clean_tree_fails_fast(self, mock_status, mock_build, tmp_path, capsys):
        assert runner.rebuild_updated(tmp_path, cfg.RunOptions()) is False
        mock_build.assert_not_called()
        assert "nothing to rebuild" in capsys.readouterr().err

    @patch("maven.build_modules", return_value=True)
    @patch("git.status_porcelain", return_value=" M b/src/X.java\n M a/src/Y.java\n M b/pom.xml\n")
    def test_builds_selected_modules(self, mock_status, mock_build, tmp_path):
        opts = cfg.RunOptions(quiet=True)
        assert runner.rebuild_updated(tmp_path, opts, extra_args=["-o"]) is True
        mock_build.assert_called_once_with(tmp_path, ["b", "a"], opts, extra_args=["-o"])

    @patch("maven.build_modules")
    @patch("git.status_porcelain", side_effect=RuntimeError("git executable not found on PATH."))
    def test_git_unavailable(self, mock_status, mock_build, tmp_path):
        assert runner.rebuild_updated(tmp_path, cfg.RunOptions()) is False
        mock_build.assert_not_called()


class TestRebuildFromSubdirectory:
    @patch("maven.build_modules", return_value=True)
    @patch("git.status_porcelain", return_value=" M web/src/main/java/B.java\n")
    @patch("git.toplevel")
    def test_builds_from_work_tree_top(self, mock_toplevel, mock_status, mock_build, tmp_path):
        mock_toplevel.return_value = tmp_path
        inner = tmp_path / "core"
        inner.mkdir()
        opts = cfg.RunOptions()

        assert runner.rebuild_updated(inner, opts) is True
        mock_toplevel.assert_called_once_with(inner)
        mock_status.assert_called_once_with(tmp_path)
        mock_build.assert_called_once_with(tmp_path, ["web"], opts, extra_args=None)

    @patch("maven.build_modules")
    @patch("git.toplevel", side_effect=RuntimeError("Not inside a git work-tree: /tmp/x"))
    def test_outside_work_tree(self, mock_toplevel, mock_build, tmp_path, capsys):
        assert runner.rebuild_updated(tmp_path, cfg.RunOptions()) is False
        mock_build.assert_not_called()
        assert "Not inside a git work-tree" in capsys.readouterr().err


class TestRedo:
    @patch("dist.run_bin", return_value=True)
    @patch("runner.rebuild_updated", return_value=True)
    def test_replaces_previous_extraction(self, mock_rebuild, mock_run, tmp_path):
        _dist_zip(tmp_path, {"bin/app.sh": "#!/bin/sh\n"})
        previous = tmp_path / "app-1.0-SNAPSHOT"
        (previous / "data").mkdir(parents=True)
        (previous / "data" / "stale.db").write_text("old")

        with patch("logger.confirm") as mock_confirm:
            assert runner.redo(tmp_path, cfg.RunOptions(), ["start"]) is True
            mock_confirm.assert_not_called()

        assert not (previous / "data").exists()
        assert (previous / "bin" / "app.sh").exists()
        mock_run.assert_called_once_with(tmp_path, ["start"])

    @patch("dist.run_bin")
    @patch("dist.extract_latest")
    @patch("runner.rebuild_updated", return_value=False)
    def test_stops_after_failed_rebuild(self, mock_rebuild, mock_extract, mock_run, tmp_path):
        assert runner.redo(tmp_path, cfg.RunOptions()) is False
        mock_extract.assert_not_called()
        mock_run.assert_not_called()

    @patch("dist.run_bin")
    @patch("runner.rebuild_updated", return_value=True)
    def test_stops_without_distribution(self, mock_rebuild, mock_run, tmp_path):
        assert runner.redo(tmp_path, cfg.RunOptions()) is False
        mock_run.assert_not_called()
