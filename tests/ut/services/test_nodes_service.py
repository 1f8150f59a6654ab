"""NodesService 单元测试"""

from __future__ import annotations

import os

import pytest

from gradle_nodes.core.config import Config
from gradle_nodes.core.models import Dependency, GraphReport, ProjectNode, Target
from gradle_nodes.services import projector as projector_mod
from gradle_nodes.services.cache import cache_path
from gradle_nodes.services.hashing import hash_object
from gradle_nodes.services.nodes_service import NodesService
from gradle_nodes.utils.shell import CommandResult


class FailingExecutor:
    def __init__(self) -> None:
        self.calls = 0

    def execute(self, cmd, *, cwd=".", env=None):
        self.calls += 1
        return CommandResult(1, "", "FAILURE: Build failed")


class TestNodesService:
    @pytest.fixture()
    def ws(self, tmp_path):
        for rel in ("build.gradle", "gradlew", "app/build.gradle"):
            path = tmp_path / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text("", encoding="utf-8")
        return os.path.normpath(str(tmp_path))

    @pytest.fixture()
    def report(self, ws):
        app = os.path.join(ws, "app")
        return GraphReport(
            nodes={
                ws: ProjectNode(name="root", targets={"help": Target(command="./gradlew :help")}),
                app: ProjectNode(name="app", targets={"ci": Target(executor="nx:noop")}),
            },
            dependencies={
                Dependency(ws, app, os.path.join(ws, "build.gradle")),
                Dependency(app, app, os.path.join(app, "build.gradle")),
                Dependency(app, "/elsewhere/logic", os.path.join(app, "build.gradle")),
            },
        )

    def test_create_nodes(self, ws, report):
        svc = NodesService(ws, config=Config())
        results = svc.create_nodes(
            ["build.gradle", "gradlew", "app/build.gradle"],
            {"ciTargetName": "ci-check"},
            report=report,
        )
        assert [f for f, _ in results] == ["build.gradle", "app/build.gradle"]
        root_projects = results[0][1]["projects"]
        assert root_projects["."]["name"] == "root"
        assert root_projects["."]["root"] == "."
        app = results[1][1]["projects"]["app"]
        assert "ci-check" in app["targets"]
        assert app["targets"]["ci-check"]["metadata"]["nonAtomizedTarget"] == "test"

    def test_cache_file_written(self, ws, report):
        options = {"ciTargetName": "ci-check"}
        NodesService(ws, config=Config()).create_nodes(
            ["build.gradle", "app/build.gradle"], options, report=report,
        )
        path = cache_path(os.path.join(ws, ".nx", "workspace-data"), hash_object(options))
        assert path.exists()

    def test_options_default_to_config(self, ws, report):
        cfg = Config(plugin_options={"ciTargetName": "verify-ci"})
        results = NodesService(ws, config=cfg).create_nodes(["app/build.gradle"], report=report)
        assert "verify-ci" in results[0][1]["projects"]["app"]["targets"]

    def test_unknown_build_file_yields_empty_projects(self, ws, report):
        results = NodesService(ws, config=Config()).create_nodes(
            ["other/build.gradle"], {}, report=report,
        )
        assert results == [("other/build.gradle", {"projects": {}})]

    def test_dangling_symlink_does_not_abort_batch(self, ws, report):
        try:
            os.symlink(os.path.join(ws, "app", "missing"), os.path.join(ws, "app", "dangling"))
        except (OSError, NotImplementedError):
            pytest.skip("当前平台不支持创建符号链接")
        results = NodesService(ws, config=Config()).create_nodes(
            ["build.gradle", "app/build.gradle"], {}, report=report,
        )
        assert [f for f, _ in results] == ["build.gradle", "app/build.gradle"]
        assert "app" in results[1][1]["projects"]

    def test_failing_build_file_skipped(self, ws, report, monkeypatch, caplog):
        """单个构建文件投影失败时记录警告，其余构建文件照常输出，缓存照常写回"""
        real_hash = projector_mod.calculate_hash_for_create_nodes

        def flaky_hash(project_root, *args, **kwargs):
            if project_root == "app":
                raise PermissionError(f"Permission denied: {project_root}")
            return real_hash(project_root, *args, **kwargs)

        monkeypatch.setattr(projector_mod, "calculate_hash_for_create_nodes", flaky_hash)
        options = {"ciTargetName": "ci-check"}
        results = NodesService(ws, config=Config()).create_nodes(
            ["build.gradle", "app/build.gradle"], options, report=report,
        )
        assert [f for f, _ in results] == ["build.gradle"]
        assert "投影失败" in caplog.text
        path = cache_path(os.path.join(ws, ".nx", "workspace-data"), hash_object(options))
        assert path.exists()

    def test_populate_failure_returns_partial(self, ws):
        executor = FailingExecutor()
        svc = NodesService(ws, config=Config(), executor=executor, os_name="Linux")
        report = svc.populate(["build.gradle", "gradlew"])
        assert executor.calls == 1
        assert report.nodes == {}

    def test_create_dependencies(self, ws, report):
        records = NodesService(ws, config=Config()).create_dependencies(report)
        assert records == [
            {"source": ".", "target": "app", "sourceFile": "build.gradle", "type": "static"},
            {"source": "app", "target": "/elsewhere/logic",
             "sourceFile": "app/build.gradle", "type": "static"},
        ]
