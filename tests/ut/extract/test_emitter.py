"""图产物生成测试"""

from __future__ import annotations

import os

from gradle_nodes.core.build_model import parse_build_tree
from gradle_nodes.core.models import Dependency, load_report
from gradle_nodes.extract.emitter import GraphEmitter, artifact_path

MODEL = {
    "name": "tutorial",
    "root": {
        "name": "tutorial",
        "tasks": [{"name": "buildEnvironment", "group": "help"}],
        "children": [
            {"name": "app", "description": "The app",
             "configurations": {"compileClasspath": ["lib"]},
             "tasks": [{"name": "run", "group": "application", "depends_on": [":ghost:jar"]}]},
            {"name": "lib", "tasks": [{"name": "jar", "group": "build"}]},
        ],
    },
    "included_builds": [
        {"name": "build-logic", "root": {"name": "build-logic", "dir": "build-logic"}},
    ],
}


def _emitter(tmp_path, **kwargs):
    ws = os.path.normpath(str(tmp_path))
    tree = parse_build_tree(MODEL, ws)
    echoed: list[str] = []
    emitter = GraphEmitter(
        tree, workspace_root=ws, output_directory=str(tmp_path / "out"),
        os_name="Linux", echo=echoed.append, **kwargs,
    )
    return ws, emitter, echoed


class TestArtifactPath:
    def test_with_and_without_hash(self, tmp_path):
        assert artifact_path(tmp_path, "tutorial") == tmp_path / "tutorial.json"
        assert artifact_path(tmp_path, "tutorial", "abc") == tmp_path / "tutorialabc.json"


class TestGraphEmitter:
    def test_failed_module_skipped_but_edges_kept(self, tmp_path):
        """app 的任务依赖指向未知模块: 节点被跳过，已收集的依赖边保留"""
        ws, emitter, _ = _emitter(tmp_path)
        report = emitter.build_report()
        app_dir = os.path.join(ws, "app")
        lib_dir = os.path.join(ws, "lib")
        assert app_dir not in report.nodes
        assert set(report.nodes) == {ws, lib_dir}
        assert Dependency(app_dir, lib_dir, os.path.join(app_dir, "build.gradle")) in report.dependencies

    def test_node_contents(self, tmp_path):
        ws, emitter, _ = _emitter(tmp_path)
        report = emitter.build_report()
        root = report.nodes[ws]
        assert root.name == "tutorial"
        assert root.target_groups == {"help": ["buildEnvironment"]}
        assert root.targets["buildEnvironment"].command == "./gradlew :buildEnvironment"

    def test_emit_writes_artifacts_and_echoes(self, tmp_path):
        ws, emitter, echoed = _emitter(tmp_path, hash_="h1")
        paths = emitter.emit()
        out = tmp_path / "out"
        assert paths == [out / "build-logich1.json", out / "tutorialh1.json"]
        assert echoed == [str(p) for p in paths]

        main = load_report(paths[1])
        assert ws in main.nodes
        included = load_report(paths[0])
        assert list(included.nodes) == [os.path.join(ws, "build-logic")]

    def test_default_output_directory(self, tmp_path):
        ws = os.path.normpath(str(tmp_path))
        emitter = GraphEmitter(parse_build_tree(MODEL, ws), workspace_root=ws)
        assert emitter.output_directory == os.path.join(ws, ".nx", "cache")
