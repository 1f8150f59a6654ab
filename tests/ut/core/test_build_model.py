"""构建模型加载测试"""

from __future__ import annotations

import os

import pytest
import yaml

from gradle_nodes.core.build_model import load_build_tree, parse_build_tree
from gradle_nodes.core.exceptions import ValidationError


def _write(path, data):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.safe_dump(data), encoding="utf-8")
    return path


TUTORIAL = {
    "name": "gradle-tutorial",
    "root": {
        "name": "gradle-tutorial",
        "description": "Root project",
        "tasks": [
            {"name": "buildEnvironment", "group": "help",
             "description": "Displays all buildscript dependencies."},
        ],
        "children": [
            {
                "name": "app",
                "tasks": [
                    {"name": "compileJava", "group": "build",
                     "inputs": ["src/main/java/App.java"],
                     "outputs": ["build/classes/java/main"],
                     "depends_on": [":lib:jar"]},
                ],
                "configurations": {"compileClasspath": ["lib"]},
            },
            {"name": "lib", "dir": "libs/core", "build_file": "build.gradle.kts"},
        ],
    },
}


class TestParseBuildTree:
    def test_paths_resolved(self, tmp_path):
        tree = parse_build_tree(TUTORIAL, tmp_path)
        ws = os.path.normpath(str(tmp_path))
        assert tree.name == "gradle-tutorial"
        assert tree.root.project_dir == ws
        assert tree.root.path == ":"
        assert tree.root.build_file == os.path.join(ws, "build.gradle")

        app = tree.find_module(":app")
        assert app is not None
        assert app.project_dir == os.path.join(ws, "app")
        assert app.tasks[0].inputs == [os.path.join(ws, "app", "src", "main", "java", "App.java")]
        assert app.tasks[0].depends_on == [":lib:jar"]
        assert app.configurations == {"compileClasspath": ["lib"]}

    def test_custom_dir_and_build_file(self, tmp_path):
        lib = parse_build_tree(TUTORIAL, tmp_path).find_module(":lib")
        assert lib.project_dir == os.path.join(os.path.normpath(str(tmp_path)), "libs", "core")
        assert lib.build_file.endswith("build.gradle.kts")

    def test_all_modules_depth_first(self, tmp_path):
        tree = parse_build_tree(TUTORIAL, tmp_path)
        assert [m.path for m in tree.all_modules()] == [":", ":app", ":lib"]

    def test_nested_path_prefix(self, tmp_path):
        data = {"root": {"name": "r", "children": [
            {"name": "a", "children": [{"name": "b"}]},
        ]}}
        tree = parse_build_tree(data, tmp_path)
        b = tree.find_module(":a:b")
        assert b is not None
        assert b.path_prefix == ":a:b:"
        assert tree.root.path_prefix == ":"

    def test_name_defaults_to_root(self, tmp_path):
        tree = parse_build_tree({"root": {"name": "solo"}}, tmp_path)
        assert tree.name == "solo"

    def test_missing_root_raises(self, tmp_path):
        with pytest.raises(ValidationError, match="root"):
            parse_build_tree({"name": "x"}, tmp_path)

    def test_task_without_name_raises(self, tmp_path):
        data = {"root": {"name": "r", "tasks": [{"group": "build"}]}}
        with pytest.raises(ValidationError, match="无效任务"):
            parse_build_tree(data, tmp_path)

    def test_inputs_must_be_list(self, tmp_path):
        data = {"root": {"name": "r", "tasks": [{"name": "t", "inputs": "a.java"}]}}
        with pytest.raises(ValidationError, match="列表"):
            parse_build_tree(data, tmp_path)


class TestLoadBuildTree:
    def test_load_with_included_build(self, tmp_path):
        _write(tmp_path / "logic" / "build-model.yml", {"root": {"name": "build-logic"}})
        model = _write(tmp_path / "main" / "build-model.yml", {
            "name": "main",
            "root": {"name": "main"},
            "included_builds": ["../logic/build-model.yml"],
        })
        tree = load_build_tree(model)
        assert len(tree.included_builds) == 1
        included = tree.included_builds[0]
        assert included.name == "build-logic"
        assert included.root.project_dir == os.path.normpath(str(tmp_path / "logic"))

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(ValidationError, match="不存在"):
            load_build_tree(tmp_path / "nope.yml")

    def test_empty_file_raises(self, tmp_path):
        model = tmp_path / "build-model.yml"
        model.write_text("", encoding="utf-8")
        with pytest.raises(ValidationError, match="为空"):
            load_build_tree(model)

    def test_malformed_yaml_raises(self, tmp_path):
        model = tmp_path / "build-model.yml"
        model.write_text("root: [unclosed", encoding="utf-8")
        with pytest.raises(ValidationError, match="解析失败"):
            load_build_tree(model)

    def test_cycle_detected(self, tmp_path):
        _write(tmp_path / "a" / "build-model.yml", {
            "root": {"name": "a"}, "included_builds": ["../b/build-model.yml"],
        })
        _write(tmp_path / "b" / "build-model.yml", {
            "root": {"name": "b"}, "included_builds": ["../a/build-model.yml"],
        })
        with pytest.raises(ValidationError, match="循环"):
            load_build_tree(tmp_path / "a" / "build-model.yml")
