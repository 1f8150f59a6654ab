"""配置文件发现测试"""

from __future__ import annotations

from gradle_nodes.services.discovery import find_config_files, split_config_files


def _touch(path):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("", encoding="utf-8")


class TestFindConfigFiles:
    def test_finds_and_skips_ignored(self, tmp_path):
        for rel in [
            "build.gradle", "gradlew", "gradlew.bat", "settings.gradle",
            "app/build.gradle.kts", "app/build/tmp/build.gradle",
            "node_modules/x/build.gradle",
        ]:
            _touch(tmp_path / rel)
        assert find_config_files(tmp_path) == [
            "app/build.gradle.kts", "build.gradle", "gradlew", "gradlew.bat",
        ]

    def test_custom_ignored_dirs(self, tmp_path):
        _touch(tmp_path / "vendor" / "build.gradle")
        assert find_config_files(tmp_path, ignored_dirs=["vendor"]) == []


class TestSplitConfigFiles:
    FILES = [
        "build.gradle", "gradlew", "gradlew.bat",
        "app/build.gradle.kts",
        "tool/gradlew.bat", "tool/build.gradle",
    ]

    def test_posix_prefers_gradlew(self):
        build_files, scripts = split_config_files(self.FILES, "Linux")
        assert build_files == ["build.gradle", "app/build.gradle.kts", "tool/build.gradle"]
        assert scripts == ["gradlew", "tool/gradlew.bat"]

    def test_windows_prefers_bat(self):
        _, scripts = split_config_files(self.FILES, "Windows")
        assert scripts == ["gradlew.bat", "tool/gradlew.bat"]
