"""
Unit tests for the compile configuration model.

Tests:
- Define construction
- Copy independence
- Editor serialization
"""

from pathlib import Path

from mozcpp.build import CompileConfig, Define, FileType, build_define


class TestBuildDefine:
    """Test suite for build_define()."""

    def test_key_value(self):
        assert build_define("FOO=bar", "=") == Define("FOO", "bar")

    def test_missing_value_defaults_to_one(self):
        assert build_define("FOO", "=") == Define("FOO", "1")

    def test_split_at_first_separator(self):
        assert build_define("FOO=a=b", "=") == Define("FOO", "a=b")

    def test_empty_value_kept(self):
        assert build_define("FOO=", "=") == Define("FOO", "")

    def test_space_separator(self):
        assert build_define("__GNUC__ 4", " ") == Define("__GNUC__", "4")

    def test_str_and_flag(self):
        define = Define("FOO", "bar")
        assert str(define) == "FOO=bar"
        assert define.to_flag() == "-DFOO=bar"


class TestFileType:
    """Test suite for FileType."""

    def test_standards(self):
        assert FileType.C.standard == "c99"
        assert FileType.CPP.standard == "c++14"

    def test_versions(self):
        assert FileType.C.version == "gnu99"
        assert FileType.CPP.version == "c++14"


class TestCompileConfig:
    """Test suite for CompileConfig."""

    def make_config(self):
        config = CompileConfig(standard="c++14", intellisense_mode="clang-x64")
        config.includes.add(Path("/src/inc"))
        config.sys_includes.add(Path("/usr/include"))
        config.framework_includes.add(Path("/System/Library/Frameworks"))
        config.forced_includes.add(Path("/obj/mozilla-config.h"))
        config.add_define(Define("FOO", "1"))
        return config

    def test_copy_is_independent(self):
        """Test modifying a copy leaves the original untouched."""
        original = self.make_config()
        duplicate = original.copy()

        duplicate.includes.add(Path("/other"))
        duplicate.sys_includes.add(Path("/other"))
        duplicate.forced_includes.add(Path("/other.h"))
        duplicate.add_define(Define("FOO", "2"))
        duplicate.add_define(Define("BAR", "1"))

        assert original.includes.to_list() == [str(Path("/src/inc"))]
        assert original.sys_includes.to_list() == [str(Path("/usr/include"))]
        assert len(original.forced_includes) == 1
        assert original.defines == {"FOO": Define("FOO", "1")}

    def test_add_define_replaces_same_key(self):
        config = CompileConfig(standard="c99", intellisense_mode="clang-x64")
        config.add_define(Define("A", "1"))
        config.add_define(Define("B", "1"))
        config.add_define(Define("A", "2"))

        assert list(config.defines) == ["A", "B"]
        assert config.defines["A"].value == "2"

    def test_to_dict(self):
        result = self.make_config().to_dict()

        assert result == {
            "includePath": [str(Path("/src/inc")), str(Path("/usr/include"))],
            "macFrameworkPath": [str(Path("/System/Library/Frameworks"))],
            "forcedInclude": [str(Path("/obj/mozilla-config.h"))],
            "defines": ["FOO=1"],
            "standard": "c++14",
            "intelliSenseMode": "clang-x64",
        }

    def test_to_dict_optional_fields(self):
        config = CompileConfig(
            standard="c99",
            intellisense_mode="clang-x64",
            compiler_path="/opt/clang",
            sdk_path=Path("/sdk"),
        )
        result = config.to_dict()

        assert result["compilerPath"] == "/opt/clang"
        assert result["sdkPath"] == str(Path("/sdk"))

    def test_to_dict_includes_deduplicated(self):
        """Test a directory both user and system appears once, user position first."""
        config = CompileConfig(standard="c99", intellisense_mode="clang-x64")
        config.includes.add(Path("/usr/include"))
        config.sys_includes.add(Path("/usr/include"))
        config.sys_includes.add(Path("/usr/local/include"))

        assert config.to_dict()["includePath"] == [
            str(Path("/usr/include")),
            str(Path("/usr/local/include")),
        ]
