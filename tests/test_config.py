"""
Tests for configuration loading — kona-build.yml and runtime properties.
"""

from pathlib import Path

import pytest

from konabuild.core.config.loader import (
    BUILD_CONFIG_FILE,
    ConfigError,
    env_var_name,
    find_config_file,
    load_config,
    parse_overrides,
    resolve_properties,
)


class TestEnvVarName:
    @pytest.mark.parametrize(
        "prop,env",
        [
            ("test.babassl.path", "KONA_TEST_BABASSL_PATH"),
            ("ks.path", "KONA_KS_PATH"),
            ("ks.storepass", "KONA_KS_STOREPASS"),
            ("ossrhUsername", "KONA_OSSRH_USERNAME"),
            ("ossrhPassword", "KONA_OSSRH_PASSWORD"),
        ],
    )
    def test_mapping(self, prop, env):
        assert env_var_name(prop) == env


class TestParseOverrides:
    def test_pairs(self):
        assert parse_overrides(["ks.path=a.p12", "ks.alias=kona"]) == {
            "ks.path": "a.p12",
            "ks.alias": "kona",
        }

    def test_value_may_contain_equals(self):
        assert parse_overrides(["ks.storepass=a=b"]) == {"ks.storepass": "a=b"}

    def test_empty_value(self):
        assert parse_overrides(["ks.path="]) == {"ks.path": ""}

    @pytest.mark.parametrize("bad", ["ks.path", "=value", ""])
    def test_invalid(self, bad):
        with pytest.raises(ConfigError):
            parse_overrides([bad])


class TestResolveProperties:
    def test_precedence(self):
        props = resolve_properties(
            file_props={"ks.alias": "file", "ks.type": "JKS", "ks.path": "file.p12"},
            overrides={"ks.alias": "cli"},
            environ={"KONA_KS_ALIAS": "env", "KONA_KS_TYPE": "PKCS12"},
        )
        assert props["ks.alias"] == "cli"
        assert props["ks.type"] == "PKCS12"
        assert props["ks.path"] == "file.p12"

    def test_unrelated_env_ignored(self):
        props = resolve_properties(environ={"KONA_SOMETHING_ELSE": "x"})
        assert props == {}

    def test_unknown_property_warns(self, caplog):
        caplog.set_level("WARNING", logger="konabuild.core.config.loader")
        resolve_properties(file_props={"ks.colour": "blue"}, environ={})
        assert "ks.colour" in caplog.text


class TestLoadConfig:
    def test_load_file(self, build_yml: Path):
        cfg = load_config(build_yml, environ={})
        assert cfg.project.name == "kona"
        assert cfg.project.version == "1.0.9-SNAPSHOT"
        assert cfg.project.modules == ("kona-crypto", "kona-pkix", "kona-ssl")
        assert cfg.interop_tool_path == "/opt/babassl/bin/babassl"
        assert cfg.signing.keystore_type == "JKS"
        assert not cfg.signing.enabled
        assert cfg.credentials is None
        assert cfg.root == str(build_yml.parent.resolve())

    def test_defaults_without_file(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        cfg = load_config(environ={})
        assert cfg.interop_tool_path == "babassl"
        assert cfg.signing.keystore_type == "PKCS12"
        assert cfg.repositories.name == "ossrh"

    def test_signing_from_overrides(self, build_yml: Path):
        cfg = load_config(
            build_yml,
            overrides={
                "ks.path": "/keys/release.p12",
                "ks.storepass": "sp",
                "ks.keypass": "kp",
                "ks.alias": "kona",
            },
            environ={},
        )
        assert cfg.signing.enabled
        assert cfg.signing.keystore_type == "JKS"
        assert cfg.signing.store_password.get_secret_value() == "sp"
        assert cfg.signing.key_password.get_secret_value() == "kp"
        assert cfg.signing.alias == "kona"

    def test_credentials_from_env(self, build_yml: Path):
        cfg = load_config(
            build_yml,
            environ={"KONA_OSSRH_USERNAME": "deployer", "KONA_OSSRH_PASSWORD": "pw"},
        )
        assert cfg.credentials is not None
        assert cfg.credentials.username == "deployer"
        assert cfg.credentials.password.get_secret_value() == "pw"

    def test_incomplete_credentials(self, build_yml: Path):
        cfg = load_config(build_yml, environ={"KONA_OSSRH_USERNAME": "deployer"})
        assert cfg.credentials is None

    def test_java_home_from_env(self, build_yml: Path):
        cfg = load_config(build_yml, environ={"JAVA_HOME": "/opt/jdk"})
        assert cfg.java_home == "/opt/jdk"

    def test_numeric_version(self, tmp_path: Path):
        path = tmp_path / BUILD_CONFIG_FILE
        path.write_text("project:\n  version: 1.0\n")
        assert load_config(path, environ={}).project.version == "1.0"

    def test_empty_file(self, tmp_path: Path):
        path = tmp_path / BUILD_CONFIG_FILE
        path.write_text("")
        assert load_config(path, environ={}).project.name == "kona"

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(ConfigError, match="not found"):
            load_config(tmp_path / "nope.yml", environ={})

    def test_invalid_yaml(self, tmp_path: Path):
        path = tmp_path / BUILD_CONFIG_FILE
        path.write_text("project: [unclosed\n")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_config(path, environ={})

    def test_not_a_mapping(self, tmp_path: Path):
        path = tmp_path / BUILD_CONFIG_FILE
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigError, match="mapping"):
            load_config(path, environ={})

    def test_properties_not_a_mapping(self, tmp_path: Path):
        path = tmp_path / BUILD_CONFIG_FILE
        path.write_text("properties: [a, b]\n")
        with pytest.raises(ConfigError, match="properties"):
            load_config(path, environ={})

    def test_invalid_project(self, tmp_path: Path):
        path = tmp_path / BUILD_CONFIG_FILE
        path.write_text("project:\n  modules: 5\n")
        with pytest.raises(ConfigError, match="Invalid build configuration"):
            load_config(path, environ={})


class TestFindConfigFile:
    def test_walks_up(self, build_yml: Path):
        nested = build_yml.parent / "kona-crypto" / "src"
        nested.mkdir(parents=True)
        assert find_config_file(nested) == build_yml.resolve()

    def test_none_when_absent(self, tmp_path: Path):
        assert find_config_file(tmp_path) is None
