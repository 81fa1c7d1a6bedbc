import pytest
from pathlib import Path

from roleforge.builder.naming import (
    base_image_name,
    role_dev_version,
    role_image_name,
    role_output_dir,
    sanitize_tag,
)
from roleforge.datacls import Role
from roleforge.exceptions import ConfigValidationError


class TestImageNames:

    def test_role_image_name(self):
        assert role_image_name("foo", "myrole", "3.14.15") == "foo-myrole:3.14.15"

    def test_base_image_name(self):
        assert base_image_name("foo", "6.28.30") == "foo-role-base:6.28.30"

    @pytest.mark.parametrize("version, expected", [
        ("1.0.0", "1.0.0"),
        ("1.0+dev.3", "1.0_dev.3"),
        ("v2_rc-1", "v2_rc-1"),
        ("a b/c", "a_b_c"),
    ])
    def test_sanitize_tag(self, version, expected):
        assert sanitize_tag(version) == expected

    def test_image_name_uses_sanitized_tag(self):
        assert role_image_name("repo", "tor", "0.3.5+dev.1") == "repo-tor:0.3.5_dev.1"

    def test_role_output_dir(self, tmp_path):
        assert role_output_dir(tmp_path, "myrole") == tmp_path / "myrole"
        assert role_output_dir(str(tmp_path), "myrole") == Path(tmp_path) / "myrole"


class TestDevVersion:

    def test_is_deterministic(self, composite_role):
        assert role_dev_version(composite_role) == role_dev_version(composite_role)
        assert len(role_dev_version(composite_role)) == 40

    def test_changes_with_content(self, composite_role, simple_role):
        assert role_dev_version(composite_role) != role_dev_version(simple_role)

    def test_depends_on_job_order(self, jobs):
        forward = Role(name="r", jobs=[jobs["new_hostname"], jobs["tor"]])
        backward = Role(name="r", jobs=[jobs["tor"], jobs["new_hostname"]])
        assert role_dev_version(forward) != role_dev_version(backward)

    def test_package_fingerprint_changes_version(self, jobs):
        tor = jobs["tor"]
        changed = tor.model_copy(update={
            "packages": [p.model_copy(update={"fingerprint": "other"}) for p in tor.packages]
        })
        assert role_dev_version(Role(name="r", jobs=[tor])) != role_dev_version(Role(name="r", jobs=[changed]))


class TestOutputDir:

    @pytest.mark.parametrize("name", ["../precious", "..", ".", "a/../../b"])
    def test_escaping_target_is_rejected(self, tmp_path, name):
        with pytest.raises(ConfigValidationError, match="escapes"):
            role_output_dir(tmp_path / "output", name)

    def test_nested_relative_target(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert role_output_dir("output", "myrole") == Path("output") / "myrole"
