"""Tests for pmresolver/constants.py."""

from pmresolver.constants import (
    ENV_VAR_NAME,
    MANIFEST_FIELD,
    MANIFEST_FILENAME,
    PREFERENCE_FIELD,
    PREFERENCE_FILENAME,
    TOOL_DIR_NAME,
)


class TestExternalContract:
    """File names and keys read by other tools must not drift."""

    def test_tool_dir_name(self):
        """Test that TOOL_DIR_NAME is .claude."""
        assert TOOL_DIR_NAME == ".claude"

    def test_preference_file(self):
        """Preference file and field names."""
        assert PREFERENCE_FILENAME == "package-manager.json"
        assert PREFERENCE_FIELD == "packageManager"

    def test_env_var_name(self):
        """The override variable name."""
        assert ENV_VAR_NAME == "CLAUDE_PACKAGE_MANAGER"

    def test_manifest_field(self):
        """package.json's packageManager field."""
        assert MANIFEST_FILENAME == "package.json"
        assert MANIFEST_FIELD == "packageManager"
