# coding=utf-8
# SPDX-License-Identifier: Apache-2.0
"""
Tests for patch-spec loading.
"""

import json

import pytest

from parampatch.errors import PatchSpecError
from parampatch.models import ParamChange
from parampatch.services.patch_spec import load_patch_spec, parse_patch_records, parse_patch_script

GENERATED_SCRIPT = '''package DistributedTest.patches.projects

import jetbrains.buildServer.configs.kotlin.v2019_2.*
import jetbrains.buildServer.configs.kotlin.v2019_2.Project
import jetbrains.buildServer.configs.kotlin.v2019_2.ui.*

/*
This patch script was generated by TeamCity on settings change in UI.
To apply the patch, change the project with uuid = 'DistributedGradle_Check' (id = 'DistributedTest')
accordingly, and delete the patch script.
*/
changeProject(uuid("DistributedGradle_Check")) {
    params {
        expect {
            param("env.ARTIFACTORY_PASSWORD", "%artifactoryPassword%")
        }
        update {
            param("env.ARTIFACTORY_PASSWORD", "bot-enterprise-releases")
        }
        expect {
            param("env.GRADLE_ENTERPRISE_ACCESS_KEY", "%e.grdev.net.access.key%")
        }
        update {
            param("env.GRADLE_ENTERPRISE_ACCESS_KEY", "credentialsJSON:3dadbc2c-a4ef-49ff-a9d2-ed682a4e26ac")
        }
    }
}
'''


class TestJSONRecords:
    """Tests for JSON record patch specs."""

    def test_list_of_records(self):
        """Test the plain list form."""
        patch = parse_patch_records([
            {"key": "env.X", "expected": "%a%", "newValue": "secretref:1"},
            {"key": "env.Y", "expected": "%b%", "newValue": "secretref:2"},
        ])

        assert patch.entity_id is None
        assert patch.changes == [
            ParamChange("env.X", "%a%", "secretref:1"),
            ParamChange("env.Y", "%b%", "secretref:2"),
        ]

    def test_object_with_target(self):
        """Test the object form carrying the target entity."""
        patch = parse_patch_records({
            "entity_id": "DistributedGradle_Check",
            "changes": [{"key": "env.X", "expected": "%a%", "new_value": "secretref:1"}],
        })

        assert patch.entity_id == "DistributedGradle_Check"
        assert patch.changes == [ParamChange("env.X", "%a%", "secretref:1")]

    def test_expected_defaults_to_empty(self):
        """Test that records without expected create parameters."""
        patch = parse_patch_records([{"key": "env.NEW", "newValue": "v"}])

        assert patch.changes == [ParamChange("env.NEW", "", "v")]

    def test_missing_new_value_rejected(self):
        """Test that a record needs a new value."""
        with pytest.raises(PatchSpecError, match="Invalid patch spec"):
            parse_patch_records([{"key": "env.X", "expected": "%a%"}])

    def test_empty_key_rejected(self):
        """Test that a record needs a key."""
        with pytest.raises(PatchSpecError):
            parse_patch_records([{"key": "", "expected": "", "newValue": "v"}])

    def test_scalar_rejected(self):
        """Test that a bare value is not a patch spec."""
        with pytest.raises(PatchSpecError):
            parse_patch_records("env.X")


class TestPatchScript:
    """Tests for settings DSL patch scripts."""

    def test_generated_script(self):
        """Test parsing a script exactly as the CI server generates it."""
        patch = parse_patch_script(GENERATED_SCRIPT)

        assert patch.entity_id == "DistributedGradle_Check"
        assert patch.changes == [
            ParamChange("env.ARTIFACTORY_PASSWORD", "%artifactoryPassword%", "bot-enterprise-releases"),
            ParamChange(
                "env.GRADLE_ENTERPRISE_ACCESS_KEY",
                "%e.grdev.net.access.key%",
                "credentialsJSON:3dadbc2c-a4ef-49ff-a9d2-ed682a4e26ac",
            ),
        ]

    def test_build_type_with_relative_id(self):
        """Test the build configuration variant and escaped strings."""
        script = '''
changeBuildType(RelativeId("Check_Quick")) {
    params {
        expect { param("env.URL", "https://example.com/a\\"b") }
        update { param("env.URL", "https://example.com/\\$c") }
    }
}
'''
        patch = parse_patch_script(script)

        assert patch.entity_id == "Check_Quick"
        assert patch.changes == [ParamChange("env.URL", 'https://example.com/a"b', "https://example.com/$c")]

    def test_add_block_creates_parameter(self):
        """Test that add entries expect the parameter to be absent."""
        script = 'changeProject(uuid("p")) { params { add { param("env.NEW", "1") } } }'

        patch = parse_patch_script(script)

        assert patch.changes == [ParamChange("env.NEW", "", "1")]

    def test_expect_without_update_is_assertion(self):
        """Test that a lone expect keeps the value."""
        script = 'changeProject(uuid("p")) { params { expect { param("env.A", "x") } } }'

        patch = parse_patch_script(script)

        assert patch.changes == [ParamChange("env.A", "x", "x")]

    def test_update_without_expect_rejected(self):
        """Test that blind overwrites are refused."""
        script = 'changeProject(uuid("p")) { params { update { param("env.A", "x") } } }'

        with pytest.raises(PatchSpecError, match="no matching expect"):
            parse_patch_script(script)

    def test_remove_rejected(self):
        """Test that parameter removal is refused."""
        script = 'changeProject(uuid("p")) { params { remove { param("env.A", "x") } } }'

        with pytest.raises(PatchSpecError, match="Removing parameters"):
            parse_patch_script(script)

    def test_no_target_rejected(self):
        """Test that a script must name its entity."""
        with pytest.raises(PatchSpecError, match="No changeProject"):
            parse_patch_script('params { expect { param("a", "b") } }')

    def test_no_params_block_rejected(self):
        """Test that a script must change parameters."""
        with pytest.raises(PatchSpecError, match="no params block"):
            parse_patch_script('changeProject(uuid("p")) { }')

    def test_other_block_beside_params_rejected(self):
        """Test that non-parameter changes are not silently dropped."""
        script = '''
changeProject(uuid("p")) {
    params {
        expect { param("env.A", "x") }
        update { param("env.A", "y") }
    }
    features {
        remove { feature { type = "versionedSettings" } }
    }
}
'''
        with pytest.raises(PatchSpecError, match="Unsupported content besides params"):
            parse_patch_script(script)

    def test_second_params_block_rejected(self):
        """Test that changes in a second params block are not silently dropped."""
        script = '''
changeProject(uuid("p")) {
    params {
        expect { param("env.A", "x") }
        update { param("env.A", "y") }
    }
    params {
        expect { param("env.B", "x") }
        update { param("env.B", "y") }
    }
}
'''
        with pytest.raises(PatchSpecError, match="more than one params block"):
            parse_patch_script(script)

    def test_trailing_comments_ignored(self):
        """Test comments at the end of lines, and // inside strings."""
        script = '''
changeProject(uuid("p")) { // rotated credentials
    params {
        expect { param("env.A", "x") } // old value
        update {
            param("env.A", "https://repo.example.com/y") // new value
        } /* done */
    }
}
'''
        patch = parse_patch_script(script)

        assert patch.changes == [ParamChange("env.A", "x", "https://repo.example.com/y")]

    def test_duplicate_expect_rejected(self):
        """Test that a key cannot be expected twice before its update."""
        script = '''
changeProject(uuid("p")) {
    params {
        expect { param("env.A", "x") }
        expect { param("env.A", "z") }
        update { param("env.A", "y") }
    }
}
'''
        with pytest.raises(PatchSpecError, match="expected twice"):
            parse_patch_script(script)

    def test_unbalanced_braces_rejected(self):
        """Test that a truncated script is refused."""
        with pytest.raises(PatchSpecError, match="Unbalanced"):
            parse_patch_script('changeProject(uuid("p")) { params { expect { param("a", "b") }')


class TestLoadPatchSpec:
    """Tests for loading patch specs from files."""

    def test_load_json_file(self, tmp_path):
        """Test that .json files are read as records."""
        path = tmp_path / "patch.json"
        path.write_text(json.dumps([{"key": "env.X", "expected": "%a%", "newValue": "secretref:1"}]))

        patch = load_patch_spec(path)

        assert patch.changes == [ParamChange("env.X", "%a%", "secretref:1")]

    def test_load_script_file(self, tmp_path):
        """Test that .kts files are read as scripts."""
        path = tmp_path / "DistributedGradle_Check.kts"
        path.write_text(GENERATED_SCRIPT)

        patch = load_patch_spec(path)

        assert patch.entity_id == "DistributedGradle_Check"
        assert len(patch) == 2

    def test_invalid_json_rejected(self, tmp_path):
        """Test that broken JSON is reported as a patch spec error."""
        path = tmp_path / "patch.json"
        path.write_text("[{")

        with pytest.raises(PatchSpecError, match="not valid JSON"):
            load_patch_spec(path)

    def test_missing_file_rejected(self, tmp_path):
        """Test that an unreadable file is reported as a patch spec error."""
        with pytest.raises(PatchSpecError, match="Cannot read"):
            load_patch_spec(tmp_path / "nope.json")
