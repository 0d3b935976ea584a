import os
import stat

import pytest

from mganalyzer.pipeline import config_utils
from mganalyzer.pipeline.errors import ConfigInvalid, ToolNotInstalled
from tests.conftest import write_file

CONFIG = {"resources": {"trimmomatic": {"cmd": "/opt/trimmomatic/run",
                                        "options": ["MINLEN:50"]},
                        "megahit": {"options": "--presets meta-large"}}}


def _executable(fname):
    write_file(fname, "#!/bin/sh\nexit 0\n")
    os.chmod(fname, os.stat(fname).st_mode | stat.S_IXUSR)
    return fname


class TestLoadSystemConfig(object):

    def test_no_file(self):
        assert config_utils.load_system_config(None) == {}

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigInvalid):
            config_utils.load_system_config(str(tmp_path / "nope.yaml"))

    def test_malformed_yaml(self, tmp_path):
        fname = write_file(str(tmp_path / "bad.yaml"), "resources: [unclosed\n")
        with pytest.raises(ConfigInvalid):
            config_utils.load_system_config(fname)

    def test_resources_must_be_mapping(self, tmp_path):
        fname = write_file(str(tmp_path / "bad.yaml"), "resources:\n  - fastqc\n")
        with pytest.raises(ConfigInvalid):
            config_utils.load_system_config(fname)

    def test_expands_user_in_cmd(self, tmp_path):
        fname = write_file(str(tmp_path / "system.yaml"),
                           "resources:\n  kraken2:\n    cmd: ~/bin/kraken2\n")
        config = config_utils.load_system_config(fname)
        assert config["resources"]["kraken2"]["cmd"] == os.path.expanduser("~/bin/kraken2")


class TestPrograms(object):

    def test_get_program(self):
        assert config_utils.get_program("trimmomatic", CONFIG) == "/opt/trimmomatic/run"
        assert config_utils.get_program("fastqc", CONFIG) == "fastqc"
        assert config_utils.get_program("quast", {}, "quast.py") == "quast.py"

    def test_get_options(self):
        assert config_utils.get_options("trimmomatic", CONFIG) == ["MINLEN:50"]
        assert config_utils.get_options("megahit", CONFIG) == ["--presets meta-large"]
        assert config_utils.get_options("fastqc", CONFIG, ["--nogroup"]) == ["--nogroup"]

    def test_accepts_run_config(self, make_config, tmp_path):
        fname = write_file(str(tmp_path / "system.yaml"),
                           "resources:\n  fastqc:\n    cmd: /opt/fastqc\n")
        config = make_config(config_file=fname)
        assert config_utils.get_program("fastqc", config) == "/opt/fastqc"

    def test_resolve_explicit_path(self, tmp_path):
        tool = _executable(str(tmp_path / "tool"))
        assert config_utils.resolve_program(tool) == tool

    def test_resolve_non_executable_path(self, tmp_path):
        tool = write_file(str(tmp_path / "tool"))
        with pytest.raises(ToolNotInstalled):
            config_utils.resolve_program(tool)

    def test_resolve_from_path(self, tmp_path, monkeypatch):
        tool = _executable(str(tmp_path / "mg-test-tool"))
        monkeypatch.setenv("PATH", str(tmp_path))
        assert config_utils.resolve_program("mg-test-tool") == tool

    def test_resolve_missing(self):
        with pytest.raises(ToolNotInstalled):
            config_utils.resolve_program("mg-analyzer-no-such-tool")
