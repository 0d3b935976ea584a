"""Pytest fixtures and test helper functions"""

import collections
import os

import pytest

from mganalyzer.pipeline import run_config, stage
from mganalyzer.pipeline.errors import StageExecutionFailed

ToolCall = collections.namedtuple("ToolCall", "name cmd required_inputs expected_outputs")


def write_file(fname, content="@read1\nACGT\n+\nIIII\n"):
    os.makedirs(os.path.dirname(fname), exist_ok=True)
    with open(fname, "w") as out_handle:
        out_handle.write(content)
    return fname


def make_reads(dirname, base="sample", ext="fastq", status=None):
    status_str = "" if status is None else "." + status
    return [write_file(os.path.join(dirname, "%s_%s%s.%s" % (base, mate, status_str, ext)))
            for mate in [1, 2]]


def snapshot(dirname):
    """Relative path to content of every file below dirname."""
    out = {}
    for root, _, files in os.walk(dirname):
        for fname in files:
            path = os.path.join(root, fname)
            with open(path, "rb") as in_handle:
                out[os.path.relpath(path, dirname)] = in_handle.read()
    return out


class FakeTools(object):
    """Stand-in for stage.run_stage recording each call.

    Writes every expected output, unless the stage is named in `fail`.
    """
    def __init__(self, fail=None):
        self.calls = []
        self.fail = fail

    def __call__(self, name, cmd, required_inputs, expected_outputs, log_dir=None, descr=None):
        self.calls.append(ToolCall(name, list(cmd), list(required_inputs), list(expected_outputs)))
        if name == self.fail:
            return stage.failed(name, StageExecutionFailed("%s exited with status 1" % cmd[0]))
        for out_file in expected_outputs:
            write_file(out_file, "%s output\n" % name)
        return stage.StageResult(name, True, list(expected_outputs), "ok\n", None)

    @property
    def names(self):
        return [c.name for c in self.calls]

    def call(self, name):
        return [c for c in self.calls if c.name == name][0]


@pytest.fixture
def input_dir(tmp_path):
    dirname = str(tmp_path / "reads")
    make_reads(dirname)
    return dirname


@pytest.fixture
def output_dir(tmp_path):
    return str(tmp_path / "results")


@pytest.fixture
def kraken_db(tmp_path):
    dirname = str(tmp_path / "kraken_db")
    os.makedirs(dirname)
    return dirname


@pytest.fixture
def make_config(input_dir, output_dir, kraken_db):
    def _make_config(**kwargs):
        kwargs.setdefault("output_dir", output_dir)
        kwargs.setdefault("kraken_db", kraken_db)
        return run_config.resolve(kwargs.pop("input_dir", input_dir), **kwargs)
    return _make_config


@pytest.fixture
def fake_tools(mocker):
    tools = FakeTools()
    mocker.patch("mganalyzer.pipeline.stage.run_stage", side_effect=tools)
    return tools
