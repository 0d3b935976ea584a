"""Run a single external tool with a uniform check, invoke, verify contract.
"""
import collections
import os
import subprocess

from mganalyzer.log import logger
from mganalyzer.pipeline import config_utils
from mganalyzer.pipeline.errors import PipelineError, PreconditionUnmet, StageExecutionFailed
from mganalyzer.provenance import do

PENDING = "pending"
SKIPPED = "skipped"
RUNNING = "running"
SUCCEEDED = "succeeded"
FAILED = "failed"

StageResult = collections.namedtuple("StageResult", "name succeeded outputs output error")

def failed(name, error, output=""):
    if error.stage is None:
        error.stage = name
    return StageResult(name, False, [], output, error)

def run_stage(name, cmd, required_inputs, expected_outputs, log_dir=None, descr=None):
    """Run cmd for a stage, returning a StageResult.

    Every required input must exist and the executable must resolve before
    anything runs. A zero exit status is only a success when every expected
    output exists afterwards. Tool output is kept unchanged in the result
    and, when log_dir is given, in `<log_dir>/<name>.out`.
    """
    missing = [x for x in required_inputs if not os.path.exists(x)]
    if missing:
        return failed(name, PreconditionUnmet("Required input not found: %s" % ", ".join(missing)))
    cmd = [str(x) for x in cmd]
    try:
        cmd[0] = config_utils.resolve_program(cmd[0])
    except PipelineError as e:
        return failed(name, e)
    log_file = os.path.join(log_dir, "%s.out" % name) if log_dir else None
    logger.info("Running %s: %s" % (name, descr or os.path.basename(cmd[0])))
    try:
        output = do.run(cmd, descr or name, log_file=log_file)
    except subprocess.CalledProcessError as e:
        return failed(name, StageExecutionFailed("%s exited with status %s%s"
                                                 % (os.path.basename(cmd[0]), e.returncode,
                                                    _see_log(log_file)), output=e.output),
                      e.output)
    except OSError as e:
        return failed(name, StageExecutionFailed("Could not run %s: %s" % (cmd[0], e)))
    absent = [x for x in expected_outputs if not os.path.exists(x)]
    if absent:
        return failed(name, StageExecutionFailed("%s finished without producing %s%s"
                                                 % (os.path.basename(cmd[0]), ", ".join(absent),
                                                    _see_log(log_file)), output=output),
                      output)
    logger.info("Finished %s" % name)
    return StageResult(name, True, list(expected_outputs), output, None)

def _see_log(log_file):
    return " (tool output in %s)" % log_file if log_file else ""
