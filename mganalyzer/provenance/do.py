"""Centralize running of external commands, providing logging and tracking.
"""
import shutil
import subprocess

from mganalyzer.log import logger, logger_cl, logger_stdout


def run(cmd, descr=None, log_file=None, env=None):
    """Run the provided command, logging details and checking for errors.

    Returns the combined standard output and error of the command, which is
    also written byte for byte to log_file when given.
    """
    cmd = [str(x) for x in cmd]
    if descr:
        logger.debug(descr)
    logger_cl.debug(" ".join(cmd))
    return _do_run(cmd, log_file, env=env)

def find_cmd(cmd):
    return shutil.which(cmd)

def _do_run(cmd, log_file=None, env=None):
    """Perform running and check results, raising errors for issues.
    """
    out_handle = open(log_file, "wb") if log_file else None
    lines = []
    try:
        s = subprocess.Popen(cmd, stdout=subprocess.PIPE, stderr=subprocess.STDOUT,
                             close_fds=True, env=env)
        for raw in s.stdout:
            if out_handle:
                out_handle.write(raw)
            line = raw.decode("utf-8", errors="replace")
            lines.append(line)
            if line.rstrip():
                logger_stdout.debug(line.rstrip())
        exitcode = s.wait()
        s.stdout.close()
    finally:
        if out_handle:
            out_handle.close()
    output = "".join(lines)
    if exitcode != 0:
        raise subprocess.CalledProcessError(exitcode, " ".join(cmd), output=output)
    return output
