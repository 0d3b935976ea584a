"""Loads system configuration from .yaml files and looks up program details.
"""
import os
import sys

import toolz as tz
import yaml

from mganalyzer.pipeline.errors import ConfigInvalid, ToolNotInstalled
from mganalyzer.provenance import do


def load_system_config(config_file=None):
    """Load the optional YAML system configuration.

    The file describes per program `resources`: the command to use (`cmd`)
    and extra `options` passed to the tool. A missing file name returns
    an empty configuration.
    """
    if config_file is None:
        return {}
    if not os.path.exists(config_file):
        raise ConfigInvalid("Configuration file not found: %s" % config_file)
    with open(config_file) as in_handle:
        try:
            config = yaml.safe_load(in_handle)
        except yaml.YAMLError as e:
            raise ConfigInvalid("Could not parse configuration file %s: %s" % (config_file, e))
    if config is None:
        return {}
    if not isinstance(config, dict) or not isinstance(config.get("resources", {}), dict):
        raise ConfigInvalid("Configuration file %s must contain a `resources` mapping" % config_file)
    return _expand_paths(config)

def _expand_paths(config):
    for prog, pconfig in config.get("resources", {}).items():
        if isinstance(pconfig, dict) and pconfig.get("cmd"):
            config["resources"][prog]["cmd"] = expand_path(pconfig["cmd"])
    return config

def expand_path(path):
    """Expand user and environmental variables in a path.
    """
    return os.path.expandvars(os.path.expanduser(path))

def get_resources(name, config):
    """Retrieve resources for a program, pulling from the system configuration.
    """
    # support taking in a full RunConfig
    config = getattr(config, "system_config", config)
    return tz.get_in(["resources", name], config, {}) or {}

def get_program(name, config, default=None):
    """Retrieve the command to run a program.

    Uses `cmd` from the program resources, falling back to default or the
    program name itself. The command is not checked here, see
    `resolve_program`.
    """
    return get_resources(name, config).get("cmd", default or name)

def get_options(name, config, default=None):
    """Retrieve extra command line options for a program as a list of strings.
    """
    opts = get_resources(name, config).get("options", default or [])
    if not isinstance(opts, (list, tuple)):
        opts = [opts]
    return [str(x) for x in opts]

def resolve_program(cmd):
    """Find the full path to an executable, raising ToolNotInstalled if missing.

    Checks explicit paths, then programs installed alongside the running
    Python (conda environments), then the PATH.
    """
    is_ok = lambda f: os.path.isfile(f) and os.access(f, os.X_OK)
    if os.sep in cmd:
        if is_ok(cmd):
            return os.path.abspath(cmd)
        raise ToolNotInstalled("Executable not found or not executable: %s" % cmd)
    conda_cmd = os.path.join(os.path.dirname(sys.executable), cmd)
    if is_ok(conda_cmd):
        return conda_cmd
    path_cmd = do.find_cmd(cmd)
    if path_cmd:
        return path_cmd
    raise ToolNotInstalled("%s is not installed or not on the PATH" % cmd)
