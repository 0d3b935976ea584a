"""Create and own the output directory tree of a run.

Each stage writes into one named subdirectory of the output root. An
existing, non-empty stage subdirectory is only replaced when overwrite was
requested; otherwise the run stops before touching anything so results of
different runs never mix.
"""
import collections
import os
import shutil

from mganalyzer import utils
from mganalyzer.log import logger
from mganalyzer.pipeline.errors import WorkspaceConflict

QUALITY = "quality"
TRIMMED = "trimmed"
ASSEMBLY = "assembly"
QUAST = "quast"
KRAKEN = "kraken"
RRNA = "rrna"
SUBDIRS = [QUALITY, TRIMMED, ASSEMBLY, QUAST, KRAKEN, RRNA]
LOG_DIR = "log"

Workspace = collections.namedtuple("Workspace", "root dirs log_dir input_dir")

def layout(config):
    """Paths of the workspace for a configuration, without creating anything.
    """
    root = config.output_dir
    return Workspace(root=root,
                     dirs=collections.OrderedDict((d, os.path.join(root, d)) for d in SUBDIRS),
                     log_dir=os.path.join(root, LOG_DIR),
                     input_dir=config.input_dir)

def ensure(config, subdirs):
    """Prepare the output root and the subdirectories of the stages that will run.

    subdirs names the stage subdirectories needed by this run. Existing
    subdirectories holding files raise WorkspaceConflict unless
    config.overwrite is set, in which case only those subdirectories are
    recreated. All checks happen before the filesystem is modified.
    """
    work = layout(config)
    targets = []
    for name in subdirs:
        if name not in work.dirs:
            raise ValueError("Unexpected stage directory: %s" % name)
        if work.dirs[name] not in targets:
            targets.append(work.dirs[name])
    existing = [t for t in targets if os.path.lexists(t) and not utils.is_empty_dir(t)]
    if existing and not config.overwrite:
        raise WorkspaceConflict("Output directories from a previous run exist: %s. "
                                "Use -w/--overwrite to replace them"
                                % ", ".join(existing))
    for dname in existing:
        _check_removable(dname, work)
    utils.safe_makedir(work.root)
    for dname in existing:
        logger.info("Overwriting previous results in %s" % dname)
        try:
            shutil.rmtree(dname)
        except OSError as e:
            raise WorkspaceConflict("Could not remove previous results in %s: %s" % (dname, e))
    for dname in targets:
        utils.safe_makedir(dname)
    utils.safe_makedir(work.log_dir)
    return work

def _check_removable(dname, work):
    """Only a named stage subdirectory of the output root is ever deleted.

    Protects input reads in same-as-input mode, and when the input
    directory itself sits at a stage subdirectory location.
    """
    ok = (os.path.dirname(os.path.abspath(dname)) == os.path.abspath(work.root)
          and os.path.basename(dname) in SUBDIRS
          and not os.path.islink(dname)
          and not utils.is_within(work.input_dir, dname))
    if not ok:
        raise WorkspaceConflict("Refusing to remove %s: it is not a stage output "
                                "directory separate from the input reads" % dname)
