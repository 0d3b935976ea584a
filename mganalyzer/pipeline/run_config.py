"""Resolve command line parameters into a validated, immutable run configuration.

Resolution only inspects the filesystem. Output directories are created
later by the workspace, and database paths are checked only when the stage
needing them is about to run.
"""
import collections
import os

from mganalyzer import utils
from mganalyzer.log import logger
from mganalyzer.pipeline import config_utils, naming
from mganalyzer.pipeline.errors import ConfigInvalid, PreconditionUnmet

DEFAULT_THREADS = 8
MIN_READ_FILES = 2

RunConfig = collections.namedtuple(
    "RunConfig",
    ["input_dir", "output_dir", "threads", "memory",
     "kraken_db", "quast_db", "rrna_db",
     "overwrite", "same_as_input",
     "skip_qc", "skip_trim", "skip_megahit", "skip_quast", "skip_kraken", "skip_rrna",
     "system_config", "debug"])

def resolve(input_dir, output_dir=None, threads=None, memory=None,
            kraken_db=None, quast_db=None, rrna_db=None, overwrite=False,
            skip_qc=False, skip_trim=False, skip_megahit=False, skip_quast=False,
            skip_kraken=False, skip_rrna=False, config_file=None, debug=False):
    """Validate run parameters, returning a RunConfig.

    Raises ConfigInvalid for missing or malformed parameters and
    PreconditionUnmet when the input directory holds too few read files.
    """
    if not input_dir:
        raise ConfigInvalid("An input directory of paired-end reads is required (-i/--input)")
    input_dir = utils.get_abspath(input_dir)
    if not os.path.isdir(input_dir):
        raise ConfigInvalid("Input directory does not exist: %s" % input_dir)
    reads = naming.read_files(input_dir)
    if len(reads) < MIN_READ_FILES:
        raise PreconditionUnmet("Found %s read files (%s) in %s, need at least %s"
                                % (len(reads), ", ".join(naming.READ_EXTENSIONS),
                                   input_dir, MIN_READ_FILES))
    threads = _check_threads(threads)
    if memory is not None:
        logger.warning("-m/--memory is deprecated and ignored: no stage uses a memory limit")
    if output_dir:
        output_dir = utils.get_abspath(output_dir)
    else:
        output_dir = input_dir
        logger.warning("No output directory given (-o/--output): stage directories will "
                       "be created inside the input directory %s" % input_dir)
    if os.path.exists(output_dir) and not os.path.isdir(output_dir):
        raise ConfigInvalid("Output path exists and is not a directory: %s" % output_dir)
    same_as_input = os.path.realpath(output_dir) == os.path.realpath(input_dir)
    return RunConfig(input_dir=input_dir, output_dir=output_dir, threads=threads,
                     memory=memory,
                     kraken_db=_abspath_or_none(kraken_db),
                     quast_db=_abspath_or_none(quast_db),
                     rrna_db=_abspath_or_none(rrna_db),
                     overwrite=bool(overwrite), same_as_input=same_as_input,
                     skip_qc=bool(skip_qc), skip_trim=bool(skip_trim),
                     skip_megahit=bool(skip_megahit), skip_quast=bool(skip_quast),
                     skip_kraken=bool(skip_kraken), skip_rrna=bool(skip_rrna),
                     system_config=config_utils.load_system_config(config_file),
                     debug=bool(debug))

def _check_threads(threads):
    if threads is None:
        return DEFAULT_THREADS
    try:
        threads = int(threads)
    except (TypeError, ValueError):
        raise ConfigInvalid("Thread count must be a positive integer, got %r" % (threads,))
    if threads < 1:
        raise ConfigInvalid("Thread count must be a positive integer, got %s" % threads)
    return threads

def _abspath_or_none(path):
    return utils.get_abspath(path) if path else None

def require_database(config, field, flag, stage):
    """Return a database path needed by a stage that is about to run.
    """
    path = getattr(config, field)
    if not path:
        raise ConfigInvalid("A database path is required for this stage (%s)" % flag, stage)
    if not os.path.exists(path):
        raise PreconditionUnmet("Database not found: %s" % path, stage)
    return path
