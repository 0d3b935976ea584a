"""Run tools in temporary directories, moving results in place once finished.

Tools that refuse to write into an existing directory, or that leave
partial files behind on failure, run inside a transactional directory.
Only a successful run is moved into the stage directory.
"""
import contextlib
import tempfile

from mganalyzer import utils

DEFAULT_TMP = "mgtx"


@contextlib.contextmanager
def tx_tmpdir(base_dir, remove=True):
    """Context manager to create and remove a transactional temporary directory.

    The directory lives inside base_dir so moving results out of it stays on
    one filesystem.
    """
    utils.safe_makedir(base_dir)
    tmp_dir = tempfile.mkdtemp(prefix="%s-" % DEFAULT_TMP, dir=base_dir)
    try:
        yield tmp_dir
    finally:
        if remove:
            utils.remove_safe(tmp_dir)
