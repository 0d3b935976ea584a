"""Separate ribosomal RNA reads from paired-end reads using SortMeRNA.

https://github.com/sortmerna/sortmerna
"""
import os

from mganalyzer.pipeline import config_utils, run_config, stage
from mganalyzer.pipeline.transaction import tx_tmpdir

def out_prefixes(sample, out_dir):
    return (os.path.join(out_dir, "%s_rrna" % sample.base),
            os.path.join(out_dir, "%s_non_rrna" % sample.base))

def filter_rrna(sample, reads, out_dir, config, log_dir=None):
    """Write rRNA and non-rRNA read pairs of a sample into out_dir.

    SortMeRNA keeps its index and alignment state in a work directory that
    must be fresh for each run; it lives only for the duration of the run.
    """
    db = run_config.require_database(config, "rrna_db", "--rrna-db", "rrna")
    aligned, other = out_prefixes(sample, out_dir)
    with tx_tmpdir(out_dir) as work_dir:
        cl = [config_utils.get_program("sortmerna", config), "--ref", db,
              "--reads", reads[0], "--reads", reads[1],
              "--workdir", work_dir, "--threads", str(config.threads),
              "--fastx", "--paired_in", "--out2",
              "--aligned", aligned, "--other", other]
        cl += config_utils.get_options("sortmerna", config)
        return stage.run_stage("rrna", cl, reads, ["%s.log" % aligned], log_dir,
                               "rRNA filtering with sortmerna: %s" % sample.base)
