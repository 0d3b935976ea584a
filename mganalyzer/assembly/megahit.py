"""Metagenome assembly with MEGAHIT.

https://github.com/voutcn/megahit
"""
import os

from mganalyzer import utils
from mganalyzer.pipeline import config_utils, stage
from mganalyzer.pipeline.transaction import tx_tmpdir

CONTIGS = "final.contigs.fa"

def contigs_file(out_dir):
    return os.path.join(out_dir, CONTIGS)

def assemble(reads, out_dir, config, log_dir=None):
    """Assemble a read pair into contigs within out_dir.

    MEGAHIT refuses to write into an existing directory, so it assembles in
    a transactional directory and results are moved into out_dir on success.
    """
    fq1, fq2 = reads
    with tx_tmpdir(out_dir) as tx_dir:
        tx_out = os.path.join(tx_dir, "megahit")
        cl = [config_utils.get_program("megahit", config),
              "-1", fq1, "-2", fq2, "-t", str(config.threads), "-o", tx_out]
        cl += config_utils.get_options("megahit", config)
        result = stage.run_stage("megahit", cl, reads, [contigs_file(tx_out)], log_dir,
                                 "Assembling with megahit: %s" % os.path.basename(fq1))
        if result.succeeded:
            utils.move_contents(tx_out, out_dir)
            result = result._replace(outputs=[contigs_file(out_dir)])
    return result
