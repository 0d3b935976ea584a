"""Quality and adapter trimming of paired-end reads with Trimmomatic.

http://www.usadellab.org/cms/?page=trimmomatic

Trimmed reads keep the sample naming convention with a status marker:
`<sample>_1.p.<ext>` for reads whose mate also survived and
`<sample>_1.u.<ext>` for orphaned reads.
"""
from mganalyzer.pipeline import config_utils, naming, stage

# Used unless the trimmomatic resources configure their own steps, for
# instance ILLUMINACLIP with an adapter file
DEFAULT_STEPS = ["SLIDINGWINDOW:4:20", "MINLEN:36"]

def trim_adapters(sample, in_dir, out_dir, config, log_dir=None):
    fastq_files = naming.read_pair(in_dir, sample)
    out_files = naming.trimmed_reads(out_dir, sample)
    cl = [config_utils.get_program("trimmomatic", config), "PE",
          "-threads", str(config.threads)]
    cl += fastq_files + out_files
    cl += config_utils.get_options("trimmomatic", config, DEFAULT_STEPS)
    return stage.run_stage("trim", cl, fastq_files, out_files, log_dir,
                           "Trimming with trimmomatic: %s" % sample.base)
