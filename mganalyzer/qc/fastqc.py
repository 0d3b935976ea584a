"""Read quality reports with FastQC.

http://www.bioinformatics.babraham.ac.uk/projects/fastqc/
"""
import os

from mganalyzer.pipeline import config_utils, stage

def run(name, read_files, out_dir, config, log_dir=None):
    """Run fastqc on read files, writing one HTML report per file into out_dir.
    """
    cl = [config_utils.get_program("fastqc", config),
          "-t", str(config.threads), "-o", out_dir]
    cl += config_utils.get_options("fastqc", config)
    cl += read_files
    expected = [report_file(x, out_dir) for x in read_files]
    return stage.run_stage(name, cl, read_files, expected, log_dir,
                           "FastQC: %s" % ", ".join(os.path.basename(x) for x in read_files))

def report_file(read_file, out_dir):
    """Name of the HTML report FastQC writes for a read file.

    FastQC drops compression and read extensions from the file name.
    """
    fname = os.path.basename(read_file)
    for ext in [".gz", ".bz2"]:
        if fname.endswith(ext):
            fname = fname[:-len(ext)]
    for ext in [".fastq", ".fq"]:
        if fname.endswith(ext):
            fname = fname[:-len(ext)]
    return os.path.join(out_dir, "%s_fastqc.html" % fname)
