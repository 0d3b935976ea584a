"""Command line interface: run the analysis pipeline on a directory of paired-end reads.

Usage:
  mg-analyzer -i <input_dir> [-o <output_dir>] [-t threads] [-k kraken_db]
              [-q quast_db] [--rrna-db sortmerna_ref] [-w] [--skip-<stage> ...]

Exits 0 when every stage that ran succeeded and 1 otherwise, with a single
`[ERROR]` line naming the problem.
"""
import argparse
import os
import sys

from mganalyzer import log, version
from mganalyzer.log import logger
from mganalyzer.pipeline import main, run_config
from mganalyzer.pipeline.errors import ConfigInvalid, PipelineError

DEBUG_ENV = "DEBUG_MG_ANALYZER"


class ArgumentParser(argparse.ArgumentParser):
    """Report usage problems as configuration errors, exiting with status 1.
    """
    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(1, "[ERROR] %s: %s\n" % (ConfigInvalid.__name__, message))


def parse_cl_args(in_args):
    description = ("Run read QC, trimming, assembly, assembly QC, taxonomic "
                   "classification and rRNA filtering on paired-end reads.")
    parser = ArgumentParser(prog="mg-analyzer", description=description)
    parser.add_argument("-i", "--input", required=True,
                        help="Directory of paired-end reads named <sample>_1.<ext> "
                             "and <sample>_2.<ext> (fastq, fq, optionally gzipped)")
    parser.add_argument("-o", "--output",
                        help="Output directory. Defaults to the input directory, "
                             "creating stage directories next to the reads")
    parser.add_argument("-t", "--threads", type=int, default=run_config.DEFAULT_THREADS,
                        help="Threads passed to each tool (default: %(default)s)")
    parser.add_argument("-m", "--memory",
                        help="Deprecated and ignored")
    parser.add_argument("-k", "--kraken",
                        help="Kraken 2 database. Required unless --skip-kraken")
    parser.add_argument("-q", "--quast",
                        help="Reference genomes for MetaQUAST assembly QC (optional)")
    parser.add_argument("-r", "--rrna-db",
                        help="SortMeRNA rRNA reference. rRNA filtering only runs when given")
    parser.add_argument("-c", "--config",
                        help="YAML file with per tool resources: cmd and options")
    parser.add_argument("-w", "--overwrite", action="store_true", default=False,
                        help="Replace results of a previous run for the stages that run")
    parser.add_argument("--skip-qc", action="store_true", default=False,
                        help="Skip FastQC on raw and trimmed reads")
    parser.add_argument("--skip-trim", action="store_true", default=False,
                        help="Skip trimming, assembling the raw reads")
    parser.add_argument("--skip-megahit", action="store_true", default=False,
                        help="Skip assembly")
    parser.add_argument("--skip-quast", action="store_true", default=False,
                        help="Skip assembly QC")
    parser.add_argument("--skip-kraken", action="store_true", default=False,
                        help="Skip taxonomic classification")
    parser.add_argument("--skip-rrna", action="store_true", default=False,
                        help="Skip rRNA filtering")
    parser.add_argument("--debug", action="store_true", default=False,
                        help="Log debug messages and every command run "
                             "(also enabled by %s)" % DEBUG_ENV)
    parser.add_argument("-v", "--version", action="version",
                        version="%(prog)s " + version.__version__)
    return parser.parse_args(in_args)

def args_to_config(args, environ=None):
    """Resolve parsed arguments into a RunConfig.
    """
    environ = os.environ if environ is None else environ
    return run_config.resolve(args.input, output_dir=args.output, threads=args.threads,
                              memory=args.memory, kraken_db=args.kraken,
                              quast_db=args.quast, rrna_db=args.rrna_db,
                              overwrite=args.overwrite, skip_qc=args.skip_qc,
                              skip_trim=args.skip_trim, skip_megahit=args.skip_megahit,
                              skip_quast=args.skip_quast, skip_kraken=args.skip_kraken,
                              skip_rrna=args.skip_rrna, config_file=args.config,
                              debug=args.debug or bool(environ.get(DEBUG_ENV)))

def run(in_args):
    """Run the pipeline for command line arguments, returning the exit status.
    """
    args = parse_cl_args(in_args)
    handler = log.setup_console_logging(args.debug or bool(os.environ.get(DEBUG_ENV)))
    try:
        config = args_to_config(args)
        report = main.run_main(config)
    except PipelineError as e:
        logger.error(e.describe())
        return 1
    finally:
        handler.pop_application()
    return 0 if report.status == main.COMPLETED else 1

def main_cl():
    sys.exit(run(sys.argv[1:]))

if __name__ == "__main__":
    main_cl()
