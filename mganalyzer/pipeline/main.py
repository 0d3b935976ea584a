"""Main entry point for running the analysis pipeline on a directory of reads.

Stages run strictly one after another, each consuming files written by the
stages before it:

  qc -> trim -> qc_trimmed -> megahit -> quast -> kraken -> rrna

Every stage moves from pending to running and then to succeeded or failed,
or is marked skipped up front. The first failure aborts the run and leaves
all later stages pending; outputs of finished stages stay in place.
"""
import collections
import datetime
import os

import yaml

from mganalyzer import log
from mganalyzer.assembly import megahit
from mganalyzer.fastq import trim
from mganalyzer.log import logger
from mganalyzer.pipeline import naming, stage, workspace
from mganalyzer.pipeline.errors import PipelineError, PreconditionUnmet
from mganalyzer.qc import fastqc, kraken, quast
from mganalyzer.rrna import sortmerna

COMPLETED = "completed"
ABORTED = "aborted"
SUMMARY_FILE = "mg-analyzer-summary.yaml"

STAGES = ["qc", "trim", "qc_trimmed", "megahit", "quast", "kraken", "rrna"]
STAGE_DIRS = {"qc": workspace.QUALITY,
              "trim": workspace.TRIMMED,
              "qc_trimmed": workspace.QUALITY,
              "megahit": workspace.ASSEMBLY,
              "quast": workspace.QUAST,
              "kraken": workspace.KRAKEN,
              "rrna": workspace.RRNA}
SKIP_FLAGS = {"qc": "--skip-qc", "trim": "--skip-trim", "megahit": "--skip-megahit",
              "quast": "--skip-quast", "kraken": "--skip-kraken", "rrna": "--skip-rrna"}

RunReport = collections.namedtuple("RunReport",
                                   "status states results failed_stage error sample workspace")

def run_main(config):
    """Run the pipeline for a resolved RunConfig, returning a RunReport.

    Problems found before any stage starts (ambiguous input reads, workspace
    conflicts) raise PipelineError. Stage failures abort the run and are
    reported in the returned RunReport.
    """
    sample = naming.sample_identity(config.input_dir)
    logger.info("Sample %s with %s reads in %s" % (sample.base, sample.ext, config.input_dir))
    enabled = enabled_stages(config)
    work = workspace.ensure(config, [STAGE_DIRS[s] for s in STAGES if enabled[s]])
    with log.file_logging(work.log_dir):
        report = _run_stages(config, work, sample, enabled)
        write_summary(report, config)
    return report

def enabled_stages(config):
    """Map each stage to whether it runs with this configuration.

    Re-checking trimmed reads only makes sense when both QC and trimming
    run, and rRNA filtering needs a reference database.
    """
    return collections.OrderedDict([
        ("qc", not config.skip_qc),
        ("trim", not config.skip_trim),
        ("qc_trimmed", not config.skip_qc and not config.skip_trim),
        ("megahit", not config.skip_megahit),
        ("quast", not config.skip_quast),
        ("kraken", not config.skip_kraken),
        ("rrna", not config.skip_rrna and bool(config.rrna_db))])

def _run_stages(config, work, sample, enabled):
    states = collections.OrderedDict((s, stage.PENDING if enabled[s] else stage.SKIPPED)
                                     for s in STAGES)
    results = []
    for name in STAGES:
        if states[name] == stage.SKIPPED:
            logger.info("Skipping %s" % name)
            continue
        states[name] = stage.RUNNING
        try:
            result = _STAGE_FNS[name](config, work, sample, states)
        except PipelineError as e:
            result = stage.failed(name, e)
        results.append(result)
        if not result.succeeded:
            states[name] = stage.FAILED
            logger.error(result.error.describe())
            return RunReport(ABORTED, states, results, name, result.error, sample, work)
        states[name] = stage.SUCCEEDED
    logger.info("Finished processing %s: results in %s" % (sample.base, work.root))
    return RunReport(COMPLETED, states, results, None, None, sample, work)

# ## Inputs of each stage

def _reads_for_assembly(work, sample, states, consumer):
    """Trimmed paired reads, or the raw input reads when trimming was skipped.

    Trimmed reads are looked up again under the post-trimming naming
    convention and must belong to the same sample.
    """
    if states["trim"] == stage.SKIPPED:
        return naming.read_pair(work.input_dir, sample)
    trimmed_dir = work.dirs[workspace.TRIMMED]
    base = naming.detect_base(trimmed_dir, naming.PAIRED)
    if base != sample.base:
        raise PreconditionUnmet("Trimmed reads in %s belong to sample %s, expected %s"
                                % (trimmed_dir, base, sample.base), consumer)
    return naming.read_pair(trimmed_dir, sample, naming.PAIRED)

def _contigs(work, states, consumer):
    """Assembled contigs, failing clearly when assembly was skipped without
    leaving contigs from an earlier run.
    """
    contigs = megahit.contigs_file(work.dirs[workspace.ASSEMBLY])
    if states["megahit"] == stage.SKIPPED:
        if not os.path.exists(contigs):
            raise PreconditionUnmet("%s not found: assembly was skipped (%s)"
                                    % (contigs, SKIP_FLAGS["megahit"]), consumer)
        logger.info("Using contigs from a previous run: %s" % contigs)
    return contigs

# ## Stages

def _qc(config, work, sample, states):
    return fastqc.run("qc", naming.read_pair(work.input_dir, sample),
                      work.dirs[workspace.QUALITY], config, work.log_dir)

def _trim(config, work, sample, states):
    return trim.trim_adapters(sample, work.input_dir, work.dirs[workspace.TRIMMED],
                              config, work.log_dir)

def _qc_trimmed(config, work, sample, states):
    reads = _reads_for_assembly(work, sample, states, "qc_trimmed")
    return fastqc.run("qc_trimmed", reads, work.dirs[workspace.QUALITY], config, work.log_dir)

def _megahit(config, work, sample, states):
    reads = _reads_for_assembly(work, sample, states, "megahit")
    return megahit.assemble(reads, work.dirs[workspace.ASSEMBLY], config, work.log_dir)

def _quast(config, work, sample, states):
    return quast.run(_contigs(work, states, "quast"), work.dirs[workspace.QUAST],
                     config, work.log_dir)

def _kraken(config, work, sample, states):
    return kraken.run(_contigs(work, states, "kraken"), work.dirs[workspace.KRAKEN],
                      config, work.log_dir)

def _rrna(config, work, sample, states):
    reads = _reads_for_assembly(work, sample, states, "rrna")
    return sortmerna.filter_rrna(sample, reads, work.dirs[workspace.RRNA], config, work.log_dir)

_STAGE_FNS = {"qc": _qc, "trim": _trim, "qc_trimmed": _qc_trimmed, "megahit": _megahit,
              "quast": _quast, "kraken": _kraken, "rrna": _rrna}

# ## Run summary

def write_summary(report, config):
    """Write a YAML summary of stage states and outputs into the log directory.
    """
    out_file = os.path.join(report.workspace.log_dir, SUMMARY_FILE)
    outputs = dict((r.name, r.outputs) for r in report.results)
    stages = [{"name": name, "state": state, "outputs": outputs.get(name, [])}
              for name, state in report.states.items()]
    summary = {"date": str(datetime.datetime.now()),
               "sample": report.sample.base,
               "format": report.sample.ext,
               "input": config.input_dir,
               "output": report.workspace.root,
               "status": report.status,
               "stages": stages}
    if report.error is not None:
        summary["failed_stage"] = report.failed_stage
        summary["error"] = report.error.describe()
    kraken_report = kraken.out_files(report.workspace.dirs[workspace.KRAKEN])["report"]
    if report.states["kraken"] == stage.SUCCEEDED:
        summary["kraken_species"] = kraken.summarize(kraken_report)
    with open(out_file, "w") as out_handle:
        yaml.safe_dump(summary, out_handle, default_flow_style=False, allow_unicode=False)
    return out_file
