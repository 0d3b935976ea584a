"""Taxonomic classification of assembled contigs using Kraken 2.

https://ccb.jhu.edu/software/kraken2/
"""
import os

from mganalyzer.log import logger
from mganalyzer.pipeline import config_utils, run_config, stage

def out_files(out_dir):
    return {"output": os.path.join(out_dir, "kraken_output"),
            "report": os.path.join(out_dir, "kraken_report"),
            "classified": os.path.join(out_dir, "kraken_classified")}

def run(contigs, out_dir, config, log_dir=None):
    """Run kraken2 on contigs, writing per-sequence output and a summary report.
    """
    db = run_config.require_database(config, "kraken_db", "-k/--kraken", "kraken")
    out = out_files(out_dir)
    cl = [config_utils.get_program("kraken2", config), "--db", db,
          "--threads", str(config.threads),
          "--output", out["output"], "--classified-out", out["classified"],
          "--report", out["report"], "--use-names"]
    cl += config_utils.get_options("kraken2", config)
    cl += [contigs]
    return stage.run_stage("kraken", cl, [contigs], [out["output"], out["report"]],
                           log_dir, "kraken2 classification: %s" % os.path.basename(contigs))

def summarize(report_file, max_species=10):
    """Species level abundances from a kraken report, most abundant first.

    Report columns are percentage, clade reads, direct reads, rank code,
    taxonomy id and the indented scientific name. Lines that do not parse
    are skipped.
    """
    species = []
    with open(report_file, errors="replace") as handle:
        for line in handle:
            cols = line.rstrip("\n").split("\t")
            if len(cols) < 6 or cols[3].strip() != "S":
                continue
            try:
                percent, reads = float(cols[0]), int(cols[1])
            except ValueError:
                logger.warning("Skipping unexpected kraken report line: %s" % line.rstrip())
                continue
            species.append({"name": cols[5].strip(), "percent": percent, "reads": reads})
    species.sort(key=lambda x: x["reads"], reverse=True)
    return species[:max_species]
