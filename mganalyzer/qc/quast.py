"""Assembly quality assessment with QUAST, or MetaQUAST against references.

http://quast.sourceforge.net/
"""
import os

from mganalyzer.pipeline import config_utils, run_config, stage

def run(contigs, out_dir, config, log_dir=None):
    """Report assembly statistics for contigs into out_dir.

    With an assembly QC database (-q/--quast) MetaQUAST compares contigs to
    the reference genomes it holds, otherwise plain QUAST runs reference free.
    """
    if config.quast_db:
        db = run_config.require_database(config, "quast_db", "-q/--quast", "quast")
        cl = [config_utils.get_program("metaquast", config, "metaquast.py"), "-r", db]
    else:
        cl = [config_utils.get_program("quast", config, "quast.py")]
    cl += [contigs, "-o", out_dir, "-t", str(config.threads)]
    cl += config_utils.get_options("quast", config)
    return stage.run_stage("quast", cl, [contigs], [os.path.join(out_dir, "report.html")],
                           log_dir, "Assembly QC with %s" % os.path.basename(cl[0]))
