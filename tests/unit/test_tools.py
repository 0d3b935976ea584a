import os

from mganalyzer.assembly import megahit
from mganalyzer.fastq import trim
from mganalyzer.pipeline import naming
from mganalyzer.qc import fastqc, kraken, quast
from mganalyzer.rrna import sortmerna
from tests.conftest import make_reads, write_file

SAMPLE = naming.SampleIdentity("sample", "fastq")


def test_fastqc_report_names():
    assert fastqc.report_file("/in/s_1.fastq", "/q") == "/q/s_1_fastqc.html"
    assert fastqc.report_file("/in/s_1.p.fq.gz", "/q") == "/q/s_1.p_fastqc.html"


def test_fastqc_command(make_config, fake_tools, input_dir, tmp_path):
    reads = naming.read_pair(input_dir, SAMPLE)
    fastqc.run("qc", reads, str(tmp_path), make_config(threads=2))
    call = fake_tools.call("qc")
    assert call.cmd[:5] == ["fastqc", "-t", "2", "-o", str(tmp_path)]
    assert call.cmd[-2:] == reads


def test_trim_command_uses_naming_convention(make_config, fake_tools, input_dir, tmp_path):
    result = trim.trim_adapters(SAMPLE, input_dir, str(tmp_path), make_config())
    call = fake_tools.call("trim")
    assert call.cmd[:4] == ["trimmomatic", "PE", "-threads", "8"]
    assert [os.path.basename(x) for x in call.cmd[4:10]] == [
        "sample_1.fastq", "sample_2.fastq", "sample_1.p.fastq", "sample_1.u.fastq",
        "sample_2.p.fastq", "sample_2.u.fastq"]
    assert call.cmd[10:] == trim.DEFAULT_STEPS
    assert result.succeeded


def test_trim_options_from_config(make_config, fake_tools, input_dir, tmp_path):
    fname = write_file(str(tmp_path / "system.yaml"),
                       "resources:\n  trimmomatic:\n    options: [\"ILLUMINACLIP:a.fa:2:30:10\"]\n")
    trim.trim_adapters(SAMPLE, input_dir, str(tmp_path / "t"), make_config(config_file=fname))
    assert fake_tools.call("trim").cmd[-1] == "ILLUMINACLIP:a.fa:2:30:10"


def test_megahit_moves_results(make_config, fake_tools, tmp_path):
    reads = make_reads(str(tmp_path / "t"), status="p")
    out_dir = str(tmp_path / "assembly")
    os.makedirs(out_dir)
    result = megahit.assemble(reads, out_dir, make_config())
    assert result.outputs == [os.path.join(out_dir, "final.contigs.fa")]
    assert os.listdir(out_dir) == ["final.contigs.fa"]
    cmd = fake_tools.call("megahit").cmd
    assert cmd[:5] == ["megahit", "-1", reads[0], "-2", reads[1]]


def test_megahit_failure_leaves_no_partial_results(make_config, fake_tools, tmp_path):
    fake_tools.fail = "megahit"
    out_dir = str(tmp_path / "assembly")
    os.makedirs(out_dir)
    result = megahit.assemble(make_reads(str(tmp_path / "t")), out_dir, make_config())
    assert not result.succeeded
    assert os.listdir(out_dir) == []


def test_quast_with_and_without_references(make_config, fake_tools, tmp_path):
    refs = str(tmp_path / "refs")
    os.makedirs(refs)
    quast.run("contigs.fa", str(tmp_path / "q"), make_config())
    quast.run("contigs.fa", str(tmp_path / "q"), make_config(quast_db=refs))
    plain, meta = fake_tools.calls
    assert plain.cmd[0] == "quast.py"
    assert meta.cmd[:3] == ["metaquast.py", "-r", refs]
    assert plain.expected_outputs == [os.path.join(str(tmp_path / "q"), "report.html")]


def test_kraken_command(make_config, fake_tools, kraken_db, tmp_path):
    kraken.run("contigs.fa", str(tmp_path), make_config())
    call = fake_tools.call("kraken")
    assert call.cmd[:3] == ["kraken2", "--db", kraken_db]
    assert call.cmd[-1] == "contigs.fa"
    assert "--use-names" in call.cmd
    assert call.expected_outputs == [os.path.join(str(tmp_path), "kraken_output"),
                                     os.path.join(str(tmp_path), "kraken_report")]


def test_kraken_summary(tmp_path):
    report = write_file(str(tmp_path / "kraken_report"),
                        "50.00\t5\t5\tU\t0\tunclassified\n"
                        "10.00\t1\t1\tS\t7\t      Vibrio cholerae\n"
                        "40.00\t4\t4\tS\t8\t      Bacteroides fragilis\n")
    assert kraken.summarize(report) == [
        {"name": "Bacteroides fragilis", "percent": 40.0, "reads": 4},
        {"name": "Vibrio cholerae", "percent": 10.0, "reads": 1}]
    assert len(kraken.summarize(report, max_species=1)) == 1


def test_kraken_summary_skips_malformed_lines(tmp_path):
    report = write_file(str(tmp_path / "kraken_report"),
                        "n/a\t1\t1\tS\t7\t      Vibrio cholerae\n"
                        "40.00\tmany\t4\tS\t8\t      Bacteroides fragilis\n"
                        "5.00\t2\t2\tS\t9\t      Escherichia coli\n")
    assert kraken.summarize(report) == [
        {"name": "Escherichia coli", "percent": 5.0, "reads": 2}]


def test_sortmerna_command(make_config, fake_tools, tmp_path):
    db = write_file(str(tmp_path / "silva.fasta"), ">r\nACGT\n")
    reads = make_reads(str(tmp_path / "t"), status="p")
    out_dir = str(tmp_path / "rrna")
    sortmerna.filter_rrna(SAMPLE, reads, out_dir, make_config(rrna_db=db))
    call = fake_tools.call("rrna")
    assert call.cmd[:3] == ["sortmerna", "--ref", db]
    assert call.expected_outputs == [os.path.join(out_dir, "sample_rrna.log")]
    assert [f for f in os.listdir(out_dir) if f.startswith("mgtx")] == []
