"""Derive sample names, read formats and paths of paired-end read files.

Read files follow `<base>_<1|2>[.p|.u].<ext>`: the mate number, an optional
trimming status (`p` paired, `u` unpaired survivors) and one of the
recognized read extensions. Directories are re-queried per stage with the
status the stage expects, since trimmed reads live in their own directory.
"""
import collections
import os
import re

from mganalyzer.pipeline.errors import PreconditionUnmet

READ_EXTENSIONS = ["fastq", "fq", "fastq.gz", "fq.gz"]
RAW = None
PAIRED = "p"
UNPAIRED = "u"

_READ_RE = re.compile(r"^(?P<base>.+)_(?P<mate>[12])(?:\.(?P<status>[pu]))?"
                      r"\.(?P<ext>(?:fastq|fq)(?:\.gz)?)$")

ReadName = collections.namedtuple("ReadName", "base mate status ext")
SampleIdentity = collections.namedtuple("SampleIdentity", "base ext")

def read_extension(fname):
    """Return the recognized read extension of a file name, or None.
    """
    for ext in sorted(READ_EXTENSIONS, key=len, reverse=True):
        if fname.endswith("." + ext):
            return ext
    return None

def read_files(dirname):
    """Sorted names of the files in dirname carrying a read extension.
    """
    if not os.path.isdir(dirname):
        return []
    return sorted(f for f in os.listdir(dirname)
                  if os.path.isfile(os.path.join(dirname, f)) and read_extension(f))

def parse_read_name(fname):
    m = _READ_RE.match(os.path.basename(fname))
    if m:
        return ReadName(m.group("base"), int(m.group("mate")), m.group("status"), m.group("ext"))

def detect_format(dirname):
    """Return the single read extension used by the files in dirname.

    Directories mixing extensions are rejected rather than resolved by
    whichever file sorts first.
    """
    exts = sorted(set(read_extension(f) for f in read_files(dirname)))
    if not exts:
        raise PreconditionUnmet("No read files (%s) found in %s" % (", ".join(READ_EXTENSIONS), dirname))
    if len(exts) > 1:
        raise PreconditionUnmet("Mixed read file formats in %s: %s" % (dirname, ", ".join(exts)))
    return exts[0]

def detect_base(dirname, status=RAW):
    """Return the sample base name of the single complete read pair in dirname.

    Only files with the given trimming status are considered: RAW for
    `<base>_1.<ext>` inputs, PAIRED for `<base>_1.p.<ext>` trimmed reads.
    """
    mates = collections.defaultdict(set)
    for fname in read_files(dirname):
        name = parse_read_name(fname)
        if name and name.status == status:
            mates[name.base].add(name.mate)
    bases = sorted(b for b, ms in mates.items() if ms == set([1, 2]))
    suffix = "_1%s.<ext>" % ("" if status is None else "." + status)
    if not bases:
        raise PreconditionUnmet("No paired read files named <sample>%s (and matching _2) in %s"
                                % (suffix, dirname))
    if len(bases) > 1:
        raise PreconditionUnmet("Multiple samples found in %s: %s" % (dirname, ", ".join(bases)))
    return bases[0]

def sample_identity(dirname):
    """Infer the sample base name and read extension of an input directory.
    """
    return SampleIdentity(detect_base(dirname), detect_format(dirname))

def read_name(sample, mate, status=RAW):
    status_str = "" if status is None else ".%s" % status
    return "%s_%s%s.%s" % (sample.base, mate, status_str, sample.ext)

def read_pair(dirname, sample, status=RAW):
    """Paths to the forward and reverse reads of a sample in dirname.
    """
    return [os.path.join(dirname, read_name(sample, mate, status)) for mate in [1, 2]]

def trimmed_reads(dirname, sample):
    """Trimming outputs in the order paired tools write them: 1.p 1.u 2.p 2.u
    """
    return [os.path.join(dirname, read_name(sample, mate, status))
            for mate in [1, 2] for status in [PAIRED, UNPAIRED]]
