#!/usr/bin/env python
"""Run the mg-analyzer pipeline on a directory of paired-end reads.

Drives read QC (FastQC), trimming (Trimmomatic), assembly (MEGAHIT),
assembly QC (QUAST), taxonomic classification (Kraken 2) and optional rRNA
filtering (SortMeRNA), writing one directory per stage:

  <output>/quality  <output>/trimmed  <output>/assembly
  <output>/quast    <output>/kraken   <output>/rrna      <output>/log

Usage:
  mg_analyzer.py -i <input_dir> [-o <output_dir>] -k <kraken_db> [options]

Set DEBUG_MG_ANALYZER to log every command that runs.
"""
import sys

from mganalyzer.commandline import run

if __name__ == "__main__":
    sys.exit(run(sys.argv[1:]))
