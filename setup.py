#!/usr/bin/env python

"""Setup file and install script for the mg-analyzer read analysis pipeline"""

import os
import subprocess

import setuptools

VERSION = '0.2.0'

# add version number and git commit hash of the current revision to version.py
try:
    git_run = subprocess.run(['git', 'rev-parse', '--short', 'HEAD'],
                             stdout=subprocess.PIPE, stderr=subprocess.DEVNULL)
    git_run.check_returncode()
except (OSError, subprocess.SubprocessError):
    commit_hash = ''
else:
    commit_hash = git_run.stdout.strip().decode()

here = os.path.dirname(os.path.abspath(__file__))
with open(os.path.join(here, 'mganalyzer', 'version.py'), 'w') as version_file:
    version_file.writelines([f'__version__ = "{VERSION}"\n',
                             f'__git_revision__ = "{commit_hash}"\n'])

# external tools (fastqc, trimmomatic, megahit, quast, kraken2, sortmerna)
# are installed separately, for instance from bioconda
setuptools.setup(name='mg-analyzer',
                 version=VERSION,
                 description='Paired-end metagenomic read QC, trimming, assembly and classification',
                 packages=setuptools.find_packages(exclude=['tests', 'tests.*']),
                 python_requires='>=3.8',
                 install_requires=['logbook', 'toolz', 'PyYAML'],
                 extras_require={'test': ['pytest', 'pytest-mock', 'mock']},
                 scripts=['scripts/mg_analyzer.py'],
                 entry_points={'console_scripts': ['mg-analyzer = mganalyzer.commandline:main_cl']})
