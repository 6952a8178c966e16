#!/usr/bin/env python3
"""
Setup script for nexusconvert package.
"""

import re
from setuptools import setup, find_packages
from pathlib import Path

# Read the README file for long description
this_directory = Path(__file__).parent
long_description = (this_directory / "README.md").read_text(encoding='utf-8')

# Read requirements from requirements.txt
requirements = []
requirements_path = this_directory / "requirements.txt"
if requirements_path.exists():
    requirements = requirements_path.read_text().strip().split('\n')
    requirements = [req.strip() for req in requirements if req.strip() and not req.startswith('#')]

# Read version from package constants without importing its dependencies
constants = (this_directory / "nexusconvert" / "core" / "constants.py").read_text(encoding='utf-8')
version = re.search(r'^VERSION = "([^"]+)"', constants, re.M).group(1)

setup(
    name="nexusconvert",
    version=version,
    description="Convert NEXUS alignments to FASTA, PHYLIP and MEGA and append analysis blocks",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Science/Research",
        "Topic :: Scientific/Engineering :: Bio-Informatics",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Operating System :: OS Independent",
    ],
    keywords="phylogenetics bioinformatics nexus fasta phylip mega alignment paup mrbayes",
    python_requires=">=3.8",
    install_requires=requirements,
    extras_require={
        "dev": ["pytest>=6.0", "pytest-cov"],
    },
    entry_points={
        "console_scripts": [
            "nexusconvert=nexusconvert.cli:main",
            "nexus2fasta=nexusconvert.cli:nexus2fasta",
            "nexus2phylip=nexusconvert.cli:nexus2phylip",
            "nexus2mega=nexusconvert.cli:nexus2mega",
            "reformat-nexus=nexusconvert.cli:reformat_nexus",
        ],
    },
    zip_safe=False,
)
