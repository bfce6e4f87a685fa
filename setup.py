#!/usr/bin/env python3
"""
Setup script for the proctree Python package.
"""

from setuptools import setup, find_packages
from pathlib import Path


# Read requirements from requirements.txt
def read_requirements():
    requirements_file = Path(__file__).parent / "requirements.txt"
    if requirements_file.exists():
        with open(requirements_file, "r") as f:
            return [
                line.strip()
                for line in f
                if line.strip() and not line.startswith("#")
            ]
    return []


# Read version from __init__.py
def get_version():
    init_file = Path(__file__).parent / "proctree" / "__init__.py"
    if init_file.exists():
        with open(init_file, "r") as f:
            for line in f:
                if line.startswith("__version__"):
                    return line.split("=")[1].strip().strip('"').strip("'")
    return "1.0.0"


setup(
    name="proctree",
    version=get_version(),
    description="Inspect and signal a live Linux process tree through /proc",
    long_description="Relationship queries, zombie detection and subtree-wide signal delivery for Linux process trees.",
    author="proctree Team",
    python_requires=">=3.9",
    packages=find_packages(include=["proctree", "proctree.*"]),
    install_requires=read_requirements(),
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "proctree=proctree.cli:main",
        ]
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: System Administrators",
        "License :: OSI Approved :: MIT License",
        "Operating System :: POSIX :: Linux",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Topic :: System :: Systems Administration",
        "Topic :: System :: Monitoring",
    ],
    keywords="process tree proc zombie signal kill linux",
    zip_safe=False,
)
