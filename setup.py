#!/usr/bin/env python3
"""
rfc5444 - Setup Script

For development installation:
    pip install -e .[dev]
"""

from setuptools import setup, find_packages
from pathlib import Path

# Read version from package
version = "0.1.0"

# Read README
readme_path = Path(__file__).parent / "README.md"
long_description = readme_path.read_text() if readme_path.exists() else ""

setup(
    name="rfc5444",
    version=version,
    description="Zero-copy decoder for RFC 5444 MANET packets",
    long_description=long_description,
    long_description_content_type="text/markdown",
    author="rfc5444 Project",
    license="MIT OR Apache-2.0",

    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.8",

    install_requires=[
        "toml>=0.10",
    ],

    extras_require={
        "dev": [
            "pytest>=7.0",
            "pytest-cov>=3.0",
            "hypothesis>=6.0",
        ],
    },

    entry_points={
        "console_scripts": [
            "rfc5444dump=rfc5444dump.main:main",
        ],
    },

    classifiers=[
        "Development Status :: 3 - Alpha",
        "Environment :: Console",
        "Intended Audience :: Developers",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Topic :: Internet",
        "Topic :: System :: Networking",
    ],

    keywords="rfc5444 manet olsrv2 nhdp packet parser",
)
