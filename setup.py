# SPDX-License-Identifier: MIT
# Copyright (c) 2025 modkit contributors

"""Setup configuration for modkit-error-reporting package."""

from pathlib import Path

from setuptools import find_packages, setup

# Read the README file
this_directory = Path(__file__).parent
long_description = (this_directory / "README.md").read_text(encoding="utf-8")

setup(
    name="modkit-error-reporting",
    version="0.1.0",
    author="ModKit Contributors",
    description="Deduplicated, copyable error reports for client-side mod features",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.12",
    ],
    python_requires=">=3.10",
    install_requires=[
        "pyperclip>=1.8.0",
    ],
    extras_require={
        "sentry": [
            "sentry-sdk>=2.0.0",
        ],
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
        ],
    },
)
