#!/usr/bin/env python3
"""
Setup configuration for Code Collector.
"""

from setuptools import setup, find_packages
from pathlib import Path

# Read the contents of README file
this_directory = Path(__file__).parent
long_description = (this_directory / "README.md").read_text(encoding="utf-8")

# Read requirements from requirements.txt
requirements = []
if (this_directory / "requirements.txt").exists():
    requirements = (this_directory / "requirements.txt").read_text().strip().split('\n')
    requirements = [req.strip() for req in requirements if req.strip() and not req.startswith('#')]

setup(
    name="code-collector",
    version="1.0.0",
    author="Project Think",
    author_email="",
    description="Collect source files and their local imports into a single LLM-ready text blob",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=['parsers*', 'resolvers*', 'collection*']),
    py_modules=[
        'base_classes',
        'code_collector',
        'collect',
        'collection_errors',
        'collector_configs',
        'file_utils',
        'token_counter',
        'run_tests',
    ],
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Topic :: Software Development :: Documentation",
        "Topic :: Text Processing",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.8",
    install_requires=requirements,
    extras_require={
        "dev": [
            "pytest>=6.0",
            "pytest-cov",
            "black",
            "flake8",
            "mypy",
        ],
        "test": [
            "pytest>=6.0",
            "pytest-cov",
            "pytest-mock",
        ],
    },
    entry_points={
        "console_scripts": [
            "code-collector=collect:main",
            "run-collector-tests=run_tests:main",
        ],
    },
    include_package_data=True,
    keywords=[
        "llm",
        "context",
        "imports",
        "dependency-graph",
        "code-review",
        "clipboard",
    ],
)
