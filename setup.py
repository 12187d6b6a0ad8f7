"""
adapt_de: Configuration-Driven Adaptive Parameter Control for DE
================================================================

Installation:
    pip install -e .

Or with test tooling:
    pip install -e ".[dev]"
"""
from setuptools import setup, find_packages

setup(
    name="adapt_de",
    version="1.0.0",
    author="adapt_de Research Team",
    description="Configuration-driven adaptive parameter control for differential evolution",
    long_description=open("README.md", encoding="utf-8").read(),
    long_description_content_type="text/markdown",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    python_requires=">=3.8",
    install_requires=[
        "numpy>=1.21.0",
        "scipy>=1.7.0",
        "pandas>=1.3.0",
    ],
    extras_require={
        "dev": ["pytest", "pytest-cov", "black", "flake8", "mypy"],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Science/Research",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Topic :: Scientific/Engineering :: Mathematics",
    ],
    entry_points={
        "console_scripts": [
            "adapt-de=adapt_de.cli:main",
        ],
    },
)
