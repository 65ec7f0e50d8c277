"""Setup script for the clusterstudy distance-metric and clustering toolkit."""

from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="clusterstudy",
    version="0.1.0",
    author="clusterstudy Team",
    description="Distance metrics, K-Means and DBSCAN for interactive clustering lessons",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Education",
        "Topic :: Scientific/Engineering :: Artificial Intelligence",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    python_requires=">=3.9",
    install_requires=[
        "numpy>=1.24.0",
        "scipy>=1.11.0",
        "scikit-learn>=1.3.0",
        "pydantic>=2.0.0",
        "pyyaml>=6.0.0",
        "hydra-core>=1.3.0",
        "omegaconf>=2.3.0",
        "deepdiff>=6.0.0",
        "typer>=0.9.0",
        "rich>=13.0.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.4.0",
            "pytest-cov>=4.1.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "clusterstudy=clusterstudy.cli.main:app",
        ],
    },
    include_package_data=True,
    package_data={
        "clusterstudy": ["conf/*.yaml", "conf/*.yml"],
    },
)
