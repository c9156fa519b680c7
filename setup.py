"""Setup script for summarymetrics."""

from setuptools import find_packages, setup

setup(
    name="summarymetrics",
    version="0.1.0",
    description="Concurrent Summary metrics with reservoir-sampled quantiles, plus a simulated workload driver",
    author="summarymetrics Team",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    python_requires=">=3.9",
    install_requires=[
        "simpy>=4.0",
        "numpy>=1.24",
        "pandas>=2.0",
        "pyyaml>=6.0",
        "click>=8.1",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "summarymetrics=summarymetrics.cli:cli",
        ],
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Topic :: System :: Monitoring",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
    ],
)
