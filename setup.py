"""
Setup script for resus-clock.

resus-clock is the pediatric cardiac-arrest protocol timer and training
engine. It serves two roles:

1. Live Clock - 2-minute rhythm checks, drug timing and an auditable event log
2. Training Simulator - stochastic rhythm scenarios with scoring and hints

The 'resus' command is the terminal front end.
"""

from setuptools import find_packages, setup

setup(
    name="resus-clock",
    version="1.0.0",
    description="Pediatric cardiac arrest protocol clock and training simulator",
    long_description=open("README.md", encoding="utf-8").read() if __import__("os").path.exists("README.md") else "",
    long_description_content_type="text/markdown",
    packages=find_packages(include=["resus", "resus.*"]),
    py_modules=["config"],
    python_requires=">=3.10",
    install_requires=[
        # CLI
        "typer>=0.9.0",
        "rich>=13.0.0",
        # Config & Validation
        "pydantic>=2.0.0",
        "pydantic-settings>=2.0.0",
        # Logging
        "loguru>=0.7.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-asyncio>=0.21.0",
            "pytest-cov>=4.0.0",
            "ruff>=0.1.0",
            "mypy>=1.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "resus=resus.delivery.cli:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: Healthcare Industry",
        "Intended Audience :: Education",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Scientific/Engineering :: Medical Science Apps.",
        "Topic :: Education :: Computer Aided Instruction (CAI)",
    ],
    keywords="resuscitation pals cpr simulation training clinical-timer",
)
