"""Setup script for FundPulse."""

from pathlib import Path

from setuptools import find_packages, setup

# Read the README for long description
readme_path = Path(__file__).parent / "README.md"
long_description = ""
if readme_path.exists():
    long_description = readme_path.read_text(encoding="utf-8")

setup(
    name="fundpulse",
    version="1.0.0",
    description="Mutual fund info backend - mirrors PulseDB fund data into SQLite and serves it over REST",
    long_description=long_description,
    long_description_content_type="text/markdown",
    author="FundPulse Team",
    python_requires=">=3.8",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "flask>=2.2.0",
        "requests>=2.28.0",
        "python-dateutil>=2.8.0",
        "python-dotenv>=1.0.0",
        "apscheduler>=3.10.0,<4",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
            "flake8>=6.0.0",
            "black>=23.0.0",
            "isort>=5.12.0",
            "mypy>=1.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "fundpulse=fundpulse.manage:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Intended Audience :: Financial and Insurance Industry",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Office/Business :: Financial",
        "Framework :: Flask",
    ],
    keywords="mutual fund, nav, sip, returns, flask, sqlite, finance",
)
