from setuptools import setup, find_packages
from pathlib import Path

# Read the README file for the long description
this_directory = Path(__file__).parent
readme = this_directory / "README.md"
long_description = readme.read_text() if readme.exists() else ""

setup(
    name="jirafs",
    version="0.1.0",
    description="Browse a Jira server as a read-only virtual filesystem",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["jirafs", "jirafs.*"]),
    entry_points={
        "console_scripts": [
            "jirafs=jirafs.cli:app"
        ],
    },
    install_requires=[
        "typer>=0.9.0",
        "rich>=13.0.0",
        "httpx>=0.24.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
            "black>=23.0.0",
            "isort>=5.0.0",
            "flake8>=6.0.0",
            "mypy>=1.0.0",
        ],
        "test": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Topic :: Software Development :: Bug Tracking",
        "Topic :: System :: Filesystems",
    ],
    python_requires='>=3.8',
)
