"""Setup script for lattice-objects package."""
from setuptools import setup, find_packages

setup(
    name="lattice-objects",
    version="0.1.0",
    description="Command-line client for the Lattice object store",
    long_description=open("README.md").read() if __file__ else "",
    long_description_content_type="text/markdown",
    author="Lattice Objects Team",
    license="AGPL-3.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.9",
    install_requires=[
        "requests>=2.31.0",
        "pydantic>=2.5.0",
        "typing-extensions>=4.9.0",
        "typer>=0.12.0",
        "rich>=13.7.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.4.3",
            "pytest-cov>=4.1.0",
            "pytest-mock>=3.12.0",
            "black>=23.12.0",
            "flake8>=7.0.0",
            "mypy>=1.8.0",
            "isort>=5.13.2",
            "responses>=0.24.1",
        ],
    },
    entry_points={
        "console_scripts": [
            "lattice-objects=lattice_objects.cli:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: GNU Affero General Public License v3",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
)
