"""
Setup script for notion-batch.

notion-batch runs chunk-oriented batch jobs over Notion databases:

1. Reader - Paginated, restartable reads of a database query
2. Writers - Create Notion pages, or insert rows into a SQL table
3. CLI - Inspect a database or export it to SQLite/PostgreSQL

The 'notion-batch' command is the entry point.
"""

from setuptools import find_packages, setup

setup(
    name="notion-batch",
    version="1.0.0",
    description="Chunk-oriented batch reading and writing of Notion databases",
    long_description=open("README.md", encoding="utf-8").read() if __import__("os").path.exists("README.md") else "",
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.10",
    install_requires=[
        # Notion
        "notion-client>=2.2.1,<3",
        # HTTP
        "httpx>=0.25.0",
        "requests>=2.28.0",
        # CLI
        "typer>=0.9.0",
        "rich>=13.0.0",
        # Database
        "sqlalchemy>=2.0.0",
        # Config & Validation
        "pydantic>=2.0.0",
        "pydantic-settings>=2.0.0",
        # Logging
        "loguru>=0.7.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
            "ruff>=0.1.0",
            "mypy>=1.0.0",
        ],
        "postgres": [
            "psycopg2-binary>=2.9.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "notion-batch=notion_batch.cli.main:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Software Development :: Libraries",
    ],
    keywords="notion batch etl reader writer",
)
