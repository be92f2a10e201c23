"""setuptools setup for ZenFocus.

Install for development:
    pip install -e ".[test]"
    pytest
"""

from setuptools import setup, find_packages

setup(
    name="zenfocus",
    version="0.1.0",
    description="Timer and session engine for a focus-timer app",
    packages=find_packages(include=["zenfocus", "zenfocus.*"]),
    python_requires=">=3.10",
    install_requires=[
        "PyQt6>=6.4",
        "SQLAlchemy>=2.0",
        "pydantic>=2.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": ["zenfocus=zenfocus.__main__:main"],
    },
)
