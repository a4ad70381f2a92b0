"""Packaging for VibeFlo.

Install for development:
    pip install -e ".[test]"
"""

from setuptools import setup, find_packages

setup(
    name="vibeflo",
    version="0.1.0",
    description="Pomodoro focus timer with task binding and session stats",
    packages=find_packages(include=["vibeflo", "vibeflo.*"]),
    python_requires=">=3.10",
    install_requires=[
        "PyQt6>=6.5",
        "SQLAlchemy>=2.0",
        "numpy>=1.24",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "gui_scripts": ["vibeflo = vibeflo.__main__:main"],
    },
)
