"""
Setup script for the quiz-battle package.

Installs the quiz_battle engine from src/, together with its SQLite
schema and the bundled demo catalog.
"""

from setuptools import setup, find_packages

setup(
    name="quiz-battle",
    version="1.0.0",
    description="Quiz Battle - two-player quiz match engine",
    author="Course Staff",
    python_requires=">=3.10",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    install_requires=[
        "python-dotenv>=1.0.0",
        "pydantic>=2.5.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
        "dev": [
            "pytest>=7.0",
            "build",
            "wheel",
        ],
    },
    package_data={
        "quiz_battle._store": ["schema.sql"],
        "quiz_battle": ["demo_data/*.json"],
    },
    entry_points={
        "console_scripts": [
            "quiz-battle=quiz_battle.cli:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Education",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
)
