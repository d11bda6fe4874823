"""Setup configuration for the jigsaw-grid package."""

from setuptools import find_packages, setup

setup(
    name="jigsaw-grid",
    version="0.1.0",
    packages=find_packages(include=["jigsaw_grid", "jigsaw_grid.*"]),
    python_requires=">=3.9",
    install_requires=[
        "numpy",
        "pydantic>=2",
        "pydantic-settings",
    ],
    extras_require={
        "dev": [
            "pytest",
            "pytest-cov",
            "pillow",
            "black",
            "flake8",
            "mypy",
            "isort",
        ],
    },
    entry_points={
        "console_scripts": [
            "jigsaw-grid=jigsaw_grid.cli:main",
        ],
    },
)
