"""
OptWidgets setup.py — Package configuration.
"""

from setuptools import find_packages, setup

setup(
    name="optwidgets",
    version="0.3.0",
    description="OptWidgets — Reactive option-input widgets",
    packages=find_packages(include=["optwidgets", "optwidgets.*"]),
    python_requires=">=3.11",
    install_requires=[
        "reflex>=0.6.0",
        "pydantic>=2.5",
        "pyyaml>=6.0",
    ],
    extras_require={
        "test": [
            "pytest>=8.0",
        ],
    },
)
