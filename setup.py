from __future__ import annotations

from setuptools import find_namespace_packages, setup


setup(
    name="modgraph",
    version="0.1.0",
    description="Focus-filtered Go module dependency graphs rendered as Graphviz DOT.",
    python_requires=">=3.10",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["modgraph", "modgraph.*"]),
    install_requires=[
        "polars>=1.0",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "modgraph=modgraph.cli:main",
        ],
    },
)
