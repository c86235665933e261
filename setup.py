from setuptools import setup, find_packages
from pathlib import Path

setup(
    name="flush_annotation",
    version=Path("./flush_annotation/VERSION").read_text().strip(),
    packages=find_packages(include=["flush_annotation", "flush_annotation.*"]),
    package_data={"flush_annotation": ["VERSION"]},
    install_requires=[
        "numpy",
        "easydict",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "flush_annotation=flush_annotation.cli:main",
        ],
    },
)
