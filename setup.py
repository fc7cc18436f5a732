#!/usr/bin/env python

from setuptools import setup

setup(
    name="pbxwriter",
    version="0.1.0",
    packages=[
        "pbxwriter",
        "pbxwriter.details",
        "pbxwriter.details.targets",
        "pbxwriter.generators",
        "pbxwriter.generators.xcode",
    ],
    python_requires=">=3.9",
    extras_require={"test": ["pytest"]},
    entry_points={"console_scripts": ["pbxwriter = pbxwriter.__main__:main"]},
)
