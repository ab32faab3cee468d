#!/usr/bin/env python3
"""
Setup script for tvremote
"""

from setuptools import setup, find_namespace_packages

setup(
    name="tvremote",
    version="0.0.1",
    description="Single-shot SSAP remote control for LG webOS TVs",
    packages=find_namespace_packages(include=["ssap", "ssap.*", "tvremote", "tvremote.*"]),
    install_requires=[
        "websockets==15.0",
        "python-socks[asyncio]>=2.4",
        "click==8.1.7",
        "typer==0.12.3",
        "rich==13.9.2",
        "PyYAML==6.0.2",
    ],
    extras_require={
        "test": [
            "pytest==8.4.2",
            "pytest-asyncio==1.2.0",
        ],
    },
    python_requires=">=3.10",
    entry_points={
        'console_scripts': [
            'tvremote=tvremote.cli:main',
        ],
    },
)
