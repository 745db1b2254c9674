# setup.py
from setuptools import setup, find_namespace_packages

setup(
    name="minipack",
    version="0.1.0",
    description="Manifest and dependency resolution engine for multi-entry mini-programs",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["minipack", "minipack.*"]),
    package_data={"minipack": ["assets/*.acss"]},
    python_requires=">=3.9",
    install_requires=[],
    extras_require={
        "test": [
            "pytest",
            "pytest-asyncio",
        ],
    },
    entry_points={
        'console_scripts': [
            'minipack=minipack.interface.cli.app:main',
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
