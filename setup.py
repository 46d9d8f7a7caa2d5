# setup.py - Package the cube engine and its public facade
from setuptools import setup, find_packages

setup(
    name="sparsecube",
    version="0.1.0",
    description="Labeled sparse N-dimensional matrix algebra",
    packages=find_packages(include=["cube_core", "cube_core.*", "sparsecube", "sparsecube.*"]),
    python_requires=">=3.9",
    install_requires=[
        "numpy",
        "loguru",
        "pydantic>=2",
        "pyyaml",
    ],
    extras_require={
        "test": ["pytest"],
    },
)
