# setup.py - Compressed Sparse Fiber index
from setuptools import setup, find_packages

setup(
    name="compressed_sparse_fiber",
    version="0.1.0",
    description="Compressed Sparse Fiber (CSF) index for N-dimensional sparse tensors",
    packages=find_packages(include=["sparse_fiber", "sparse_fiber.*"]),
    python_requires=">=3.8",
    install_requires=[
        "numpy",
    ],
    extras_require={
        "test": ["pytest"],
    },
)
