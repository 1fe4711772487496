"""
This module configures the package for distribution and installation.
"""

from setuptools import setup, find_packages

setup(
    name="pyfractal",
    version="0.0.0",
    packages=find_packages(exclude=["tests"]),
    python_requires=">=3.9",
    install_requires=["numpy", "pygame", "pillow"],
    extras_require={"test": ["pytest"]},
    entry_points={
        "console_scripts": [
            "pyfractal = pyfractal.__main__:main",
        ]
    },
)
