"""
Setup file.
"""

import os

from setuptools import find_packages, setup

URL = "https://github.com/mozcpp/mozcpp"
KEYWORDS = "mozilla mach clang compiler configuration intellisense include-paths defines"
HERE = os.path.dirname(os.path.abspath(__file__))

with open(os.path.join(HERE, "src", "mozcpp", "__init__.py"), encoding="utf-8") as f:
    VERSION = next(line.split('"')[1] for line in f if line.startswith("__version__"))


if __name__ == "__main__":
    setup(
        name="mozcpp",
        version=VERSION,
        description="Per-file compiler configuration for mach recursive make builds",
        keywords=KEYWORDS,
        url=URL,
        package_dir={"": "src"},
        packages=find_packages(where="src"),
        python_requires=">=3.8",
        install_requires=[
            "psutil>=5.9",
        ],
        extras_require={
            "test": [
                "pytest>=7.0",
            ],
        },
        entry_points={
            "console_scripts": [
                "mozcpp=mozcpp.cli:main",
            ],
        },
        include_package_data=True)
