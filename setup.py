# setup.py
from setuptools import setup, find_packages

setup(
    name="shiftcompass",
    version="0.1.0",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    python_requires=">=3.8",
    install_requires=[
        "python-dateutil",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "shiftcompass=shiftcompass.main:run_wizard",
        ],
    },
)
