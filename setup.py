# setup.py
from setuptools import setup, find_packages

setup(
    name="lilith",
    version="0.1.0",
    description="Evaluation core of the Lilith Lisp dialect",
    packages=find_packages(include=["lilith", "lilith.*"]),
    package_data={"lilith": ["prelude/*.lsp"]},
    python_requires=">=3.10",
    install_requires=[
        "loguru",
    ],
    extras_require={
        "test": ["pytest", "hypothesis"],
    },
    zip_safe=False,
)
