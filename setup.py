"""Build configuration for carafe."""
import os
import re

from setuptools import find_packages, setup


def read_version():
    path = os.path.join(os.path.dirname(__file__), "src", "carafe", "__init__.py")
    with open(path, encoding="utf-8") as f:
        return re.search(r'^__version__ = "([^"]+)"', f.read(), re.M).group(1)


setup(
    name="carafe",
    version=read_version(),
    description="Controller base class, request lifecycle and themed error pages for WSGI apps",
    package_dir={"": "src"},
    packages=find_packages("src"),
    python_requires=">=3.9",
    install_requires=[
        "werkzeug>=3.0",
        "jinja2>=3.1",
        "markupsafe>=2.1",
        "click>=8.1",
    ],
    extras_require={
        "test": ["pytest>=7.4,<9.1"],
    },
    entry_points={
        "console_scripts": [
            "carafe=carafe.cli:main",
        ],
    },
)
