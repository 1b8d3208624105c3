#!/usr/bin/env python3
"""
Portfolio Site Setup Configuration
Personal portfolio website server with a JSON-backed contact form
"""

from setuptools import setup, find_packages


def read_requirements(path):
    with open(path, "r", encoding="utf-8") as fh:
        return [line.strip() for line in fh if line.strip() and not line.startswith("#")]


with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="portfolio-site",
    version="1.0.0",
    description="Portfolio website server with static assets and a contact form API",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["api", "api.*", "config", "config.*", "core", "core.*"]),
    py_modules=["cli"],
    classifiers=[
        "Development Status :: 4 - Beta",
        "Framework :: FastAPI",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3.13",
    ],
    python_requires=">=3.10",
    install_requires=read_requirements("config/requirements.txt"),
    extras_require={
        "test": read_requirements("config/requirements-test.txt"),
    },
    entry_points={
        "console_scripts": [
            "portfolio-site=cli:main",
        ],
    },
    include_package_data=True,
    keywords="portfolio website contact-form fastapi",
)

#setup.py ends here
