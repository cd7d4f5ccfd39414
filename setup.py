"""
Field Reorder - reorder struct literal and pattern fields to declaration order
"""

from setuptools import find_packages, setup

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="field-reorder",
    version="1.0.0",
    author="Agromarin",
    description="Reorder Rust struct literal and pattern fields to declaration order",
    long_description=long_description,
    long_description_content_type="text/markdown",
    url="https://github.com/agromarin/field-reorder",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    package_data={"field_reorder.core": ["grammar.lark"]},
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Topic :: Software Development :: Libraries :: Python Modules",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    python_requires=">=3.11",
    install_requires=[
        "click>=8.1.0",
        "lark>=1.1.0",
        "PyYAML>=6.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
            "pytest-mock>=3.10.0",
            "mypy>=1.0.0",
            "ruff>=0.1.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "field-reorder=field_reorder.cli:main",
        ],
    },
)
