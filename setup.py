"""Setup configuration for QBEView"""

from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="qbeview-query-builder",
    version="1.0.0",
    author="QBEView",
    description="Visual Query-By-Example builder that compiles a column grid into SQL",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: End Users/Desktop",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.10",
    install_requires=[
        "PyQt6>=6.6.1",
        "sqlalchemy>=2.0.23",
        "pandas>=2.1.4",
        "openpyxl>=3.1.2",
    ],
    extras_require={
        "dev": [
            "pytest>=7.4.3",
            "pytest-qt>=4.2.0",
            "black>=23.12.1",
            "flake8>=6.1.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "qbeview=qbeview.main:main",
        ],
    },
    package_data={
        "qbeview": ["ui/styles.qss"],
    },
    include_package_data=True,
)
