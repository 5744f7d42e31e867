from pathlib import Path

from setuptools import find_packages, setup

NAME = "qrinvoice"
README = Path("README.md")

INSTALL_REQUIRES = [
    "openpyxl>=3.1",
    "pypdf>=4.0",
    "qrbill>=1.1",
    "reportlab>=4.0",
    "svglib>=1.5",
    "python-stdnum>=1.19",
    "iso3166>=2.1",
]

setup(
    name=NAME,
    version="1.2.0",
    description="Invoice PDF documents with Swiss QR-bill payment parts and reference numbering",
    long_description=README.read_text(encoding="utf-8") if README.exists() else "",
    long_description_content_type="text/markdown",
    python_requires=">=3.10",
    package_dir={"": "src"},
    packages=find_packages("src"),
    package_data={"qrinvoice": ["langs/*.json"]},
    install_requires=INSTALL_REQUIRES,
    extras_require={"test": ["pytest>=7"]},
    entry_points={"console_scripts": ["qrinvoice=qrinvoice.cli:main"]},
)
