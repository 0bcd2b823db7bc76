from setuptools import setup, find_packages

setup(
    name="quotegate",
    version="0.4.0",
    description="Ingestion safety pipeline for legislator statements: duplicate detection and submission rate limiting",
    author="Quotegate maintainers",
    packages=find_packages(exclude=["tests", "tests.*"]),
    package_data={"quotegate": ["credibility.yaml"]},
    install_requires=[
        "python-dateutil>=2.8.0",
        "rich>=13.0.0",
        "pyyaml>=6.0.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "quotegate=quotegate.cli:main",
        ],
    },
    python_requires=">=3.9",
)
