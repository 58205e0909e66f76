from setuptools import setup, find_packages

setup(
    name="citygml-linker",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "click",
        "pandas",
        "numpy",
        "shapely",
        "lxml",
        "pyyaml",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "citygml-link=cli.run_linking:cli",
        ],
    },
    python_requires=">=3.8",
)
