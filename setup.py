import setuptools

with open("README.md", "r") as fh:
    long_description = fh.read()

setuptools.setup(
    author="Walnut",
    author_email="walnut356@gmail.com",
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    description="Inspector and converter for SSBM replay files",
    entry_points={"console_scripts": ["slp = slpinspect.cli:main"]},
    extras_require={"test": ["pytest"]},
    install_requires=["py-ubjson", "tzlocal", "polars", "xxhash"],
    long_description=long_description,
    long_description_content_type="text/markdown",
    name="py-slippi-inspect",
    packages=setuptools.find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.10",
    version="0.1.0",
)
