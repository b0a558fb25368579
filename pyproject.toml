[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "gedupgrade"
version = "0.1.0"
description = "Convert GEDCOM 5.5.1 genealogy files to GEDCOM 7.0"
requires-python = ">=3.10"
dependencies = []
keywords = ["gedcom", "genealogy", "conversion", "ansel"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Sociology :: Genealogy",
    "Topic :: File Formats",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
gedupgrade = "gedupgrade.convert:main"

[tool.hatch.build.targets.wheel]
packages = ["gedupgrade"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
