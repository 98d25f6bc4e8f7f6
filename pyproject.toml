[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "pvekit"
version = "0.10.0"
description = "Property-string codecs for virtual machine settings and read helpers for cluster data sources"
requires-python = ">=3.10"
dependencies = []
keywords = ["virtualization", "qemu", "vm", "configuration", "property-string"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: System Administrators",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Systems Administration",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["pvekit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
