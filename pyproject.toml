[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sake"
version = "0.12.1"
description = "Building blocks for running shell commands on local and remote servers over SSH"
requires-python = ">=3.10"
keywords = ["ssh", "remote", "automation", "inventory", "hosts", "known_hosts", "ssh-config"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: System Administrators",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Systems Administration",
]
dependencies = [
    "paramiko",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["sake"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
