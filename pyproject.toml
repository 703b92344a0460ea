[build-system]
requires = ["setuptools>=61.0"]
build-backend = "setuptools.build_meta"

[project]
name = "searchlight"
version = "0.1.0"
description = "API types and validation rules for Kubernetes alert resources checked through Icinga."
requires-python = ">=3.10"
dependencies = []
keywords = ["monitoring", "alerts", "icinga", "kubernetes", "incidents"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Monitoring",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.setuptools.packages.find]
include = ["searchlight*"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
