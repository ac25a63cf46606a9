[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sparkbatch"
version = "0.1.0"
description = "Batch scheduler support for Spark applications: a scheduler registry, pod resource sizing and Yunikorn gang-scheduling task groups"
requires-python = ">=3.10"
dependencies = []
keywords = ["spark", "kubernetes", "yunikorn", "batch-scheduling", "gang-scheduling"]
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
    "Topic :: System :: Distributed Computing",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["sparkbatch"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
strict = true
