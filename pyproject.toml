[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "comfybench"
version = "0.1.0"
description = "Benchmarking building blocks: fine-grained durations, timers, overhead measurement, thread pools and unit formatting."
requires-python = ">=3.10"
dependencies = []
keywords = ["benchmark", "timing", "measure", "performance", "profiling"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Benchmark",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["comfybench"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
