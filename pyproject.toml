[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "parlab"
version = "0.1.0"
description = "Small parallel-computing workloads: Mandelbrot rendering, a simulated vector unit, Newton square roots and SAXPY, with timing harnesses"
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = [
    "benchmark",
    "parallelism",
    "mandelbrot",
    "simd",
    "vector",
    "saxpy",
    "threads",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Education",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Benchmark",
    "Topic :: Education",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
parlab-mandelbrot = "parlab.mandelbrot_cli:main"
parlab-vecintrin = "parlab.vector_programs:main"
parlab-sqrt = "parlab.sqrt:main"
parlab-saxpy = "parlab.saxpy:main"

[tool.hatch.build.targets.wheel]
packages = ["parlab"]

[tool.hatch.build.targets.sdist]
include = [
    "parlab",
    "tests",
    "pyproject.toml",
]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 88
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
