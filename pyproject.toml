[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "patchysim"
version = "0.1.0"
description = "Analysis tools for simulations of patchy colloidal particles: clusters, cluster sizes, bond breakage and reaction autocorrelations"
requires-python = ">=3.10"
keywords = ["patchy particles", "colloids", "cluster analysis", "bond breakage", "transition state theory", "autocorrelation"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Science/Research",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Scientific/Engineering :: Physics",
]
dependencies = [
    "numpy",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["patchysim"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
