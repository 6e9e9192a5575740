[build-system]
requires = ["setuptools>=64"]
build-backend = "setuptools.build_meta"

[project]
name = "agentsim"
version = "0.1.0"
description = "A 2D multi-agent simulation model with shapes, agents, mail, collision reports and on-disk projects"
requires-python = ">=3.10"
dependencies = [
    "shapely>=2.0",
]
keywords = ["simulation", "agents", "multi-agent", "artificial life", "collision"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Artificial Life",
]

[project.optional-dependencies]
test = [
    "pytest>=7",
]

[project.scripts]
agentsim = "agentsim.cli:main"

[tool.setuptools.packages.find]
include = ["agentsim*"]

[tool.pytest.ini_options]
addopts = "-ra"
