[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "legoland"
version = "1.0.0"
description = "Convert ASCII PLY triangle meshes into LEGO brick models in the LDraw .DAT format"
requires-python = ">=3.10"
dependencies = []
keywords = ["lego", "ldraw", "voxel", "ply", "mesh", "voxelization", "bricks"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Graphics :: 3D Modeling",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
legoland = "legoland.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["legoland"]

[tool.pytest.ini_options]
addopts = "-ra"
