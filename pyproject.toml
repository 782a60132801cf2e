[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "yoloquant"
version = "0.1.0"
description = "Detection-head decoding, routing and resampling layers for quantization-aware YOLO networks, with array and argument helpers"
requires-python = ">=3.10"
keywords = ["yolo", "object-detection", "neural-network", "quantization", "numpy"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Scientific/Engineering :: Artificial Intelligence",
]
dependencies = ["numpy"]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["yoloquant"]

[tool.pytest.ini_options]
addopts = "-ra"
