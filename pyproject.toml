[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "insnfuzz"
version = "0.1.0"
description = "Template-driven instruction fuzzing: assembler source generation for several architectures and harness result formatting"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "fuzzing",
    "instruction-set",
    "assembly",
    "arm",
    "thumb2",
    "armv8",
    "riscv",
    "x86",
    "mersenne-twister",
    "testing",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Testing",
    "Topic :: Software Development :: Assemblers",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["insnfuzz"]

[tool.hatch.build.targets.sdist]
include = ["insnfuzz", "tests"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
