[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "container-agent"
version = "0.8.0"
description = "Container monitoring library: collects container metrics and host specs on ECS, Fargate and Kubernetes, and waits on HTTP and TCP readiness probes."
requires-python = ">=3.10"
keywords = [
    "monitoring",
    "metrics",
    "containers",
    "ecs",
    "fargate",
    "kubernetes",
    "kubelet",
    "probe",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: System Administrators",
    "Intended Audience :: Developers",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Framework :: AsyncIO",
    "Topic :: System :: Monitoring",
]
dependencies = [
    "httpx>=0.26",
    "psutil>=5.9",
]

[project.optional-dependencies]
test = [
    "pytest>=7.0",
    "pytest-asyncio>=0.21",
    "respx>=0.20",
]

[tool.hatch.build.targets.wheel]
packages = ["container_agent"]

[tool.hatch.build.targets.sdist]
include = ["container_agent", "tests"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
