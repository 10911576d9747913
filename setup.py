from setuptools import setup, find_packages

setup(
    name="wadm-nats",
    version="0.1.0",
    description="NATS connection and JetStream stream/KV provisioning for wadm",
    author="wadm Team",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "nats-py>=2.6.0",
        "nkeys>=0.1.0",
        "opentelemetry-api>=1.14.0",
        "opentelemetry-sdk>=1.14.0",
        "opentelemetry-exporter-otlp>=1.14.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-asyncio>=0.21.0",
            "pytest-cov",
            "black",
            "isort",
            "pylint",
        ],
    },
    python_requires=">=3.9",
)
