from setuptools import find_packages, setup

setup(
    name="localstack-fixture",
    version="0.1.0",
    packages=find_packages(
        include=[
            "localstack_fixture",
            "localstack_fixture.*",
        ]
    ),
    install_requires=[
        "requests>=2.31.0",
        "click>=8.1.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.4.0",
            "pytest-asyncio>=0.21.0",
            "pytest-xdist>=3.3.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "localstack-fixture=localstack_fixture.cli:main",
        ],
    },
    python_requires=">=3.10",
)
