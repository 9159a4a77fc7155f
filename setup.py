from setuptools import setup, find_packages

setup(
    name="syskit",
    version="0.1.0",
    packages=find_packages(include=["syskit", "syskit.*"]),
    package_data={"syskit": ["config.yaml"]},
    install_requires=[
        "pydantic>=2",
        "tinydb",
        "pyyaml",
        "python-dotenv",
    ],
    extras_require={
        "test": ["pytest"],
    },
    python_requires=">=3.9",
)
