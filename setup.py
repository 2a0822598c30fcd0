from setuptools import setup, find_packages

setup(
    name="gdpr-userdata",
    version="0.1",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    install_requires=[
        "pandas",
        "aiofiles",
        "tqdm",
        "orjson",
    ],
    extras_require={
        "test": [
            "pytest",
            "pytest-asyncio",
        ],
    },
    python_requires=">=3.8",
)
