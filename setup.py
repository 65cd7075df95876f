from setuptools import setup, find_packages

setup(
    name="customers-repository",
    version="0.1",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.9",
    install_requires=[
        "fastapi",
        "uvicorn",
        "sqlalchemy[asyncio]>=2.0",
        "aiosqlite",
        "alembic",
        "pydantic>=2.0",
        "pydantic-settings",
        "python-dotenv",
    ],
    extras_require={
        "test": [
            "pytest",
            "pytest-asyncio",
            "httpx",
        ],
    },
)
