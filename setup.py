from setuptools import find_packages, setup

setup(
    name="slidesmith-backend",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    py_modules=["app", "bootloader"],
    install_requires=[
        "fastapi>=0.110",
        "uvicorn>=0.27",
        "pydantic>=2.5",
        "python-multipart>=0.0.9",
        "openai>=1.30",
        "aiohttp>=3.9",
        "PyYAML>=6.0",
        "python-dotenv>=1.0",
    ],
    extras_require={
        "test": [
            "pytest>=8.0",
            "pytest-asyncio>=0.23",
            "httpx>=0.27",
        ],
    },
    python_requires=">=3.11",
    include_package_data=True,
    description="Backend package for SlideSmith (document-to-deck generation and canvas editing)",
    author="Andreas Malathouras",
    author_email="steelstridertgm@gmail.com",
)
