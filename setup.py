import setuptools
from pathlib import Path

# Read the long description from README.md
this_directory = Path(__file__).parent
long_description = (this_directory / "README.md").read_text()

setuptools.setup(
    name="promptcast",
    version="0.1.0",
    author="Nucleusbox",
    author_email="info@nucleusbox.com",
    description="promptcast asks a chat model for values of a given type: describe the shape, send a prompt, get back validated Python data.",
    long_description=long_description,
    long_description_content_type="text/markdown",
    url="https://github.com/nucleusbox/promptcast",
    project_urls={
        "Documentation": "https://github.com/nucleusbox/promptcast#readme",
        "Source": "https://github.com/nucleusbox/promptcast",
        "Tracker": "https://github.com/nucleusbox/promptcast/issues",
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    package_dir={"": "src"},
    packages=setuptools.find_packages(where="src"),
    python_requires=">=3.10,<4.0",
    install_requires=[
        "openai>=1.40.0",
        "pydantic>=2.5",
        "httpx>=0.25",
        "python-dotenv>=1.0.0",
        "typing_extensions>=4.7; python_version < '3.11'",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
            "pytest-asyncio>=0.21",
        ],
    },
    include_package_data=True,
)
