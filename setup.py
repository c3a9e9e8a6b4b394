import os

from setuptools import find_packages, setup

README = os.path.join(os.path.dirname(__file__), "README.md")


def readme() -> str:
    with open(README, encoding="utf-8") as f:
        return f.read()


setup(
    name="controllers_to_sdk",
    version="1.0.0",
    description="Generate a typed TypeScript client SDK from the controllers of a Python API",
    long_description=readme(),
    long_description_content_type="text/markdown",
    classifiers=[
        "Development Status :: 4 - Beta",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Software Development :: Code Generators",
        "Intended Audience :: Developers",
    ],
    keywords="sdk code generation typescript rtk-query controllers api client template",
    license="MIT",
    packages=find_packages(exclude=["*.tests.test_data", "*.tests.test_data.*"]),
    python_requires=">=3.11",
    install_requires=[
        "click>=8.0.0",
        "jinja2>=3.0.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
            "black>=23.0.0",
            "ruff>=0.1.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "controllers_to_sdk=controllers_to_sdk.controllers_to_sdk:controllers_to_sdk",
        ],
    },
    include_package_data=True,
    package_data={
        "controllers_to_sdk": ["templates/**/*.jinja2"],
    },
    zip_safe=False,
)
