from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="study-digits",
    version="0.1.0",
    author="Your Name",
    author_email="your.email@example.com",
    description="KNN classification and k-means clustering experiments on digit vectors",
    long_description=long_description,
    long_description_content_type="text/markdown",
    url="https://github.com/spencermcbridemoore/study-digits",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    classifiers=[
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.10",
    install_requires=[
        "numpy>=1.24",
        "python-dotenv>=1.0.0",
        "matplotlib>=3.5",  # PNG rendering of digit vectors
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "black>=22.0.0",
            "flake8>=5.0.0",
        ]
    },
    entry_points={
        "console_scripts": [
            "study-digits=study_digits.cli:main",
        ],
    },
)
