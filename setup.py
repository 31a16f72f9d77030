from setuptools import setup, find_packages

setup(
    name="exam_paper_builder",
    version="1.0.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    package_data={"webapp": ["templates/*.html"]},
    install_requires=[
        "Flask>=2.2",
        "Flask-Cors>=4.0",
        "requests>=2.31.0",
        "python-dotenv>=1.0.1",
        "reportlab>=4.1.0",
        "Pillow>=10.2.0",
        "beautifulsoup4>=4.12"
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    python_requires=">=3.8",
    author="Exam Paper Builder Team",
    description="Build printable exam papers from photographed questions",
    long_description=open("README.md", encoding="utf-8").read(),
    long_description_content_type="text/markdown",
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
)
