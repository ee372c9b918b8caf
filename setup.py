from setuptools import setup, find_packages
from pathlib import Path

setup(
    name="roi_taskflow",
    version=Path("./roi_taskflow/VERSION").read_text().strip(),
    packages=find_packages(include=["roi_taskflow", "roi_taskflow.*"]),
    package_data={"roi_taskflow": ["VERSION"]},
    python_requires=">=3.9",
    install_requires=[
        "numpy",
        "opencv-python-headless",
        "matplotlib",
        "easydict",
        "litellm",
        "pydantic>=2",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": ["roi_taskflow=roi_taskflow.cli:main"],
    },
)
