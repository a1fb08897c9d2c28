from setuptools import setup, find_packages

setup(
    name="rewardengine",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    py_modules=["cli"],
    install_requires=[
        "pynacl==1.6.2",
    ],
    entry_points={
        "console_scripts": [
            "rewardengine=cli:main",
        ],
    },
    python_requires=">=3.8",
)
