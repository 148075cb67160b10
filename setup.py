from setuptools import setup, find_packages

setup(
    name="scale-simulator",
    version="0.1.0",
    description="Design-time performance forecasts for distributed system topologies",
    author="adamfilli",
    packages=find_packages(exclude=["tests", "tests.*", "examples", "examples.*"]),
    install_requires=[
        "matplotlib",
        "pandas",
    ],
    extras_require={
        "test": [
            "pytest",
        ],
    },
    entry_points={
        "console_scripts": [
            "scalesim=scalesim.__main__:main",
        ],
    },
    include_package_data=True,
    python_requires=">=3.11",
)
