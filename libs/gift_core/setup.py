from setuptools import setup, find_packages

setup(
    name="gift_core",
    version="0.1.0",
    description="Gift exchange matching and group join code utilities",
    packages=find_packages(),
    install_requires=[],
    python_requires=">=3.10",
)
